"""
Tests for CMS content and site settings.
"""
import pytest

from evenza_api.app.services.content_service import slugify


@pytest.fixture
def make_content(client, admin):
    def _make(**overrides):
        body = {"title": "About Us", "content": "<p>Hello</p>", "type": "page", "status": "published"}
        body.update(overrides)
        response = client.post("/api/admin/content", json=body, headers=admin["headers"])
        assert response.status_code == 201, response.text
        return response.json()
    return _make


# ============================================================================
# Content
# ============================================================================

class TestSlugify:

    @pytest.mark.parametrize("title, slug", [
        ("About Us", "about-us"),
        ("  Terms & Conditions!  ", "terms-conditions"),
        ("FAQ: Payments   and Refunds", "faq-payments-and-refunds"),
    ])
    def test_slugify(self, title, slug):
        assert slugify(title) == slug


class TestContent:

    def test_slug_derived_from_title(self, make_content):
        content = make_content(title="Privacy Policy", type="legal")

        assert content["slug"] == "privacy-policy"
        assert content["author_name"] == "Admin"

    def test_duplicate_slug(self, client, admin, make_content):
        make_content()

        response = client.post(
            "/api/admin/content",
            json={"title": "About us", "content": "x", "type": "page"},
            headers=admin["headers"],
        )

        assert response.status_code == 400

    def test_public_lookup_only_published(self, client, make_content):
        make_content(title="Public Page")
        make_content(title="Secret Draft", status="draft")

        assert client.get("/api/content/public-page").status_code == 200
        assert client.get("/api/content/secret-draft").status_code == 404

    def test_single_homepage(self, client, admin, make_content):
        first = make_content(title="Home One", is_homepage=True)
        second = make_content(title="Home Two", is_homepage=True)

        homepage = client.get("/api/content/homepage")
        first_now = client.get(f"/api/admin/content/{first['id']}", headers=admin["headers"]).json()

        assert homepage.json()["id"] == second["id"]
        assert first_now["is_homepage"] is False

    def test_update_moves_homepage(self, client, admin, make_content):
        first = make_content(title="Home One", is_homepage=True)
        second = make_content(title="Home Two")

        client.put(f"/api/admin/content/{second['id']}", json={"is_homepage": True}, headers=admin["headers"])

        assert client.get("/api/content/homepage").json()["id"] == second["id"]
        first_now = client.get(f"/api/admin/content/{first['id']}", headers=admin["headers"]).json()
        assert first_now["is_homepage"] is False

    def test_no_homepage(self, client):
        assert client.get("/api/content/homepage").status_code == 404

    def test_update_to_taken_slug(self, client, admin, make_content):
        make_content(title="Taken")
        other = make_content(title="Other")

        response = client.put(
            f"/api/admin/content/{other['id']}", json={"slug": "taken"}, headers=admin["headers"]
        )

        assert response.status_code == 400

    def test_admin_list_filters(self, client, admin, make_content):
        make_content(title="Question One", type="faq")
        make_content(title="A Post", type="post")

        faqs = client.get("/api/admin/content", params={"type": "faq"}, headers=admin["headers"]).json()
        everything = client.get("/api/admin/content", params={"type": "all"}, headers=admin["headers"]).json()

        assert [c["title"] for c in faqs["content"]] == ["Question One"]
        assert everything["pagination"]["total"] == 2

    def test_delete(self, client, admin, make_content):
        content = make_content()

        assert client.delete(f"/api/admin/content/{content['id']}", headers=admin["headers"]).status_code == 204
        assert client.get("/api/content/about-us").status_code == 404


# ============================================================================
# Settings
# ============================================================================

class TestSettings:

    def test_public_settings_are_seeded(self, client):
        response = client.get("/api/settings/public")

        assert response.status_code == 200
        assert response.json()["settings"]["general.siteName"] == "Evenza"

    def test_save_category_keeps_types(self, client, admin):
        response = client.post(
            "/api/admin/settings",
            json={"category": "payments", "settings": {"bankAccount": "PK00 1234", "fee": 2.5, "enabled": True}},
            headers=admin["headers"],
        )

        assert response.status_code == 200
        settings = response.json()["settings"]
        assert settings["payments.bankAccount"] == "PK00 1234"
        assert settings["payments.fee"] == 2.5
        assert settings["payments.enabled"] is True
        assert "general.siteName" in settings

    def test_save_overwrites(self, client, admin):
        client.post(
            "/api/admin/settings",
            json={"category": "general", "settings": {"siteName": "Evenza Campus"}},
            headers=admin["headers"],
        )

        assert client.get("/api/settings/public").json()["settings"]["general.siteName"] == "Evenza Campus"

    def test_private_categories_not_public(self, client, admin):
        client.post(
            "/api/admin/settings",
            json={"category": "payments", "settings": {"bankAccount": "secret"}},
            headers=admin["headers"],
        )

        assert "payments.bankAccount" not in client.get("/api/settings/public").json()["settings"]

    def test_bad_category(self, client, admin):
        response = client.post(
            "/api/admin/settings", json={"category": "a.b", "settings": {}}, headers=admin["headers"]
        )

        assert response.status_code == 400

    def test_admin_only(self, client, user):
        assert client.get("/api/admin/settings", headers=user["headers"]).status_code == 403
