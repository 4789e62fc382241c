"""
Tests for the user's own profile and the admin user screens.
"""
from conftest import DEFAULT_PASSWORD, create_user, fetch_one


# ============================================================================
# Profile
# ============================================================================

class TestProfile:

    def test_update_profile(self, client, user):
        response = client.put(
            "/api/user/profile",
            json={"phone": "555-0100", "department": "Computer Science", "year": "3"},
            headers=user["headers"],
        )

        assert response.status_code == 200
        data = response.json()
        assert data["phone"] == "555-0100"
        assert data["department"] == "Computer Science"
        assert data["name"] == user["name"]

    def test_change_password(self, client, user):
        response = client.post(
            "/api/user/change-password",
            json={"current_password": DEFAULT_PASSWORD, "new_password": "a-much-longer-one"},
            headers=user["headers"],
        )

        assert response.status_code == 200
        login = client.post("/api/auth/login", json={"email": user["email"], "password": "a-much-longer-one"})
        assert login.status_code == 200

    def test_change_password_wrong_current(self, client, user):
        response = client.post(
            "/api/user/change-password",
            json={"current_password": "nope", "new_password": "a-much-longer-one"},
            headers=user["headers"],
        )

        assert response.status_code == 400

    def test_change_password_too_short(self, client, user):
        response = client.post(
            "/api/user/change-password",
            json={"current_password": DEFAULT_PASSWORD, "new_password": "short"},
            headers=user["headers"],
        )

        assert response.status_code == 400

    def test_change_password_ends_sessions(self, client, user):
        client.post("/api/auth/login", json={"email": user["email"], "password": DEFAULT_PASSWORD})

        client.post(
            "/api/user/change-password",
            json={"current_password": DEFAULT_PASSWORD, "new_password": "a-much-longer-one"},
            headers=user["headers"],
        )

        assert fetch_one("SELECT COUNT(*) AS n FROM sessions WHERE user_id = ?", (user["id"],))["n"] == 0


# ============================================================================
# Admin user management
# ============================================================================

class TestAdminUsers:

    def test_list_search_and_paginate(self, client, admin, user, other_user):
        everyone = client.get("/api/admin/users", params={"limit": 2}, headers=admin["headers"]).json()
        searched = client.get("/api/admin/users", params={"search": "other"}, headers=admin["headers"]).json()
        admins = client.get("/api/admin/users", params={"role": "admin"}, headers=admin["headers"]).json()

        assert everyone["pagination"] == {"total": 3, "page": 1, "limit": 2, "pages": 2}
        assert len(everyone["users"]) == 2
        assert [u["email"] for u in searched["users"]] == [other_user["email"]]
        assert [u["email"] for u in admins["users"]] == [admin["email"]]

    def test_create_user(self, client, admin):
        response = client.post(
            "/api/admin/users",
            json={"name": "New", "email": "new@example.com", "password": "secret123", "role": "admin"},
            headers=admin["headers"],
        )

        assert response.status_code == 201
        assert response.json()["role"] == "admin"

    def test_create_duplicate(self, client, admin, user):
        response = client.post(
            "/api/admin/users",
            json={"name": "Dup", "email": user["email"]},
            headers=admin["headers"],
        )

        assert response.status_code == 409

    def test_admin_cannot_create_super_admin(self, client, admin):
        response = client.post(
            "/api/admin/users",
            json={"name": "Boss", "email": "boss@example.com", "role": "super_admin"},
            headers=admin["headers"],
        )

        assert response.status_code == 403

    def test_disable_user(self, client, admin, user):
        response = client.put(f"/api/admin/users/{user['id']}", json={"disabled": True}, headers=admin["headers"])

        assert response.json()["disabled"] is True
        assert client.get("/api/user/profile", headers=user["headers"]).status_code == 401

    def test_role_change_applies_immediately(self, client, admin, user):
        client.put(f"/api/admin/users/{user['id']}", json={"role": "admin"}, headers=admin["headers"])

        assert client.get("/api/auth/check-admin", headers=user["headers"]).status_code == 200

    def test_admin_cannot_touch_super_admin(self, client, admin, super_admin):
        update = client.put(
            f"/api/admin/users/{super_admin['id']}", json={"role": "user"}, headers=admin["headers"]
        )
        delete = client.delete(f"/api/admin/users/{super_admin['id']}", headers=admin["headers"])

        assert update.status_code == 403
        assert delete.status_code == 403

    def test_super_admin_promotes(self, client, super_admin, user):
        response = client.put(
            f"/api/admin/users/{user['id']}", json={"role": "super_admin"}, headers=super_admin["headers"]
        )

        assert response.json()["role"] == "super_admin"

    def test_cannot_delete_self(self, client, admin):
        assert client.delete(f"/api/admin/users/{admin['id']}", headers=admin["headers"]).status_code == 400

    def test_delete_user(self, client, admin):
        victim = create_user(email="victim@example.com")

        assert client.delete(f"/api/admin/users/{victim['id']}", headers=admin["headers"]).status_code == 204
        assert client.get(f"/api/admin/users/{victim['id']}", headers=admin["headers"]).status_code == 404
