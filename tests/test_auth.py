"""
Tests for registration, login, request authentication and admin setup.
"""
from fastapi.testclient import TestClient

from evenza_api.app.core.config import settings
from evenza_api.app.core.security import decode_access_token
from evenza_api.app.main import app

from conftest import DEFAULT_PASSWORD, create_user, fetch_one


def _login(client, email, password=DEFAULT_PASSWORD, remember_me=False):
    return client.post(
        "/api/auth/login",
        json={"email": email, "password": password, "remember_me": remember_me},
    )


# ============================================================================
# Registration
# ============================================================================

class TestRegister:

    def test_register_user(self, client):
        response = client.post(
            "/api/auth/register",
            json={"name": "Aisha Khan", "email": "Aisha@Example.com ", "password": "secret123"},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["email"] == "aisha@example.com"
        assert data["role"] == "user"
        assert "password" not in data

    def test_register_duplicate_email(self, client, user):
        response = client.post(
            "/api/auth/register",
            json={"name": "Again", "email": user["email"], "password": "secret123"},
        )

        assert response.status_code == 409

    def test_register_short_password(self, client):
        response = client.post(
            "/api/auth/register",
            json={"name": "Shorty", "email": "short@example.com", "password": "123"},
        )

        assert response.status_code == 400

    def test_register_invalid_email(self, client):
        response = client.post(
            "/api/auth/register",
            json={"name": "Bad", "email": "not-an-email", "password": "secret123"},
        )

        assert response.status_code == 400
        assert "valid email" in response.json()["detail"]


# ============================================================================
# Login / logout
# ============================================================================

class TestLogin:

    def test_login_success_sets_cookies(self, client, user):
        response = _login(client, user["email"])

        assert response.status_code == 200
        data = response.json()
        assert data["message"] == "Login successful"
        assert data["user"]["id"] == user["id"]
        assert decode_access_token(data["token"])["sub"] == str(user["id"])
        assert response.cookies.get(settings.auth_cookie_name) == data["token"]
        assert response.cookies.get(settings.session_cookie_name)
        assert fetch_one("SELECT last_login FROM users WHERE id = ?", (user["id"],))["last_login"]

    def test_login_cookie_lifetime(self, client, user):
        short = _login(client, user["email"])
        long = _login(client, user["email"], remember_me=True)

        short_cookies = " ".join(short.headers.get_list("set-cookie"))
        long_cookies = " ".join(long.headers.get_list("set-cookie"))
        assert f"Max-Age={settings.access_token_expire_minutes * 60}" in short_cookies
        assert f"Max-Age={settings.remember_me_days * 86400}" in long_cookies
        assert "HttpOnly" in long_cookies

    def test_login_wrong_password(self, client, user):
        response = _login(client, user["email"], password="wrong-password")

        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid email or password"

    def test_login_unknown_email(self, client):
        assert _login(client, "ghost@example.com").status_code == 401

    def test_login_disabled_account(self, client):
        disabled = create_user(email="off@example.com", disabled=True)

        assert _login(client, disabled["email"]).status_code == 401

    def test_login_missing_fields(self, client):
        response = client.post("/api/auth/login", json={"email": ""})

        assert response.status_code == 400

    def test_logout_deletes_session(self, client, user):
        session_id = _login(client, user["email"]).cookies.get(settings.session_cookie_name)

        response = client.post("/api/auth/logout")

        assert response.status_code == 200
        assert fetch_one("SELECT 1 FROM sessions WHERE id = ?", (session_id,)) is None
        assert client.get("/api/user/profile").status_code == 401


# ============================================================================
# Credential resolution
# ============================================================================

class TestCredentialResolution:

    def test_anonymous_is_rejected(self, client):
        assert client.get("/api/user/profile").status_code == 401

    def test_bearer_header(self, client, user):
        response = client.get("/api/user/profile", headers=user["headers"])

        assert response.status_code == 200
        assert response.json()["email"] == user["email"]

    def test_auth_cookie(self, client, user):
        _login(client, user["email"])

        response = client.get("/api/user/profile")

        assert response.status_code == 200
        assert response.json()["id"] == user["id"]

    def test_session_cookie_only(self, user):
        login = _login(TestClient(app), user["email"])
        session_id = login.cookies.get(settings.session_cookie_name)

        fresh = TestClient(app)
        response = fresh.get(
            "/api/user/profile",
            headers={"Cookie": f"{settings.session_cookie_name}={session_id}"},
        )

        assert response.status_code == 200
        assert response.json()["id"] == user["id"]

    def test_unknown_session_cookie(self, client):
        response = client.get(
            "/api/user/profile",
            headers={"Cookie": f"{settings.session_cookie_name}=does-not-exist"},
        )

        assert response.status_code == 401

    def test_header_wins_over_cookie(self, user, other_user):
        token = _login(TestClient(app), other_user["email"]).json()["token"]

        fresh = TestClient(app)
        response = fresh.get(
            "/api/user/profile",
            headers={**user["headers"], "Cookie": f"{settings.auth_cookie_name}={token}"},
        )

        assert response.json()["id"] == user["id"]

    def test_invalid_header_is_not_rescued_by_cookie(self, user):
        token = _login(TestClient(app), user["email"]).json()["token"]

        fresh = TestClient(app)
        response = fresh.get(
            "/api/user/profile",
            headers={
                "Authorization": "Bearer broken.token.value",
                "Cookie": f"{settings.auth_cookie_name}={token}",
            },
        )

        assert response.status_code == 401

    def test_disabled_user_token_rejected(self, client):
        disabled = create_user(email="off@example.com", disabled=True)

        assert client.get("/api/user/profile", headers=disabled["headers"]).status_code == 401

    def test_token_endpoint_from_session(self, user):
        session_id = _login(TestClient(app), user["email"]).cookies.get(settings.session_cookie_name)

        fresh = TestClient(app)
        response = fresh.get(
            "/api/auth/token",
            headers={"Cookie": f"{settings.session_cookie_name}={session_id}"},
        )

        assert response.status_code == 200
        assert decode_access_token(response.json()["token"])["sub"] == str(user["id"])


# ============================================================================
# Admin checks and bootstrap
# ============================================================================

class TestCheckAdmin:

    def test_requires_authentication(self, client):
        assert client.get("/api/auth/check-admin").status_code == 401

    def test_regular_user_forbidden(self, client, user):
        response = client.get("/api/auth/check-admin", headers=user["headers"])

        assert response.status_code == 403
        assert response.json()["detail"] == "Not authorized as admin"

    def test_admin_allowed(self, client, admin):
        response = client.get("/api/auth/check-admin", headers=admin["headers"])

        assert response.status_code == 200
        assert response.json()["user"]["role"] == "admin"

    def test_admin_routes_forbidden_for_users(self, client, user):
        assert client.get("/api/admin/dashboard", headers=user["headers"]).status_code == 403


class TestSetupAdmin:

    payload = {"name": "First Admin", "email": "first@example.com", "password": "secret123"}

    def test_first_admin_becomes_super_admin(self, client):
        response = client.post("/api/setup/admin", json=self.payload)

        assert response.status_code == 201
        assert response.json()["message"] == "Admin user created successfully"
        assert response.json()["user"]["role"] == "super_admin"

    def test_second_call_requires_super_admin(self, client, admin):
        response = client.post("/api/setup/admin", json=self.payload)

        assert response.status_code == 403

    def test_admin_cannot_add_admins(self, client, admin):
        response = client.post("/api/setup/admin", json=self.payload, headers=admin["headers"])

        assert response.status_code == 403

    def test_super_admin_creates_admin(self, client, super_admin):
        response = client.post("/api/setup/admin", json=self.payload, headers=super_admin["headers"])

        assert response.status_code == 201
        assert response.json()["user"]["role"] == "admin"

    def test_promote_existing_user(self, client, user):
        response = client.post(
            "/api/setup/admin",
            json={"name": "Whoever", "email": user["email"], "password": "ignored1"},
        )

        assert response.status_code == 200
        assert response.json()["message"] == "User promoted to admin"
        assert fetch_one("SELECT role FROM users WHERE id = ?", (user["id"],))["role"] == "super_admin"

    def test_existing_admin_reported(self, client, super_admin):
        response = client.post(
            "/api/setup/admin",
            json={"name": "Root", "email": super_admin["email"], "password": "ignored1"},
            headers=super_admin["headers"],
        )

        assert response.status_code == 200
        assert response.json()["message"] == "User is already an admin"
