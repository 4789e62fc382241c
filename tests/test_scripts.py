"""
Tests for the maintenance command-line scripts.
"""
import sys

import pytest

import create_token
import reset_password
from evenza_api.app.core.config import settings
from evenza_api.app.core.security import decode_access_token, verify_password

from conftest import fetch_one


class TestCreateToken:

    def test_prints_token_for_user(self, user, monkeypatch, capsys):
        monkeypatch.setattr(sys, "argv", ["create_token.py", "--email", user["email"], "--days", "2"])

        create_token.main()

        payload = decode_access_token(capsys.readouterr().out.strip().splitlines()[-1])
        assert payload["sub"] == str(user["id"])

    def test_unknown_email(self, monkeypatch):
        monkeypatch.setattr(sys, "argv", ["create_token.py", "--email", "ghost@example.com"])

        with pytest.raises(SystemExit) as exc:
            create_token.main()
        assert exc.value.code == 2


class TestResetPassword:

    def test_resets_password_and_role(self, user, monkeypatch):
        monkeypatch.setattr(sys, "argv", [
            "reset_password.py", "--db", settings.database_url, "--email", user["email"],
            "--password", "brand-new-pass", "--role", "admin",
        ])

        reset_password.main()

        row = fetch_one("SELECT password, role FROM users WHERE id = ?", (user["id"],))
        assert verify_password("brand-new-pass", row["password"])
        assert row["role"] == "admin"

    def test_short_password(self, user, monkeypatch):
        monkeypatch.setattr(sys, "argv", [
            "reset_password.py", "--db", settings.database_url, "--email", user["email"], "--password", "short",
        ])

        with pytest.raises(SystemExit) as exc:
            reset_password.main()
        assert exc.value.code == 1
