"""
Evenza API - test configuration and fixtures.

Every test runs against its own SQLite file under ``tmp_path``; uploads
go to a temporary directory as well.
"""
import os
import tempfile

# Set testing environment before the application reads it
os.environ["SECRET_KEY"] = "test-secret-key-for-testing-only"
os.environ["DATABASE_URL"] = os.path.join(tempfile.gettempdir(), "evenza-test-import.db")
os.environ["UPLOAD_DIR"] = os.path.join(tempfile.gettempdir(), "evenza-test-uploads")
os.environ["SMTP_USER"] = ""
os.environ["SMTP_PASSWORD"] = ""

from typing import Any, Dict

import pytest
from fastapi.testclient import TestClient

from evenza_api.app.core.config import settings
from evenza_api.app.core.db import get_connection, init_db
from evenza_api.app.core.security import create_user_token, hash_password
from evenza_api.app.main import app


DEFAULT_PASSWORD = "secret123"


@pytest.fixture(autouse=True)
def test_db(tmp_path, monkeypatch):
    """Point the application at a fresh database and upload directory."""
    monkeypatch.setattr(settings, "database_url", str(tmp_path / "evenza.db"))
    monkeypatch.setattr(settings, "upload_dir", str(tmp_path / "uploads"))
    monkeypatch.setattr(settings, "smtp_user", "")
    monkeypatch.setattr(settings, "smtp_password", "")
    init_db()
    yield tmp_path


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


def create_user(
    email: str = "user@example.com",
    name: str = "Test User",
    role: str = "user",
    password: str = DEFAULT_PASSWORD,
    disabled: bool = False,
) -> Dict[str, Any]:
    """Insert a user directly and return it with ready-made auth headers."""
    conn = get_connection()
    try:
        cursor = conn.execute(
            "INSERT INTO users (name, email, password, role, disabled) VALUES (?, ?, ?, ?, ?)",
            (name, email, hash_password(password), role, 1 if disabled else 0),
        )
        conn.commit()
        user_id = cursor.lastrowid
    finally:
        conn.close()
    user = {"id": user_id, "name": name, "email": email, "role": role, "password": password}
    user["headers"] = {"Authorization": f"Bearer {create_user_token(user)}"}
    return user


@pytest.fixture
def user() -> Dict[str, Any]:
    return create_user()


@pytest.fixture
def other_user() -> Dict[str, Any]:
    return create_user(email="other@example.com", name="Other User")


@pytest.fixture
def admin() -> Dict[str, Any]:
    return create_user(email="admin@example.com", name="Admin", role="admin")


@pytest.fixture
def super_admin() -> Dict[str, Any]:
    return create_user(email="root@example.com", name="Root", role="super_admin")


def event_payload(**overrides: Any) -> Dict[str, Any]:
    payload = {
        "title": "Tech Conference",
        "description": "Talks and workshops",
        "date": "2030-05-15",
        "time": "10:00 AM",
        "location": "Main Auditorium",
        "category": "Technology",
        "price": 0,
        "max_attendees": 100,
    }
    payload.update(overrides)
    return payload


def trip_payload(**overrides: Any) -> Dict[str, Any]:
    payload = {
        "title": "Northern Areas Tour",
        "description": "Five days in the mountains",
        "date": "2030-07-01",
        "end_date": "2030-07-05",
        "location": "Hunza Valley",
        "price": 0,
        "spots": 20,
    }
    payload.update(overrides)
    return payload


def interview_payload(**overrides: Any) -> Dict[str, Any]:
    payload = {
        "title": "Summer Internship Drive",
        "company": "Systems Ltd",
        "description": "Internships for students",
        "date": "2030-06-10",
        "location": "Career Center",
        "positions": ["Backend Intern", "QA Intern"],
    }
    payload.update(overrides)
    return payload


def execute(sql: str, params: tuple = ()) -> int:
    """Run a statement against the test database and return ``lastrowid``."""
    conn = get_connection()
    try:
        cursor = conn.execute(sql, params)
        conn.commit()
        return cursor.lastrowid
    finally:
        conn.close()


def fetch_one(sql: str, params: tuple = ()):
    conn = get_connection()
    try:
        return conn.execute(sql, params).fetchone()
    finally:
        conn.close()
