"""
Tests for contact messages, user queries and the merged admin inbox.
"""
import pytest

from conftest import execute, fetch_one


def _message(name, created_at, status="new", subject="Hello"):
    return execute(
        "INSERT INTO messages (name, email, subject, message, status, created_at) VALUES (?, ?, ?, ?, ?, ?)",
        (name, f"{name.lower()}@example.com", subject, f"Body from {name}", status, created_at),
    )


def _query(name, created_at, subject="Refund", status="new", response=None):
    return execute(
        "INSERT INTO queries (name, email, subject, message, status, response, created_at) "
        "VALUES (?, ?, ?, ?, ?, ?, ?)",
        (name, f"{name.lower()}@example.com", subject, f"Question from {name}", status, response, created_at),
    )


# ============================================================================
# Merged inbox
# ============================================================================

class TestInbox:

    @pytest.fixture
    def inbox(self):
        return {
            "m1": _message("Mona", "2030-01-01 10:00:00"),
            "m2": _message("Mark", "2030-01-02 10:00:00"),
            "m3": _message("Mia", "2030-01-03 10:00:00"),
            "q1": _query("Quinn", "2030-01-05 10:00:00"),
            "q2": _query("Quade", "2030-01-04 10:00:00"),
        }

    def _page(self, client, admin, page, limit=2, **params):
        response = client.get(
            "/api/admin/messages", params={"page": page, "limit": limit, **params}, headers=admin["headers"]
        )
        assert response.status_code == 200
        return response.json()

    def test_messages_fill_first_pages(self, client, admin, inbox):
        data = self._page(client, admin, 1)

        assert [(m["type"], m["id"]) for m in data["messages"]] == [
            ("message", inbox["m3"]),
            ("message", inbox["m2"]),
        ]
        assert data["pagination"] == {"total": 5, "page": 1, "limit": 2, "pages": 3}

    def test_page_straddling_both_tables_is_sorted(self, client, admin, inbox):
        data = self._page(client, admin, 2)

        assert [(m["type"], m["id"]) for m in data["messages"]] == [
            ("query", inbox["q1"]),
            ("message", inbox["m1"]),
        ]

    def test_last_page_holds_remaining_queries(self, client, admin, inbox):
        data = self._page(client, admin, 3)

        assert [(m["type"], m["id"]) for m in data["messages"]] == [("query", inbox["q2"])]

    def test_every_row_on_exactly_one_page(self, client, admin, inbox):
        seen = []
        for page in (1, 2, 3, 4):
            seen.extend((m["type"], m["id"]) for m in self._page(client, admin, page)["messages"])

        assert len(seen) == len(set(seen)) == 5

    def test_query_defaults(self, client, admin):
        query_id = execute(
            "INSERT INTO queries (name, email, subject, message) VALUES ('Q', 'q@example.com', NULL, 'Help')"
        )
        _query("Answered", "2030-01-01 00:00:00", status="answered", response="Done")

        items = self._page(client, admin, 1, limit=10)["messages"]
        untitled = next(m for m in items if m["id"] == query_id)
        answered = next(m for m in items if m["name"] == "Answered")

        assert untitled["subject"] == "Query"
        assert untitled["notes"] == ""
        assert answered["notes"] == "Done"

    def test_status_and_search_filters(self, client, admin, inbox):
        _message("Archie", "2030-01-06 10:00:00", status="archived")

        archived = self._page(client, admin, 1, limit=10, status="archived")
        everything = self._page(client, admin, 1, limit=10, status="all")
        searched = self._page(client, admin, 1, limit=10, search="quinn")

        assert [m["name"] for m in archived["messages"]] == ["Archie"]
        assert everything["pagination"]["total"] == 6
        assert [m["id"] for m in searched["messages"]] == [inbox["q1"]]

    def test_empty_inbox(self, client, admin):
        data = self._page(client, admin, 1)

        assert data["messages"] == []
        assert data["pagination"]["pages"] == 0


# ============================================================================
# Admin message management
# ============================================================================

class TestMessages:

    def test_create_update_delete(self, client, admin):
        created = client.post(
            "/api/admin/messages",
            json={"name": "Bilal", "email": "bilal@example.com", "subject": "Sponsor", "message": "Hi"},
            headers=admin["headers"],
        )
        message_id = created.json()["id"]

        updated = client.patch(
            f"/api/admin/messages/{message_id}",
            json={"status": "read", "notes": "Call back"},
            headers=admin["headers"],
        )
        deleted = client.delete(f"/api/admin/messages/{message_id}", headers=admin["headers"])

        assert created.status_code == 201
        assert created.json()["status"] == "new"
        assert updated.json()["status"] == "read"
        assert updated.json()["notes"] == "Call back"
        assert deleted.status_code == 204
        assert client.get(f"/api/admin/messages/{message_id}", headers=admin["headers"]).status_code == 404

    def test_invalid_status(self, client, admin):
        message_id = _message("Mona", "2030-01-01 10:00:00")

        response = client.put(
            f"/api/admin/messages/{message_id}", json={"status": "spam"}, headers=admin["headers"]
        )

        assert response.status_code == 400


# ============================================================================
# User queries
# ============================================================================

class TestQueries:

    def _submit(self, client, user, **overrides):
        body = {"name": user["name"], "email": user["email"], "message": "When does it start?"}
        body.update(overrides)
        return client.post("/api/queries", json=body, headers=user["headers"])

    def test_submit_defaults_subject(self, client, user):
        response = self._submit(client, user)

        assert response.status_code == 201
        assert response.json()["subject"] == "General Query"
        assert response.json()["status"] == "new"
        assert fetch_one("SELECT COUNT(*) AS n FROM messages")["n"] == 0

    def test_submit_requires_login(self, client):
        response = client.post("/api/queries", json={"name": "A", "email": "a@example.com", "message": "Hi"})

        assert response.status_code == 401

    def test_list_own_queries(self, client, user, other_user):
        self._submit(client, user, subject="Mine")
        self._submit(client, other_user, subject="Theirs")

        data = client.get("/api/queries", headers=user["headers"]).json()

        assert [q["subject"] for q in data["queries"]] == ["Mine"]
        assert data["pagination"]["total"] == 1

    def test_other_users_query_is_forbidden(self, client, user, other_user):
        query_id = self._submit(client, user).json()["id"]

        assert client.get(f"/api/queries/{query_id}", headers=other_user["headers"]).status_code == 403

    def test_admin_responds(self, client, user, admin):
        query_id = self._submit(client, user).json()["id"]

        response = client.put(
            f"/api/queries/{query_id}", json={"response": "Next Monday"}, headers=admin["headers"]
        )

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "answered"
        assert data["response"] == "Next Monday"
        assert data["responded_by"] == admin["id"]
        assert client.get(f"/api/queries/{query_id}", headers=user["headers"]).json()["response"] == "Next Monday"

    def test_user_cannot_respond(self, client, user):
        query_id = self._submit(client, user).json()["id"]

        response = client.put(f"/api/queries/{query_id}", json={"response": "Self"}, headers=user["headers"])

        assert response.status_code == 403

    def test_respond_to_missing_query(self, client, admin):
        response = client.put("/api/queries/999", json={"response": "?"}, headers=admin["headers"])

        assert response.status_code == 404

    def test_respond_and_close(self, client, user, admin):
        query_id = self._submit(client, user).json()["id"]

        closed = client.put(
            f"/api/queries/{query_id}", json={"response": "Done", "status": "closed"}, headers=admin["headers"]
        )
        reopened = client.put(
            f"/api/queries/{query_id}", json={"response": "Again", "status": "open"}, headers=admin["headers"]
        )

        assert closed.json()["status"] == "closed"
        assert reopened.status_code == 400
