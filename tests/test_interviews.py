"""
Tests for interviews, applications and the review workflow.
"""
import asyncio
from unittest.mock import AsyncMock, patch

import pytest

from evenza_api.app.core.config import settings
from evenza_api.app.services.email_service import EmailService

from conftest import interview_payload


@pytest.fixture
def make_interview(client, admin):
    def _make(**overrides):
        response = client.post(
            "/api/admin/interviews", json=interview_payload(**overrides), headers=admin["headers"]
        )
        assert response.status_code == 201
        return response.json()
    return _make


def _apply(client, interview_id, headers, position="Backend Intern", **extra):
    return client.post(
        f"/api/interviews/{interview_id}/submit",
        json={"position": position, **extra},
        headers=headers,
    )


# ============================================================================
# Applying
# ============================================================================

class TestApplications:

    def test_positions_roundtrip(self, client, make_interview):
        interview = make_interview()

        data = client.get(f"/api/interviews/{interview['id']}").json()

        assert data["positions"] == ["Backend Intern", "QA Intern"]
        assert data["registrations"] == 0

    def test_positions_required(self, client, admin):
        response = client.post(
            "/api/admin/interviews", json=interview_payload(positions=[]), headers=admin["headers"]
        )

        assert response.status_code == 400

    def test_apply(self, client, user, make_interview):
        interview = make_interview()

        response = _apply(client, interview["id"], user["headers"], cover_letter="Hire me")

        assert response.status_code == 201
        assert response.json()["message"] == "Application submitted successfully"
        assert client.get(f"/api/interviews/{interview['id']}").json()["registrations"] == 1

    def test_apply_twice(self, client, user, make_interview):
        interview = make_interview()
        _apply(client, interview["id"], user["headers"])

        response = _apply(client, interview["id"], user["headers"], position="QA Intern")

        assert response.status_code == 400
        assert response.json()["detail"] == "You have already applied for this interview"

    def test_unknown_position(self, client, user, make_interview):
        interview = make_interview()

        assert _apply(client, interview["id"], user["headers"], position="CEO").status_code == 400

    def test_closed_interview(self, client, user, make_interview):
        interview = make_interview(status="closed")

        assert _apply(client, interview["id"], user["headers"]).status_code == 400

    def test_user_sees_own_submissions(self, client, user, other_user, make_interview):
        interview = make_interview()
        _apply(client, interview["id"], user["headers"])
        _apply(client, interview["id"], other_user["headers"])

        mine = client.get("/api/user/interview-submissions", headers=user["headers"]).json()

        assert len(mine) == 1
        assert mine[0]["interview_title"] == interview["title"]
        assert mine[0]["company"] == interview["company"]
        assert mine[0]["status"] == "pending"


# ============================================================================
# Review
# ============================================================================

class TestReview:

    @pytest.fixture
    def submission(self, client, user, make_interview):
        interview = make_interview()
        _apply(client, interview["id"], user["headers"])
        return client.get("/api/user/interview-submissions", headers=user["headers"]).json()[0]

    def test_approve_sends_email(self, client, admin, user, submission):
        with patch.object(EmailService, "send_email", new_callable=AsyncMock, return_value=True) as send:
            response = client.put(
                f"/api/admin/interview-submissions/{submission['id']}",
                json={"status": "approved", "admin_notes": "Strong profile"},
                headers=admin["headers"],
            )

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "approved"
        assert data["admin_notes"] == "Strong profile"
        assert data["reviewed_by"] == admin["id"]
        to_email, subject, html = send.await_args.args[:3]
        assert to_email == user["email"]
        assert subject == f"Interview Application Status Update: {submission['interview_title']}"
        assert "approved" in html

    def test_rejected_wording(self, client, admin, submission):
        with patch.object(EmailService, "send_email", new_callable=AsyncMock, return_value=True) as send:
            client.put(
                f"/api/admin/interview-submissions/{submission['id']}",
                json={"status": "rejected"},
                headers=admin["headers"],
            )

        assert "not approved" in send.await_args.args[2]

    def test_email_failure_keeps_status(self, client, admin, submission):
        with patch.object(EmailService, "send_email", new_callable=AsyncMock, return_value=False):
            response = client.put(
                f"/api/admin/interview-submissions/{submission['id']}",
                json={"status": "completed"},
                headers=admin["headers"],
            )

        assert response.status_code == 200
        assert response.json()["status"] == "completed"

    def test_invalid_status(self, client, admin, submission):
        response = client.put(
            f"/api/admin/interview-submissions/{submission['id']}",
            json={"status": "maybe"},
            headers=admin["headers"],
        )

        assert response.status_code == 400

    def test_missing_submission(self, client, admin):
        response = client.put(
            "/api/admin/interview-submissions/999", json={"status": "approved"}, headers=admin["headers"]
        )

        assert response.status_code == 404

    def test_filter_by_status(self, client, admin, submission):
        pending = client.get(
            "/api/admin/interview-submissions", params={"status": "pending"}, headers=admin["headers"]
        ).json()
        approved = client.get(
            f"/api/admin/interviews/{submission['interview_id']}/submissions",
            params={"status": "approved"},
            headers=admin["headers"],
        ).json()

        assert [s["id"] for s in pending] == [submission["id"]]
        assert approved == []


# ============================================================================
# Email transport
# ============================================================================

class TestEmailService:

    def test_unconfigured_smtp_is_skipped(self):
        with patch("evenza_api.app.services.email_service.aiosmtplib.send", new_callable=AsyncMock) as send:
            sent = asyncio.run(EmailService.send_email("a@example.com", "Hi", "<p>Hi</p>"))

        assert sent is False
        send.assert_not_awaited()

    def test_configured_smtp_sends(self, monkeypatch):
        monkeypatch.setattr(settings, "smtp_user", "mailer@example.com")
        monkeypatch.setattr(settings, "smtp_password", "app-password")

        with patch("evenza_api.app.services.email_service.aiosmtplib.send", new_callable=AsyncMock) as send:
            sent = asyncio.run(EmailService.send_submission_status("a@example.com", "<Ann>", "Drive", "approved"))

        assert sent is True
        message = send.await_args.args[0]
        assert message["To"] == "a@example.com"
        assert send.await_args.kwargs["username"] == "mailer@example.com"

    def test_smtp_error_reports_failure(self, monkeypatch):
        import aiosmtplib

        monkeypatch.setattr(settings, "smtp_user", "mailer@example.com")
        monkeypatch.setattr(settings, "smtp_password", "app-password")

        with patch(
            "evenza_api.app.services.email_service.aiosmtplib.send",
            new_callable=AsyncMock,
            side_effect=aiosmtplib.SMTPException("boom"),
        ):
            assert asyncio.run(EmailService.send_email("a@example.com", "Hi", "<p>Hi</p>")) is False
