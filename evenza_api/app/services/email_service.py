"""
Outgoing email over SMTP.

Messages are sent asynchronously with ``aiosmtplib``.  When SMTP
credentials are not configured the service logs a warning and reports
failure instead of raising, so a missing mail setup never breaks the
request that triggered the email.
"""

import logging
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from html import escape
from typing import Optional

import aiosmtplib

from evenza_api.app.core.config import settings


logger = logging.getLogger(__name__)


class EmailService:
    """Async email service using SMTP."""

    @classmethod
    def is_configured(cls) -> bool:
        return bool(settings.smtp_user and settings.smtp_password)

    @classmethod
    async def send_email(
        cls,
        to_email: str,
        subject: str,
        html_content: str,
        text_content: Optional[str] = None,
    ) -> bool:
        """Send an email.  Returns ``True`` on success, ``False`` otherwise."""
        if not cls.is_configured():
            logger.warning("Email service not configured, skipping email to %s", to_email)
            return False

        message = MIMEMultipart("alternative")
        message["From"] = f"{settings.email_from_name} <{settings.email_from}>"
        message["To"] = to_email
        message["Subject"] = subject
        if text_content:
            message.attach(MIMEText(text_content, "plain"))
        message.attach(MIMEText(html_content, "html"))

        try:
            await aiosmtplib.send(
                message,
                hostname=settings.smtp_host,
                port=settings.smtp_port,
                username=settings.smtp_user,
                password=settings.smtp_password,
                start_tls=settings.smtp_use_tls,
            )
        except (aiosmtplib.SMTPException, OSError) as e:
            logger.error("Failed to send email to %s: %s", to_email, e)
            return False
        logger.info("Sent email to %s: %s", to_email, subject)
        return True

    @classmethod
    async def send_submission_status(cls, to_email: str, name: str, interview_title: str, status: str) -> bool:
        """Notify an applicant that their interview application changed status."""
        if status == "approved":
            status_text = "approved"
            action_text = (
                "We're excited to inform you that your application has been approved. "
                "Please check your dashboard for further instructions."
            )
        elif status == "rejected":
            status_text = "not approved"
            action_text = (
                "We regret to inform you that your application was not approved at this time. "
                "We encourage you to apply for future opportunities."
            )
        elif status == "completed":
            status_text = "marked as completed"
            action_text = (
                "Thank you for participating in the interview process. "
                "We've marked your interview as completed."
            )
        else:
            status_text = "updated"
            action_text = "Please check your dashboard for the latest status."

        subject = f"Interview Application Status Update: {interview_title}"
        text = (
            f"Dear {name},\n\nYour application for the {interview_title} interview has been "
            f"{status_text}. {action_text}\n\nBest regards,\n{settings.email_from_name}"
        )
        html = (
            "<h1>Interview Application Status Update</h1>"
            f"<p>Dear {escape(name)},</p>"
            f"<p>Your application for the <strong>{escape(interview_title)}</strong> interview has been "
            f"<strong>{status_text}</strong>.</p>"
            f"<p>{action_text}</p>"
            f"<p>Best regards,<br>{settings.email_from_name}</p>"
        )
        return await cls.send_email(to_email, subject, html, text)
