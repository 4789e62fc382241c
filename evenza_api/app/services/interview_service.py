"""
Business logic for interview opportunities and applications.

An interview lists one or more open positions.  Each user may apply
once per interview (enforced by a unique index); admins review the
applications and the applicant is emailed whenever the status changes.
"""

import json
import logging
import sqlite3
from typing import Any, Dict, List, Optional

from evenza_api.app.core.db import build_update, get_connection, to_db_value
from evenza_api.app.core.exceptions import NotFoundError
from evenza_api.app.schemas.interview import (
    SUBMISSION_STATUSES,
    InterviewCreate,
    InterviewRead,
    SubmissionCreate,
    SubmissionRead,
    SubmissionResult,
)
from evenza_api.app.services.activity_service import ActivityService
from evenza_api.app.services.email_service import EmailService


logger = logging.getLogger(__name__)

INTERVIEW_SELECT = (
    "SELECT i.*, "
    "(SELECT COUNT(*) FROM interview_submissions s WHERE s.interview_id = i.id) AS registrations "
    "FROM interviews i"
)

SUBMISSION_SELECT = (
    "SELECT s.*, i.title AS interview_title, i.company, u.name AS user_name, u.email AS user_email "
    "FROM interview_submissions s "
    "JOIN interviews i ON i.id = s.interview_id "
    "JOIN users u ON u.id = s.user_id"
)


def _row_to_interview(row: sqlite3.Row) -> InterviewRead:
    data = dict(row)
    data["positions"] = json.loads(data["positions"] or "[]")
    return InterviewRead(**data)


class InterviewService:
    """Сервис собеседований и заявок на них."""

    @classmethod
    async def list_published(cls, limit: Optional[int] = None) -> List[InterviewRead]:
        conn = get_connection()
        try:
            query = f"{INTERVIEW_SELECT} WHERE i.is_published = 1 ORDER BY i.date ASC, i.id ASC"
            params: tuple = ()
            if limit:
                query += " LIMIT ?"
                params = (limit,)
            return [_row_to_interview(row) for row in conn.execute(query, params).fetchall()]
        finally:
            conn.close()

    @classmethod
    async def list_all(cls) -> List[InterviewRead]:
        conn = get_connection()
        try:
            rows = conn.execute(f"{INTERVIEW_SELECT} ORDER BY i.created_at DESC, i.id DESC").fetchall()
            return [_row_to_interview(row) for row in rows]
        finally:
            conn.close()

    @classmethod
    async def get_interview(cls, interview_id: int, published_only: bool = False) -> InterviewRead:
        conn = get_connection()
        try:
            row = conn.execute(f"{INTERVIEW_SELECT} WHERE i.id = ?", (interview_id,)).fetchone()
        finally:
            conn.close()
        if not row or (published_only and not row["is_published"]):
            raise NotFoundError("Interview not found")
        return _row_to_interview(row)

    @classmethod
    async def create_interview(cls, data: InterviewCreate, current_user: Dict[str, Any]) -> InterviewRead:
        logger.info("User %s is creating interview '%s'", current_user.get("email"), data.title)
        values = {k: to_db_value(v) for k, v in data.model_dump().items()}
        values["created_by"] = current_user.get("user_id")
        conn = get_connection()
        try:
            cursor = conn.execute(
                f"INSERT INTO interviews ({', '.join(values)}) VALUES ({', '.join('?' for _ in values)})",
                tuple(values.values()),
            )
            interview_id = cursor.lastrowid
            conn.commit()
        finally:
            conn.close()
        await ActivityService.record(
            current_user.get("user_id"), "create", "interview", interview_id, {"title": data.title}
        )
        return await cls.get_interview(interview_id)

    @classmethod
    async def update_interview(
        cls, interview_id: int, updates: Dict[str, Any], current_user: Dict[str, Any]
    ) -> InterviewRead:
        await cls.get_interview(interview_id)
        if updates:
            set_sql, values = build_update(updates)
            conn = get_connection()
            try:
                conn.execute(f"UPDATE interviews SET {set_sql} WHERE id = ?", tuple(values) + (interview_id,))
                conn.commit()
            finally:
                conn.close()
            await ActivityService.record(
                current_user.get("user_id"), "update", "interview", interview_id, {"fields": sorted(updates)}
            )
        return await cls.get_interview(interview_id)

    @classmethod
    async def delete_interview(cls, interview_id: int, current_user: Dict[str, Any]) -> None:
        interview = await cls.get_interview(interview_id)
        conn = get_connection()
        try:
            conn.execute("DELETE FROM interviews WHERE id = ?", (interview_id,))
            conn.commit()
        finally:
            conn.close()
        await ActivityService.record(
            current_user.get("user_id"), "delete", "interview", interview_id, {"title": interview.title}
        )

    @classmethod
    async def submit(cls, interview_id: int, user_id: int, data: SubmissionCreate) -> SubmissionResult:
        """Apply for an interview.

        Raises ``NotFoundError`` for unknown or unpublished interviews and
        ``ValueError`` if applications are closed, the position is not
        offered or the user already applied.
        """
        interview = await cls.get_interview(interview_id, published_only=True)
        if interview.status != "active":
            raise ValueError("This interview is no longer accepting applications")
        if interview.positions and data.position not in interview.positions:
            raise ValueError(f"Position '{data.position}' is not offered for this interview")
        values = data.model_dump()
        values.update({"interview_id": interview_id, "user_id": user_id})
        conn = get_connection()
        try:
            try:
                cursor = conn.execute(
                    f"INSERT INTO interview_submissions ({', '.join(values)}) "
                    f"VALUES ({', '.join('?' for _ in values)})",
                    tuple(values.values()),
                )
            except sqlite3.IntegrityError as e:
                raise ValueError("You have already applied for this interview") from e
            submission_id = cursor.lastrowid
            conn.commit()
        finally:
            conn.close()
        logger.info("User %s applied for interview %s", user_id, interview_id)
        await ActivityService.record(
            user_id, "interview_applied", "interview", interview_id,
            {"title": interview.title, "position": data.position},
        )
        return SubmissionResult(message="Application submitted successfully", submission_id=submission_id)

    @classmethod
    async def get_submission(cls, submission_id: int) -> SubmissionRead:
        conn = get_connection()
        try:
            row = conn.execute(f"{SUBMISSION_SELECT} WHERE s.id = ?", (submission_id,)).fetchone()
        finally:
            conn.close()
        if not row:
            raise NotFoundError("Submission not found")
        return SubmissionRead(**dict(row))

    @classmethod
    async def list_submissions(
        cls,
        interview_id: Optional[int] = None,
        user_id: Optional[int] = None,
        status: Optional[str] = None,
    ) -> List[SubmissionRead]:
        conn = get_connection()
        try:
            where_clauses: List[str] = []
            params: List[Any] = []
            if interview_id is not None:
                where_clauses.append("s.interview_id = ?")
                params.append(interview_id)
            if user_id is not None:
                where_clauses.append("s.user_id = ?")
                params.append(user_id)
            if status:
                where_clauses.append("s.status = ?")
                params.append(status)
            query = SUBMISSION_SELECT
            if where_clauses:
                query += " WHERE " + " AND ".join(where_clauses)
            query += " ORDER BY s.created_at DESC, s.id DESC"
            return [SubmissionRead(**dict(row)) for row in conn.execute(query, tuple(params)).fetchall()]
        finally:
            conn.close()

    @classmethod
    async def update_submission_status(
        cls,
        submission_id: int,
        status: str,
        admin_notes: Optional[str],
        current_user: Dict[str, Any],
    ) -> SubmissionRead:
        """Review an application and email the applicant.

        ``status`` must be one of pending, approved, rejected, completed
        or cancelled; anything else raises ``ValueError``.  A failed email
        is logged and does not undo the status change.
        """
        if status not in SUBMISSION_STATUSES:
            raise ValueError(f"Invalid status. Must be one of: {', '.join(SUBMISSION_STATUSES)}")
        await cls.get_submission(submission_id)
        conn = get_connection()
        try:
            fields = ["status = ?", "reviewed_by = ?", "reviewed_at = CURRENT_TIMESTAMP", "updated_at = CURRENT_TIMESTAMP"]
            params: List[Any] = [status, current_user.get("user_id")]
            if admin_notes is not None:
                fields.append("admin_notes = ?")
                params.append(admin_notes)
            conn.execute(
                f"UPDATE interview_submissions SET {', '.join(fields)} WHERE id = ?",
                tuple(params) + (submission_id,),
            )
            conn.commit()
        finally:
            conn.close()
        submission = await cls.get_submission(submission_id)
        await ActivityService.record(
            current_user.get("user_id"), "submission_reviewed", "interview", submission.interview_id,
            {"submission_id": submission_id, "status": status},
        )
        sent = await EmailService.send_submission_status(
            submission.user_email, submission.user_name, submission.interview_title, status
        )
        if not sent:
            logger.warning("Status email for submission %s was not delivered", submission_id)
        return submission
