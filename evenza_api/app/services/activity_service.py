"""
Activity log for recording and querying user and admin actions.

Every significant action (registrations, enrollments, applications and
admin create/update/delete operations) is written to the
``activity_logs`` table.  The log feeds the admin dashboard, the admin
activity screen and the user's own activity page.
"""

import json
import logging
from typing import Any, Dict, List, Optional

from evenza_api.app.core.db import get_connection


logger = logging.getLogger(__name__)


class ActivityService:
    """Service class for writing and retrieving activity records."""

    @classmethod
    async def log(
        cls,
        user_id: Optional[int],
        action: str,
        resource_type: str,
        resource_id: Optional[int] = None,
        details: Optional[dict] = None,
    ) -> None:
        """Insert a new activity record.

        Parameters
        ----------
        user_id : Optional[int]
            ID of the user performing the action.  ``None`` for
            anonymous or system actions.
        action : str
            Short action code, e.g. ``"event_registered"`` or ``"update"``.
        resource_type : str
            Type of object affected (``"event"``, ``"trip"``, ``"payment"``...).
        resource_id : Optional[int]
            Primary key of the affected object, if applicable.
        details : Optional[dict]
            Additional structured data, stored as JSON.
        """
        conn = get_connection()
        try:
            conn.execute(
                """
                INSERT INTO activity_logs (user_id, action, resource_type, resource_id, details)
                VALUES (?, ?, ?, ?, ?)
                """,
                (user_id, action, resource_type, resource_id, json.dumps(details) if details else None),
            )
            conn.commit()
        finally:
            conn.close()

    @classmethod
    async def record(cls, *args: Any, **kwargs: Any) -> None:
        """Like ``log`` but never raises; the caller's operation has already succeeded."""
        try:
            await cls.log(*args, **kwargs)
        except Exception:
            logger.warning("Failed to write activity log entry", exc_info=True)

    @staticmethod
    def _row_to_dict(row) -> Dict[str, Any]:
        details = None
        if row["details"]:
            try:
                details = json.loads(row["details"])
            except json.JSONDecodeError:
                details = {"raw": row["details"]}
        return {
            "id": row["id"],
            "user_id": row["user_id"],
            "user_name": row["user_name"],
            "action": row["action"],
            "resource_type": row["resource_type"],
            "resource_id": row["resource_id"],
            "details": details,
            "created_at": row["created_at"],
        }

    @classmethod
    async def list_logs(
        cls,
        user_id: Optional[int] = None,
        resource_type: Optional[str] = None,
        action: Optional[str] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> List[Dict[str, Any]]:
        """Retrieve activity records, newest first, with optional filters."""
        conn = get_connection()
        try:
            where_clauses: List[str] = []
            params: List[Any] = []
            if user_id is not None:
                where_clauses.append("a.user_id = ?")
                params.append(user_id)
            if resource_type:
                where_clauses.append("a.resource_type = ?")
                params.append(resource_type)
            if action:
                where_clauses.append("a.action = ?")
                params.append(action)
            query = (
                "SELECT a.id, a.user_id, u.name AS user_name, a.action, a.resource_type, "
                "a.resource_id, a.details, a.created_at "
                "FROM activity_logs a LEFT JOIN users u ON u.id = a.user_id"
            )
            if where_clauses:
                query += " WHERE " + " AND ".join(where_clauses)
            query += " ORDER BY a.created_at DESC, a.id DESC LIMIT ? OFFSET ?"
            params.extend([limit, offset])
            rows = conn.execute(query, tuple(params)).fetchall()
            return [cls._row_to_dict(row) for row in rows]
        finally:
            conn.close()

    @classmethod
    async def counts_by_resource_type(cls) -> Dict[str, int]:
        conn = get_connection()
        try:
            rows = conn.execute(
                "SELECT resource_type, COUNT(*) AS cnt FROM activity_logs GROUP BY resource_type"
            ).fetchall()
            return {row["resource_type"]: row["cnt"] for row in rows}
        finally:
            conn.close()
