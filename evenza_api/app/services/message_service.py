"""
Contact messages, user queries and the merged admin inbox.

Two tables feed the inbox: ``messages`` (contact form and
admin-entered) and ``queries`` (support questions from signed-in
users).  ``list_inbox`` pages over their union without a SQL ``UNION``:
messages are conceptually placed before queries, the requested window
``[skip, skip + limit)`` is split across the two tables, and the rows
fetched for the page are then sorted by ``created_at`` descending.  The
order across pages is therefore approximate; each page is exact in
size and every row appears on exactly one page.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from evenza_api.app.core.db import build_update, get_connection
from evenza_api.app.core.exceptions import NotFoundError, PermissionDenied
from evenza_api.app.core.security import is_admin
from evenza_api.app.schemas.common import Pagination
from evenza_api.app.schemas.message import (
    InboxItem,
    InboxResponse,
    MessageCreate,
    MessageRead,
    QueryCreate,
    QueryRead,
)
from evenza_api.app.services.activity_service import ActivityService


logger = logging.getLogger(__name__)

DEFAULT_QUERY_SUBJECT = "General Query"


def _filters(search: Optional[str], status: Optional[str]) -> Tuple[str, List[Any]]:
    """Build the WHERE fragment shared by both inbox tables."""
    where_clauses: List[str] = []
    params: List[Any] = []
    if search:
        where_clauses.append("(name LIKE ? OR email LIKE ? OR subject LIKE ? OR message LIKE ?)")
        params.extend([f"%{search}%"] * 4)
    if status and status != "all":
        where_clauses.append("status = ?")
        params.append(status)
    return (" WHERE " + " AND ".join(where_clauses) if where_clauses else ""), params


class MessageService:
    """Сервис сообщений и обращений пользователей."""

    @classmethod
    async def list_inbox(
        cls,
        page: int = 1,
        limit: int = 10,
        search: Optional[str] = None,
        status: Optional[str] = None,
    ) -> InboxResponse:
        """Return one page of the merged message/query inbox.

        Parameters
        ----------
        page, limit : int
            1-based page number and page size.
        search : Optional[str]
            Substring matched against name, email, subject and body.
        status : Optional[str]
            Exact status filter; ``"all"`` or ``None`` disables it.
        """
        where_sql, params = _filters(search, status)
        skip = (page - 1) * limit
        conn = get_connection()
        try:
            message_count = conn.execute(f"SELECT COUNT(*) FROM messages{where_sql}", tuple(params)).fetchone()[0]
            query_count = conn.execute(f"SELECT COUNT(*) FROM queries{where_sql}", tuple(params)).fetchone()[0]

            items: List[InboxItem] = []
            if skip < message_count:
                rows = conn.execute(
                    f"SELECT * FROM messages{where_sql} ORDER BY created_at DESC, id DESC LIMIT ? OFFSET ?",
                    tuple(params) + (min(limit, message_count - skip), skip),
                ).fetchall()
                items.extend(
                    InboxItem(
                        id=row["id"],
                        type="message",
                        name=row["name"],
                        email=row["email"],
                        subject=row["subject"],
                        message=row["message"],
                        status=row["status"],
                        notes=row["notes"] or "",
                        created_at=row["created_at"],
                    )
                    for row in rows
                )
            remaining = limit - len(items)
            if remaining > 0:
                query_skip = max(0, skip - message_count)
                rows = conn.execute(
                    f"SELECT * FROM queries{where_sql} ORDER BY created_at DESC, id DESC LIMIT ? OFFSET ?",
                    tuple(params) + (remaining, query_skip),
                ).fetchall()
                items.extend(
                    InboxItem(
                        id=row["id"],
                        type="query",
                        name=row["name"],
                        email=row["email"],
                        subject=row["subject"] or "Query",
                        message=row["message"],
                        status=row["status"] or "new",
                        notes=row["response"] or "",
                        created_at=row["created_at"],
                    )
                    for row in rows
                )
        finally:
            conn.close()

        # Stable sort: on equal timestamps messages keep their lead
        items.sort(key=lambda item: item.created_at.isoformat() if item.created_at else "", reverse=True)
        total = message_count + query_count
        return InboxResponse(messages=items, pagination=Pagination.build(total, page, limit))

    @classmethod
    async def create_message(cls, data: MessageCreate, user_id: Optional[int] = None) -> MessageRead:
        conn = get_connection()
        try:
            cursor = conn.execute(
                "INSERT INTO messages (user_id, name, email, subject, message) VALUES (?, ?, ?, ?, ?)",
                (user_id, data.name, data.email, data.subject, data.message),
            )
            message_id = cursor.lastrowid
            conn.commit()
        finally:
            conn.close()
        logger.info("Message %s received from %s", message_id, data.email)
        return await cls.get_message(message_id)

    @classmethod
    async def get_message(cls, message_id: int) -> MessageRead:
        conn = get_connection()
        try:
            row = conn.execute("SELECT * FROM messages WHERE id = ?", (message_id,)).fetchone()
        finally:
            conn.close()
        if not row:
            raise NotFoundError("Message not found")
        return MessageRead(**dict(row))

    @classmethod
    async def update_message(cls, message_id: int, updates: Dict[str, Any], current_user: Dict[str, Any]) -> MessageRead:
        await cls.get_message(message_id)
        if updates:
            set_sql, values = build_update(updates)
            conn = get_connection()
            try:
                conn.execute(f"UPDATE messages SET {set_sql} WHERE id = ?", tuple(values) + (message_id,))
                conn.commit()
            finally:
                conn.close()
            await ActivityService.record(current_user.get("user_id"), "update", "message", message_id, updates)
        return await cls.get_message(message_id)

    @classmethod
    async def delete_message(cls, message_id: int, current_user: Dict[str, Any]) -> None:
        await cls.get_message(message_id)
        conn = get_connection()
        try:
            conn.execute("DELETE FROM messages WHERE id = ?", (message_id,))
            conn.commit()
        finally:
            conn.close()
        await ActivityService.record(current_user.get("user_id"), "delete", "message", message_id)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @classmethod
    async def create_query(cls, data: QueryCreate, user_id: int) -> QueryRead:
        """Store a support query.  An empty subject becomes "General Query"."""
        subject = (data.subject or "").strip() or DEFAULT_QUERY_SUBJECT
        conn = get_connection()
        try:
            cursor = conn.execute(
                "INSERT INTO queries (user_id, name, email, subject, message) VALUES (?, ?, ?, ?, ?)",
                (user_id, data.name, data.email, subject, data.message),
            )
            query_id = cursor.lastrowid
            conn.commit()
        finally:
            conn.close()
        await ActivityService.record(user_id, "query_submitted", "query", query_id, {"subject": subject})
        return await cls.get_query(query_id)

    @classmethod
    async def get_query(cls, query_id: int, current_user: Optional[Dict[str, Any]] = None) -> QueryRead:
        """Fetch a query.  When ``current_user`` is given, only its owner or an admin may read it."""
        conn = get_connection()
        try:
            row = conn.execute("SELECT * FROM queries WHERE id = ?", (query_id,)).fetchone()
        finally:
            conn.close()
        if not row:
            raise NotFoundError("Query not found")
        if current_user is not None and not is_admin(current_user) and row["user_id"] != current_user.get("user_id"):
            raise PermissionDenied("You do not have access to this query")
        return QueryRead(**dict(row))

    @classmethod
    async def list_user_queries(cls, user_id: int, page: int = 1, limit: int = 10) -> Tuple[List[QueryRead], int]:
        conn = get_connection()
        try:
            total = conn.execute("SELECT COUNT(*) FROM queries WHERE user_id = ?", (user_id,)).fetchone()[0]
            rows = conn.execute(
                "SELECT * FROM queries WHERE user_id = ? ORDER BY created_at DESC, id DESC LIMIT ? OFFSET ?",
                (user_id, limit, (page - 1) * limit),
            ).fetchall()
            return [QueryRead(**dict(row)) for row in rows], total
        finally:
            conn.close()

    @classmethod
    async def respond_to_query(
        cls,
        query_id: int,
        response: str,
        status: str,
        current_user: Dict[str, Any],
    ) -> QueryRead:
        await cls.get_query(query_id)
        conn = get_connection()
        try:
            conn.execute(
                """
                UPDATE queries
                SET response = ?, status = ?, responded_by = ?, responded_at = CURRENT_TIMESTAMP,
                    updated_at = CURRENT_TIMESTAMP
                WHERE id = ?
                """,
                (response, status, current_user.get("user_id"), query_id),
            )
            conn.commit()
        finally:
            conn.close()
        await ActivityService.record(current_user.get("user_id"), "query_answered", "query", query_id)
        return await cls.get_query(query_id)
