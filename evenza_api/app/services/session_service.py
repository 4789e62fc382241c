"""
Server-side sessions.

A session is an opaque random id stored in a cookie and mapped to a
user in the ``sessions`` table.  It is the last credential consulted
by ``core.security`` after the bearer header and the JWT cookie.
"""

import logging
import secrets
from typing import Optional

from evenza_api.app.core.db import get_connection


logger = logging.getLogger(__name__)


class SessionService:

    @classmethod
    async def create(cls, user_id: int, max_age_seconds: int) -> str:
        session_id = secrets.token_urlsafe(32)
        conn = get_connection()
        try:
            # Expired rows of this user are dropped on every login
            conn.execute(
                "DELETE FROM sessions WHERE user_id = ? AND expires_at <= CURRENT_TIMESTAMP",
                (user_id,),
            )
            conn.execute(
                "INSERT INTO sessions (id, user_id, expires_at) VALUES (?, ?, datetime('now', ?))",
                (session_id, user_id, f"+{int(max_age_seconds)} seconds"),
            )
            conn.commit()
        finally:
            conn.close()
        logger.debug("Session created for user %s", user_id)
        return session_id

    @classmethod
    async def resolve(cls, session_id: str) -> Optional[int]:
        """Return the user id of a live session or ``None``."""
        conn = get_connection()
        try:
            row = conn.execute(
                "SELECT user_id FROM sessions WHERE id = ? AND expires_at > CURRENT_TIMESTAMP",
                (session_id,),
            ).fetchone()
        finally:
            conn.close()
        return row["user_id"] if row else None

    @classmethod
    async def delete(cls, session_id: str) -> None:
        conn = get_connection()
        try:
            conn.execute("DELETE FROM sessions WHERE id = ?", (session_id,))
            conn.commit()
        finally:
            conn.close()
