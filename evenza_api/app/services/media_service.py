"""
Gallery media records.

The files themselves are stored by ``StorageService``; this service
keeps the catalogue shown on the public gallery page.
"""

import logging
from typing import Any, Dict, List, Optional

from evenza_api.app.core.db import get_connection
from evenza_api.app.core.exceptions import NotFoundError
from evenza_api.app.schemas.media import MediaCreate, MediaRead
from evenza_api.app.services.activity_service import ActivityService


logger = logging.getLogger(__name__)


class MediaService:

    @classmethod
    async def list_media(cls, category: Optional[str] = None, media_type: Optional[str] = None) -> List[MediaRead]:
        conn = get_connection()
        try:
            where_clauses: List[str] = []
            params: List[Any] = []
            if category:
                where_clauses.append("category = ?")
                params.append(category)
            if media_type:
                where_clauses.append("type = ?")
                params.append(media_type)
            query = "SELECT * FROM media"
            if where_clauses:
                query += " WHERE " + " AND ".join(where_clauses)
            query += " ORDER BY created_at DESC, id DESC"
            return [MediaRead(**dict(row)) for row in conn.execute(query, tuple(params)).fetchall()]
        finally:
            conn.close()

    @classmethod
    async def create_media(cls, data: MediaCreate, current_user: Dict[str, Any]) -> MediaRead:
        values = data.model_dump()
        values["uploaded_by"] = current_user.get("user_id")
        conn = get_connection()
        try:
            if values.get("related_event_id") is not None and not conn.execute(
                "SELECT 1 FROM events WHERE id = ?", (values["related_event_id"],)
            ).fetchone():
                raise NotFoundError("Event not found")
            if values.get("related_trip_id") is not None and not conn.execute(
                "SELECT 1 FROM trips WHERE id = ?", (values["related_trip_id"],)
            ).fetchone():
                raise NotFoundError("Trip not found")
            cursor = conn.execute(
                f"INSERT INTO media ({', '.join(values)}) VALUES ({', '.join('?' for _ in values)})",
                tuple(values.values()),
            )
            media_id = cursor.lastrowid
            conn.commit()
            row = conn.execute("SELECT * FROM media WHERE id = ?", (media_id,)).fetchone()
        finally:
            conn.close()
        await ActivityService.record(current_user.get("user_id"), "create", "media", media_id, {"title": data.title})
        return MediaRead(**dict(row))

    @classmethod
    async def delete_media(cls, media_id: int, current_user: Dict[str, Any]) -> None:
        conn = get_connection()
        try:
            deleted = conn.execute("DELETE FROM media WHERE id = ?", (media_id,)).rowcount
            conn.commit()
        finally:
            conn.close()
        if not deleted:
            raise NotFoundError("Media not found")
        await ActivityService.record(current_user.get("user_id"), "delete", "media", media_id)
