"""
Business logic for CMS content.

Slugs are unique across all content.  At most one item is flagged as
the homepage; flagging a new one clears the flag everywhere else in
the same transaction.
"""

import logging
import re
import sqlite3
from typing import Any, Dict, List, Optional, Tuple

from evenza_api.app.core.db import build_update, get_connection, to_db_value
from evenza_api.app.core.exceptions import NotFoundError
from evenza_api.app.schemas.content import ContentCreate, ContentRead
from evenza_api.app.services.activity_service import ActivityService


logger = logging.getLogger(__name__)

CONTENT_SELECT = "SELECT c.*, u.name AS author_name FROM content c LEFT JOIN users u ON u.id = c.author_id"


def slugify(title: str) -> str:
    """``"About Us!"`` -> ``"about-us"``."""
    slug = re.sub(r"[^\w\s]", "", title.lower())
    return re.sub(r"\s+", "-", slug.strip())


class ContentService:

    @classmethod
    async def list_content(
        cls,
        page: int = 1,
        limit: int = 10,
        search: Optional[str] = None,
        content_type: Optional[str] = None,
    ) -> Tuple[List[ContentRead], int]:
        conn = get_connection()
        try:
            where_clauses: List[str] = []
            params: List[Any] = []
            if search:
                where_clauses.append("(c.title LIKE ? OR c.content LIKE ?)")
                params.extend([f"%{search}%"] * 2)
            if content_type and content_type != "all":
                where_clauses.append("c.type = ?")
                params.append(content_type)
            where_sql = " WHERE " + " AND ".join(where_clauses) if where_clauses else ""
            total = conn.execute(f"SELECT COUNT(*) FROM content c{where_sql}", tuple(params)).fetchone()[0]
            rows = conn.execute(
                f"{CONTENT_SELECT}{where_sql} ORDER BY c.updated_at DESC, c.id DESC LIMIT ? OFFSET ?",
                tuple(params) + (limit, (page - 1) * limit),
            ).fetchall()
            return [ContentRead(**dict(row)) for row in rows], total
        finally:
            conn.close()

    @classmethod
    async def get_content(cls, content_id: int) -> ContentRead:
        conn = get_connection()
        try:
            row = conn.execute(f"{CONTENT_SELECT} WHERE c.id = ?", (content_id,)).fetchone()
        finally:
            conn.close()
        if not row:
            raise NotFoundError("Content not found")
        return ContentRead(**dict(row))

    @classmethod
    async def get_published_by_slug(cls, slug: str) -> ContentRead:
        conn = get_connection()
        try:
            row = conn.execute(
                f"{CONTENT_SELECT} WHERE c.slug = ? AND c.status = 'published'", (slug,)
            ).fetchone()
        finally:
            conn.close()
        if not row:
            raise NotFoundError("Content not found")
        return ContentRead(**dict(row))

    @classmethod
    async def get_homepage(cls) -> ContentRead:
        conn = get_connection()
        try:
            row = conn.execute(
                f"{CONTENT_SELECT} WHERE c.is_homepage = 1 AND c.status = 'published'"
            ).fetchone()
        finally:
            conn.close()
        if not row:
            raise NotFoundError("No homepage content has been published")
        return ContentRead(**dict(row))

    @classmethod
    async def create_content(cls, data: ContentCreate, current_user: Dict[str, Any]) -> ContentRead:
        """Create a content item.

        The slug defaults to ``slugify(title)``.  Raises ``ValueError``
        if the slug is empty or already taken.
        """
        values = {k: to_db_value(v) for k, v in data.model_dump().items()}
        values["slug"] = data.slug or slugify(data.title)
        if not values["slug"]:
            raise ValueError("Could not derive a slug from the title")
        values["author_id"] = current_user.get("user_id")
        conn = get_connection()
        try:
            if conn.execute("SELECT 1 FROM content WHERE slug = ?", (values["slug"],)).fetchone():
                raise ValueError("Content with this slug already exists")
            if data.is_homepage:
                conn.execute("UPDATE content SET is_homepage = 0 WHERE is_homepage = 1")
            try:
                cursor = conn.execute(
                    f"INSERT INTO content ({', '.join(values)}) VALUES ({', '.join('?' for _ in values)})",
                    tuple(values.values()),
                )
            except sqlite3.IntegrityError as e:
                raise ValueError("Content with this slug already exists") from e
            content_id = cursor.lastrowid
            conn.commit()
        finally:
            conn.close()
        logger.info("Content '%s' created by %s", values["slug"], current_user.get("email"))
        await ActivityService.record(
            current_user.get("user_id"), "create", "content", content_id, {"slug": values["slug"]}
        )
        return await cls.get_content(content_id)

    @classmethod
    async def update_content(cls, content_id: int, updates: Dict[str, Any], current_user: Dict[str, Any]) -> ContentRead:
        current = await cls.get_content(content_id)
        if not updates:
            return current
        if "slug" in updates and not updates["slug"]:
            updates.pop("slug")
        conn = get_connection()
        try:
            new_slug = updates.get("slug")
            if new_slug and new_slug != current.slug:
                taken = conn.execute(
                    "SELECT 1 FROM content WHERE slug = ? AND id != ?", (new_slug, content_id)
                ).fetchone()
                if taken:
                    raise ValueError("Content with this slug already exists")
            if updates.get("is_homepage"):
                conn.execute("UPDATE content SET is_homepage = 0 WHERE id != ?", (content_id,))
            set_sql, values = build_update(updates)
            conn.execute(f"UPDATE content SET {set_sql} WHERE id = ?", tuple(values) + (content_id,))
            conn.commit()
        finally:
            conn.close()
        await ActivityService.record(
            current_user.get("user_id"), "update", "content", content_id, {"fields": sorted(updates)}
        )
        return await cls.get_content(content_id)

    @classmethod
    async def delete_content(cls, content_id: int, current_user: Dict[str, Any]) -> None:
        content = await cls.get_content(content_id)
        conn = get_connection()
        try:
            conn.execute("DELETE FROM content WHERE id = ?", (content_id,))
            conn.commit()
        finally:
            conn.close()
        await ActivityService.record(
            current_user.get("user_id"), "delete", "content", content_id, {"slug": content.slug}
        )
