"""
Service layer for site settings.

Settings are key-value pairs stored in the ``settings`` table.  Keys are
namespaced by category (``general.siteName``, ``payments.bankAccount``)
and values are JSON-encoded so booleans, numbers and nested objects
survive a round trip through the admin settings form.
"""

import json
import logging
from typing import Any, Dict, Optional

from evenza_api.app.core.db import get_connection
from evenza_api.app.services.activity_service import ActivityService


logger = logging.getLogger(__name__)


class SettingsService:
    """Service for managing site settings."""

    @staticmethod
    def _deserialize(raw: Optional[str]) -> Any:
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            # Values written by hand directly into the table
            return raw

    @classmethod
    async def get_all(cls, category: Optional[str] = None) -> Dict[str, Any]:
        """Return settings as ``{key: value}``, optionally limited to one category."""
        conn = get_connection()
        try:
            if category:
                rows = conn.execute(
                    "SELECT key, value FROM settings WHERE category = ? ORDER BY key", (category,)
                ).fetchall()
            else:
                rows = conn.execute("SELECT key, value FROM settings ORDER BY key").fetchall()
            return {row["key"]: cls._deserialize(row["value"]) for row in rows}
        finally:
            conn.close()

    @classmethod
    async def save_category(cls, category: str, values: Dict[str, Any], current_user: Dict[str, Any]) -> Dict[str, Any]:
        """Upsert every entry of ``values`` as ``<category>.<key>``.

        Returns the full, updated settings mapping.
        """
        conn = get_connection()
        try:
            for key, value in values.items():
                conn.execute(
                    "INSERT INTO settings (key, value, category) VALUES (?, ?, ?)"
                    " ON CONFLICT(key) DO UPDATE SET value = excluded.value,"
                    " category = excluded.category, updated_at = CURRENT_TIMESTAMP",
                    (f"{category}.{key}", json.dumps(value), category),
                )
            conn.commit()
        finally:
            conn.close()
        logger.info("Settings category %s updated (%d keys)", category, len(values))
        await ActivityService.record(
            current_user.get("user_id"), "update", "setting", None, {"category": category, "keys": sorted(values)}
        )
        return await cls.get_all()
