"""
Liveness/readiness probe.
"""

import logging
import sqlite3

from fastapi import APIRouter

from evenza_api.app.core.db import get_connection


logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("")
async def health() -> dict:
    """Report whether the API can reach its database."""
    try:
        conn = get_connection()
        try:
            conn.execute("SELECT 1").fetchone()
        finally:
            conn.close()
        database = "ok"
    except sqlite3.Error:
        logger.exception("Database health check failed")
        database = "error"
    return {"status": "ok" if database == "ok" else "degraded", "database": database}
