"""
Business logic for trips and trip enrollments.

Mirrors ``EventService``: published trips are public, capacity is the
``spots`` column and a paid trip creates a pending payment of the trip
price on enrollment.
"""

import logging
from typing import Any, Dict, List, Optional

from evenza_api.app.core.db import build_update, get_connection, to_db_value
from evenza_api.app.core.exceptions import NotFoundError
from evenza_api.app.schemas.trip import (
    TripCreate,
    TripEnrollmentCreate,
    TripEnrollmentResult,
    TripParticipantRead,
    TripRead,
)
from evenza_api.app.services.activity_service import ActivityService


logger = logging.getLogger(__name__)

TRIP_SELECT = (
    "SELECT t.*, "
    "(SELECT COUNT(*) FROM trip_participants p WHERE p.trip_id = t.id) AS enrollments "
    "FROM trips t"
)


class TripService:

    @classmethod
    async def list_published(cls, limit: Optional[int] = None) -> List[TripRead]:
        conn = get_connection()
        try:
            query = f"{TRIP_SELECT} WHERE t.is_published = 1 ORDER BY t.date ASC, t.id ASC"
            params: tuple = ()
            if limit:
                query += " LIMIT ?"
                params = (limit,)
            return [TripRead(**dict(row)) for row in conn.execute(query, params).fetchall()]
        finally:
            conn.close()

    @classmethod
    async def list_all(cls) -> List[TripRead]:
        conn = get_connection()
        try:
            rows = conn.execute(f"{TRIP_SELECT} ORDER BY t.created_at DESC, t.id DESC").fetchall()
            return [TripRead(**dict(row)) for row in rows]
        finally:
            conn.close()

    @classmethod
    async def get_trip(cls, trip_id: int, published_only: bool = False) -> TripRead:
        conn = get_connection()
        try:
            row = conn.execute(f"{TRIP_SELECT} WHERE t.id = ?", (trip_id,)).fetchone()
        finally:
            conn.close()
        if not row or (published_only and not row["is_published"]):
            raise NotFoundError("Trip not found")
        return TripRead(**dict(row))

    @classmethod
    async def create_trip(cls, data: TripCreate, current_user: Dict[str, Any]) -> TripRead:
        logger.info("User %s is creating trip '%s'", current_user.get("email"), data.title)
        values = {k: to_db_value(v) for k, v in data.model_dump().items()}
        values["created_by"] = current_user.get("user_id")
        conn = get_connection()
        try:
            cursor = conn.execute(
                f"INSERT INTO trips ({', '.join(values)}) VALUES ({', '.join('?' for _ in values)})",
                tuple(values.values()),
            )
            trip_id = cursor.lastrowid
            conn.commit()
        finally:
            conn.close()
        await ActivityService.record(current_user.get("user_id"), "create", "trip", trip_id, {"title": data.title})
        return await cls.get_trip(trip_id)

    @classmethod
    async def update_trip(cls, trip_id: int, updates: Dict[str, Any], current_user: Dict[str, Any]) -> TripRead:
        await cls.get_trip(trip_id)
        if updates:
            set_sql, values = build_update(updates)
            conn = get_connection()
            try:
                conn.execute(f"UPDATE trips SET {set_sql} WHERE id = ?", tuple(values) + (trip_id,))
                conn.commit()
            finally:
                conn.close()
            await ActivityService.record(
                current_user.get("user_id"), "update", "trip", trip_id, {"fields": sorted(updates)}
            )
        return await cls.get_trip(trip_id)

    @classmethod
    async def delete_trip(cls, trip_id: int, current_user: Dict[str, Any]) -> None:
        trip = await cls.get_trip(trip_id)
        conn = get_connection()
        try:
            conn.execute("DELETE FROM trips WHERE id = ?", (trip_id,))
            conn.commit()
        finally:
            conn.close()
        logger.info("Trip %s deleted by %s", trip_id, current_user.get("email"))
        await ActivityService.record(current_user.get("user_id"), "delete", "trip", trip_id, {"title": trip.title})

    @classmethod
    async def list_participants(cls, trip_id: int) -> List[TripParticipantRead]:
        await cls.get_trip(trip_id)
        conn = get_connection()
        try:
            rows = conn.execute(
                "SELECT * FROM trip_participants WHERE trip_id = ? ORDER BY enrolled_at, id",
                (trip_id,),
            ).fetchall()
            return [TripParticipantRead(**dict(row)) for row in rows]
        finally:
            conn.close()

    @classmethod
    async def enroll(cls, trip_id: int, user_id: int, data: TripEnrollmentCreate) -> TripEnrollmentResult:
        """Enroll a user in a published, active trip.

        Raises ``NotFoundError`` for unknown or unpublished trips and
        ``ValueError`` when the trip is inactive, full or the user is
        already enrolled.
        """
        conn = get_connection()
        try:
            conn.execute("BEGIN IMMEDIATE")
            trip = conn.execute(
                f"{TRIP_SELECT} WHERE t.id = ? AND t.is_published = 1", (trip_id,)
            ).fetchone()
            if not trip:
                raise NotFoundError("Trip not found")
            if trip["status"] != "active":
                raise ValueError("Trip is not open for enrollment")
            if trip["enrollments"] >= trip["spots"]:
                raise ValueError("Trip is full")
            already = conn.execute(
                "SELECT 1 FROM trip_participants WHERE trip_id = ? AND user_id = ?",
                (trip_id, user_id),
            ).fetchone()
            if already:
                raise ValueError("You are already enrolled in this trip")
            user = conn.execute("SELECT name, email, phone FROM users WHERE id = ?", (user_id,)).fetchone()
            if not user:
                raise NotFoundError("User not found")

            paid = trip["price"] > 0
            payment_status = "pending" if paid else "not_required"
            cursor = conn.execute(
                """
                INSERT INTO trip_participants
                    (trip_id, user_id, name, email, phone, emergency_contact, special_requirements, payment_status)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    trip_id,
                    user_id,
                    data.name or user["name"],
                    data.email or user["email"],
                    data.phone or user["phone"],
                    data.emergency_contact,
                    data.special_requirements,
                    payment_status,
                ),
            )
            enrollment_id = cursor.lastrowid
            payment_id = None
            if paid:
                cursor = conn.execute(
                    """
                    INSERT INTO payments
                        (user_id, user_name, user_email, amount, payment_type, related_id, related_title, status)
                    VALUES (?, ?, ?, ?, 'trip', ?, ?, 'pending')
                    """,
                    (user_id, user["name"], user["email"], trip["price"], trip_id, trip["title"]),
                )
                payment_id = cursor.lastrowid
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

        logger.info("User %s enrolled in trip %s", user_id, trip_id)
        await ActivityService.record(
            user_id, "trip_enrolled", "trip", trip_id, {"title": trip["title"], "payment_id": payment_id}
        )
        return TripEnrollmentResult(
            message="Successfully enrolled in trip",
            enrollment_id=enrollment_id,
            payment_id=payment_id,
            payment_status=payment_status,
        )
