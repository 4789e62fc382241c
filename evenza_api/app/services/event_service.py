"""
Business logic for events and event registrations.

Public callers only ever see published events, ordered by date.  A
registration reserves one attendee slot regardless of the number of
tickets; paid events additionally create a pending payment for
``price * tickets`` that the user settles by uploading a proof.
"""

import logging
from typing import Any, Dict, List, Optional

from evenza_api.app.core.db import build_update, get_connection, to_db_value
from evenza_api.app.core.exceptions import NotFoundError
from evenza_api.app.schemas.event import (
    EventCreate,
    EventRead,
    EventRegistrationCreate,
    EventRegistrationRead,
    EventRegistrationResult,
)
from evenza_api.app.services.activity_service import ActivityService


logger = logging.getLogger(__name__)

EVENT_SELECT = (
    "SELECT e.*, "
    "(SELECT COUNT(*) FROM event_registrations r WHERE r.event_id = e.id) AS attendee_count "
    "FROM events e"
)


class EventService:
    """Сервис для управления мероприятиями.

    Использует SQLite для хранения данных.  Регистрация выполняется в
    транзакции ``BEGIN IMMEDIATE``, чтобы проверка свободных мест и
    вставка записи не разъезжались при одновременных запросах.
    """

    @classmethod
    async def list_published(
        cls,
        category: Optional[str] = None,
        featured: Optional[bool] = None,
        limit: Optional[int] = None,
    ) -> List[EventRead]:
        """Вернуть опубликованные мероприятия, отсортированные по дате."""
        conn = get_connection()
        try:
            where_clauses = ["e.is_published = 1"]
            params: List[Any] = []
            if category:
                where_clauses.append("e.category = ?")
                params.append(category)
            if featured is not None:
                where_clauses.append("e.is_featured = ?")
                params.append(1 if featured else 0)
            query = f"{EVENT_SELECT} WHERE {' AND '.join(where_clauses)} ORDER BY e.date ASC, e.id ASC"
            if limit:
                query += " LIMIT ?"
                params.append(limit)
            rows = conn.execute(query, tuple(params)).fetchall()
            return [EventRead(**dict(row)) for row in rows]
        finally:
            conn.close()

    @classmethod
    async def list_all(cls) -> List[EventRead]:
        """All events including drafts, newest first (admin view)."""
        conn = get_connection()
        try:
            rows = conn.execute(f"{EVENT_SELECT} ORDER BY e.created_at DESC, e.id DESC").fetchall()
            return [EventRead(**dict(row)) for row in rows]
        finally:
            conn.close()

    @classmethod
    async def get_event(cls, event_id: int, published_only: bool = False) -> EventRead:
        conn = get_connection()
        try:
            row = conn.execute(f"{EVENT_SELECT} WHERE e.id = ?", (event_id,)).fetchone()
        finally:
            conn.close()
        if not row or (published_only and not row["is_published"]):
            raise NotFoundError("Event not found")
        return EventRead(**dict(row))

    @classmethod
    async def create_event(cls, data: EventCreate, current_user: Dict[str, Any]) -> EventRead:
        """Создать мероприятие и записать действие в журнал."""
        logger.info("User %s is creating event '%s'", current_user.get("email"), data.title)
        values = {k: to_db_value(v) for k, v in data.model_dump().items()}
        values["created_by"] = current_user.get("user_id")
        conn = get_connection()
        try:
            cursor = conn.execute(
                f"INSERT INTO events ({', '.join(values)}) VALUES ({', '.join('?' for _ in values)})",
                tuple(values.values()),
            )
            event_id = cursor.lastrowid
            conn.commit()
        finally:
            conn.close()
        await ActivityService.record(current_user.get("user_id"), "create", "event", event_id, {"title": data.title})
        return await cls.get_event(event_id)

    @classmethod
    async def update_event(cls, event_id: int, updates: Dict[str, Any], current_user: Dict[str, Any]) -> EventRead:
        """Partially update an event.  Raises ``NotFoundError`` if it does not exist."""
        await cls.get_event(event_id)
        if updates:
            set_sql, values = build_update(updates)
            conn = get_connection()
            try:
                conn.execute(f"UPDATE events SET {set_sql} WHERE id = ?", tuple(values) + (event_id,))
                conn.commit()
            finally:
                conn.close()
            await ActivityService.record(
                current_user.get("user_id"), "update", "event", event_id, {"fields": sorted(updates)}
            )
        return await cls.get_event(event_id)

    @classmethod
    async def delete_event(cls, event_id: int, current_user: Dict[str, Any]) -> None:
        """Delete an event; registrations cascade, payments are kept for bookkeeping."""
        event = await cls.get_event(event_id)
        conn = get_connection()
        try:
            conn.execute("DELETE FROM events WHERE id = ?", (event_id,))
            conn.commit()
        finally:
            conn.close()
        logger.info("Event %s deleted by %s", event_id, current_user.get("email"))
        await ActivityService.record(current_user.get("user_id"), "delete", "event", event_id, {"title": event.title})

    @classmethod
    async def list_attendees(cls, event_id: int) -> List[EventRegistrationRead]:
        await cls.get_event(event_id)
        conn = get_connection()
        try:
            rows = conn.execute(
                "SELECT * FROM event_registrations WHERE event_id = ? ORDER BY registered_at, id",
                (event_id,),
            ).fetchall()
            return [EventRegistrationRead(**dict(row)) for row in rows]
        finally:
            conn.close()

    @classmethod
    async def register(
        cls,
        event_id: int,
        user_id: int,
        data: EventRegistrationCreate,
    ) -> EventRegistrationResult:
        """Register a user for a published, active event.

        Raises
        ------
        NotFoundError
            If the event (or user) does not exist or is unpublished.
        ValueError
            If the event is not active, is full, or the user is already
            registered.
        """
        conn = get_connection()
        try:
            conn.execute("BEGIN IMMEDIATE")
            event = conn.execute(
                f"{EVENT_SELECT} WHERE e.id = ? AND e.is_published = 1", (event_id,)
            ).fetchone()
            if not event:
                raise NotFoundError("Event not found")
            if event["status"] != "active":
                raise ValueError("Event is not open for registration")
            if event["attendee_count"] >= event["max_attendees"]:
                raise ValueError("Event is full")
            already = conn.execute(
                "SELECT 1 FROM event_registrations WHERE event_id = ? AND user_id = ?",
                (event_id, user_id),
            ).fetchone()
            if already:
                raise ValueError("You are already registered for this event")
            user = conn.execute("SELECT name, email, phone FROM users WHERE id = ?", (user_id,)).fetchone()
            if not user:
                raise NotFoundError("User not found")

            paid = event["price"] > 0
            payment_status = "pending" if paid else "not_required"
            cursor = conn.execute(
                """
                INSERT INTO event_registrations
                    (event_id, user_id, name, email, phone, tickets, payment_status, special_requirements)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    event_id,
                    user_id,
                    data.name or user["name"],
                    data.email or user["email"],
                    data.phone or user["phone"],
                    data.tickets,
                    payment_status,
                    data.special_requirements,
                ),
            )
            registration_id = cursor.lastrowid
            payment_id = None
            if paid:
                cursor = conn.execute(
                    """
                    INSERT INTO payments
                        (user_id, user_name, user_email, amount, payment_type, related_id, related_title, status)
                    VALUES (?, ?, ?, ?, 'event', ?, ?, 'pending')
                    """,
                    (user_id, user["name"], user["email"], event["price"] * data.tickets, event_id, event["title"]),
                )
                payment_id = cursor.lastrowid
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

        logger.info("User %s registered for event %s (%s tickets)", user_id, event_id, data.tickets)
        await ActivityService.record(
            user_id,
            "event_registered",
            "event",
            event_id,
            {"title": event["title"], "tickets": data.tickets, "payment_id": payment_id},
        )
        return EventRegistrationResult(
            message="Successfully registered for event",
            registration_id=registration_id,
            payment_id=payment_id,
            payment_status=payment_status,
        )
