"""
Business logic for payments.

Payments are created by ``EventService.register`` and
``TripService.enroll``.  Users attach a proof of transfer, and admins
verify it by moving the payment to ``completed`` (or ``rejected`` /
``refunded``).  The verdict is mirrored onto the registration or
enrollment the payment belongs to.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from evenza_api.app.core.db import get_connection
from evenza_api.app.core.exceptions import NotFoundError, PermissionDenied
from evenza_api.app.schemas.payment import PAYMENT_STATUSES, PaymentRead
from evenza_api.app.services.activity_service import ActivityService


logger = logging.getLogger(__name__)

# Payment status -> payment_status of the linked registration/enrollment
_REGISTRATION_STATUS = {
    "pending": "pending",
    "completed": "completed",
    "rejected": "failed",
    "refunded": "refunded",
}

_LINKED_TABLES = {
    "event": ("event_registrations", "event_id"),
    "trip": ("trip_participants", "trip_id"),
}

PAYMENT_SELECT = (
    "SELECT p.*, COALESCE(u.name, p.user_name) AS user_name, COALESCE(u.email, p.user_email) AS user_email "
    "FROM payments p LEFT JOIN users u ON u.id = p.user_id"
)


class PaymentService:
    """Сервис платежей: список для администратора, подтверждение и чеки пользователей."""

    @classmethod
    async def get_payment(cls, payment_id: int) -> PaymentRead:
        conn = get_connection()
        try:
            row = conn.execute(f"{PAYMENT_SELECT} WHERE p.id = ?", (payment_id,)).fetchone()
        finally:
            conn.close()
        if not row:
            raise NotFoundError("Payment not found")
        return PaymentRead(**dict(row))

    @classmethod
    async def list_payments(
        cls,
        page: int = 1,
        limit: Optional[int] = 10,
        search: Optional[str] = None,
        status: Optional[str] = None,
        payment_type: Optional[str] = None,
        user_id: Optional[int] = None,
    ) -> Tuple[List[PaymentRead], int]:
        """Вернуть страницу платежей (новые сверху) и общее количество.

        ``search`` ищет по имени и email плательщика и названию
        связанного мероприятия; ``status`` и ``payment_type`` со
        значением ``"all"`` не фильтруют.  ``limit=None`` возвращает все записи.
        """
        conn = get_connection()
        try:
            where_clauses: List[str] = []
            params: List[Any] = []
            if search:
                where_clauses.append("(u.name LIKE ? OR u.email LIKE ? OR p.user_name LIKE ? OR p.related_title LIKE ?)")
                params.extend([f"%{search}%"] * 4)
            if status and status != "all":
                where_clauses.append("p.status = ?")
                params.append(status)
            if payment_type and payment_type != "all":
                where_clauses.append("p.payment_type = ?")
                params.append(payment_type)
            if user_id is not None:
                where_clauses.append("p.user_id = ?")
                params.append(user_id)
            where_sql = " WHERE " + " AND ".join(where_clauses) if where_clauses else ""
            total = conn.execute(
                f"SELECT COUNT(*) FROM payments p LEFT JOIN users u ON u.id = p.user_id{where_sql}",
                tuple(params),
            ).fetchone()[0]
            query = f"{PAYMENT_SELECT}{where_sql} ORDER BY p.created_at DESC, p.id DESC"
            if limit is not None:
                query += " LIMIT ? OFFSET ?"
                params.extend([limit, (page - 1) * limit])
            rows = conn.execute(query, tuple(params)).fetchall()
            return [PaymentRead(**dict(row)) for row in rows], total
        finally:
            conn.close()

    @classmethod
    async def update_status(
        cls,
        payment_id: int,
        status: str,
        notes: Optional[str],
        current_user: Dict[str, Any],
    ) -> PaymentRead:
        """Record an admin's verdict on a payment.

        Raises ``ValueError`` for an unknown status and ``NotFoundError``
        if the payment does not exist.
        """
        if status not in PAYMENT_STATUSES:
            raise ValueError(f"Invalid status. Must be one of: {', '.join(PAYMENT_STATUSES)}")
        payment = await cls.get_payment(payment_id)
        conn = get_connection()
        try:
            fields = ["status = ?", "verified_by = ?", "verified_at = CURRENT_TIMESTAMP", "updated_at = CURRENT_TIMESTAMP"]
            params: List[Any] = [status, current_user.get("user_id")]
            if notes is not None:
                fields.append("notes = ?")
                params.append(notes)
            conn.execute(f"UPDATE payments SET {', '.join(fields)} WHERE id = ?", tuple(params) + (payment_id,))
            linked = _LINKED_TABLES.get(payment.payment_type)
            if linked and payment.related_id is not None:
                table, fk = linked
                conn.execute(
                    f"UPDATE {table} SET payment_status = ? WHERE {fk} = ? AND user_id = ?",
                    (_REGISTRATION_STATUS[status], payment.related_id, payment.user_id),
                )
            conn.commit()
        finally:
            conn.close()
        logger.info("Payment %s marked %s by %s", payment_id, status, current_user.get("email"))
        await ActivityService.record(
            current_user.get("user_id"), "payment_verified", "payment", payment_id, {"status": status}
        )
        return await cls.get_payment(payment_id)

    @classmethod
    async def attach_proof(cls, payment_id: int, user_id: int, proof_image: str) -> PaymentRead:
        """Attach a proof-of-payment image to one of the caller's pending payments."""
        payment = await cls.get_payment(payment_id)
        if payment.user_id != user_id:
            raise PermissionDenied("This payment belongs to another user")
        if payment.status != "pending":
            raise ValueError("Only pending payments accept a proof of payment")
        conn = get_connection()
        try:
            conn.execute(
                "UPDATE payments SET proof_image = ?, updated_at = CURRENT_TIMESTAMP WHERE id = ?",
                (proof_image, payment_id),
            )
            conn.commit()
        finally:
            conn.close()
        await ActivityService.record(user_id, "payment_proof_uploaded", "payment", payment_id)
        return await cls.get_payment(payment_id)
