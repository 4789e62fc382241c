"""
Payment verification for administrators.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from evenza_api.app.api.errors import http_error
from evenza_api.app.core.security import require_admin
from evenza_api.app.schemas.common import Pagination
from evenza_api.app.schemas.payment import PaymentListResponse, PaymentRead, PaymentStatusUpdate
from evenza_api.app.services.payment_service import PaymentService


router = APIRouter()


@router.get("", response_model=PaymentListResponse)
async def list_payments(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    search: Optional[str] = Query(None),
    status: Optional[str] = Query(None),
    type: Optional[str] = Query(None),
    current_user: dict = Depends(require_admin),
) -> PaymentListResponse:
    """Получить список платежей.

    - **search** - поиск по имени/email плательщика и названию.
    - **status** - `pending`, `completed`, `rejected`, `refunded` или `all`.
    - **type** - `event`, `trip`, `interview`, `membership` или `all`.
    """
    payments, total = await PaymentService.list_payments(
        page=page, limit=limit, search=search, status=status, payment_type=type
    )
    return PaymentListResponse(payments=payments, pagination=Pagination.build(total, page, limit))


@router.get("/{payment_id}", response_model=PaymentRead)
async def get_payment(payment_id: int, current_user: dict = Depends(require_admin)) -> PaymentRead:
    try:
        return await PaymentService.get_payment(payment_id)
    except ValueError as e:
        raise http_error(e) from e


@router.put("/{payment_id}/status", response_model=PaymentRead)
async def update_payment_status(
    payment_id: int,
    data: PaymentStatusUpdate,
    current_user: dict = Depends(require_admin),
) -> PaymentRead:
    """Verify or reject a payment; records who did it and when."""
    try:
        return await PaymentService.update_status(payment_id, data.status, data.notes, current_user)
    except ValueError as e:
        raise http_error(e) from e
