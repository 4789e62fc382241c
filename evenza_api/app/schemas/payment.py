"""
Pydantic models for payment data.

Payments are created automatically when a user registers for a paid
event or enrolls in a paid trip.  The user then attaches a proof image
and an administrator verifies it.
"""

import datetime as dt
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from .common import Pagination


PaymentType = Literal["event", "trip", "interview", "membership"]
PAYMENT_STATUSES = ("pending", "completed", "rejected", "refunded")


class PaymentRead(BaseModel):
    """Schema for reading a payment."""

    id: int
    user_id: int
    user_name: Optional[str] = None
    user_email: Optional[str] = None
    amount: float = Field(..., examples=[1500.0])
    payment_type: PaymentType
    related_id: Optional[int] = None
    related_title: Optional[str] = Field(None, examples=["Tech Conference 2025"])
    proof_image: Optional[str] = None
    status: str = Field(..., examples=["pending"])
    verified_by: Optional[int] = None
    verified_at: Optional[dt.datetime] = None
    notes: Optional[str] = None
    created_at: Optional[dt.datetime] = None

    model_config = {
        "from_attributes": True,
    }


class PaymentListResponse(BaseModel):
    payments: List[PaymentRead]
    pagination: Pagination


class PaymentStatusUpdate(BaseModel):
    status: str = Field(..., examples=["completed"])
    notes: Optional[str] = None


class PaymentProof(BaseModel):
    proof_image: str = Field(..., min_length=1, examples=["/uploads/payments/5d1c.png"])
