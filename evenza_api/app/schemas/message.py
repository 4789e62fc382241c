"""
Pydantic models for contact messages and user queries.

Messages arrive through the contact form or are entered by admins;
queries are submitted by signed-in users and answered by admins.  The
admin inbox shows both as ``InboxItem`` rows distinguished by ``type``.
"""

import datetime as dt
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from .common import Pagination, normalize_email


class MessageCreate(BaseModel):
    name: str = Field(..., min_length=1, examples=["Bilal Ahmed"])
    email: str = Field(..., examples=["bilal@example.com"])
    subject: str = Field(..., min_length=1, examples=["Sponsorship"])
    message: str = Field(..., min_length=1, examples=["We would like to sponsor the next hackathon."])

    @field_validator("email")
    @classmethod
    def _check_email(cls, value: str) -> str:
        return normalize_email(value)


class MessageRead(BaseModel):
    id: int
    user_id: Optional[int] = None
    name: str
    email: str
    subject: str
    message: str
    status: str
    notes: Optional[str] = None
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None


class MessageUpdate(BaseModel):
    status: Optional[Literal["new", "read", "replied", "archived"]] = None
    notes: Optional[str] = None


class QueryCreate(BaseModel):
    name: str = Field(..., min_length=1)
    email: str
    subject: Optional[str] = Field(None, examples=["Event refund"])
    message: str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def _check_email(cls, value: str) -> str:
        return normalize_email(value)


class QueryRead(BaseModel):
    id: int
    user_id: Optional[int] = None
    name: str
    email: str
    subject: Optional[str] = None
    message: str
    status: str
    response: Optional[str] = None
    responded_by: Optional[int] = None
    responded_at: Optional[dt.datetime] = None
    created_at: Optional[dt.datetime] = None


class QueryResponse(BaseModel):
    response: str = Field(..., min_length=1)
    status: Literal["answered", "closed"] = "answered"


class QueryListResponse(BaseModel):
    queries: List[QueryRead]
    pagination: Pagination


class InboxItem(BaseModel):
    """A message or a query as shown in the admin inbox."""

    id: int
    type: Literal["message", "query"]
    name: str
    email: str
    subject: str
    message: str
    status: str
    notes: str = ""
    created_at: Optional[dt.datetime] = None


class InboxResponse(BaseModel):
    messages: List[InboxItem]
    pagination: Pagination
