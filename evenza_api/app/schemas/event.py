"""
Pydantic models for event data.

``EventBase`` holds the fields shared by create and read models;
``EventUpdate`` makes everything optional for partial updates.
Registrations are exposed through ``EventRegistrationCreate`` (what a
user submits) and ``EventRegistrationRead`` (what admins see).
"""

import datetime as dt
from typing import List, Literal, Optional

from pydantic import BaseModel, Field


EventStatus = Literal["active", "cancelled", "completed"]

DEFAULT_IMAGE = "/placeholder.svg?height=400&width=600"


class EventBase(BaseModel):
    title: str = Field(..., min_length=1, examples=["Tech Conference 2025"])
    description: str = Field(..., min_length=1, examples=["Talks and workshops on modern web development"])
    date: dt.date = Field(..., examples=["2025-05-15"])
    time: Optional[str] = Field(None, examples=["10:00 AM - 4:00 PM"])
    location: str = Field(..., min_length=1, examples=["Main Auditorium"])
    category: str = Field(..., min_length=1, examples=["Technology"])
    price: float = Field(0, ge=0, examples=[0])
    max_attendees: int = Field(..., ge=1, examples=[200])
    is_featured: bool = False
    image: Optional[str] = DEFAULT_IMAGE
    is_published: bool = True
    status: EventStatus = "active"


class EventCreate(EventBase):
    """Schema for creating an event."""
    pass


class EventRead(EventBase):
    """Schema for reading an event from the API."""

    id: int
    attendee_count: int = 0
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None

    model_config = {
        "from_attributes": True,
    }


class EventUpdate(BaseModel):
    """Schema for updating an event.

    All fields are optional; only provided fields will be updated.
    """
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    date: Optional[dt.date] = None
    time: Optional[str] = None
    location: Optional[str] = None
    category: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    max_attendees: Optional[int] = Field(None, ge=1)
    is_featured: Optional[bool] = None
    image: Optional[str] = None
    is_published: Optional[bool] = None
    status: Optional[EventStatus] = None


class EventList(BaseModel):
    events: List[EventRead]


class EventRegistrationCreate(BaseModel):
    """Body of ``POST /events/{id}/register``.

    Contact fields default to the values stored on the user's account.
    """

    tickets: int = Field(1, ge=1, le=10, examples=[1])
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = Field(None, examples=["+92 300 1234567"])
    special_requirements: Optional[str] = None


class EventRegistrationRead(BaseModel):
    id: int
    event_id: int
    user_id: int
    name: str
    email: str
    phone: Optional[str] = None
    tickets: int
    payment_status: str
    special_requirements: Optional[str] = None
    registered_at: Optional[dt.datetime] = None


class EventRegistrationResult(BaseModel):
    message: str
    registration_id: int
    payment_id: Optional[int] = None
    payment_status: str
