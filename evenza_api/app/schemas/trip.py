"""
Pydantic models for trips and trip enrollments.
"""

import datetime as dt
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from .event import DEFAULT_IMAGE


TripStatus = Literal["active", "cancelled", "completed"]


class TripBase(BaseModel):
    title: str = Field(..., min_length=1, examples=["Northern Areas Tour"])
    description: str = Field(..., min_length=1, examples=["Five days across Hunza and Skardu"])
    date: dt.date = Field(..., examples=["2025-07-01"])
    end_date: Optional[dt.date] = Field(None, examples=["2025-07-05"])
    location: str = Field(..., min_length=1, examples=["Hunza Valley"])
    price: float = Field(0, ge=0, examples=[25000])
    spots: int = Field(20, ge=1, examples=[30])
    itinerary: Optional[str] = None
    requirements: Optional[str] = None
    image: Optional[str] = DEFAULT_IMAGE
    is_published: bool = True
    status: TripStatus = "active"


class TripCreate(TripBase):
    """Schema for creating a trip."""
    pass


class TripRead(TripBase):
    id: int
    enrollments: int = 0
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None

    model_config = {
        "from_attributes": True,
    }


class TripUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    date: Optional[dt.date] = None
    end_date: Optional[dt.date] = None
    location: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    spots: Optional[int] = Field(None, ge=1)
    itinerary: Optional[str] = None
    requirements: Optional[str] = None
    image: Optional[str] = None
    is_published: Optional[bool] = None
    status: Optional[TripStatus] = None


class TripList(BaseModel):
    trips: List[TripRead]


class TripEnrollmentCreate(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    emergency_contact: Optional[str] = Field(None, examples=["Father, +92 300 7654321"])
    special_requirements: Optional[str] = None


class TripParticipantRead(BaseModel):
    id: int
    trip_id: int
    user_id: int
    name: str
    email: str
    phone: Optional[str] = None
    emergency_contact: Optional[str] = None
    special_requirements: Optional[str] = None
    payment_status: str
    enrolled_at: Optional[dt.datetime] = None


class TripEnrollmentResult(BaseModel):
    message: str
    enrollment_id: int
    payment_id: Optional[int] = None
    payment_status: str
