"""
Pydantic models for the activity log and dashboards.
"""

import datetime as dt
from typing import Any, Dict, List, Optional

from pydantic import BaseModel

from .event import EventRead
from .interview import InterviewRead, SubmissionRead
from .trip import TripRead
from .user import UserRead


class ActivityRead(BaseModel):
    id: int
    user_id: Optional[int] = None
    user_name: Optional[str] = None
    action: str
    resource_type: str
    resource_id: Optional[int] = None
    details: Optional[Dict[str, Any]] = None
    created_at: Optional[dt.datetime] = None


class MonthlyPoint(BaseModel):
    month: str
    value: float


class AdminDashboard(BaseModel):
    totals: Dict[str, int]
    recent_activity: List[ActivityRead]
    user_growth: List[MonthlyPoint]
    revenue: List[MonthlyPoint]
    activity_by_type: Dict[str, int]


class RegisteredEvent(EventRead):
    tickets: int
    payment_status: str
    registered_at: Optional[dt.datetime] = None


class EnrolledTrip(TripRead):
    payment_status: str
    enrolled_at: Optional[dt.datetime] = None


class UserDashboard(BaseModel):
    user: UserRead
    stats: Dict[str, int]
    registered_events: List[RegisteredEvent]
    enrolled_trips: List[EnrolledTrip]
    interview_submissions: List[SubmissionRead]
    available_events: List[EventRead]
    available_trips: List[TripRead]
    available_interviews: List[InterviewRead]
