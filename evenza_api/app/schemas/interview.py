"""
Pydantic models for interview opportunities and applications.
"""

import datetime as dt
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from .event import DEFAULT_IMAGE


InterviewStatus = Literal["active", "closed", "completed"]
SubmissionStatus = Literal["pending", "approved", "rejected", "completed", "cancelled"]
SUBMISSION_STATUSES = ("pending", "approved", "rejected", "completed", "cancelled")


class InterviewBase(BaseModel):
    title: str = Field(..., min_length=1, examples=["Summer Internship Drive"])
    company: str = Field(..., min_length=1, examples=["Systems Ltd"])
    description: str = Field(..., min_length=1)
    date: dt.date = Field(..., examples=["2025-06-10"])
    location: str = Field(..., min_length=1, examples=["Career Center"])
    positions: List[str] = Field(..., min_length=1, examples=[["Backend Intern", "QA Intern"]])
    requirements: Optional[str] = None
    image: Optional[str] = DEFAULT_IMAGE
    is_published: bool = True
    status: InterviewStatus = "active"


class InterviewCreate(InterviewBase):
    pass


class InterviewRead(InterviewBase):
    id: int
    registrations: int = 0
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None


class InterviewUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1)
    company: Optional[str] = None
    description: Optional[str] = None
    date: Optional[dt.date] = None
    location: Optional[str] = None
    positions: Optional[List[str]] = None
    requirements: Optional[str] = None
    image: Optional[str] = None
    is_published: Optional[bool] = None
    status: Optional[InterviewStatus] = None


class InterviewList(BaseModel):
    interviews: List[InterviewRead]


class SubmissionCreate(BaseModel):
    """Application form submitted by a user."""

    position: str = Field(..., min_length=1, examples=["Backend Intern"])
    education: Optional[str] = Field(None, examples=["BS Computer Science, 3rd year"])
    experience: Optional[str] = None
    cover_letter: Optional[str] = None
    resume: Optional[str] = Field(None, examples=["/uploads/resumes/3f2a.pdf"])
    portfolio_url: Optional[str] = None
    linkedin_url: Optional[str] = None
    github_url: Optional[str] = None
    availability: Optional[str] = None
    additional_info: Optional[str] = None


class SubmissionRead(SubmissionCreate):
    id: int
    interview_id: int
    interview_title: Optional[str] = None
    company: Optional[str] = None
    user_id: int
    user_name: Optional[str] = None
    user_email: Optional[str] = None
    status: SubmissionStatus
    admin_notes: Optional[str] = None
    reviewed_by: Optional[int] = None
    reviewed_at: Optional[dt.datetime] = None
    created_at: Optional[dt.datetime] = None


class SubmissionResult(BaseModel):
    message: str
    submission_id: int


class SubmissionStatusUpdate(BaseModel):
    status: str = Field(..., examples=["approved"])
    admin_notes: Optional[str] = None
