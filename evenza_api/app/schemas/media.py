"""
Pydantic models for gallery media and file uploads.
"""

import datetime as dt
from typing import List, Literal, Optional

from pydantic import BaseModel, Field


MediaType = Literal["image", "video"]


class MediaCreate(BaseModel):
    title: str = Field(..., min_length=1, examples=["Hackathon finals"])
    description: Optional[str] = None
    type: MediaType = "image"
    url: str = Field(..., min_length=1, examples=["/uploads/gallery/9b1e.jpg"])
    category: Optional[str] = Field(None, examples=["events"])
    related_event_id: Optional[int] = None
    related_trip_id: Optional[int] = None


class MediaRead(MediaCreate):
    id: int
    uploaded_by: Optional[int] = None
    created_at: Optional[dt.datetime] = None


class MediaList(BaseModel):
    media: List[MediaRead]


class UploadResult(BaseModel):
    url: str = Field(..., examples=["/uploads/events/2f0c6a.png"])
