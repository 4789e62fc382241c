"""
Pydantic models for CMS content (pages, posts, legal texts, FAQ entries).
"""

import datetime as dt
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from .common import Pagination


ContentType = Literal["page", "post", "legal", "faq"]
ContentStatus = Literal["draft", "published", "archived"]


class ContentBase(BaseModel):
    title: str = Field(..., min_length=1, examples=["About Us"])
    content: str = Field(..., min_length=1, examples=["<p>Evenza connects students...</p>"])
    type: ContentType = Field(..., examples=["page"])
    slug: Optional[str] = Field(None, examples=["about-us"])
    status: ContentStatus = "draft"
    is_homepage: bool = False


class ContentCreate(ContentBase):
    pass


class ContentRead(ContentBase):
    id: int
    slug: str
    author_id: Optional[int] = None
    author_name: Optional[str] = None
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None


class ContentUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1)
    content: Optional[str] = None
    type: Optional[ContentType] = None
    slug: Optional[str] = None
    status: Optional[ContentStatus] = None
    is_homepage: Optional[bool] = None


class ContentListResponse(BaseModel):
    content: List[ContentRead]
    pagination: Pagination
