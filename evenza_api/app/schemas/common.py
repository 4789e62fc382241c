"""
Shared pydantic models: pagination envelope and simple acknowledgements.
"""

import re
from typing import Optional

from pydantic import BaseModel, Field


EMAIL_RE = re.compile(r"^\S+@\S+\.\S+$")


def normalize_email(value: Optional[str]) -> Optional[str]:
    """Lower-case and trim an email, rejecting obviously malformed addresses."""
    if value is None:
        return None
    value = value.strip().lower()
    if not EMAIL_RE.match(value):
        raise ValueError("Please enter a valid email")
    return value


class Pagination(BaseModel):
    total: int = Field(..., examples=[42])
    page: int = Field(..., examples=[1])
    limit: int = Field(..., examples=[10])
    pages: int = Field(..., examples=[5])

    @classmethod
    def build(cls, total: int, page: int, limit: int) -> "Pagination":
        return cls(total=total, page=page, limit=limit, pages=-(-total // limit) if limit else 0)


class MessageResponse(BaseModel):
    """Plain acknowledgement returned by mutating endpoints without a body of their own."""

    message: str = Field(..., examples=["Operation completed successfully"])
