"""
Pydantic models for user data.

Defines schemas for registration, login, profile management and the
admin user screens.  Password hashes never leave the service layer.
"""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from .common import Pagination, normalize_email


Role = Literal["user", "admin", "super_admin"]


class UserBase(BaseModel):
    name: str = Field(..., min_length=1, examples=["Aisha Khan"])
    email: str = Field(..., examples=["aisha@example.com"])

    @field_validator("email")
    @classmethod
    def _check_email(cls, value: str) -> str:
        return normalize_email(value)


class UserRegister(UserBase):
    """Schema for public self-registration."""

    password: str = Field(..., min_length=6, examples=["secret123"])


class UserLogin(BaseModel):
    email: str = Field(..., min_length=1, examples=["aisha@example.com"])
    password: str = Field(..., min_length=1, examples=["secret123"])
    remember_me: bool = Field(False, examples=[True])


class UserSummary(BaseModel):
    id: int
    name: str
    email: str
    role: Role


class UserRead(UserBase):
    """Schema for reading a user from the API."""

    id: int
    role: Role = "user"
    phone: Optional[str] = None
    student_id: Optional[str] = None
    department: Optional[str] = None
    year: Optional[str] = None
    bio: Optional[str] = None
    profile_picture: Optional[str] = None
    disabled: bool = False
    last_login: Optional[datetime] = None
    created_at: Optional[datetime] = None

    model_config = {
        "from_attributes": True,
    }


class UserCreate(UserBase):
    """Schema for creating a user from the admin panel.

    When ``password`` is omitted a random one is generated; the user is
    expected to reset it.
    """

    password: Optional[str] = Field(None, min_length=6)
    role: Role = "user"
    phone: Optional[str] = None
    student_id: Optional[str] = None
    department: Optional[str] = None
    year: Optional[str] = None


class UserUpdate(BaseModel):
    """Admin update; only provided fields are changed."""

    name: Optional[str] = Field(None, min_length=1)
    email: Optional[str] = None
    password: Optional[str] = Field(None, min_length=6)
    role: Optional[Role] = None
    phone: Optional[str] = None
    student_id: Optional[str] = None
    department: Optional[str] = None
    year: Optional[str] = None
    bio: Optional[str] = None
    disabled: Optional[bool] = None

    @field_validator("email")
    @classmethod
    def _check_email(cls, value: Optional[str]) -> Optional[str]:
        return normalize_email(value)


class ProfileUpdate(BaseModel):
    """Fields a user may change on their own profile."""

    name: Optional[str] = Field(None, min_length=1, examples=["Aisha Khan"])
    phone: Optional[str] = Field(None, examples=["+92 300 1234567"])
    student_id: Optional[str] = Field(None, examples=["FA21-BCS-001"])
    department: Optional[str] = Field(None, examples=["Computer Science"])
    year: Optional[str] = Field(None, examples=["3"])
    bio: Optional[str] = None
    profile_picture: Optional[str] = None


class PasswordChange(BaseModel):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=1)


class UserListResponse(BaseModel):
    users: List[UserRead]
    pagination: Pagination


class LoginResponse(BaseModel):
    message: str
    user: UserSummary
    token: str


class TokenResponse(BaseModel):
    token: str


class AdminCheckResponse(BaseModel):
    user: UserSummary


class SetupAdminRequest(UserBase):
    password: str = Field(..., min_length=6)


class SetupAdminResponse(BaseModel):
    message: str
    user: UserSummary
