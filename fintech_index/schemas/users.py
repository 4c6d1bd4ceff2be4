"""
Admin user-management schemas.
"""

from typing import Optional

from pydantic import EmailStr, Field

from fintech_index.schemas.auth import UserResponse
from fintech_index.schemas.common import CamelModel


class UserCreateByAdmin(CamelModel):
    """Account created by an admin; starts verified and may hold any role."""

    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)
    name: str = Field(..., min_length=1, max_length=255)
    role: str = "viewer"
    phone_number: Optional[str] = Field(None, max_length=50)
    country: Optional[str] = Field(None, max_length=100)
    organization: Optional[str] = Field(None, max_length=255)
    job_title: Optional[str] = Field(None, max_length=255)


class UserUpdate(CamelModel):
    """Partial admin edit; omitted fields are left alone."""

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    role: Optional[str] = None
    is_verified: Optional[bool] = None
    phone_number: Optional[str] = Field(None, max_length=50)
    country: Optional[str] = Field(None, max_length=100)
    organization: Optional[str] = Field(None, max_length=255)
    job_title: Optional[str] = Field(None, max_length=255)


class UserVerifiedResponse(CamelModel):
    message: str
    user: UserResponse
