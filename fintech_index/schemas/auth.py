"""
Authentication schemas.
"""

import uuid
from datetime import datetime
from typing import Any, Optional

from pydantic import EmailStr, Field, field_validator

from fintech_index.schemas.common import CamelModel


def _enum_value(value: Any) -> Any:
    return value.value if hasattr(value, "value") else value


class UserRegister(CamelModel):
    """Self-registration request."""

    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)
    name: str = Field(..., min_length=1, max_length=255)
    role: str = "viewer"
    phone_number: Optional[str] = Field(None, max_length=50)
    country: Optional[str] = Field(None, max_length=100)
    organization: Optional[str] = Field(None, max_length=255)
    job_title: Optional[str] = Field(None, max_length=255)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name is required")
        return v

    @field_validator("role")
    @classmethod
    def lower_role(cls, v: str) -> str:
        return v.strip().lower()


class UserLogin(CamelModel):
    """User login request."""

    email: EmailStr
    password: str = Field(..., min_length=1)


class UserResponse(CamelModel):
    """User profile response. Never carries the password hash."""

    id: uuid.UUID
    email: str
    name: str
    role: str
    is_verified: bool
    phone_number: Optional[str] = None
    country: Optional[str] = None
    organization: Optional[str] = None
    job_title: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("role", mode="before")
    @classmethod
    def role_text(cls, v: Any) -> Any:
        return _enum_value(v)


class RegisterResponse(CamelModel):
    message: str
    user: UserResponse


class TokenResponse(CamelModel):
    """Login response."""

    token: str
    token_type: str = "bearer"
    user: UserResponse
