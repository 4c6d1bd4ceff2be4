"""
Startup directory schemas.
"""

import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from pydantic import Field, field_validator, model_validator

from fintech_index.kernel.models.startup import (
    COUNTRY_MAX_LENGTH,
    NAME_MAX_LENGTH,
    SECTOR_MAX_LENGTH,
    WEBSITE_MAX_LENGTH,
    parse_sectors,
    serialize_sectors,
)
from fintech_index.schemas.common import CamelModel


def _sector_list(value: Union[str, List[str], None]) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return parse_sectors(value)
    return [s.strip() for s in value if isinstance(s, str) and s.strip()]


def _check_sector_width(sectors: List[str]) -> List[str]:
    if len(serialize_sectors(sectors)) > SECTOR_MAX_LENGTH:
        raise ValueError(f"Sectors must fit in {SECTOR_MAX_LENGTH} characters")
    return sectors


class StartupCreate(CamelModel):
    """
    New startup submission.

    ``sectors`` may be a list or a delimited string; a bare ``sector``
    string is accepted as well.
    """

    name: str = Field(..., min_length=1, max_length=NAME_MAX_LENGTH)
    country: str = Field(..., min_length=1, max_length=COUNTRY_MAX_LENGTH)
    sectors: List[str] = Field(default_factory=list)
    founded_year: int = Field(..., ge=1900, le=2100)
    description: Optional[str] = None
    website: Optional[str] = Field(None, max_length=WEBSITE_MAX_LENGTH)

    @model_validator(mode="before")
    @classmethod
    def merge_sector_fields(cls, data: Any) -> Any:
        if isinstance(data, dict):
            data = dict(data)
            sectors = _sector_list(data.get("sectors"))
            if not sectors:
                sectors = _sector_list(data.get("sector"))
            data["sectors"] = sectors
            data.pop("sector", None)
        return data

    @field_validator("sectors")
    @classmethod
    def require_sector(cls, v: List[str]) -> List[str]:
        if not v:
            raise ValueError("At least one sector is required")
        return _check_sector_width(v)

    @field_validator("name", "country")
    @classmethod
    def strip_text(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


class StartupUpdate(CamelModel):
    """Editor changes to a listing; verification fields are not editable here."""

    name: Optional[str] = Field(None, min_length=1, max_length=NAME_MAX_LENGTH)
    country: Optional[str] = Field(None, min_length=1, max_length=COUNTRY_MAX_LENGTH)
    sectors: Optional[List[str]] = None
    founded_year: Optional[int] = Field(None, ge=1900, le=2100)
    description: Optional[str] = None
    website: Optional[str] = Field(None, max_length=WEBSITE_MAX_LENGTH)

    @model_validator(mode="before")
    @classmethod
    def merge_sector_fields(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("sectors") is None and data.get("sector") is not None:
            data = dict(data)
            data["sectors"] = _sector_list(data.pop("sector"))
        return data

    @field_validator("sectors")
    @classmethod
    def sector_width(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        return _check_sector_width(v) if v else v


class StartupResponse(CamelModel):
    id: uuid.UUID
    name: str
    country: str
    sector: str
    sectors: List[str]
    founded_year: int
    description: Optional[str] = None
    website: Optional[str] = None
    added_by: str
    added_at: datetime
    is_verified: bool
    verification_status: str
    verified_by: Optional[str] = None
    verified_at: Optional[datetime] = None
    admin_notes: Optional[str] = None

    @field_validator("verification_status", mode="before")
    @classmethod
    def status_text(cls, v: Any) -> Any:
        return v.value if hasattr(v, "value") else v


class StartupCreated(StartupResponse):
    message: str


class StartupBulkCreate(CamelModel):
    data: List[Dict[str, Any]]


class StartupBulkResponse(CamelModel):
    message: str
    inserted_count: int
    skipped_count: int
    startups: List[StartupResponse]


class PendingStartups(CamelModel):
    count: int
    startups: List[StartupResponse]


class StartupCount(CamelModel):
    country: str
    count: int


class VerifyRequest(CamelModel):
    status: str
    admin_notes: Optional[str] = None


class StartupVerified(CamelModel):
    message: str
    startup: StartupResponse


class BulkVerifyRequest(CamelModel):
    startup_ids: List[uuid.UUID] = Field(default_factory=list)
    status: str
    admin_notes: Optional[str] = None


class BulkVerifyResponse(CamelModel):
    message: str
    modified_count: int


class BulkDeleteRequest(CamelModel):
    startup_ids: List[uuid.UUID] = Field(default_factory=list)


class StartupDeleted(CamelModel):
    message: str
    deleted_startup: StartupResponse
    deleted_by: str
