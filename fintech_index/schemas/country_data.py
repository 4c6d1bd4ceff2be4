"""
Country metrics schemas.
"""

import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import Field, field_validator

from fintech_index.schemas.common import CamelModel


class CountryDataCreate(CamelModel):
    """One country-year record as submitted by an editor."""

    country_id: str = Field(..., min_length=1, max_length=16)
    name: str = Field(..., min_length=1, max_length=255)
    year: int = Field(..., ge=1900, le=2100)
    final_score: float
    literacy_rate: float
    digital_infrastructure: float
    investment: float
    population: Optional[float] = None
    gdp: Optional[float] = None

    @field_validator("country_id", "name")
    @classmethod
    def strip_text(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


class CountryDataUpdate(CamelModel):
    """Partial update of a record's values."""

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    final_score: Optional[float] = None
    literacy_rate: Optional[float] = None
    digital_infrastructure: Optional[float] = None
    investment: Optional[float] = None
    population: Optional[float] = None
    gdp: Optional[float] = None


class CountryDataResponse(CamelModel):
    id: uuid.UUID
    country_id: str
    name: str
    year: int
    final_score: float
    literacy_rate: float
    digital_infrastructure: float
    investment: float
    population: Optional[float] = None
    gdp: Optional[float] = None
    created_by: str
    updated_by: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CountryDataBulkCreate(CamelModel):
    data: List[CountryDataCreate]


class SelectiveDelete(CamelModel):
    ids: List[uuid.UUID]


class CountryStats(CamelModel):
    total_records: int
    unique_countries: int
    years: List[int]
    average_score: Optional[float] = None
    min_score: Optional[float] = None
    max_score: Optional[float] = None


class CountryDataDeleted(CamelModel):
    message: str
    deleted_data: CountryDataResponse


class DeleteAllResponse(CamelModel):
    message: str
    deleted_count: int
    before_count: int
    after_count: int


class BulkInsertResponse(CamelModel):
    message: str
    inserted_count: int
    failed_count: int = 0
    failures: List[Dict[str, Any]] = Field(default_factory=list)
