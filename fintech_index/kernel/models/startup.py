"""
Startup directory model and its verification status.
"""

import re
import uuid
from datetime import datetime
from enum import Enum
from typing import Iterable, List, Optional

from sqlalchemy import Boolean, DateTime, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from fintech_index.kernel.models.base import Base, generate_uuid, utcnow


class VerificationStatus(str, Enum):
    """Verification state of a submitted startup."""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


_SECTOR_SPLIT = re.compile(r"[,;]")

# Column widths; rows longer than these are refused before they reach the store
NAME_MAX_LENGTH = 255
COUNTRY_MAX_LENGTH = 100
SECTOR_MAX_LENGTH = 500
WEBSITE_MAX_LENGTH = 500


def parse_sectors(raw: Optional[str]) -> List[str]:
    """Split a stored sector string on commas/semicolons, trimming blanks."""
    if not raw:
        return []
    return [part.strip() for part in _SECTOR_SPLIT.split(raw) if part.strip()]


def serialize_sectors(sectors: Iterable[str]) -> str:
    """Inverse of parse_sectors for already-clean values."""
    return ", ".join(s.strip() for s in sectors if s and s.strip())


class Startup(Base):
    """A fintech startup listed in the directory."""

    __tablename__ = "startups"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        primary_key=True,
        default=generate_uuid,
    )
    name: Mapped[str] = mapped_column(String(NAME_MAX_LENGTH), index=True, nullable=False)
    country: Mapped[str] = mapped_column(String(COUNTRY_MAX_LENGTH), index=True, nullable=False)
    # Delimited storage form; use .sectors for the list
    sector: Mapped[str] = mapped_column(String(SECTOR_MAX_LENGTH), nullable=False)
    founded_year: Mapped[int] = mapped_column(Integer, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    website: Mapped[Optional[str]] = mapped_column(String(WEBSITE_MAX_LENGTH), nullable=True)

    added_by: Mapped[str] = mapped_column(String(255), nullable=False, default="public")
    added_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
    )

    is_verified: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    verification_status: Mapped[VerificationStatus] = mapped_column(
        String(20),
        default=VerificationStatus.PENDING,
        index=True,
        nullable=False,
    )
    verified_by: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    verified_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    admin_notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    @property
    def sectors(self) -> List[str]:
        return parse_sectors(self.sector)

    @sectors.setter
    def sectors(self, values: Iterable[str]) -> None:
        self.sector = serialize_sectors(values)

    @property
    def status_value(self) -> str:
        status = self.verification_status
        return status.value if hasattr(status, "value") else str(status)

    def __repr__(self) -> str:
        return f"<Startup {self.name} ({self.status_value})>"
