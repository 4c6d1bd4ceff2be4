"""
Persistent models for users, country metrics and startups.
"""

from fintech_index.kernel.models.base import Base, TimestampMixin, generate_uuid, utcnow
from fintech_index.kernel.models.user import User, UserRole, SELF_REGISTRATION_ROLES
from fintech_index.kernel.models.country_data import CountryMetric
from fintech_index.kernel.models.startup import (
    Startup,
    VerificationStatus,
    parse_sectors,
    serialize_sectors,
)

__all__ = [
    # Base
    "Base",
    "TimestampMixin",
    "generate_uuid",
    "utcnow",
    # Users
    "User",
    "UserRole",
    "SELF_REGISTRATION_ROLES",
    # Country data
    "CountryMetric",
    # Startups
    "Startup",
    "VerificationStatus",
    "parse_sectors",
    "serialize_sectors",
]
