"""
Country metric model: one row per country per year.
"""

import uuid
from typing import Optional

from sqlalchemy import Float, Integer, String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from fintech_index.kernel.models.base import Base, TimestampMixin, generate_uuid


class CountryMetric(Base, TimestampMixin):
    """Fintech index inputs and final score of one country for one year."""

    __tablename__ = "country_data"
    __table_args__ = (
        UniqueConstraint("country_id", "year", name="uq_country_data_country_year"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        primary_key=True,
        default=generate_uuid,
    )
    country_id: Mapped[str] = mapped_column(String(16), index=True, nullable=False)
    name: Mapped[str] = mapped_column(String(255), index=True, nullable=False)
    year: Mapped[int] = mapped_column(Integer, index=True, nullable=False)

    final_score: Mapped[float] = mapped_column(Float, nullable=False)
    literacy_rate: Mapped[float] = mapped_column(Float, nullable=False)
    digital_infrastructure: Mapped[float] = mapped_column(Float, nullable=False)
    investment: Mapped[float] = mapped_column(Float, nullable=False)
    population: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    gdp: Mapped[Optional[float]] = mapped_column(Float, nullable=True)

    created_by: Mapped[str] = mapped_column(String(255), nullable=False, default="admin")
    updated_by: Mapped[str] = mapped_column(String(255), nullable=False, default="admin")

    @property
    def key(self) -> tuple:
        return (self.country_id, self.year)

    def __repr__(self) -> str:
        return f"<CountryMetric {self.country_id}/{self.year} score={self.final_score}>"
