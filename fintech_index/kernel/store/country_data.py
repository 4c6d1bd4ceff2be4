"""
Country metrics collection adapter.
"""

import uuid
from typing import Any, Dict, Iterable, List, Optional, Tuple

from sqlalchemy import delete, distinct, func, or_, select, tuple_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from fintech_index.kernel.errors import NotFound
from fintech_index.kernel.models.country_data import CountryMetric
from fintech_index.kernel.store.base import BaseStore
from fintech_index.logging_config import get_logger

logger = get_logger(__name__)

# sort option -> ORDER BY
SORT_ORDERS = {
    None: (CountryMetric.year.desc(), CountryMetric.name.asc()),
    "score": (CountryMetric.final_score.desc(), CountryMetric.year.desc()),
    "name": (CountryMetric.name.asc(), CountryMetric.year.desc()),
}

# Columns an update may touch
UPDATABLE_FIELDS = (
    "name",
    "final_score",
    "literacy_rate",
    "digital_infrastructure",
    "investment",
    "population",
    "gdp",
)
NULLABLE_FIELDS = frozenset({"population", "gdp"})

_NO_SYNC = {"synchronize_session": False}


def _country_match(pattern: str):
    """Case-insensitive substring match on name or country code."""
    return or_(
        CountryMetric.name.icontains(pattern, autoescape=True),
        CountryMetric.country_id.icontains(pattern, autoescape=True),
    )


class CountryDataStore(BaseStore):
    """Reads and writes CountryMetric rows."""

    conflict_message = "Data for this country and year already exists"

    async def query(
        self,
        year: Optional[int] = None,
        country: Optional[str] = None,
        sort: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[CountryMetric]:
        """
        List records.

        Args:
            year: exact year filter
            country: substring of name or country code, case-insensitive
            sort: None (year desc, name asc), "score" or "name"
            limit: row cap; defaults and ceiling come from settings
        """
        stmt = select(CountryMetric)
        if year is not None:
            stmt = stmt.where(CountryMetric.year == year)
        if country:
            stmt = stmt.where(_country_match(country))
        stmt = stmt.order_by(*SORT_ORDERS.get(sort, SORT_ORDERS[None])).limit(self.clamp_limit(limit))

        result = await self._read(self.session.execute(stmt), "country_data.query")
        return list(result.scalars().all())

    async def stats(self) -> Dict[str, Any]:
        """Record count, distinct countries, years and score spread."""
        summary_stmt = select(
            func.count(CountryMetric.id),
            func.count(distinct(CountryMetric.country_id)),
            func.avg(CountryMetric.final_score),
            func.min(CountryMetric.final_score),
            func.max(CountryMetric.final_score),
        )
        summary = (await self._read(self.session.execute(summary_stmt), "country_data.stats")).one()
        total, countries, average, minimum, maximum = summary

        return {
            "total_records": total or 0,
            "unique_countries": countries or 0,
            "years": await self.years(),
            "average_score": round(float(average), 2) if average is not None else None,
            "min_score": minimum,
            "max_score": maximum,
        }

    async def years(self) -> List[int]:
        stmt = select(distinct(CountryMetric.year)).order_by(CountryMetric.year.desc())
        result = await self._read(self.session.execute(stmt), "country_data.years")
        return list(result.scalars().all())

    async def countries(self) -> List[str]:
        stmt = (
            select(distinct(CountryMetric.name))
            .where(CountryMetric.name != "")
            .order_by(CountryMetric.name.asc())
        )
        result = await self._read(self.session.execute(stmt), "country_data.countries")
        return list(result.scalars().all())

    async def count(self) -> int:
        stmt = select(func.count(CountryMetric.id))
        return (await self._read(self.session.execute(stmt), "country_data.count")).scalar_one()

    async def get(self, country_id: str, year: int) -> Optional[CountryMetric]:
        stmt = select(CountryMetric).where(
            CountryMetric.country_id == country_id,
            CountryMetric.year == year,
        )
        result = await self._read(self.session.execute(stmt), "country_data.get")
        return result.scalar_one_or_none()

    async def require(self, country_id: str, year: int) -> CountryMetric:
        record = await self.get(country_id, year)
        if record is None:
            raise NotFound("Country data not found")
        return record

    async def find_existing(self, keys: Iterable[Tuple[str, int]]) -> List[CountryMetric]:
        """Rows whose (country_id, year) is in ``keys``."""
        keys = list(set(keys))
        if not keys:
            return []
        stmt = select(CountryMetric).where(
            tuple_(CountryMetric.country_id, CountryMetric.year).in_(keys)
        )
        result = await self._read(self.session.execute(stmt), "country_data.find_existing")
        return list(result.scalars().all())

    async def insert(self, record: CountryMetric) -> CountryMetric:
        self.session.add(record)
        await self._flush("country_data.insert")
        return record

    async def insert_unordered(
        self, records: List[CountryMetric]
    ) -> Tuple[List[CountryMetric], List[Dict[str, Any]]]:
        """
        Insert each record in its own savepoint.

        A failing record is rolled back alone and reported; the others are
        kept.

        Returns:
            (inserted records, failures as {countryId, year, error})
        """
        inserted: List[CountryMetric] = []
        failures: List[Dict[str, Any]] = []
        for record in records:
            try:
                async with self.session.begin_nested():
                    self.session.add(record)
                inserted.append(record)
            except IntegrityError as e:
                failures.append({"countryId": record.country_id, "year": record.year, "error": "duplicate"})
                logger.info("Bulk insert row rejected", extra={"key": f"{record.country_id}/{record.year}", "error": str(e.orig)})
            except SQLAlchemyError as e:
                failures.append({"countryId": record.country_id, "year": record.year, "error": type(e).__name__})
                logger.warning("Bulk insert row failed", extra={"key": f"{record.country_id}/{record.year}", "error": str(e)})
        return inserted, failures

    async def update(
        self,
        country_id: str,
        year: int,
        changes: Dict[str, Any],
        actor: str,
    ) -> CountryMetric:
        """Apply field changes to one record; last write wins."""
        record = await self.require(country_id, year)
        for field in UPDATABLE_FIELDS:
            if field not in changes:
                continue
            if changes[field] is None and field not in NULLABLE_FIELDS:
                continue
            setattr(record, field, changes[field])
        record.updated_by = actor
        await self._flush("country_data.update")
        return record

    async def delete_one(self, country_id: str, year: int) -> CountryMetric:
        record = await self.require(country_id, year)
        await self.session.delete(record)
        await self._flush("country_data.delete_one")
        return record

    async def delete_by_year(self, year: int) -> int:
        stmt = delete(CountryMetric).where(CountryMetric.year == year)
        result = await self._write(self.session.execute(stmt, execution_options=_NO_SYNC), "country_data.delete_by_year")
        return self.rowcount(result)

    async def delete_by_country(self, pattern: str) -> int:
        stmt = delete(CountryMetric).where(_country_match(pattern))
        result = await self._write(self.session.execute(stmt, execution_options=_NO_SYNC), "country_data.delete_by_country")
        return self.rowcount(result)

    async def delete_by_ids(self, ids: List[uuid.UUID]) -> int:
        stmt = delete(CountryMetric).where(CountryMetric.id.in_(ids))
        result = await self._write(self.session.execute(stmt, execution_options=_NO_SYNC), "country_data.delete_by_ids")
        return self.rowcount(result)

    async def delete_all(self) -> int:
        stmt = delete(CountryMetric)
        result = await self._write(self.session.execute(stmt, execution_options=_NO_SYNC), "country_data.delete_all")
        return self.rowcount(result)
