"""
Startup directory adapter.
"""

import uuid
from typing import Any, Dict, List, Optional

from sqlalchemy import delete, func, or_, select, update

from fintech_index.kernel.errors import NotFound
from fintech_index.kernel.models.startup import Startup, VerificationStatus
from fintech_index.kernel.store.base import BaseStore

_NO_SYNC = {"synchronize_session": False}

# Fields PUT /startups/{id} may change
EDITABLE_FIELDS = ("name", "country", "sectors", "founded_year", "description", "website")


class StartupStore(BaseStore):
    """Reads and writes Startup rows."""

    conflict_message = "Startup already exists"

    async def list_approved(
        self,
        country: Optional[str] = None,
        sector: Optional[str] = None,
        search: Optional[str] = None,
        year: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> List[Startup]:
        """
        Public listing: approved startups only, newest first.

        Args:
            country: substring of the country, case-insensitive
            sector: substring of the stored sector string
            search: substring of name or description
            year: founded year
            limit: row cap
        """
        stmt = select(Startup).where(Startup.verification_status == VerificationStatus.APPROVED.value)
        if country:
            stmt = stmt.where(Startup.country.icontains(country, autoescape=True))
        if sector:
            stmt = stmt.where(Startup.sector.icontains(sector, autoescape=True))
        if search:
            stmt = stmt.where(
                or_(
                    Startup.name.icontains(search, autoescape=True),
                    Startup.description.icontains(search, autoescape=True),
                )
            )
        if year is not None:
            stmt = stmt.where(Startup.founded_year == year)
        stmt = stmt.order_by(Startup.added_at.desc()).limit(self.clamp_limit(limit))

        result = await self._read(self.session.execute(stmt), "startups.list_approved")
        return list(result.scalars().all())

    async def list_pending(self) -> List[Startup]:
        stmt = (
            select(Startup)
            .where(Startup.verification_status == VerificationStatus.PENDING.value)
            .order_by(Startup.added_at.desc())
        )
        result = await self._read(self.session.execute(stmt), "startups.list_pending")
        return list(result.scalars().all())

    async def counts_by_country(self, year: Optional[int] = None) -> List[Dict[str, Any]]:
        """Approved startups per country, most first."""
        total = func.count(Startup.id).label("count")
        stmt = (
            select(Startup.country, total)
            .where(Startup.verification_status == VerificationStatus.APPROVED.value)
            .group_by(Startup.country)
            .order_by(total.desc(), Startup.country.asc())
        )
        if year is not None:
            stmt = stmt.where(Startup.founded_year == year)
        result = await self._read(self.session.execute(stmt), "startups.counts_by_country")
        return [{"country": country, "count": count} for country, count in result.all()]

    async def get(self, startup_id: uuid.UUID) -> Optional[Startup]:
        return await self._read(self.session.get(Startup, startup_id), "startups.get")

    async def require(self, startup_id: uuid.UUID) -> Startup:
        startup = await self.get(startup_id)
        if startup is None:
            raise NotFound("Startup not found")
        return startup

    async def insert(self, startup: Startup) -> Startup:
        self.session.add(startup)
        await self._flush("startups.insert")
        return startup

    async def insert_many(self, startups: List[Startup]) -> List[Startup]:
        self.session.add_all(startups)
        await self._flush("startups.insert_many")
        return startups

    async def update_fields(self, startup_id: uuid.UUID, changes: Dict[str, Any]) -> Startup:
        startup = await self.require(startup_id)
        for field in EDITABLE_FIELDS:
            if field in changes:
                setattr(startup, field, changes[field])
        await self._flush("startups.update")
        return startup

    async def bulk_set(self, ids: List[uuid.UUID], values: Dict[str, Any]) -> int:
        """One UPDATE over ``ids``; unknown ids simply don't match."""
        stmt = update(Startup).where(Startup.id.in_(ids)).values(**values)
        result = await self._write(
            self.session.execute(stmt, execution_options=_NO_SYNC), "startups.bulk_set"
        )
        return self.rowcount(result)

    async def delete(self, startup_id: uuid.UUID) -> Startup:
        startup = await self.require(startup_id)
        await self.session.delete(startup)
        await self._flush("startups.delete")
        return startup

    async def delete_many(self, ids: List[uuid.UUID]) -> int:
        stmt = delete(Startup).where(Startup.id.in_(ids))
        result = await self._write(
            self.session.execute(stmt, execution_options=_NO_SYNC), "startups.delete_many"
        )
        return self.rowcount(result)
