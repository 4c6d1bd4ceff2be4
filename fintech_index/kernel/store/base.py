"""
Shared plumbing for the resource stores: bounded reads, limit clamping and
translation of store failures into the service error taxonomy.
"""

import asyncio
from typing import Any, Awaitable, Optional, TypeVar

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from fintech_index.config import get_settings
from fintech_index.kernel.errors import Conflict, QueryTimeout, StoreUnavailable
from fintech_index.logging_config import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class BaseStore:
    """
    Base class for collection adapters.

    Reads go through ``_read`` which races the store call against
    ``query_timeout_seconds``. Writes go through ``_write`` which maps
    uniqueness violations to Conflict and everything else to
    StoreUnavailable.
    """

    conflict_message = "Resource already exists"

    def __init__(
        self,
        session: AsyncSession,
        read_timeout: Optional[float] = None,
        default_limit: Optional[int] = None,
        max_limit: Optional[int] = None,
    ):
        settings = get_settings()
        self.session = session
        self.read_timeout = read_timeout or settings.query_timeout_seconds
        self.default_limit = default_limit or settings.default_query_limit
        self.max_limit = max_limit or settings.max_query_limit

    def clamp_limit(self, limit: Optional[int]) -> int:
        if not limit or limit < 1:
            return self.default_limit
        return min(limit, self.max_limit)

    async def _read(self, awaitable: Awaitable[T], what: str = "query") -> T:
        try:
            return await asyncio.wait_for(awaitable, timeout=self.read_timeout)
        except asyncio.TimeoutError:
            logger.warning("Read timed out", extra={"operation": what, "timeout_s": self.read_timeout})
            raise QueryTimeout()
        except SQLAlchemyError as e:
            logger.error("Read failed", extra={"operation": what, "error": str(e)})
            raise StoreUnavailable()

    async def _write(self, awaitable: Awaitable[T], what: str = "write") -> T:
        try:
            return await awaitable
        except IntegrityError as e:
            await self.session.rollback()
            logger.info("Uniqueness violation", extra={"operation": what, "error": str(e.orig)})
            raise Conflict(self.conflict_message)
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error("Write failed", extra={"operation": what, "error": str(e)})
            raise StoreUnavailable()

    async def _flush(self, what: str = "write") -> None:
        await self._write(self.session.flush(), what)

    async def save(self, what: str = "write") -> None:
        """Flush pending changes to tracked rows."""
        await self._flush(what)

    @staticmethod
    def rowcount(result: Any) -> int:
        count = getattr(result, "rowcount", None)
        return count if count and count > 0 else 0
