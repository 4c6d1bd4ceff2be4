"""
Duplicate detection for bulk country-data uploads.

A batch is checked as a whole before anything is written: keys repeated
inside the batch and keys already stored both reject it.
"""

from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

from fintech_index.kernel.errors import Conflict, ValidationFailed
from fintech_index.kernel.models.country_data import CountryMetric
from fintech_index.kernel.store.country_data import CountryDataStore
from fintech_index.logging_config import get_logger

logger = get_logger(__name__)

DUPLICATE_IN_BATCH = "duplicate_in_batch"
ALREADY_EXISTS = "already_exists"

Key = Tuple[str, int]


@dataclass
class IngestionReport:
    """Outcome of an unordered bulk insert."""

    inserted: List[CountryMetric] = field(default_factory=list)
    failures: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def inserted_count(self) -> int:
        return len(self.inserted)

    @property
    def failed_count(self) -> int:
        return len(self.failures)

    @property
    def years(self) -> List[int]:
        return sorted({r.year for r in self.inserted})


def batch_conflicts(keys: Sequence[Key], existing: Sequence[Key] = ()) -> List[Dict[str, Any]]:
    """
    List every colliding (country_id, year) in ``keys``.

    Each in-batch repeat is reported once per occurrence; a key that is
    already stored is reported once per occurrence as well, unless it was
    already listed as a batch duplicate.
    """
    counts = Counter(keys)
    stored = set(existing)
    conflicts: List[Dict[str, Any]] = []
    for country_id, year in keys:
        if counts[(country_id, year)] > 1:
            reason = DUPLICATE_IN_BATCH
        elif (country_id, year) in stored:
            reason = ALREADY_EXISTS
        else:
            continue
        conflicts.append({"countryId": country_id, "year": year, "reason": reason})
    return conflicts


class BulkIngestionGuard:
    """Checks a batch for duplicates, then inserts it record by record."""

    def __init__(self, store: CountryDataStore):
        self.store = store

    async def check(self, records: Sequence[CountryMetric]) -> None:
        """
        Raises:
            ValidationFailed: empty batch
            Conflict: (400) any key collides, with the full ``conflicts`` list
        """
        if not records:
            raise ValidationFailed("Data array is required and must not be empty")

        keys = [r.key for r in records]
        existing = [r.key for r in await self.store.find_existing(keys)]
        conflicts = batch_conflicts(keys, existing)
        if conflicts:
            logger.info(
                "Bulk upload rejected",
                extra={"batch_size": len(records), "conflicts": len(conflicts)},
            )
            raise Conflict(
                "Duplicate data detected",
                conflicts=conflicts,
                details=_summary(conflicts),
                status_code=400,
            )

    async def ingest(self, records: Sequence[CountryMetric]) -> IngestionReport:
        """
        Check then insert unordered.

        Raises:
            Conflict: batch rejected by ``check``, or every record failed
        """
        await self.check(records)
        inserted, failures = await self.store.insert_unordered(list(records))
        report = IngestionReport(inserted=inserted, failures=failures)
        if not report.inserted:
            raise Conflict(
                "Failed to insert any records",
                conflicts=failures,
                details=f"{report.failed_count} records failed",
                status_code=400,
            )
        return report


def _summary(conflicts: List[Dict[str, Any]], limit: Optional[int] = 5) -> str:
    shown = ", ".join(f"{c['countryId']}/{c['year']}" for c in conflicts[:limit])
    more = len(conflicts) - limit if limit and len(conflicts) > limit else 0
    return f"{shown} (+{more} more)" if more else shown
