"""
Bulk Ingestion Guard and bulk row normalisation.
"""

from fintech_index.kernel.ingestion.guard import (
    ALREADY_EXISTS,
    DUPLICATE_IN_BATCH,
    BulkIngestionGuard,
    IngestionReport,
    batch_conflicts,
)
from fintech_index.kernel.ingestion.startup_rows import (
    StartupRow,
    extract_country,
    normalize_row,
    normalize_rows,
    parse_founded_year,
)

__all__ = [
    "ALREADY_EXISTS",
    "DUPLICATE_IN_BATCH",
    "BulkIngestionGuard",
    "IngestionReport",
    "batch_conflicts",
    "StartupRow",
    "extract_country",
    "normalize_row",
    "normalize_rows",
    "parse_founded_year",
]
