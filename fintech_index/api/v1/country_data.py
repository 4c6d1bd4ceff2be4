"""
Country metrics endpoints.

Reads are public. Writes need an admin or editor token, except updates
which are admin only.
"""

from typing import List, Optional

from fastapi import APIRouter, BackgroundTasks, Query, status

from fintech_index.api.deps import AdminIdentity, DataManagerIdentity, DbSession, Dispatcher
from fintech_index.kernel.errors import NotFound, ValidationFailed
from fintech_index.kernel.identity.jwt import SessionIdentity
from fintech_index.kernel.ingestion.guard import BulkIngestionGuard
from fintech_index.kernel.models.country_data import CountryMetric
from fintech_index.kernel.notifications import messages
from fintech_index.kernel.notifications.dispatcher import NotificationDispatcher
from fintech_index.kernel.store.country_data import CountryDataStore
from fintech_index.logging_config import get_logger
from fintech_index.schemas.common import DeletedCountResponse
from fintech_index.schemas.country_data import (
    BulkInsertResponse,
    CountryDataBulkCreate,
    CountryDataCreate,
    CountryDataDeleted,
    CountryDataResponse,
    CountryDataUpdate,
    CountryStats,
    DeleteAllResponse,
    SelectiveDelete,
)

router = APIRouter()
logger = get_logger(__name__)


def _record(data: CountryDataCreate, actor: str) -> CountryMetric:
    return CountryMetric(**data.model_dump(), created_by=actor, updated_by=actor)


def _announce_deletion(
    background: BackgroundTasks,
    dispatcher: NotificationDispatcher,
    scope: str,
    count: int,
    identity: SessionIdentity,
) -> None:
    background.add_task(
        dispatcher.notify_admin,
        messages.country_data_deleted(scope, count, identity.email, identity.role),
    )


@router.get("", response_model=List[CountryDataResponse])
async def list_country_data(
    db: DbSession,
    year: Optional[int] = Query(None),
    country: Optional[str] = Query(None),
    sort: Optional[str] = Query(None),
    limit: Optional[int] = Query(None, ge=1),
):
    """
    List records, newest year first.

    ``country`` matches name or country code, case-insensitive.
    ``sort=score`` ranks by final score, ``sort=name`` alphabetically.
    """
    records = await CountryDataStore(db).query(year=year, country=country, sort=sort, limit=limit)
    return [CountryDataResponse.model_validate(r) for r in records]


@router.get("/stats", response_model=CountryStats)
async def country_stats(db: DbSession):
    return CountryStats(**await CountryDataStore(db).stats())


@router.get("/years", response_model=List[int])
async def list_years(db: DbSession):
    return await CountryDataStore(db).years()


@router.get("/countries", response_model=List[str])
async def list_countries(db: DbSession):
    return await CountryDataStore(db).countries()


@router.post("", response_model=CountryDataResponse, status_code=status.HTTP_201_CREATED)
async def create_country_data(data: CountryDataCreate, identity: DataManagerIdentity, db: DbSession):
    """Add one country-year record; 409 if that pair already exists."""
    record = await CountryDataStore(db).insert(_record(data, identity.email))
    return CountryDataResponse.model_validate(record)


@router.post("/bulk", response_model=BulkInsertResponse, status_code=status.HTTP_201_CREATED)
async def bulk_create_country_data(
    data: CountryDataBulkCreate,
    identity: DataManagerIdentity,
    db: DbSession,
    dispatcher: Dispatcher,
    background: BackgroundTasks,
):
    """
    Add many records.

    The batch is rejected whole (400, with ``conflicts``) if any
    country-year pair repeats inside it or already exists.
    """
    guard = BulkIngestionGuard(CountryDataStore(db))
    report = await guard.ingest([_record(item, identity.email) for item in data.data])

    logger.info(
        "Country data bulk upload",
        extra={"inserted": report.inserted_count, "failed": report.failed_count, "by": identity.email},
    )
    background.add_task(
        dispatcher.notify_admin,
        messages.country_data_uploaded(report.inserted_count, report.years, identity.email),
    )
    return BulkInsertResponse(
        message=f"Successfully added {report.inserted_count} records",
        inserted_count=report.inserted_count,
        failed_count=report.failed_count,
        failures=report.failures,
    )


@router.delete("/delete-by-year/{year}", response_model=DeletedCountResponse)
async def delete_by_year(
    year: int,
    identity: DataManagerIdentity,
    db: DbSession,
    dispatcher: Dispatcher,
    background: BackgroundTasks,
):
    deleted = await CountryDataStore(db).delete_by_year(year)
    if not deleted:
        raise NotFound("No data found for the specified year")

    _announce_deletion(background, dispatcher, f"year {year}", deleted, identity)
    return DeletedCountResponse(message=f"Deleted {deleted} records for year {year}", deleted_count=deleted)


@router.delete("/delete-by-country/{country}", response_model=DeletedCountResponse)
async def delete_by_country(
    country: str,
    identity: DataManagerIdentity,
    db: DbSession,
    dispatcher: Dispatcher,
    background: BackgroundTasks,
):
    """Delete every record whose name or code contains ``country``."""
    deleted = await CountryDataStore(db).delete_by_country(country)
    if not deleted:
        raise NotFound("No data found for the specified country")

    _announce_deletion(background, dispatcher, f"country {country}", deleted, identity)
    return DeletedCountResponse(message=f"Deleted {deleted} records for country {country}", deleted_count=deleted)


@router.delete("/delete-selective", response_model=DeletedCountResponse)
async def delete_selective(
    data: SelectiveDelete,
    identity: DataManagerIdentity,
    db: DbSession,
    dispatcher: Dispatcher,
    background: BackgroundTasks,
):
    """Delete records by record id."""
    if not data.ids:
        raise ValidationFailed("IDs array is required and must not be empty")
    deleted = await CountryDataStore(db).delete_by_ids(data.ids)
    if not deleted:
        raise NotFound("No records found with the provided IDs")

    _announce_deletion(background, dispatcher, "selected records", deleted, identity)
    return DeletedCountResponse(message=f"Deleted {deleted} records", deleted_count=deleted)


@router.delete("", response_model=DeleteAllResponse)
@router.delete("/delete-all", response_model=DeleteAllResponse)
async def delete_all(
    identity: DataManagerIdentity,
    db: DbSession,
    dispatcher: Dispatcher,
    background: BackgroundTasks,
):
    store = CountryDataStore(db)
    before = await store.count()
    deleted = await store.delete_all()
    after = await store.count()

    logger.warning("All country data deleted", extra={"deleted": deleted, "by": identity.email})
    _announce_deletion(background, dispatcher, "all", deleted, identity)
    return DeleteAllResponse(
        message=f"Deleted all {deleted} records",
        deleted_count=deleted,
        before_count=before,
        after_count=after,
    )


@router.put("/{country_id}/{year}", response_model=CountryDataResponse)
async def update_country_data(
    country_id: str,
    year: int,
    data: CountryDataUpdate,
    identity: AdminIdentity,
    db: DbSession,
):
    record = await CountryDataStore(db).update(
        country_id,
        year,
        data.model_dump(exclude_unset=True),
        actor=identity.email,
    )
    return CountryDataResponse.model_validate(record)


@router.delete("/{country_id}/{year}", response_model=CountryDataDeleted)
async def delete_country_data(country_id: str, year: int, identity: DataManagerIdentity, db: DbSession):
    record = await CountryDataStore(db).delete_one(country_id, year)
    return CountryDataDeleted(
        message="Country data deleted successfully",
        deleted_data=CountryDataResponse.model_validate(record),
    )
