"""
Startup directory endpoints.

Anyone may list approved startups and submit new ones; submissions wait for
admin verification unless the submitter is an admin.
"""

import uuid
from typing import List, Optional

from fastapi import APIRouter, BackgroundTasks, Query, status

from fintech_index.api.deps import (
    AdminIdentity,
    DataManagerIdentity,
    DbSession,
    Dispatcher,
    OptionalIdentity,
)
from fintech_index.kernel.errors import NotFound, ValidationFailed
from fintech_index.kernel.ingestion.startup_rows import normalize_rows, row_to_fields
from fintech_index.kernel.models.startup import Startup
from fintech_index.kernel.notifications import messages
from fintech_index.kernel.permissions.role_policy import is_admin
from fintech_index.kernel.store.startups import StartupStore
from fintech_index.kernel.verification.workflow import VerificationWorkflow, initial_state
from fintech_index.logging_config import get_logger
from fintech_index.schemas.common import DeletedCountResponse
from fintech_index.schemas.startups import (
    BulkDeleteRequest,
    BulkVerifyRequest,
    BulkVerifyResponse,
    PendingStartups,
    StartupBulkCreate,
    StartupBulkResponse,
    StartupCount,
    StartupCreate,
    StartupCreated,
    StartupDeleted,
    StartupResponse,
    StartupUpdate,
    StartupVerified,
    VerifyRequest,
)

router = APIRouter()
logger = get_logger(__name__)

PUBLIC_SUBMITTER = "public"
BULK_SUBMITTER = "bulk_upload"


def _build(fields: dict, added_by: str) -> Startup:
    sectors = fields.pop("sectors")
    startup = Startup(**fields, added_by=added_by)
    startup.sectors = sectors
    return startup


@router.get("", response_model=List[StartupResponse])
async def list_startups(
    db: DbSession,
    country: Optional[str] = Query(None),
    sector: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    year: Optional[int] = Query(None),
    limit: Optional[int] = Query(None, ge=1),
):
    """Approved startups, newest first."""
    startups = await StartupStore(db).list_approved(
        country=country, sector=sector, search=search, year=year, limit=limit
    )
    return [StartupResponse.model_validate(s) for s in startups]


@router.get("/counts", response_model=List[StartupCount])
async def startup_counts(db: DbSession, year: Optional[int] = Query(None)):
    """Approved startups per country, optionally for one founded year."""
    return await StartupStore(db).counts_by_country(year)


@router.get("/pending", response_model=PendingStartups)
async def pending_startups(admin: AdminIdentity, db: DbSession):
    startups = await StartupStore(db).list_pending()
    return PendingStartups(
        count=len(startups),
        startups=[StartupResponse.model_validate(s) for s in startups],
    )


@router.post("", response_model=StartupCreated, status_code=status.HTTP_201_CREATED)
async def create_startup(
    data: StartupCreate,
    identity: OptionalIdentity,
    db: DbSession,
    dispatcher: Dispatcher,
    background: BackgroundTasks,
):
    """
    Submit a startup.

    With an admin token it is approved straight away; otherwise it is
    pending and the admin contact is notified.
    """
    added_by = identity.email if identity else PUBLIC_SUBMITTER
    startup = initial_state(_build(data.model_dump(), added_by), identity)
    startup = await StartupStore(db).insert(startup)

    if startup.is_verified:
        message = "Startup added and approved"
    else:
        message = "Startup submitted successfully and is pending verification"
        background.add_task(
            dispatcher.notify_admin,
            messages.startup_submitted(startup.name, startup.country, startup.sector, added_by),
        )

    return StartupCreated(
        **StartupResponse.model_validate(startup).model_dump(),
        message=message,
    )


@router.post("/bulk", response_model=StartupBulkResponse, status_code=status.HTTP_201_CREATED)
async def bulk_create_startups(
    data: StartupBulkCreate,
    identity: OptionalIdentity,
    db: DbSession,
    dispatcher: Dispatcher,
    background: BackgroundTasks,
):
    """
    Submit spreadsheet rows.

    Rows missing a name, location, sector or usable founded year are
    skipped and counted.
    """
    if not data.data:
        raise ValidationFailed("Data array is required and must not be empty")

    rows, skipped = normalize_rows(data.data)
    if not rows:
        raise ValidationFailed(
            "No valid startup data found. Please check your file format.",
            extra={"details": "Required fields: name, country, sector, foundedYear."},
        )

    added_by = identity.email if identity else BULK_SUBMITTER
    startups = [initial_state(_build(row_to_fields(row), added_by), identity) for row in rows]
    startups = await StartupStore(db).insert_many(startups)

    logger.info(
        "Startup bulk upload",
        extra={"inserted": len(startups), "skipped": len(skipped), "by": added_by},
    )
    if not (identity and is_admin(identity)):
        background.add_task(
            dispatcher.notify_admin,
            messages.startup_submitted(f"{len(startups)} startups", "various", "bulk upload", added_by),
        )

    return StartupBulkResponse(
        message=f"Successfully added {len(startups)} startups",
        inserted_count=len(startups),
        skipped_count=len(skipped),
        startups=[StartupResponse.model_validate(s) for s in startups],
    )


@router.patch("/bulk-verify", response_model=BulkVerifyResponse)
async def bulk_verify_startups(
    data: BulkVerifyRequest,
    admin: AdminIdentity,
    db: DbSession,
    dispatcher: Dispatcher,
    background: BackgroundTasks,
):
    """Approve or reject many startups at once; unknown ids are not counted."""
    modified, decision = await VerificationWorkflow(db).verify_bulk(
        data.startup_ids, data.status, admin.email, data.admin_notes
    )
    background.add_task(
        dispatcher.notify_admin,
        messages.startups_bulk_verified(modified, decision, admin.email),
    )
    return BulkVerifyResponse(message=f"{modified} startups {decision}", modified_count=modified)


@router.delete("/bulk-delete", response_model=DeletedCountResponse)
async def bulk_delete_startups(
    data: BulkDeleteRequest,
    identity: DataManagerIdentity,
    db: DbSession,
    dispatcher: Dispatcher,
    background: BackgroundTasks,
):
    if not data.startup_ids:
        raise ValidationFailed("Startup IDs array is required")
    deleted = await StartupStore(db).delete_many(data.startup_ids)
    if not deleted:
        raise NotFound("No startups found with the provided IDs")

    background.add_task(
        dispatcher.notify_admin,
        messages.startups_bulk_deleted(deleted, identity.email, identity.role),
    )
    return DeletedCountResponse(message=f"Deleted {deleted} startups", deleted_count=deleted)


@router.put("/{startup_id}", response_model=StartupResponse)
async def update_startup(
    startup_id: uuid.UUID,
    data: StartupUpdate,
    identity: DataManagerIdentity,
    db: DbSession,
):
    changes = {k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None}
    if "sectors" in changes and not changes["sectors"]:
        raise ValidationFailed("At least one sector is required")
    startup = await StartupStore(db).update_fields(startup_id, changes)
    return StartupResponse.model_validate(startup)


@router.patch("/{startup_id}/verify", response_model=StartupVerified)
async def verify_startup(
    startup_id: uuid.UUID,
    data: VerifyRequest,
    admin: AdminIdentity,
    db: DbSession,
    dispatcher: Dispatcher,
    background: BackgroundTasks,
):
    startup = await VerificationWorkflow(db).verify_one(
        startup_id, data.status, admin.email, data.admin_notes
    )
    background.add_task(
        dispatcher.notify_admin,
        messages.startup_verified(startup.name, startup.status_value, admin.email, startup.admin_notes),
    )
    return StartupVerified(
        message=f"Startup {startup.status_value} successfully",
        startup=StartupResponse.model_validate(startup),
    )


@router.delete("/{startup_id}", response_model=StartupDeleted)
async def delete_startup(
    startup_id: uuid.UUID,
    identity: DataManagerIdentity,
    db: DbSession,
    dispatcher: Dispatcher,
    background: BackgroundTasks,
):
    startup = await StartupStore(db).delete(startup_id)
    background.add_task(
        dispatcher.notify_admin,
        messages.startup_deleted(startup.name, startup.country, identity.email, identity.role),
    )
    return StartupDeleted(
        message="Startup deleted successfully",
        deleted_startup=StartupResponse.model_validate(startup),
        deleted_by=identity.email,
    )
