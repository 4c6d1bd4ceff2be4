"""
Admin user management endpoints.
"""

import uuid
from typing import List

from fastapi import APIRouter, BackgroundTasks, status

from fintech_index.api.deps import AdminIdentity, DbSession, Dispatcher
from fintech_index.kernel.identity.identity_service import IdentityService
from fintech_index.kernel.notifications import messages
from fintech_index.logging_config import get_logger
from fintech_index.schemas.auth import UserResponse
from fintech_index.schemas.common import MessageResponse
from fintech_index.schemas.users import UserCreateByAdmin, UserUpdate, UserVerifiedResponse

router = APIRouter()
logger = get_logger(__name__)


@router.get("", response_model=List[UserResponse])
async def list_users(admin: AdminIdentity, db: DbSession):
    """All accounts, newest first."""
    users = await IdentityService(db).list_users()
    return [UserResponse.model_validate(u) for u in users]


@router.get("/unverified", response_model=List[UserResponse])
async def list_unverified_users(admin: AdminIdentity, db: DbSession):
    users = await IdentityService(db).list_users(unverified_only=True)
    return [UserResponse.model_validate(u) for u in users]


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(data: UserCreateByAdmin, admin: AdminIdentity, db: DbSession):
    """Create an account directly; it can log in immediately."""
    user = await IdentityService(db).create_user(
        email=data.email,
        password=data.password,
        name=data.name,
        role=data.role,
        phone_number=data.phone_number,
        country=data.country,
        organization=data.organization,
        job_title=data.job_title,
    )
    logger.info("User created by admin", extra={"email": user.email, "by": admin.email})
    return UserResponse.model_validate(user)


@router.patch("/{user_id}/verify", response_model=UserVerifiedResponse)
async def verify_user(
    user_id: uuid.UUID,
    admin: AdminIdentity,
    db: DbSession,
    dispatcher: Dispatcher,
    background: BackgroundTasks,
):
    user = await IdentityService(db).verify_user(user_id)
    background.add_task(
        dispatcher.notify_user,
        user.email,
        messages.user_verified(user.name),
        user.phone_number,
    )
    return UserVerifiedResponse(message="User verified", user=UserResponse.model_validate(user))


@router.patch("/{user_id}", response_model=UserResponse)
async def update_user(user_id: uuid.UUID, data: UserUpdate, admin: AdminIdentity, db: DbSession):
    """Edit name, role, verification flag or contact details."""
    user = await IdentityService(db).update_user(user_id, data.model_dump(exclude_unset=True))
    return UserResponse.model_validate(user)


@router.delete("/{user_id}", response_model=MessageResponse)
async def delete_user(user_id: uuid.UUID, admin: AdminIdentity, db: DbSession):
    user = await IdentityService(db).delete_user(user_id)
    logger.info("User deleted by admin", extra={"email": user.email, "by": admin.email})
    return MessageResponse(message="User deleted")
