"""
Authentication endpoints.
"""

from fastapi import APIRouter, BackgroundTasks, status

from fintech_index.api.deps import CurrentIdentity, DbSession, Dispatcher, Tokens
from fintech_index.kernel.errors import NotFound
from fintech_index.kernel.identity.identity_service import IdentityService
from fintech_index.kernel.notifications import messages
from fintech_index.logging_config import get_logger
from fintech_index.schemas.auth import (
    RegisterResponse,
    TokenResponse,
    UserLogin,
    UserRegister,
    UserResponse,
)

router = APIRouter()
logger = get_logger(__name__)


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
async def register(
    data: UserRegister,
    db: DbSession,
    dispatcher: Dispatcher,
    background: BackgroundTasks,
):
    """
    Self-register as editor or viewer.

    The account cannot log in until an admin verifies it.
    """
    identity_service = IdentityService(db)
    user = await identity_service.register_user(
        email=data.email,
        password=data.password,
        name=data.name,
        role=data.role,
        phone_number=data.phone_number,
        country=data.country,
        organization=data.organization,
        job_title=data.job_title,
    )

    background.add_task(dispatcher.notify_user, user.email, messages.registration_received(user.name))
    background.add_task(
        dispatcher.notify_admin,
        messages.registration_for_admin(user.name, user.email, user.role_value),
    )

    return RegisterResponse(
        message="Registration successful. Please wait for admin verification.",
        user=UserResponse.model_validate(user),
    )


@router.post("/login", response_model=TokenResponse)
async def login(data: UserLogin, db: DbSession, tokens: Tokens):
    """Exchange email and password for a session token."""
    identity_service = IdentityService(db, token_manager=tokens)
    user, token = await identity_service.authenticate(email=data.email, password=data.password)

    return TokenResponse(token=token, user=UserResponse.model_validate(user))


@router.get("/me", response_model=UserResponse)
async def get_me(identity: CurrentIdentity, db: DbSession):
    """Get current user profile."""
    user = await IdentityService(db).get_user_by_id(identity.subject_id)
    if user is None:
        raise NotFound("User not found")
    return UserResponse.model_validate(user)
