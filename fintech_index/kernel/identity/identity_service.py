"""
Identity service for registration, login and admin user management.
"""

import asyncio
import uuid
from typing import Any, Dict, List, Optional

from email_validator import EmailNotValidError, validate_email
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from fintech_index.config import get_settings
from fintech_index.kernel.errors import (
    Conflict,
    Forbidden,
    InvalidCredentials,
    NotFound,
    ValidationFailed,
)
from fintech_index.kernel.identity.jwt import TokenManager, get_token_manager
from fintech_index.kernel.identity.password import (
    get_password_hasher,
    hash_password_async,
    verify_dummy_async,
    verify_password_async,
)
from fintech_index.kernel.models.user import SELF_REGISTRATION_ROLES, User, UserRole
from fintech_index.logging_config import get_logger

logger = get_logger(__name__)

# Fields an admin may change through PATCH /users/{id}
EDITABLE_USER_FIELDS = (
    "name",
    "email",
    "role",
    "is_verified",
    "phone_number",
    "country",
    "organization",
    "job_title",
)


def _parse_role(role: str) -> UserRole:
    try:
        return UserRole(role)
    except ValueError:
        raise ValidationFailed("Invalid role")


class IdentityService:
    """
    Service for user identity operations.

    Handles self-registration, authentication and the admin-side
    verification and editing of accounts.
    """

    def __init__(self, session: AsyncSession, token_manager: Optional[TokenManager] = None):
        self.session = session
        self.token_manager = token_manager or get_token_manager()

    async def register_user(
        self,
        email: str,
        password: str,
        name: str,
        role: str = UserRole.VIEWER.value,
        phone_number: Optional[str] = None,
        country: Optional[str] = None,
        organization: Optional[str] = None,
        job_title: Optional[str] = None,
    ) -> User:
        """
        Register a new, unverified user.

        Raises:
            Forbidden: admin role requested
            ValidationFailed: unknown role or undeliverable email domain
            Conflict: email already registered (reported as 400)
        """
        if role == UserRole.ADMIN.value:
            raise Forbidden("Cannot register as admin via the app")
        user_role = _parse_role(role)
        if user_role not in SELF_REGISTRATION_ROLES:
            raise ValidationFailed("Invalid role")

        await self.check_deliverability(email)

        return await self._create_user(
            email=email,
            password=password,
            name=name,
            role=user_role,
            is_verified=False,
            phone_number=phone_number,
            country=country,
            organization=organization,
            job_title=job_title,
        )

    async def create_user(
        self,
        email: str,
        password: str,
        name: str,
        role: str,
        **profile: Optional[str],
    ) -> User:
        """Admin-side account creation; the account starts verified."""
        return await self._create_user(
            email=email,
            password=password,
            name=name,
            role=_parse_role(role),
            is_verified=True,
            **profile,
        )

    async def _create_user(self, *, email: str, password: str, name: str, role: UserRole,
                           is_verified: bool, **profile: Optional[str]) -> User:
        normalized = email.lower().strip()
        if await self.get_user_by_email(normalized):
            raise Conflict("Email already in use", status_code=400)

        user = User(
            email=normalized,
            password_hash=await hash_password_async(password),
            name=name.strip(),
            role=role.value,
            is_verified=is_verified,
            **profile,
        )
        self.session.add(user)
        try:
            await self.session.flush()
        except IntegrityError:
            await self.session.rollback()
            raise Conflict("Email already in use", status_code=400)

        logger.info("User created", extra={"email": user.email, "role": role.value, "verified": is_verified})
        return user

    async def check_deliverability(self, email: str) -> None:
        """Reject addresses whose domain cannot receive mail, when enabled."""
        if not get_settings().check_email_deliverability:
            return
        try:
            await asyncio.to_thread(validate_email, email, check_deliverability=True)
        except EmailNotValidError as e:
            raise ValidationFailed(f"Email address is not deliverable: {e}")

    async def authenticate(self, email: str, password: str) -> tuple[User, str]:
        """
        Check credentials and issue a session token.

        The password is checked before the verification flag, so an
        unverified account is only revealed to someone holding its password.

        Raises:
            InvalidCredentials: unknown email or wrong password
            Forbidden: correct password, account not verified yet
        """
        user = await self.get_user_by_email(email)
        if not user:
            # An unknown email costs the same bcrypt check as a known one
            await verify_dummy_async(password)
            raise InvalidCredentials()

        if not await verify_password_async(password, user.password_hash):
            raise InvalidCredentials()

        if get_password_hasher().needs_rehash(user.password_hash):
            user.password_hash = await hash_password_async(password)
            await self.session.flush()
            logger.info("Password rehashed", extra={"user_id": str(user.id)})

        if not user.is_verified:
            raise Forbidden("Account not verified by admin yet")

        return user, self.token_manager.issue_for(user)

    async def get_user_by_id(self, user_id: uuid.UUID) -> Optional[User]:
        """Get a user by ID."""
        query = select(User).where(User.id == user_id)
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def get_user_by_email(self, email: str) -> Optional[User]:
        """Get a user by email."""
        query = select(User).where(User.email == email.lower().strip())
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def require_user(self, user_id: uuid.UUID) -> User:
        user = await self.get_user_by_id(user_id)
        if not user:
            raise NotFound("User not found")
        return user

    async def list_users(self, unverified_only: bool = False) -> List[User]:
        query = select(User).order_by(User.created_at.desc(), User.email)
        if unverified_only:
            query = query.where(User.is_verified.is_(False))
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def verify_user(self, user_id: uuid.UUID) -> User:
        """Mark an account verified so it can log in."""
        user = await self.require_user(user_id)
        user.is_verified = True
        await self.session.flush()
        logger.info("User verified", extra={"email": user.email})
        return user

    async def update_user(self, user_id: uuid.UUID, changes: Dict[str, Any]) -> User:
        """
        Apply an admin edit.

        Args:
            user_id: The user's ID
            changes: Subset of EDITABLE_USER_FIELDS; None values are ignored
        """
        user = await self.require_user(user_id)

        for field in EDITABLE_USER_FIELDS:
            value = changes.get(field)
            if value is None:
                continue
            if field == "role":
                value = _parse_role(value).value
            elif field == "email":
                value = value.lower().strip()
                existing = await self.get_user_by_email(value)
                if existing and existing.id != user.id:
                    raise Conflict("Email already in use", status_code=400)
            elif field == "name":
                value = value.strip()
            setattr(user, field, value)

        await self.session.flush()
        return user

    async def delete_user(self, user_id: uuid.UUID) -> User:
        user = await self.require_user(user_id)
        await self.session.delete(user)
        await self.session.flush()
        logger.info("User deleted", extra={"email": user.email})
        return user
