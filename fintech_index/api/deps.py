"""
FastAPI dependencies for authentication, authorization, and database sessions.
"""

from typing import Annotated, Iterable, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from fintech_index.database import get_db
from fintech_index.kernel.errors import Unauthenticated
from fintech_index.kernel.identity.jwt import SessionIdentity, TokenManager, get_token_manager
from fintech_index.kernel.models.user import UserRole
from fintech_index.kernel.notifications.dispatcher import NotificationDispatcher, get_dispatcher
from fintech_index.kernel.permissions.role_policy import ADMIN_ONLY, DATA_MANAGERS, require_any_role

# Security scheme
security = HTTPBearer(auto_error=False)

# Function scope: the commit finishes before the response is sent
DbSession = Annotated[AsyncSession, Depends(get_db, scope="function")]
Tokens = Annotated[TokenManager, Depends(get_token_manager)]
Dispatcher = Annotated[NotificationDispatcher, Depends(get_dispatcher)]


async def get_session_identity(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)],
    tokens: Tokens,
) -> SessionIdentity:
    """Identity of the bearer token, or 401."""
    if not credentials:
        raise Unauthenticated("No token")
    return tokens.validate(credentials.credentials)


async def get_optional_identity(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)],
    tokens: Tokens,
) -> Optional[SessionIdentity]:
    """
    Identity if a valid token was sent, None otherwise.

    Used by public endpoints whose behaviour changes for signed-in admins.
    """
    if not credentials:
        return None
    try:
        return tokens.validate(credentials.credentials)
    except Unauthenticated:
        return None


CurrentIdentity = Annotated[SessionIdentity, Depends(get_session_identity)]
OptionalIdentity = Annotated[Optional[SessionIdentity], Depends(get_optional_identity)]


class RoleChecker:
    """
    Dependency class for role checks.

    Resolves the session identity first, so a missing token is 401 and a
    wrong role is 403, both before the handler touches any data.

    Usage:
        @router.delete("/{startup_id}")
        async def delete_startup(identity: Annotated[SessionIdentity, Depends(RoleChecker(DATA_MANAGERS))]):
            ...
    """

    def __init__(self, roles: Iterable[UserRole]):
        self.roles = frozenset(roles)

    async def __call__(self, identity: CurrentIdentity) -> SessionIdentity:
        return require_any_role(identity, self.roles)


AdminIdentity = Annotated[SessionIdentity, Depends(RoleChecker(ADMIN_ONLY))]
DataManagerIdentity = Annotated[SessionIdentity, Depends(RoleChecker(DATA_MANAGERS))]

