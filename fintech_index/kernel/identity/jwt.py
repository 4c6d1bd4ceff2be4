"""
Session tokens: signed JWTs carrying the caller's id, role and email.
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt
from pydantic import BaseModel

from fintech_index.config import get_settings
from fintech_index.kernel.errors import Unauthenticated


class SessionIdentity(BaseModel):
    """Verified claims of a bearer token, valid for one request."""

    sub: str  # User ID
    role: str
    email: str
    exp: datetime
    iat: datetime

    model_config = {"frozen": True}

    @property
    def subject_id(self) -> uuid.UUID:
        return uuid.UUID(self.sub)


class TokenManager:
    """
    Issues and validates session tokens.

    There is no refresh flow: an expired token means logging in again.
    """

    def __init__(
        self,
        secret_key: Optional[str] = None,
        algorithm: Optional[str] = None,
        expire_minutes: Optional[int] = None,
    ):
        settings = get_settings()
        self.secret_key = secret_key or settings.secret_key
        self.algorithm = algorithm or settings.algorithm
        self.expire_minutes = expire_minutes or settings.access_token_expire_minutes

    def issue(
        self,
        user_id: uuid.UUID,
        role: str,
        email: str,
        expires_delta: Optional[timedelta] = None,
    ) -> str:
        """
        Create a signed token for a user.

        Args:
            user_id: Subject of the token
            role: User role at issue time
            email: User email
            expires_delta: Override of the configured lifetime

        Returns:
            Encoded JWT
        """
        now = datetime.now(timezone.utc)
        expire = now + (expires_delta or timedelta(minutes=self.expire_minutes))
        payload = {
            "sub": str(user_id),
            "role": role,
            "email": email,
            "iat": now,
            "exp": expire,
        }
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def issue_for(self, user) -> str:
        """Create a token from a User row."""
        return self.issue(user.id, user.role_value, user.email)

    def validate(self, token: Optional[str]) -> SessionIdentity:
        """
        Decode and verify a token.

        Raises:
            Unauthenticated: missing, malformed, badly signed or expired token
        """
        if not token:
            raise Unauthenticated("No token")
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
            identity = SessionIdentity(
                sub=payload["sub"],
                role=payload["role"],
                email=payload["email"],
                exp=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
                iat=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
            )
            uuid.UUID(identity.sub)
        except (JWTError, KeyError, TypeError, ValueError):
            raise Unauthenticated("Invalid token")
        return identity


_token_manager: Optional[TokenManager] = None


def get_token_manager() -> TokenManager:
    """Get or create the default token manager."""
    global _token_manager
    if _token_manager is None:
        _token_manager = TokenManager()
    return _token_manager

