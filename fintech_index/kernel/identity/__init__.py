"""
Identity & Session - accounts, password checks and session tokens.
"""

from fintech_index.kernel.identity.password import (
    PasswordHasher,
    hash_password,
    verify_password,
)
from fintech_index.kernel.identity.jwt import (
    SessionIdentity,
    TokenManager,
    get_token_manager,
)
from fintech_index.kernel.identity.identity_service import IdentityService

__all__ = [
    "PasswordHasher",
    "hash_password",
    "verify_password",
    "SessionIdentity",
    "TokenManager",
    "get_token_manager",
    "IdentityService",
]
