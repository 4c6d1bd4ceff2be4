"""
Request and response schemas.
"""

from fintech_index.schemas.common import (
    CamelModel,
    DeletedCountResponse,
    ErrorResponse,
    HealthResponse,
    MessageResponse,
)
from fintech_index.schemas.auth import (
    RegisterResponse,
    TokenResponse,
    UserLogin,
    UserRegister,
    UserResponse,
)

__all__ = [
    "CamelModel",
    "DeletedCountResponse",
    "ErrorResponse",
    "HealthResponse",
    "MessageResponse",
    "RegisterResponse",
    "TokenResponse",
    "UserLogin",
    "UserRegister",
    "UserResponse",
]
