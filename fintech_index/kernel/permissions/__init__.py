"""
Authorization Policy - role checks on the session identity.
"""

from fintech_index.kernel.permissions.role_policy import (
    ADMIN_ONLY,
    DATA_MANAGERS,
    has_any_role,
    is_admin,
    require_any_role,
    require_role,
)

__all__ = [
    "ADMIN_ONLY",
    "DATA_MANAGERS",
    "has_any_role",
    "is_admin",
    "require_any_role",
    "require_role",
]
