"""
Role-based authorization policy.

Pure checks on a SessionIdentity; no store access. The FastAPI wiring lives
in ``fintech_index.api.deps``.
"""

from typing import Iterable, Union

from fintech_index.kernel.errors import Forbidden
from fintech_index.kernel.identity.jwt import SessionIdentity
from fintech_index.kernel.models.user import UserRole

RoleLike = Union[UserRole, str]

# Who may do what
ADMIN_ONLY = frozenset({UserRole.ADMIN})
DATA_MANAGERS = frozenset({UserRole.ADMIN, UserRole.EDITOR})


def _value(role: RoleLike) -> str:
    return role.value if isinstance(role, UserRole) else str(role)


def has_any_role(identity: SessionIdentity, roles: Iterable[RoleLike]) -> bool:
    """True when the caller's role is one of ``roles``."""
    return identity.role in {_value(r) for r in roles}


def require_any_role(identity: SessionIdentity, roles: Iterable[RoleLike]) -> SessionIdentity:
    """
    Accept the identity if its role is in ``roles``.

    Raises:
        Forbidden: role not accepted
    """
    accepted = sorted(_value(r) for r in roles)
    if identity.role not in accepted:
        raise Forbidden(f"Insufficient permissions. Required role: {' or '.join(accepted)}")
    return identity


def require_role(identity: SessionIdentity, role: RoleLike) -> SessionIdentity:
    """Single-role form of require_any_role."""
    return require_any_role(identity, [role])


def is_admin(identity: SessionIdentity) -> bool:
    return identity.role == UserRole.ADMIN.value
