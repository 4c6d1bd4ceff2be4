"""Unit tests for role checks."""

from datetime import datetime, timedelta, timezone

import pytest

from fintech_index.kernel.errors import Forbidden
from fintech_index.kernel.identity.jwt import SessionIdentity
from fintech_index.kernel.models.user import UserRole
from fintech_index.kernel.permissions import (
    ADMIN_ONLY,
    DATA_MANAGERS,
    has_any_role,
    is_admin,
    require_any_role,
    require_role,
)


def identity(role: str) -> SessionIdentity:
    now = datetime.now(timezone.utc)
    return SessionIdentity(
        sub="00000000-0000-0000-0000-000000000001",
        role=role,
        email=f"{role}@example.com",
        iat=now,
        exp=now + timedelta(hours=1),
    )


@pytest.mark.parametrize("role", ["admin", "editor"])
def test_data_managers_accepted(role):
    assert require_any_role(identity(role), DATA_MANAGERS).role == role


def test_viewer_rejected_from_data_management():
    with pytest.raises(Forbidden) as exc:
        require_any_role(identity("viewer"), DATA_MANAGERS)

    assert exc.value.status_code == 403
    assert "admin or editor" in exc.value.message


def test_admin_only():
    assert require_role(identity("admin"), UserRole.ADMIN)
    with pytest.raises(Forbidden):
        require_any_role(identity("editor"), ADMIN_ONLY)


def test_string_roles_are_accepted():
    assert has_any_role(identity("viewer"), ["viewer", UserRole.EDITOR])
    assert not has_any_role(identity("viewer"), ["admin"])


def test_is_admin():
    assert is_admin(identity("admin"))
    assert not is_admin(identity("editor"))
