"""
Verification workflow for submitted startups.

pending -> approved | rejected. A decided startup may be re-decided by a
later admin override, and re-applying the same decision refreshes the
verifier stamp.
"""

import uuid
from datetime import datetime, timezone
from typing import Dict, List, Optional, Set, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from fintech_index.kernel.errors import ValidationFailed
from fintech_index.kernel.identity.jwt import SessionIdentity
from fintech_index.kernel.models.startup import Startup, VerificationStatus
from fintech_index.kernel.permissions.role_policy import is_admin
from fintech_index.kernel.store.startups import StartupStore
from fintech_index.logging_config import get_logger

logger = get_logger(__name__)

PENDING = VerificationStatus.PENDING.value
APPROVED = VerificationStatus.APPROVED.value
REJECTED = VerificationStatus.REJECTED.value

# Valid transitions, admin only
_TRANSITIONS: Dict[str, Set[str]] = {
    PENDING: {APPROVED, REJECTED},
    APPROVED: {APPROVED, REJECTED},
    REJECTED: {APPROVED, REJECTED},
}

DECISIONS = frozenset({APPROVED, REJECTED})


def can_transition(from_state: str, to_state: str) -> bool:
    return to_state in _TRANSITIONS.get(from_state, set())


def parse_decision(status: Optional[str]) -> str:
    """
    Normalise a requested decision.

    Raises:
        ValidationFailed: status is not approved or rejected
    """
    value = (status or "").strip().lower()
    if value not in DECISIONS:
        raise ValidationFailed("Invalid status. Must be 'approved' or 'rejected'")
    return value


def decision_values(status: str, actor_email: str, notes: Optional[str] = None) -> Dict[str, object]:
    """Column values for a decision; keeps is_verified in step with the status."""
    return {
        "verification_status": status,
        "is_verified": status == APPROVED,
        "verified_by": actor_email,
        "verified_at": datetime.now(timezone.utc),
        "admin_notes": notes or "",
    }


def apply_verification(
    startup: Startup,
    status: str,
    actor_email: str,
    notes: Optional[str] = None,
) -> Startup:
    """Move one startup to ``status`` in memory."""
    from_state = startup.status_value
    if not can_transition(from_state, status):
        raise ValidationFailed(f"Invalid transition: {from_state} -> {status}")
    for field, value in decision_values(status, actor_email, notes).items():
        setattr(startup, field, value)
    return startup


def initial_state(startup: Startup, identity: Optional[SessionIdentity]) -> Startup:
    """
    Stamp a new startup with its starting status.

    Admin submissions are approved on creation; everyone else waits in
    pending.
    """
    if identity is not None and is_admin(identity):
        for field, value in decision_values(APPROVED, identity.email).items():
            setattr(startup, field, value)
    else:
        startup.verification_status = PENDING
        startup.is_verified = False
        startup.verified_by = None
        startup.verified_at = None
    return startup


class VerificationWorkflow:
    """Applies admin decisions to stored startups."""

    def __init__(self, session: AsyncSession, store: Optional[StartupStore] = None):
        self.session = session
        self.store = store or StartupStore(session)

    async def verify_one(
        self,
        startup_id: uuid.UUID,
        status: Optional[str],
        actor_email: str,
        notes: Optional[str] = None,
    ) -> Startup:
        """
        Decide one startup.

        Raises:
            ValidationFailed: status is not approved or rejected
            NotFound: unknown startup id
        """
        decision = parse_decision(status)
        startup = await self.store.require(startup_id)
        previous = startup.status_value
        apply_verification(startup, decision, actor_email, notes)
        await self.store.save("startups.verify")

        logger.info(
            "Startup verification",
            extra={"startup_id": str(startup_id), "from": previous, "to": decision, "by": actor_email},
        )
        return startup

    async def verify_bulk(
        self,
        startup_ids: Optional[List[uuid.UUID]],
        status: Optional[str],
        actor_email: str,
        notes: Optional[str] = None,
    ) -> Tuple[int, str]:
        """
        Decide many startups in one update.

        Unknown ids are not counted.

        Returns:
            (modified count, applied status)

        Raises:
            ValidationFailed: empty id list or bad status
        """
        if not startup_ids:
            raise ValidationFailed("Startup IDs array is required")
        decision = parse_decision(status)
        modified = await self.store.bulk_set(
            list(dict.fromkeys(startup_ids)),
            decision_values(decision, actor_email, notes),
        )

        logger.info(
            "Bulk startup verification",
            extra={"requested": len(startup_ids), "modified": modified, "to": decision, "by": actor_email},
        )
        return modified, decision
