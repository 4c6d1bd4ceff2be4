"""
Verification Workflow - startup approval states.
"""

from fintech_index.kernel.verification.workflow import (
    DECISIONS,
    VerificationWorkflow,
    apply_verification,
    can_transition,
    decision_values,
    initial_state,
    parse_decision,
)

__all__ = [
    "DECISIONS",
    "VerificationWorkflow",
    "apply_verification",
    "can_transition",
    "decision_values",
    "initial_state",
    "parse_decision",
]
