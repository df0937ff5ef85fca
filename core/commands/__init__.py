"""
JobLedger Command Layer: Transition Governance
================================================
Every change begins as a proposed Transition.
Every Transition produces exactly one Outcome.
REJECTED transitions carry the clause that failed.

Transition → Dispatcher → Outcome is fully deterministic.
"""

from core.commands.base import (
    Transition,
    command_type_of,
)
from core.commands.outcomes import (
    ValidationOutcome,
    ValidationStatus,
)
from core.commands.rejection import (
    ReasonCode,
    RejectionReason,
)
from core.commands.dispatcher import (
    TransitionDispatcher,
    TransitionHandler,
    run_policies,
)
from core.commands.exceptions import (
    DuplicateIntentHandlerError,
    TransitionRejectedError,
    UnrecognizedIntentError,
    ValidationEngineError,
)

__all__ = [
    # ── Base ──────────────────────────────────────────────────
    "Transition",
    "command_type_of",
    # ── Outcomes ──────────────────────────────────────────────
    "ValidationOutcome",
    "ValidationStatus",
    # ── Rejection ─────────────────────────────────────────────
    "RejectionReason",
    "ReasonCode",
    # ── Dispatcher ────────────────────────────────────────────
    "TransitionDispatcher",
    "TransitionHandler",
    "run_policies",
    # ── Errors ────────────────────────────────────────────────
    "ValidationEngineError",
    "UnrecognizedIntentError",
    "DuplicateIntentHandlerError",
    "TransitionRejectedError",
]
