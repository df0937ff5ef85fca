"""
JobLedger Command Layer: Transition Dispatcher
================================================
Accept Transition → Select Handler → Evaluate Policies → Produce Outcome.

The Dispatcher is the DECISION MAKER. It decides ACCEPTED or REJECTED.

The Dispatcher DOES NOT:
- Persist snapshots
- Verify signatures
- Mutate any state

It only produces a deterministic ValidationOutcome.

Handlers are registered per intent type. A handler is a callable
returning Optional[RejectionReason]; it usually runs an ordered
policy chain built with run_policies(). The first rejection wins.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Iterable, Optional, TypeVar

from core.commands.base import Transition
from core.commands.exceptions import (
    DuplicateIntentHandlerError,
    TransitionRejectedError,
    UnrecognizedIntentError,
)
from core.commands.outcomes import ValidationOutcome
from core.commands.rejection import RejectionReason

logger = logging.getLogger("jobledger.commands")

S = TypeVar("S")


# ══════════════════════════════════════════════════════════════
# HANDLER / POLICY TYPES
# ══════════════════════════════════════════════════════════════

# A handler is a callable:
#   (Transition) → Optional[RejectionReason]
#   Returns None if the transition passes, RejectionReason if it rejects.
TransitionHandler = Callable[[Transition], Optional[RejectionReason]]


def run_policies(
    subject: S,
    policies: Iterable[Callable[[S], Optional[RejectionReason]]],
) -> Optional[RejectionReason]:
    """
    Evaluate policies in order against one subject.

    First rejection wins, remaining policies are skipped.
    """
    for policy in policies:
        rejection = policy(subject)
        if rejection is None:
            continue
        if not isinstance(rejection, RejectionReason):
            raise TypeError(
                f"Policy must return RejectionReason or None, "
                f"got {type(rejection).__name__}."
            )
        return rejection
    return None


# ══════════════════════════════════════════════════════════════
# TRANSITION DISPATCHER
# ══════════════════════════════════════════════════════════════

class TransitionDispatcher:
    """
    Route a transition to the handler for its intent type.

    Usage:
        dispatcher = TransitionDispatcher(name="jobs")
        dispatcher.register(StartMilestone, start_milestone_handler)

        outcome = dispatcher.dispatch(transition)
        # outcome.is_accepted or outcome.is_rejected

    Intents are matched by exact type. The intent set is closed:
    an intent without a handler raises UnrecognizedIntentError.
    """

    def __init__(self, name: str):
        self._name = name
        self._handlers: Dict[type, TransitionHandler] = {}

    @property
    def name(self) -> str:
        return self._name

    def register(self, intent_type: type, handler: TransitionHandler) -> None:
        if not callable(handler):
            raise TypeError(
                f"Handler must be callable, got {type(handler).__name__}."
            )
        if intent_type in self._handlers:
            raise DuplicateIntentHandlerError(intent_type)
        self._handlers[intent_type] = handler

        logger.debug(
            f"[{self._name}] handler registered for {intent_type.__name__}"
        )

    def handles(self, intent: Any) -> bool:
        return type(intent) in self._handlers

    # ══════════════════════════════════════════════════════════
    # DISPATCH
    # ══════════════════════════════════════════════════════════

    def dispatch(self, transition: Transition) -> ValidationOutcome:
        """
        Evaluate a transition and produce its outcome.

        Raises:
            UnrecognizedIntentError: No handler for the intent type.

        Returns:
            ValidationOutcome, never None, never ambiguous.
        """
        handler = self._handlers.get(type(transition.intent))
        if handler is None:
            logger.warning(
                f"[{self._name}] unrecognised intent "
                f"{type(transition.intent).__name__}"
            )
            raise UnrecognizedIntentError(transition.intent)

        command_type = transition.command_type
        rejection = handler(transition)

        if rejection is not None:
            if not isinstance(rejection, RejectionReason):
                raise TypeError(
                    f"Handler must return RejectionReason or None, "
                    f"got {type(rejection).__name__}."
                )
            logger.info(
                f"[{self._name}] {command_type} rejected by "
                f"'{rejection.policy_name}': "
                f"[{rejection.code}] {rejection.message}"
            )
            return ValidationOutcome.rejected(command_type, rejection)

        logger.info(f"[{self._name}] {command_type} ACCEPTED")
        return ValidationOutcome.accepted(command_type)

    def verify(self, transition: Transition) -> None:
        """
        Same as dispatch(), but a rejection raises TransitionRejectedError.

        Returns None: success is silent. Failure is loud.
        """
        outcome = self.dispatch(transition)
        if outcome.is_rejected:
            raise TransitionRejectedError(outcome.reason)
