"""
JobLedger Command Layer: Exceptions
=====================================
Structured errors for the validation engine.

These are engine errors, NOT business rejections.
Business rejections flow through RejectionReason → ValidationOutcome.
"""

from __future__ import annotations

from core.commands.rejection import ReasonCode, RejectionReason


class ValidationEngineError(Exception):
    """Base error for validation engine operations."""
    pass


class UnrecognizedIntentError(ValidationEngineError):
    """
    The intent is not one this validator governs.

    Signals a caller or protocol bug, never a contract violation.
    """

    code = ReasonCode.UNRECOGNIZED_COMMAND

    def __init__(self, intent: object):
        self.intent = intent
        super().__init__(
            f"[{self.code}] Unrecognised command {type(intent).__name__}."
        )


class DuplicateIntentHandlerError(ValidationEngineError):
    """A handler for this intent type is already registered."""

    def __init__(self, intent_type: type):
        self.intent_type = intent_type
        super().__init__(
            f"Handler for '{intent_type.__name__}' is already registered."
        )


class TransitionRejectedError(ValidationEngineError):
    """Raised by verify() when a transition is rejected."""

    def __init__(self, reason: RejectionReason):
        self.reason = reason
        self.code = reason.code
        super().__init__(f"[{reason.code}] {reason.message}")
