"""
JobLedger Command Layer: Validation Outcomes
==============================================
The verdict a validator returns for one proposed transition.

An outcome is ACCEPTED with no reason, or REJECTED carrying the
RejectionReason of the clause that failed. Any other combination
is refused at construction.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from core.commands.rejection import RejectionReason


class ValidationStatus(Enum):
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"


@dataclass(frozen=True)
class ValidationOutcome:
    """
    Verdict on a transition.

    command_type: The intent's command type (e.g. 'jobs.milestone.pay.request')
    status:       ACCEPTED or REJECTED
    reason:       The failed clause; set iff REJECTED
    """

    command_type: str
    status: ValidationStatus
    reason: Optional[RejectionReason] = None

    def __post_init__(self):
        if not isinstance(self.status, ValidationStatus):
            raise ValueError(
                f"status must be ValidationStatus, "
                f"got {type(self.status).__name__}."
            )
        if (self.status == ValidationStatus.REJECTED) != (self.reason is not None):
            raise ValueError(
                f"{self.status.value} outcome "
                f"{'needs' if self.reason is None else 'cannot carry'} "
                f"a RejectionReason."
            )

    @classmethod
    def accepted(cls, command_type: str) -> ValidationOutcome:
        return cls(command_type=command_type, status=ValidationStatus.ACCEPTED)

    @classmethod
    def rejected(cls, command_type: str, reason: RejectionReason) -> ValidationOutcome:
        return cls(
            command_type=command_type,
            status=ValidationStatus.REJECTED,
            reason=reason,
        )

    @property
    def is_accepted(self) -> bool:
        return self.status == ValidationStatus.ACCEPTED

    @property
    def is_rejected(self) -> bool:
        return self.status == ValidationStatus.REJECTED

    @property
    def code(self) -> Optional[str]:
        return None if self.reason is None else self.reason.code

    def to_dict(self) -> dict:
        return {
            "command_type": self.command_type,
            "status": self.status.value,
            "reason": None if self.reason is None else self.reason.to_dict(),
        }
