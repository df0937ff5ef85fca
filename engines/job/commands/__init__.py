"""
JobLedger Job Engine: Intents
===============================
The closed set of intents a job transition may declare.

Each intent is a frozen dataclass carrying exactly the indices it
needs. Milestones and tasks are addressed by position in the job
snapshot; the validator resolves positions against both the input
and output snapshot.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Union


# ══════════════════════════════════════════════════════════════
# COMMAND TYPE CONSTANTS
# ══════════════════════════════════════════════════════════════

JOB_AGREE_REQUEST = "jobs.contract.agree.request"
JOB_TASK_START_REQUEST = "jobs.task.start.request"
JOB_MILESTONE_START_REQUEST = "jobs.milestone.start.request"
JOB_TASK_FINISH_REQUEST = "jobs.task.finish.request"
JOB_MILESTONE_FINISH_REQUEST = "jobs.milestone.finish.request"
JOB_MILESTONE_REJECT_REQUEST = "jobs.milestone.reject.request"
JOB_MILESTONE_ACCEPT_REQUEST = "jobs.milestone.accept.request"
JOB_MILESTONE_PAY_REQUEST = "jobs.milestone.pay.request"

JOB_COMMAND_TYPES = frozenset({
    JOB_AGREE_REQUEST,
    JOB_TASK_START_REQUEST,
    JOB_MILESTONE_START_REQUEST,
    JOB_TASK_FINISH_REQUEST,
    JOB_MILESTONE_FINISH_REQUEST,
    JOB_MILESTONE_REJECT_REQUEST,
    JOB_MILESTONE_ACCEPT_REQUEST,
    JOB_MILESTONE_PAY_REQUEST,
})


def _check_index(value, name: str) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValueError(f"{name} must be a non-negative integer.")


# ══════════════════════════════════════════════════════════════
# INTENTS
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class AgreeJob:
    """Create a job agreed by both parties."""
    command_type: ClassVar[str] = JOB_AGREE_REQUEST


@dataclass(frozen=True)
class StartTask:
    """Start one task; its milestone becomes STARTED."""
    command_type: ClassVar[str] = JOB_TASK_START_REQUEST
    milestone_index: int
    task_index: int

    def __post_init__(self):
        _check_index(self.milestone_index, "milestone_index")
        _check_index(self.task_index, "task_index")


@dataclass(frozen=True)
class StartMilestone:
    """Start a milestone that has no tasks."""
    command_type: ClassVar[str] = JOB_MILESTONE_START_REQUEST
    milestone_index: int

    def __post_init__(self):
        _check_index(self.milestone_index, "milestone_index")


@dataclass(frozen=True)
class FinishTask:
    """Contractor reports one task complete."""
    command_type: ClassVar[str] = JOB_TASK_FINISH_REQUEST
    milestone_index: int
    task_index: int

    def __post_init__(self):
        _check_index(self.milestone_index, "milestone_index")
        _check_index(self.task_index, "task_index")


@dataclass(frozen=True)
class FinishMilestone:
    """Contractor reports a milestone complete."""
    command_type: ClassVar[str] = JOB_MILESTONE_FINISH_REQUEST
    milestone_index: int

    def __post_init__(self):
        _check_index(self.milestone_index, "milestone_index")


@dataclass(frozen=True)
class RejectMilestone:
    """Developer sends a completed milestone back to STARTED."""
    command_type: ClassVar[str] = JOB_MILESTONE_REJECT_REQUEST
    milestone_index: int

    def __post_init__(self):
        _check_index(self.milestone_index, "milestone_index")


@dataclass(frozen=True)
class AcceptMilestone:
    """Developer accepts a completed milestone."""
    command_type: ClassVar[str] = JOB_MILESTONE_ACCEPT_REQUEST
    milestone_index: int

    def __post_init__(self):
        _check_index(self.milestone_index, "milestone_index")


@dataclass(frozen=True)
class PayMilestone:
    """Developer pays an accepted milestone against a cash move."""
    command_type: ClassVar[str] = JOB_MILESTONE_PAY_REQUEST
    milestone_index: int

    def __post_init__(self):
        _check_index(self.milestone_index, "milestone_index")


JobIntent = Union[
    AgreeJob,
    StartTask,
    StartMilestone,
    FinishTask,
    FinishMilestone,
    RejectMilestone,
    AcceptMilestone,
    PayMilestone,
]
