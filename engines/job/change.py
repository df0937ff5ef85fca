"""
JobLedger Job Engine: Resolved Job Change
===========================================
The subject every job policy evaluates.

A JobChange pairs the consumed and produced job snapshots with the
positions the intent addresses. Positional addressing stays at the
intent boundary: policies read the addressed milestone and task
through this view and never index the snapshots themselves.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, FrozenSet, Optional

from core.commands.base import Transition
from core.primitives.job import Job, Milestone, Task


@dataclass(frozen=True)
class JobChange:
    """
    One proposed job transition with its addressed positions.

    before is None only for agreement (nothing is consumed).
    The addressed properties assume the indices were checked
    in range by the addressing policies.
    """

    transition: Transition
    after: Job
    before: Optional[Job] = None
    milestone_index: Optional[int] = None
    task_index: Optional[int] = None

    @classmethod
    def from_transition(cls, transition: Transition) -> JobChange:
        """Build from a transition already checked for 0-1 inputs and 1 output."""
        inputs = transition.inputs_of_type(Job)
        intent = transition.intent
        return cls(
            transition=transition,
            after=transition.outputs_of_type(Job)[0],
            before=inputs[0] if inputs else None,
            milestone_index=getattr(intent, "milestone_index", None),
            task_index=getattr(intent, "task_index", None),
        )

    @property
    def intent(self) -> Any:
        return self.transition.intent

    @property
    def signers(self) -> FrozenSet[str]:
        return self.transition.signers

    @property
    def agreed_terms(self) -> Job:
        """Snapshot whose parties must assent: the consumed one if any."""
        return self.before if self.before is not None else self.after

    @property
    def milestone_before(self) -> Milestone:
        return self.before.milestones[self.milestone_index]

    @property
    def milestone_after(self) -> Milestone:
        return self.after.milestones[self.milestone_index]

    @property
    def task_before(self) -> Task:
        return self.milestone_before.tasks[self.task_index]

    @property
    def task_after(self) -> Task:
        return self.milestone_after.tasks[self.task_index]
