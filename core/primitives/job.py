"""
JobLedger Job Primitive: Job / Milestone / Task Snapshots
===========================================================
Engine: Core Primitives

A Job is a works contract organised by a developer and carried out
by a contractor. It is split into Milestones (billable phases),
each optionally split into Tasks (smallest unit of tracked work).

Job snapshots are replaced, never mutated: every transition
produces a new Job value that differs from the previous one in
exactly one milestone or one task. Milestones and Tasks are owned
by value; the same positional slot is replaced in place.

State machines:
    Task:       NOT_STARTED → STARTED → COMPLETED → ACCEPTED
    Milestone:  NOT_STARTED → STARTED → COMPLETED → ACCEPTED → PAID
                COMPLETED → STARTED (rejection)
                ON_ACCOUNT_PAYMENT has no transition rule here.

RULES (NON-NEGOTIABLE):
- Snapshots are immutable (frozen dataclasses, tuple sequences)
- All milestones of a job are budgeted in one currency
- Invalid snapshots fail at construction with ConstructionError
- linear_id is assigned once and stable for the life of the job

This file contains NO persistence logic.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from datetime import date, timedelta
from enum import Enum
from typing import Optional, Tuple

from core.primitives.exceptions import ConstructionError
from core.primitives.money import Money
from core.primitives.party import Party, PartyRole


# ══════════════════════════════════════════════════════════════
# ENUMS
# ══════════════════════════════════════════════════════════════

class TaskStatus(Enum):
    """Task lifecycle status. No backward edge."""
    NOT_STARTED = "NOT_STARTED"
    STARTED = "STARTED"
    COMPLETED = "COMPLETED"
    ACCEPTED = "ACCEPTED"


class MilestoneStatus(Enum):
    """Milestone lifecycle status."""
    NOT_STARTED = "NOT_STARTED"
    STARTED = "STARTED"
    COMPLETED = "COMPLETED"
    ACCEPTED = "ACCEPTED"
    PAID = "PAID"
    ON_ACCOUNT_PAYMENT = "ON_ACCOUNT_PAYMENT"


# ══════════════════════════════════════════════════════════════
# FIELD CHECKS
# ══════════════════════════════════════════════════════════════

def _require_text(value, name: str) -> None:
    if not isinstance(value, str):
        raise ConstructionError(f"{name} must be a string.")


def _require_money(value, name: str, optional: bool = False) -> None:
    if value is None and optional:
        return
    if not isinstance(value, Money):
        raise ConstructionError(f"{name} must be Money.")


def _require_number(value, name: str) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConstructionError(f"{name} must be a number.")


def _require_minor_units(value, name: str) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConstructionError(f"{name} must be int (minor units).")


def _as_hashes(value, name: str) -> Tuple[str, ...]:
    hashes = tuple(value)
    for item in hashes:
        if not item or not isinstance(item, str):
            raise ConstructionError(
                f"{name} must contain non-empty hash strings."
            )
    return hashes


def _optional_money_to_dict(value: Optional[Money]) -> Optional[dict]:
    return value.to_dict() if value is not None else None


def _optional_money_from_dict(data: Optional[dict]) -> Optional[Money]:
    return Money.from_dict(data) if data is not None else None


# ══════════════════════════════════════════════════════════════
# TASK
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Task:
    """
    Smallest unit of tracked work inside a milestone.

    Fields:
        reference:           Stable business key (e.g. "T1")
        description:         Work to be carried out
        amount:              Task value
        expected_start_date: Planned start
        expected_duration:   Planned duration in days
        requested_amount:    Amount per the contractor's application
        documents_required:  Hashes of supporting documents
        remarks:             Free text
        status:              TaskStatus
    """
    reference: str
    description: str
    amount: Money
    expected_start_date: date
    expected_duration: int
    remarks: str = ""
    requested_amount: Optional[Money] = None
    documents_required: Tuple[str, ...] = ()
    status: TaskStatus = TaskStatus.NOT_STARTED

    def __post_init__(self):
        _require_text(self.reference, "reference")
        _require_text(self.description, "description")
        _require_text(self.remarks, "remarks")
        _require_money(self.amount, "amount")
        _require_money(self.requested_amount, "requested_amount", optional=True)
        if not isinstance(self.expected_start_date, date):
            raise ConstructionError("expected_start_date must be a date.")
        if (
            isinstance(self.expected_duration, bool)
            or not isinstance(self.expected_duration, int)
            or self.expected_duration < 0
        ):
            raise ConstructionError(
                "expected_duration must be a non-negative number of days."
            )
        if not isinstance(self.status, TaskStatus):
            raise ConstructionError("status must be TaskStatus enum.")

        object.__setattr__(
            self,
            "documents_required",
            _as_hashes(self.documents_required, "documents_required"),
        )

    @property
    def expected_end_date(self) -> date:
        return self.expected_start_date + timedelta(days=self.expected_duration)

    def with_status(self, status: TaskStatus) -> Task:
        return replace(self, status=status)

    def to_dict(self) -> dict:
        return {
            "reference": self.reference,
            "description": self.description,
            "amount": self.amount.to_dict(),
            "expected_start_date": self.expected_start_date.isoformat(),
            "expected_duration": self.expected_duration,
            "remarks": self.remarks,
            "requested_amount": _optional_money_to_dict(self.requested_amount),
            "documents_required": list(self.documents_required),
            "status": self.status.value,
        }

    @classmethod
    def from_dict(cls, data: dict) -> Task:
        return cls(
            reference=data["reference"],
            description=data["description"],
            amount=Money.from_dict(data["amount"]),
            expected_start_date=date.fromisoformat(data["expected_start_date"]),
            expected_duration=data["expected_duration"],
            remarks=data.get("remarks", ""),
            requested_amount=_optional_money_from_dict(
                data.get("requested_amount")
            ),
            documents_required=tuple(data.get("documents_required", ())),
            status=TaskStatus(data.get("status", TaskStatus.NOT_STARTED.value)),
        )


# ══════════════════════════════════════════════════════════════
# MILESTONE
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Milestone:
    """
    Billable phase of a job with its own status and value.

    Fields:
        reference:             Stable business key (e.g. "M1")
        description:           Work covered by the milestone
        amount:                Milestone value
        expected_end_date:     Planned completion
        percentage_complete:   Progress indicator (0-100)
        requested_amount:      Amount per the contractor's application
        payment_on_account:    Provisional payment made so far
        net_milestone_payment: Amount less retention
        documents_required:    Hashes of supporting documents
        remarks:               Free text
        status:                MilestoneStatus
        tasks:                 Ordered tasks (may be empty)
    """
    reference: str
    description: str
    amount: Money
    expected_end_date: date
    remarks: str = ""
    percentage_complete: float = 0.0
    requested_amount: Optional[Money] = None
    payment_on_account: Optional[Money] = None
    net_milestone_payment: Optional[Money] = None
    documents_required: Tuple[str, ...] = ()
    status: MilestoneStatus = MilestoneStatus.NOT_STARTED
    tasks: Tuple[Task, ...] = ()

    def __post_init__(self):
        _require_text(self.reference, "reference")
        _require_text(self.description, "description")
        _require_text(self.remarks, "remarks")
        _require_money(self.amount, "amount")
        _require_money(self.requested_amount, "requested_amount", optional=True)
        _require_money(self.payment_on_account, "payment_on_account", optional=True)
        _require_money(
            self.net_milestone_payment, "net_milestone_payment", optional=True,
        )
        _require_number(self.percentage_complete, "percentage_complete")
        if not isinstance(self.expected_end_date, date):
            raise ConstructionError("expected_end_date must be a date.")
        if not isinstance(self.status, MilestoneStatus):
            raise ConstructionError("status must be MilestoneStatus enum.")

        tasks = tuple(self.tasks)
        for task in tasks:
            if not isinstance(task, Task):
                raise ConstructionError(
                    f"tasks must contain Task, got {type(task).__name__}."
                )

        object.__setattr__(self, "tasks", tasks)
        object.__setattr__(
            self,
            "documents_required",
            _as_hashes(self.documents_required, "documents_required"),
        )

    @property
    def has_tasks(self) -> bool:
        return len(self.tasks) > 0

    def with_status(self, status: MilestoneStatus) -> Milestone:
        return replace(self, status=status)

    def replace_task(self, index: int, task: Task) -> Milestone:
        """Return a new milestone with the task at `index` replaced."""
        if not 0 <= index < len(self.tasks):
            raise IndexError(
                f"Task index {index} out of range for milestone "
                f"'{self.reference}' with {len(self.tasks)} task(s)."
            )
        tasks = self.tasks[:index] + (task,) + self.tasks[index + 1:]
        return replace(self, tasks=tasks)

    def to_dict(self) -> dict:
        return {
            "reference": self.reference,
            "description": self.description,
            "amount": self.amount.to_dict(),
            "expected_end_date": self.expected_end_date.isoformat(),
            "remarks": self.remarks,
            "percentage_complete": self.percentage_complete,
            "requested_amount": _optional_money_to_dict(self.requested_amount),
            "payment_on_account": _optional_money_to_dict(
                self.payment_on_account
            ),
            "net_milestone_payment": _optional_money_to_dict(
                self.net_milestone_payment
            ),
            "documents_required": list(self.documents_required),
            "status": self.status.value,
            "tasks": [t.to_dict() for t in self.tasks],
        }

    @classmethod
    def from_dict(cls, data: dict) -> Milestone:
        return cls(
            reference=data["reference"],
            description=data["description"],
            amount=Money.from_dict(data["amount"]),
            expected_end_date=date.fromisoformat(data["expected_end_date"]),
            remarks=data.get("remarks", ""),
            percentage_complete=data.get("percentage_complete", 0.0),
            requested_amount=_optional_money_from_dict(
                data.get("requested_amount")
            ),
            payment_on_account=_optional_money_from_dict(
                data.get("payment_on_account")
            ),
            net_milestone_payment=_optional_money_from_dict(
                data.get("net_milestone_payment")
            ),
            documents_required=tuple(data.get("documents_required", ())),
            status=MilestoneStatus(
                data.get("status", MilestoneStatus.NOT_STARTED.value)
            ),
            tasks=tuple(Task.from_dict(t) for t in data.get("tasks", ())),
        )


# ══════════════════════════════════════════════════════════════
# JOB
# ══════════════════════════════════════════════════════════════

# Valuation bookkeeping carried on the job but never validated by
# the transition engine.
RUNNING_TOTAL_FIELDS = (
    "gross_cumulative_amount",
    "retention_amount",
    "net_cumulative_value",
    "previous_cumulative_value",
)


@dataclass(frozen=True)
class Job:
    """
    Works contract snapshot co-owned by developer and contractor.

    Fields:
        developer:                 Party commissioning the work
        contractor:                Party carrying out the work
        contract_amount:           Total agreed value (minor units)
        retention_percentage:      Share withheld from each valuation
        allow_payment_on_account:  Whether provisional payments are allowed
        gross_cumulative_amount:   Value certified so far
        retention_amount:          Amount retained so far
        net_cumulative_value:      Gross less retention
        previous_cumulative_value: Net value at the previous valuation
        milestones:                Ordered milestones
        linear_id:                 Identity across snapshots

    Raises ConstructionError if the milestones mix currencies.
    """
    developer: Party
    contractor: Party
    contract_amount: int
    retention_percentage: float
    allow_payment_on_account: bool
    milestones: Tuple[Milestone, ...] = ()
    gross_cumulative_amount: int = 0
    retention_amount: int = 0
    net_cumulative_value: int = 0
    previous_cumulative_value: int = 0
    linear_id: uuid.UUID = field(default_factory=uuid.uuid4)

    def __post_init__(self):
        if not isinstance(self.developer, Party):
            raise ConstructionError("developer must be Party.")
        if not isinstance(self.contractor, Party):
            raise ConstructionError("contractor must be Party.")
        _require_minor_units(self.contract_amount, "contract_amount")
        _require_number(self.retention_percentage, "retention_percentage")
        if not isinstance(self.allow_payment_on_account, bool):
            raise ConstructionError("allow_payment_on_account must be bool.")
        for name in RUNNING_TOTAL_FIELDS:
            _require_minor_units(getattr(self, name), name)
        if not isinstance(self.linear_id, uuid.UUID):
            raise ConstructionError("linear_id must be UUID.")

        milestones = tuple(self.milestones)
        for milestone in milestones:
            if not isinstance(milestone, Milestone):
                raise ConstructionError(
                    f"milestones must contain Milestone, "
                    f"got {type(milestone).__name__}."
                )

        currencies = {m.amount.currency for m in milestones}
        if len(currencies) > 1:
            raise ConstructionError(
                f"All milestones must be budgeted in the same currency, "
                f"got {sorted(currencies)}."
            )

        object.__setattr__(self, "milestones", milestones)

    @property
    def participants(self) -> Tuple[Party, Party]:
        return (self.developer, self.contractor)

    @property
    def currency(self) -> Optional[str]:
        """Currency of the milestones, or None for a job without any."""
        if not self.milestones:
            return None
        return self.milestones[0].amount.currency

    def party_for(self, role: PartyRole) -> Party:
        if role == PartyRole.DEVELOPER:
            return self.developer
        if role == PartyRole.CONTRACTOR:
            return self.contractor
        raise ValueError(f"Unknown party role: {role!r}.")

    def replace_milestone(self, index: int, milestone: Milestone) -> Job:
        """Return the next snapshot with the milestone at `index` replaced."""
        if not 0 <= index < len(self.milestones):
            raise IndexError(
                f"Milestone index {index} out of range for job with "
                f"{len(self.milestones)} milestone(s)."
            )
        milestones = (
            self.milestones[:index] + (milestone,) + self.milestones[index + 1:]
        )
        return replace(self, milestones=milestones)

    def to_dict(self) -> dict:
        return {
            "linear_id": str(self.linear_id),
            "developer": self.developer.to_dict(),
            "contractor": self.contractor.to_dict(),
            "contract_amount": self.contract_amount,
            "retention_percentage": self.retention_percentage,
            "allow_payment_on_account": self.allow_payment_on_account,
            "gross_cumulative_amount": self.gross_cumulative_amount,
            "retention_amount": self.retention_amount,
            "net_cumulative_value": self.net_cumulative_value,
            "previous_cumulative_value": self.previous_cumulative_value,
            "milestones": [m.to_dict() for m in self.milestones],
        }

    @classmethod
    def from_dict(cls, data: dict) -> Job:
        return cls(
            developer=Party.from_dict(data["developer"]),
            contractor=Party.from_dict(data["contractor"]),
            contract_amount=data["contract_amount"],
            retention_percentage=data["retention_percentage"],
            allow_payment_on_account=data["allow_payment_on_account"],
            milestones=tuple(
                Milestone.from_dict(m) for m in data.get("milestones", ())
            ),
            gross_cumulative_amount=data.get("gross_cumulative_amount", 0),
            retention_amount=data.get("retention_amount", 0),
            net_cumulative_value=data.get("net_cumulative_value", 0),
            previous_cumulative_value=data.get("previous_cumulative_value", 0),
            linear_id=uuid.UUID(data["linear_id"]),
        )
