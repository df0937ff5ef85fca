"""
JobLedger Job Engine: Policies
================================
Named contract clauses for job transitions.

Every policy is pure and returns Optional[RejectionReason]:
None when the clause holds, a RejectionReason naming the clause
when it does not. Transition-level policies take a Transition;
all others take a resolved JobChange and may assume the addressing
policies ran before them.

Parametrised clauses (expected statuses, required signers) are
built by small factories so each instance still carries its own
policy_name.
"""

from __future__ import annotations

from typing import Callable, Optional

from core.commands.base import Transition
from core.commands.rejection import ReasonCode, RejectionReason
from core.config.rules import ConfigStore
from core.primitives.cash import CashMove, CashState, cash_total
from core.primitives.job import (
    RUNNING_TOTAL_FIELDS,
    Job,
    MilestoneStatus,
    TaskStatus,
)
from core.primitives.money import sum_money
from core.primitives.structural import changed_positions, unchanged_except
from engines.job.change import JobChange

ChangePolicy = Callable[[JobChange], Optional[RejectionReason]]

MILESTONE_FIELDS_MESSAGE = (
    "The modified milestone's description and amount shouldn't change."
)


def _reject(code: str, message: str, policy_name: str) -> RejectionReason:
    return RejectionReason(code=code, message=message, policy_name=policy_name)


# ══════════════════════════════════════════════════════════════
# SNAPSHOT CARDINALITY (Transition-level)
# ══════════════════════════════════════════════════════════════

def no_job_inputs_policy(transition: Transition) -> Optional[RejectionReason]:
    if transition.inputs_of_type(Job):
        return _reject(
            ReasonCode.NO_INPUTS_EXPECTED,
            "No JobState inputs should be consumed.",
            "no_job_inputs_policy",
        )
    return None


def one_job_input_policy(transition: Transition) -> Optional[RejectionReason]:
    if len(transition.inputs_of_type(Job)) != 1:
        return _reject(
            ReasonCode.ONE_INPUT_EXPECTED,
            "One JobState input should be consumed.",
            "one_job_input_policy",
        )
    return None


def one_job_output_policy(transition: Transition) -> Optional[RejectionReason]:
    if len(transition.outputs_of_type(Job)) != 1:
        return _reject(
            ReasonCode.ONE_OUTPUT_EXPECTED,
            "One JobState output should be produced.",
            "one_job_output_policy",
        )
    return None


# ══════════════════════════════════════════════════════════════
# ADDRESSING
# ══════════════════════════════════════════════════════════════

def milestone_in_range_policy(change: JobChange) -> Optional[RejectionReason]:
    index = change.milestone_index
    for label, job in (("input", change.before), ("output", change.after)):
        if not 0 <= index < len(job.milestones):
            return _reject(
                ReasonCode.MILESTONE_INDEX_OUT_OF_RANGE,
                f"Milestone index {index} does not exist in the {label} job "
                f"({len(job.milestones)} milestone(s)).",
                "milestone_in_range_policy",
            )
    return None


def task_in_range_policy(change: JobChange) -> Optional[RejectionReason]:
    index = change.task_index
    for label, milestone in (
        ("input", change.milestone_before),
        ("output", change.milestone_after),
    ):
        if not 0 <= index < len(milestone.tasks):
            return _reject(
                ReasonCode.TASK_INDEX_OUT_OF_RANGE,
                f"Task index {index} does not exist in the {label} milestone "
                f"({len(milestone.tasks)} task(s)).",
                "task_in_range_policy",
            )
    return None


# ══════════════════════════════════════════════════════════════
# AGREEMENT
# ══════════════════════════════════════════════════════════════

def parties_differ_policy(change: JobChange) -> Optional[RejectionReason]:
    if change.after.developer.owning_key == change.after.contractor.owning_key:
        return _reject(
            ReasonCode.SAME_PARTIES,
            "The developer and the contractor should be different parties.",
            "parties_differ_policy",
        )
    return None


def milestones_unstarted_policy(change: JobChange) -> Optional[RejectionReason]:
    if any(
        m.status != MilestoneStatus.NOT_STARTED for m in change.after.milestones
    ):
        return _reject(
            ReasonCode.MILESTONES_NOT_UNSTARTED,
            "All the milestones should be unstarted.",
            "milestones_unstarted_policy",
        )
    return None


def tasks_unstarted_policy(change: JobChange) -> Optional[RejectionReason]:
    for milestone in change.after.milestones:
        if any(t.status != TaskStatus.NOT_STARTED for t in milestone.tasks):
            return _reject(
                ReasonCode.TASKS_NOT_UNSTARTED,
                "All tasks should be unstarted.",
                "tasks_unstarted_policy",
            )
    return None


def tasks_share_currency_policy(change: JobChange) -> Optional[RejectionReason]:
    for milestone in change.after.milestones:
        if len({t.amount.currency for t in milestone.tasks}) > 1:
            return _reject(
                ReasonCode.TASK_CURRENCY_MISMATCH,
                "All tasks should be of the same currency.",
                "tasks_share_currency_policy",
            )
    return None


def milestone_amounts_policy(change: JobChange) -> Optional[RejectionReason]:
    for milestone in change.after.milestones:
        if not milestone.tasks:
            continue
        currency = milestone.amount.currency
        if (
            any(t.amount.currency != currency for t in milestone.tasks)
            or sum_money((t.amount for t in milestone.tasks), currency)
            != milestone.amount
        ):
            return _reject(
                ReasonCode.MILESTONE_AMOUNT_MISMATCH,
                "The total amount of each milestone should be equal to the "
                "accumulated amount of all tasks.",
                "milestone_amounts_policy",
            )
    return None


def milestone_end_dates_policy(change: JobChange) -> Optional[RejectionReason]:
    for milestone in change.after.milestones:
        if not milestone.tasks:
            continue
        latest = max(t.expected_end_date for t in milestone.tasks)
        if milestone.expected_end_date != latest:
            return _reject(
                ReasonCode.MILESTONE_END_DATE_MISMATCH,
                "Expected end date of each milestone should be equal to the "
                "expected end date of the last task.",
                "milestone_end_dates_policy",
            )
    return None


# ══════════════════════════════════════════════════════════════
# LOCAL TRANSITION RULES: TASK
# ══════════════════════════════════════════════════════════════

def task_input_status(expected: TaskStatus) -> ChangePolicy:
    def task_input_status_policy(change: JobChange) -> Optional[RejectionReason]:
        if change.task_before.status != expected:
            return _reject(
                ReasonCode.INVALID_TASK_INPUT_STATUS,
                f"The modified task should have an input status of "
                f"{expected.value}.",
                "task_input_status_policy",
            )
        return None
    return task_input_status_policy


def task_output_status(expected: TaskStatus) -> ChangePolicy:
    def task_output_status_policy(change: JobChange) -> Optional[RejectionReason]:
        if change.task_after.status != expected:
            return _reject(
                ReasonCode.INVALID_TASK_OUTPUT_STATUS,
                f"The modified task should have an output status of "
                f"{expected.value}.",
                "task_output_status_policy",
            )
        return None
    return task_output_status_policy


def task_only_status_changed_policy(
    change: JobChange,
) -> Optional[RejectionReason]:
    if not unchanged_except(change.task_before, change.task_after, "status"):
        return _reject(
            ReasonCode.TASK_FIELDS_MODIFIED,
            "Only the task status should change.",
            "task_only_status_changed_policy",
        )
    return None


# ══════════════════════════════════════════════════════════════
# LOCAL TRANSITION RULES: MILESTONE
# ══════════════════════════════════════════════════════════════

def milestone_input_status(expected: MilestoneStatus) -> ChangePolicy:
    def milestone_input_status_policy(
        change: JobChange,
    ) -> Optional[RejectionReason]:
        if change.milestone_before.status != expected:
            return _reject(
                ReasonCode.INVALID_MILESTONE_INPUT_STATUS,
                f"The modified milestone should have an input status of "
                f"{expected.value}.",
                "milestone_input_status_policy",
            )
        return None
    return milestone_input_status_policy


def milestone_output_status(expected: MilestoneStatus) -> ChangePolicy:
    def milestone_output_status_policy(
        change: JobChange,
    ) -> Optional[RejectionReason]:
        if change.milestone_after.status != expected:
            return _reject(
                ReasonCode.INVALID_MILESTONE_OUTPUT_STATUS,
                f"The modified milestone should have an output status of "
                f"{expected.value}.",
                "milestone_output_status_policy",
            )
        return None
    return milestone_output_status_policy


def milestone_fields_unchanged(*ignored: str) -> ChangePolicy:
    """Addressed milestone may differ only in the `ignored` fields."""
    def milestone_fields_unchanged_policy(
        change: JobChange,
    ) -> Optional[RejectionReason]:
        if not unchanged_except(
            change.milestone_before, change.milestone_after, *ignored
        ):
            return _reject(
                ReasonCode.MILESTONE_FIELDS_MODIFIED,
                MILESTONE_FIELDS_MESSAGE,
                "milestone_fields_unchanged_policy",
            )
        return None
    return milestone_fields_unchanged_policy


def milestone_and_task_statuses_only_policy(
    change: JobChange,
) -> Optional[RejectionReason]:
    """
    Addressed milestone may change its status and its tasks' statuses.

    Used where a milestone decision carries its tasks along
    (rejection, acceptance).
    """
    before = change.milestone_before
    after = change.milestone_after
    same_shape = (
        unchanged_except(before, after, "status", "tasks")
        and len(before.tasks) == len(after.tasks)
        and all(
            unchanged_except(b, a, "status")
            for b, a in zip(before.tasks, after.tasks)
        )
    )
    if not same_shape:
        return _reject(
            ReasonCode.MILESTONE_FIELDS_MODIFIED,
            MILESTONE_FIELDS_MESSAGE,
            "milestone_and_task_statuses_only_policy",
        )
    return None


def milestone_has_no_tasks_policy(
    change: JobChange,
) -> Optional[RejectionReason]:
    if change.milestone_before.has_tasks:
        return _reject(
            ReasonCode.MILESTONE_HAS_TASKS,
            "Cannot start a milestone if it has tasks.",
            "milestone_has_no_tasks_policy",
        )
    return None


def tasks_finished_policy(change: JobChange) -> Optional[RejectionReason]:
    if any(
        t.status != TaskStatus.COMPLETED for t in change.milestone_before.tasks
    ):
        return _reject(
            ReasonCode.TASKS_NOT_FINISHED,
            "All tasks should be finished.",
            "tasks_finished_policy",
        )
    return None


def output_tasks_restarted_policy(
    change: JobChange,
) -> Optional[RejectionReason]:
    if any(t.status != TaskStatus.STARTED for t in change.milestone_after.tasks):
        return _reject(
            ReasonCode.TASKS_NOT_RESTARTED,
            "All tasks should have output status of STARTED.",
            "output_tasks_restarted_policy",
        )
    return None


def output_tasks_accepted_policy(
    change: JobChange,
) -> Optional[RejectionReason]:
    if any(t.status != TaskStatus.ACCEPTED for t in change.milestone_after.tasks):
        return _reject(
            ReasonCode.TASKS_NOT_ACCEPTED,
            "All tasks should have output status of ACCEPTED.",
            "output_tasks_accepted_policy",
        )
    return None


# ══════════════════════════════════════════════════════════════
# FRAME CONDITION
# ══════════════════════════════════════════════════════════════

def job_terms_unchanged_policy(change: JobChange) -> Optional[RejectionReason]:
    """Parties, contract terms and identity are fixed after agreement."""
    if not unchanged_except(
        change.before, change.after, "milestones", *RUNNING_TOTAL_FIELDS
    ):
        return _reject(
            ReasonCode.JOB_TERMS_MODIFIED,
            "The job's parties and terms shouldn't change.",
            "job_terms_unchanged_policy",
        )
    return None


def other_milestones_unchanged_policy(
    change: JobChange,
) -> Optional[RejectionReason]:
    changed = changed_positions(
        change.before.milestones,
        change.after.milestones,
        change.milestone_index,
    )
    if changed:
        return _reject(
            ReasonCode.OTHER_MILESTONES_MODIFIED,
            "All the other milestones should be unmodified.",
            "other_milestones_unchanged_policy",
        )
    return None


def other_tasks_unchanged_policy(change: JobChange) -> Optional[RejectionReason]:
    changed = changed_positions(
        change.milestone_before.tasks,
        change.milestone_after.tasks,
        change.task_index,
    )
    if changed:
        return _reject(
            ReasonCode.OTHER_TASKS_MODIFIED,
            "All other tasks should be unmodified.",
            "other_tasks_unchanged_policy",
        )
    return None


# ══════════════════════════════════════════════════════════════
# AUTHORIZATION
# ══════════════════════════════════════════════════════════════

def required_signers(config_store: ConfigStore) -> ChangePolicy:
    """
    Every role the intent's SignerRule names must be in the signer set.

    Roles resolve against the consumed snapshot (the agreed parties),
    or the produced one for agreement. No rule → no signer required.
    """
    def required_signers_policy(change: JobChange) -> Optional[RejectionReason]:
        rule = config_store.get_signer_rule(change.intent.command_type)
        if rule is None:
            return None

        terms = change.agreed_terms
        missing = [
            role for role in rule.roles
            if not change.transition.signed_by(terms.party_for(role).owning_key)
        ]
        if missing:
            return _reject(
                ReasonCode.MISSING_REQUIRED_SIGNER,
                rule.describe(),
                "required_signers_policy",
            )
        return None
    return required_signers_policy


# ══════════════════════════════════════════════════════════════
# PAYMENT RECONCILIATION
# ══════════════════════════════════════════════════════════════

def cash_move_declared_policy(change: JobChange) -> Optional[RejectionReason]:
    if len(change.transition.commands_of_type(CashMove)) != 1:
        return _reject(
            ReasonCode.CASH_MOVE_MISSING,
            "The Cash command should be Move.",
            "cash_move_declared_policy",
        )
    return None


def cash_currency_policy(change: JobChange) -> Optional[RejectionReason]:
    currency = change.before.currency
    states = (
        change.transition.inputs_of_type(CashState)
        + change.transition.outputs_of_type(CashState)
    )
    if any(s.amount.currency != currency for s in states):
        return _reject(
            ReasonCode.CASH_CURRENCY_MISMATCH,
            "The cash inputs and outputs should all be in the same currency "
            "as the modified milestone.",
            "cash_currency_policy",
        )
    return None


def cash_conserved_policy(change: JobChange) -> Optional[RejectionReason]:
    """Runs after cash_currency_policy: all cash is in the job currency."""
    currency = change.before.currency
    paid_in = cash_total(change.transition.inputs_of_type(CashState), currency)
    paid_out = cash_total(change.transition.outputs_of_type(CashState), currency)
    if paid_in != paid_out:
        return _reject(
            ReasonCode.CASH_NOT_CONSERVED,
            "The cash inputs and outputs should have the same value.",
            "cash_conserved_policy",
        )
    return None


def contractor_paid_policy(change: JobChange) -> Optional[RejectionReason]:
    # Change returned to the developer is not checked.
    contractor_key = change.after.contractor.owning_key
    received = cash_total(
        (
            s for s in change.transition.outputs_of_type(CashState)
            if s.owner.owning_key == contractor_key
        ),
        change.before.currency,
    )
    if received != change.milestone_after.amount:
        return _reject(
            ReasonCode.CONTRACTOR_PAYMENT_MISMATCH,
            "The cash outputs owned by the contractor should have the same "
            "value as the modified milestone.",
            "contractor_paid_policy",
        )
    return None
