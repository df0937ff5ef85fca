"""
JobLedger Command Layer: Rejection Reasons
============================================
What a validator says when it refuses a transition.

A RejectionReason names one contract clause: the ReasonCode a
caller branches on, the sentence a party reads, and the policy
function that raised it. Validators return the reason of the first
clause that fails, so the same transition always yields the same
reason.
"""

from __future__ import annotations

from dataclasses import dataclass, fields


@dataclass(frozen=True)
class RejectionReason:
    """
    One failed contract clause.

    code:        ReasonCode constant (e.g. 'MILESTONE_HAS_TASKS')
    message:     Sentence for the parties
    policy_name: Policy function that produced it
    """

    code: str
    message: str
    policy_name: str

    def __post_init__(self):
        for f in fields(self):
            value = getattr(self, f.name)
            if not isinstance(value, str) or not value:
                raise ValueError(f"{f.name} must be a non-empty string.")

    def to_dict(self) -> dict:
        return {f.name: getattr(self, f.name) for f in fields(self)}


# ══════════════════════════════════════════════════════════════
# REASON CODES
# ══════════════════════════════════════════════════════════════

class ReasonCode:
    """One code per contract clause, grouped by the stage that checks it."""

    # ── Snapshot cardinality ──────────────────────────────────
    NO_INPUTS_EXPECTED = "NO_INPUTS_EXPECTED"
    ONE_INPUT_EXPECTED = "ONE_INPUT_EXPECTED"
    ONE_OUTPUT_EXPECTED = "ONE_OUTPUT_EXPECTED"

    # ── Addressing ────────────────────────────────────────────
    MILESTONE_INDEX_OUT_OF_RANGE = "MILESTONE_INDEX_OUT_OF_RANGE"
    TASK_INDEX_OUT_OF_RANGE = "TASK_INDEX_OUT_OF_RANGE"

    # ── Agreement ─────────────────────────────────────────────
    SAME_PARTIES = "SAME_PARTIES"
    MILESTONES_NOT_UNSTARTED = "MILESTONES_NOT_UNSTARTED"
    TASKS_NOT_UNSTARTED = "TASKS_NOT_UNSTARTED"
    TASK_CURRENCY_MISMATCH = "TASK_CURRENCY_MISMATCH"
    MILESTONE_AMOUNT_MISMATCH = "MILESTONE_AMOUNT_MISMATCH"
    MILESTONE_END_DATE_MISMATCH = "MILESTONE_END_DATE_MISMATCH"

    # ── Local transition rules ────────────────────────────────
    INVALID_TASK_INPUT_STATUS = "INVALID_TASK_INPUT_STATUS"
    INVALID_TASK_OUTPUT_STATUS = "INVALID_TASK_OUTPUT_STATUS"
    TASK_FIELDS_MODIFIED = "TASK_FIELDS_MODIFIED"
    INVALID_MILESTONE_INPUT_STATUS = "INVALID_MILESTONE_INPUT_STATUS"
    INVALID_MILESTONE_OUTPUT_STATUS = "INVALID_MILESTONE_OUTPUT_STATUS"
    MILESTONE_FIELDS_MODIFIED = "MILESTONE_FIELDS_MODIFIED"
    MILESTONE_HAS_TASKS = "MILESTONE_HAS_TASKS"
    TASKS_NOT_FINISHED = "TASKS_NOT_FINISHED"
    TASKS_NOT_RESTARTED = "TASKS_NOT_RESTARTED"
    TASKS_NOT_ACCEPTED = "TASKS_NOT_ACCEPTED"

    # ── Frame condition ───────────────────────────────────────
    JOB_TERMS_MODIFIED = "JOB_TERMS_MODIFIED"
    OTHER_MILESTONES_MODIFIED = "OTHER_MILESTONES_MODIFIED"
    OTHER_TASKS_MODIFIED = "OTHER_TASKS_MODIFIED"

    # ── Authorization ─────────────────────────────────────────
    MISSING_REQUIRED_SIGNER = "MISSING_REQUIRED_SIGNER"

    # ── Payment reconciliation ────────────────────────────────
    CASH_MOVE_MISSING = "CASH_MOVE_MISSING"
    CASH_CURRENCY_MISMATCH = "CASH_CURRENCY_MISMATCH"
    CASH_NOT_CONSERVED = "CASH_NOT_CONSERVED"
    CONTRACTOR_PAYMENT_MISMATCH = "CONTRACTOR_PAYMENT_MISMATCH"

    # ── Documents ─────────────────────────────────────────────
    DOCUMENT_INPUTS_CONSUMED = "DOCUMENT_INPUTS_CONSUMED"
    DOCUMENT_OUTPUT_COUNT = "DOCUMENT_OUTPUT_COUNT"

    # ── Protocol ──────────────────────────────────────────────
    UNRECOGNIZED_COMMAND = "UNRECOGNIZED_COMMAND"
