"""
JobLedger Job Engine: Validation Service
==========================================
Decides whether a proposed job transition is legal.

Flow per intent:
    1. Snapshot cardinality (Transition-level policies)
    2. Resolve the JobChange (addressed milestone / task)
    3. Ordered policy chain: addressing → local rule →
       frame condition → signers → (payment) cash reconciliation
    4. First rejection wins → ValidationOutcome

The validator is a pure function of its inputs: it holds only
read-only configuration and can be shared between threads.
"""

from __future__ import annotations

from typing import Callable, Dict, Iterable, Optional, Tuple

from core.commands.base import Transition
from core.commands.dispatcher import TransitionDispatcher, run_policies
from core.commands.outcomes import ValidationOutcome
from core.commands.rejection import RejectionReason
from core.config.rules import ConfigStore, InMemoryConfigStore, SignerRule
from core.primitives.cash import CashMove, CashState
from core.primitives.job import Job, MilestoneStatus, TaskStatus
from core.primitives.party import PartyRole
from engines.job import policies as p
from engines.job.change import JobChange
from engines.job.commands import (
    JOB_AGREE_REQUEST,
    JOB_MILESTONE_ACCEPT_REQUEST,
    JOB_MILESTONE_FINISH_REQUEST,
    JOB_MILESTONE_PAY_REQUEST,
    JOB_MILESTONE_REJECT_REQUEST,
    JOB_MILESTONE_START_REQUEST,
    JOB_TASK_FINISH_REQUEST,
    JOB_TASK_START_REQUEST,
    AcceptMilestone,
    AgreeJob,
    FinishMilestone,
    FinishTask,
    JobIntent,
    PayMilestone,
    RejectMilestone,
    StartMilestone,
    StartTask,
)


# ══════════════════════════════════════════════════════════════
# DEFAULT SIGNER RULES
# ══════════════════════════════════════════════════════════════

_BOTH = (PartyRole.DEVELOPER, PartyRole.CONTRACTOR)
_DEVELOPER = (PartyRole.DEVELOPER,)
_CONTRACTOR = (PartyRole.CONTRACTOR,)

DEFAULT_JOB_SIGNER_RULES: Tuple[SignerRule, ...] = (
    SignerRule(JOB_AGREE_REQUEST, _BOTH),
    SignerRule(JOB_TASK_START_REQUEST, _BOTH),
    SignerRule(JOB_MILESTONE_START_REQUEST, _BOTH),
    SignerRule(JOB_TASK_FINISH_REQUEST, _CONTRACTOR),
    SignerRule(JOB_MILESTONE_FINISH_REQUEST, _CONTRACTOR),
    SignerRule(JOB_MILESTONE_REJECT_REQUEST, _DEVELOPER),
    SignerRule(JOB_MILESTONE_ACCEPT_REQUEST, _DEVELOPER),
    SignerRule(JOB_MILESTONE_PAY_REQUEST, _DEVELOPER),
)


def default_config_store() -> InMemoryConfigStore:
    return InMemoryConfigStore(DEFAULT_JOB_SIGNER_RULES)


# ══════════════════════════════════════════════════════════════
# POLICY CHAINS
# ══════════════════════════════════════════════════════════════

TransitionPolicy = Callable[[Transition], Optional[RejectionReason]]

_EXISTING_JOB = (p.one_job_input_policy, p.one_job_output_policy)
_NEW_JOB = (p.no_job_inputs_policy, p.one_job_output_policy)


def _frame(*, tasks: bool) -> Tuple[p.ChangePolicy, ...]:
    chain: Tuple[p.ChangePolicy, ...] = ()
    if tasks:
        chain += (p.other_tasks_unchanged_policy,)
    return chain + (
        p.other_milestones_unchanged_policy,
        p.job_terms_unchanged_policy,
    )


def build_policy_chains(
    config_store: ConfigStore,
) -> Dict[type, Tuple[Tuple[TransitionPolicy, ...], Tuple[p.ChangePolicy, ...]]]:
    """Ordered (transition policies, change policies) per intent type."""
    signers = p.required_signers(config_store)
    addressed_task = (p.milestone_in_range_policy, p.task_in_range_policy)
    addressed_milestone = (p.milestone_in_range_policy,)

    return {
        AgreeJob: (_NEW_JOB, (
            p.parties_differ_policy,
            p.milestones_unstarted_policy,
            p.tasks_unstarted_policy,
            p.tasks_share_currency_policy,
            p.milestone_amounts_policy,
            p.milestone_end_dates_policy,
            signers,
        )),
        StartTask: (_EXISTING_JOB, addressed_task + (
            p.task_input_status(TaskStatus.NOT_STARTED),
            p.task_output_status(TaskStatus.STARTED),
            p.task_only_status_changed_policy,
            p.milestone_output_status(MilestoneStatus.STARTED),
            p.milestone_fields_unchanged("status", "tasks"),
        ) + _frame(tasks=True) + (signers,)),
        StartMilestone: (_EXISTING_JOB, addressed_milestone + (
            p.milestone_has_no_tasks_policy,
            p.milestone_input_status(MilestoneStatus.NOT_STARTED),
            p.milestone_output_status(MilestoneStatus.STARTED),
            p.milestone_fields_unchanged("status"),
        ) + _frame(tasks=False) + (signers,)),
        FinishTask: (_EXISTING_JOB, addressed_task + (
            p.task_input_status(TaskStatus.STARTED),
            p.task_output_status(TaskStatus.COMPLETED),
            p.task_only_status_changed_policy,
            p.milestone_fields_unchanged("tasks"),
        ) + _frame(tasks=True) + (signers,)),
        FinishMilestone: (_EXISTING_JOB, addressed_milestone + (
            p.tasks_finished_policy,
            p.milestone_input_status(MilestoneStatus.STARTED),
            p.milestone_output_status(MilestoneStatus.COMPLETED),
            p.milestone_fields_unchanged("status"),
        ) + _frame(tasks=False) + (signers,)),
        RejectMilestone: (_EXISTING_JOB, addressed_milestone + (
            p.milestone_input_status(MilestoneStatus.COMPLETED),
            p.milestone_output_status(MilestoneStatus.STARTED),
            p.milestone_and_task_statuses_only_policy,
            p.output_tasks_restarted_policy,
        ) + _frame(tasks=False) + (signers,)),
        AcceptMilestone: (_EXISTING_JOB, addressed_milestone + (
            p.milestone_input_status(MilestoneStatus.COMPLETED),
            p.milestone_output_status(MilestoneStatus.ACCEPTED),
            p.milestone_and_task_statuses_only_policy,
            p.output_tasks_accepted_policy,
        ) + _frame(tasks=False) + (signers,)),
        PayMilestone: (_EXISTING_JOB, addressed_milestone + (
            p.milestone_input_status(MilestoneStatus.ACCEPTED),
            p.milestone_output_status(MilestoneStatus.PAID),
            p.milestone_fields_unchanged("status"),
        ) + _frame(tasks=False) + (
            p.cash_move_declared_policy,
            p.cash_currency_policy,
            p.cash_conserved_policy,
            p.contractor_paid_policy,
            signers,
        )),
    }


def _job_handler(
    transition_policies: Tuple[TransitionPolicy, ...],
    change_policies: Tuple[p.ChangePolicy, ...],
) -> Callable[[Transition], Optional[RejectionReason]]:
    def handle(transition: Transition) -> Optional[RejectionReason]:
        rejection = run_policies(transition, transition_policies)
        if rejection is not None:
            return rejection
        change = JobChange.from_transition(transition)
        return run_policies(change, change_policies)
    return handle


# ══════════════════════════════════════════════════════════════
# APPLICATION SERVICE
# ══════════════════════════════════════════════════════════════

class JobValidator:
    """
    Job transition validator.

    Usage:
        validator = JobValidator()
        outcome = validator.validate(Transition(
            intent=StartMilestone(milestone_index=1),
            inputs=(job,),
            outputs=(job.replace_milestone(1, started),),
            signers={developer.owning_key, contractor.owning_key},
        ))

    Unknown intents raise UnrecognizedIntentError.
    """

    def __init__(self, config_store: ConfigStore | None = None):
        self._config_store = config_store or default_config_store()
        self._dispatcher = TransitionDispatcher(name="jobs")
        self._register_handlers()

    def _register_handlers(self) -> None:
        chains = build_policy_chains(self._config_store)
        for intent_type, (transition_policies, change_policies) in chains.items():
            self._dispatcher.register(
                intent_type, _job_handler(transition_policies, change_policies),
            )

    def validate(self, transition: Transition) -> ValidationOutcome:
        return self._dispatcher.dispatch(transition)

    def verify(self, transition: Transition) -> None:
        """Raise TransitionRejectedError if the transition is rejected."""
        self._dispatcher.verify(transition)

    def handles(self, intent) -> bool:
        return self._dispatcher.handles(intent)


def validate_job_transition(
    intent: JobIntent,
    job_inputs: Iterable[Job],
    job_outputs: Iterable[Job],
    signers: Iterable[str],
    cash_inputs: Iterable[CashState] = (),
    cash_outputs: Iterable[CashState] = (),
    cash_commands: Iterable[CashMove] = (),
    validator: JobValidator | None = None,
) -> ValidationOutcome:
    """Validate from separate job and cash collections."""
    transition = Transition(
        intent=intent,
        inputs=tuple(job_inputs) + tuple(cash_inputs),
        outputs=tuple(job_outputs) + tuple(cash_outputs),
        signers=frozenset(signers),
        commands=tuple(cash_commands),
    )
    return (validator or JobValidator()).validate(transition)
