"""
JobLedger Core Primitives: Tests
==================================
Tests for: Money, Party, Job / Milestone / Task, DocumentRecord,
CashState, structural diff.

Tests verify:
- Construction invariants (ConstructionError on malformed snapshots)
- Single-currency rule for a job's milestones
- Snapshot replacement helpers
- Structural diff used by every frame condition
"""

import uuid
from dataclasses import replace
from datetime import date, timedelta

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from core.primitives.exceptions import ConstructionError
from core.primitives.job import Job, Milestone, MilestoneStatus, Task, TaskStatus
from core.primitives.money import Money
from core.primitives.party import Party, PartyRole

DAY_0 = date(2026, 3, 2)
DEVELOPER = Party(name="Harbour Developments, Bristol, GB", owning_key="dev-key")
CONTRACTOR = Party(name="Stone & Sons, Leeds, GB", owning_key="con-key")


# ══════════════════════════════════════════════════════════════
# TEST HELPERS
# ══════════════════════════════════════════════════════════════

def make_task(reference="T1", amount=80, currency="GBP", start=DAY_0, days=3):
    return Task(
        reference=reference,
        description="Lay foundations",
        amount=Money(amount, currency),
        expected_start_date=start,
        expected_duration=days,
    )


def make_milestone(reference="M1", amount=100, currency="GBP", tasks=()):
    return Milestone(
        reference=reference,
        description="Foundations",
        amount=Money(amount, currency),
        expected_end_date=DAY_0 + timedelta(days=5),
        tasks=tasks,
    )


def make_job(milestones=()):
    return Job(
        developer=DEVELOPER,
        contractor=CONTRACTOR,
        contract_amount=180,
        retention_percentage=5.0,
        allow_payment_on_account=False,
        milestones=milestones,
    )


# ══════════════════════════════════════════════════════════════
# MONEY
# ══════════════════════════════════════════════════════════════

class TestMoney:
    def test_integer_minor_units_only(self):
        with pytest.raises(ConstructionError):
            Money(10.5, "GBP")

    def test_bool_is_not_an_amount(self):
        with pytest.raises(ConstructionError):
            Money(True, "GBP")

    def test_currency_must_be_three_letters(self):
        with pytest.raises(ConstructionError):
            Money(100, "GB")
        with pytest.raises(ConstructionError):
            Money(100, None)

    def test_same_currency_addition(self):
        assert Money(80, "GBP") + Money(20, "GBP") == Money(100, "GBP")

    def test_cross_currency_addition_raises(self):
        with pytest.raises(ValueError, match="Cannot add USD to GBP"):
            Money(80, "GBP") + Money(20, "USD")

    def test_sum_money(self):
        from core.primitives.money import sum_money
        assert sum_money([Money(80, "GBP"), Money(20, "GBP")], "GBP") == Money(100, "GBP")
        assert sum_money([], "GBP") == Money(0, "GBP")

    def test_sum_money_rejects_foreign_currency(self):
        from core.primitives.money import sum_money
        with pytest.raises(ValueError):
            sum_money([Money(80, "GBP"), Money(20, "USD")], "GBP")


# ══════════════════════════════════════════════════════════════
# PARTY
# ══════════════════════════════════════════════════════════════

class TestParty:
    def test_empty_key_rejected(self):
        with pytest.raises(ConstructionError):
            Party(name="Nobody", owning_key="")

    def test_identity_is_the_owning_key(self):
        renamed = Party(name="Stone and Sons", owning_key=CONTRACTOR.owning_key)
        assert renamed == CONTRACTOR
        assert hash(renamed) == hash(CONTRACTOR)
        assert Party(name=CONTRACTOR.name, owning_key="other-key") != CONTRACTOR

    def test_job_resolves_roles(self):
        job = make_job()
        assert job.party_for(PartyRole.DEVELOPER) == DEVELOPER
        assert job.party_for(PartyRole.CONTRACTOR) == CONTRACTOR
        assert job.participants == (DEVELOPER, CONTRACTOR)


# ══════════════════════════════════════════════════════════════
# TASK / MILESTONE
# ══════════════════════════════════════════════════════════════

class TestTask:
    def test_expected_end_date_adds_duration(self):
        task = make_task(start=DAY_0, days=3)
        assert task.expected_end_date == DAY_0 + timedelta(days=3)

    def test_defaults_to_not_started(self):
        assert make_task().status == TaskStatus.NOT_STARTED

    def test_negative_duration_rejected(self):
        with pytest.raises(ConstructionError):
            make_task(days=-1)

    def test_documents_normalised_to_tuple(self):
        task = replace(make_task(), documents_required=["abc123"])
        assert task.documents_required == ("abc123",)

    def test_with_status_keeps_other_fields(self):
        task = make_task()
        started = task.with_status(TaskStatus.STARTED)
        assert started.status == TaskStatus.STARTED
        assert replace(started, status=TaskStatus.NOT_STARTED) == task


class TestMilestone:
    def test_tasks_normalised_to_tuple(self):
        milestone = make_milestone(tasks=[make_task()])
        assert isinstance(milestone.tasks, tuple)
        assert milestone.has_tasks

    def test_rejects_non_task_entries(self):
        with pytest.raises(ConstructionError):
            make_milestone(tasks=("not a task",))

    def test_replace_task(self):
        milestone = make_milestone(tasks=(make_task("T1"), make_task("T2")))
        started = milestone.tasks[1].with_status(TaskStatus.STARTED)
        updated = milestone.replace_task(1, started)
        assert updated.tasks == (milestone.tasks[0], started)
        assert milestone.tasks[1].status == TaskStatus.NOT_STARTED

    def test_replace_task_out_of_range(self):
        with pytest.raises(IndexError):
            make_milestone(tasks=(make_task(),)).replace_task(1, make_task())


# ══════════════════════════════════════════════════════════════
# JOB
# ══════════════════════════════════════════════════════════════

class TestJob:
    def test_job_without_milestones_is_constructible(self):
        job = make_job()
        assert job.milestones == ()
        assert job.currency is None

    def test_mixed_milestone_currencies_rejected(self):
        with pytest.raises(ConstructionError, match="same currency"):
            make_job(milestones=(
                make_milestone("M1", currency="GBP"),
                make_milestone("M2", currency="USD"),
            ))

    def test_currency_of_milestones(self):
        job = make_job(milestones=(make_milestone("M1"), make_milestone("M2")))
        assert job.currency == "GBP"

    def test_running_totals_must_be_minor_units(self):
        with pytest.raises(ConstructionError):
            replace(make_job(), retention_amount=1.5)

    def test_payment_on_account_flag_must_be_bool(self):
        with pytest.raises(ConstructionError):
            replace(make_job(), allow_payment_on_account="yes")

    def test_linear_id_assigned_and_stable(self):
        job = make_job(milestones=(make_milestone(),))
        assert isinstance(job.linear_id, uuid.UUID)
        started = job.replace_milestone(
            0, job.milestones[0].with_status(MilestoneStatus.STARTED),
        )
        assert started.linear_id == job.linear_id

    def test_replace_milestone_out_of_range(self):
        with pytest.raises(IndexError):
            make_job().replace_milestone(0, make_milestone())

    def test_snapshots_are_hashable(self):
        job = make_job(milestones=(make_milestone(tasks=(make_task(),)),))
        assert hash(job) == hash(replace(job))

    def test_dict_round_trip(self):
        milestone = replace(
            make_milestone(tasks=(make_task(),)),
            payment_on_account=Money(10, "GBP"),
            documents_required=("a1b2",),
        )
        job = make_job(milestones=(milestone,))
        assert Job.from_dict(job.to_dict()) == job

    @settings(max_examples=50, derandomize=True, deadline=None)
    @given(currencies=st.lists(st.sampled_from(("GBP", "USD", "EUR")), max_size=5))
    def test_construction_fails_iff_currencies_mixed(self, currencies):
        milestones = tuple(
            make_milestone(f"M{i}", currency=c) for i, c in enumerate(currencies)
        )
        if len(set(currencies)) > 1:
            with pytest.raises(ConstructionError):
                make_job(milestones=milestones)
        else:
            assert make_job(milestones=milestones).milestones == milestones


# ══════════════════════════════════════════════════════════════
# DOCUMENT / CASH
# ══════════════════════════════════════════════════════════════

class TestDocumentRecord:
    def test_issuer_is_only_participant(self):
        from core.primitives.document import DocumentRecord, DocumentType
        record = DocumentRecord(
            name="Site survey",
            description="Ground conditions at plot 4",
            document_type=DocumentType.SURVEY,
            issuer=DEVELOPER,
        )
        assert record.participants == (DEVELOPER,)
        assert DocumentRecord.from_dict(record.to_dict()) == record

    def test_document_type_must_be_enum(self):
        from core.primitives.document import DocumentRecord
        with pytest.raises(ConstructionError):
            DocumentRecord(
                name="Site survey",
                description="",
                document_type="SURVEY",
                issuer=DEVELOPER,
            )


class TestCashState:
    def test_cash_total(self):
        from core.primitives.cash import CashState, cash_total
        states = [
            CashState(amount=Money(50, "GBP"), owner=CONTRACTOR),
            CashState(amount=Money(20, "GBP"), owner=DEVELOPER),
        ]
        assert cash_total(states, "GBP") == Money(70, "GBP")
        assert cash_total([], "GBP") == Money(0, "GBP")

    def test_cash_total_mixed_currencies_raise(self):
        from core.primitives.cash import CashState, cash_total
        states = [
            CashState(amount=Money(50, "GBP"), owner=CONTRACTOR),
            CashState(amount=Money(20, "USD"), owner=DEVELOPER),
        ]
        with pytest.raises(ValueError):
            cash_total(states, "GBP")

    def test_owner_must_be_party(self):
        from core.primitives.cash import CashState
        with pytest.raises(ConstructionError):
            CashState(amount=Money(50, "GBP"), owner="con-key")


# ══════════════════════════════════════════════════════════════
# STRUCTURAL DIFF
# ══════════════════════════════════════════════════════════════

class TestStructuralDiff:
    def test_changed_fields_in_declaration_order(self):
        from core.primitives.structural import changed_fields
        task = make_task()
        other = replace(task, remarks="late", status=TaskStatus.STARTED)
        assert changed_fields(task, other) == ("remarks", "status")
        assert changed_fields(task, task) == ()

    def test_unchanged_except(self):
        from core.primitives.structural import unchanged_except
        task = make_task()
        started = task.with_status(TaskStatus.STARTED)
        assert unchanged_except(task, started, "status")
        assert not unchanged_except(task, replace(started, remarks="x"), "status")

    def test_diff_requires_same_dataclass(self):
        from core.primitives.structural import changed_fields
        with pytest.raises(TypeError):
            changed_fields(make_task(), make_milestone())
        with pytest.raises(TypeError):
            changed_fields({"a": 1}, {"a": 2})

    def test_changed_positions_skips_addressed(self):
        from core.primitives.structural import changed_positions
        assert changed_positions((1, 2, 3), (9, 2, 3), addressed=0) == ()
        assert changed_positions((1, 2, 3), (9, 2, 4), addressed=0) == (2,)

    def test_changed_positions_counts_length_change(self):
        from core.primitives.structural import changed_positions
        assert changed_positions((1, 2), (1, 2, 3), addressed=0) == (2,)
        assert changed_positions((1, 2, 3), (1, 2), addressed=1) == (2,)
