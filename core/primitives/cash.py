"""
JobLedger Cash Primitive: Read-Only View of Cash Movements
============================================================
Engine: Core Primitives

The cash-asset contract that governs how monetary tokens move is
an external collaborator. The job engine only READS the cash
states a payment transition consumes and produces, plus the
collaborator's move declaration. Nothing here mutates cash.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from core.primitives.exceptions import ConstructionError
from core.primitives.money import Money, sum_money
from core.primitives.party import Party


@dataclass(frozen=True)
class CashState:
    """An amount of cash owned by a party."""
    amount: Money
    owner: Party

    def __post_init__(self):
        if not isinstance(self.amount, Money):
            raise ConstructionError("amount must be Money.")
        if not isinstance(self.owner, Party):
            raise ConstructionError("owner must be Party.")

    def to_dict(self) -> dict:
        return {"amount": self.amount.to_dict(), "owner": self.owner.to_dict()}


@dataclass(frozen=True)
class CashMove:
    """The cash collaborator's declaration that cash changes owner."""
    command_type = "cash.asset.move.request"


def cash_total(states: Iterable[CashState], currency: str) -> Money:
    """Total value of `states` in `currency`; mixed currencies raise ValueError."""
    return sum_money((state.amount for state in states), currency)
