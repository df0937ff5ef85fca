"""
JobLedger Money Primitive: Currency Amounts
=============================================
Engine: Core Primitives

Every monetary value in a job (milestone amount, task amount,
cash state) is carried as Money.

RULES (NON-NEGOTIABLE):
- Amounts are integer minor units (pence/cents), never floats
- Every amount names its ISO 4217 currency
- Adding amounts of different currencies raises ValueError

This file contains NO persistence logic.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from core.primitives.exceptions import ConstructionError


@dataclass(frozen=True)
class Money:
    """
    Monetary value in integer minor units.

    Money(1050, "GBP") is 10.50 GBP.
    """
    amount: int
    currency: str

    def __post_init__(self):
        if isinstance(self.amount, bool) or not isinstance(self.amount, int):
            raise ConstructionError(
                f"amount must be int minor units, "
                f"got {type(self.amount).__name__}."
            )
        if (
            not isinstance(self.currency, str)
            or len(self.currency) != 3
            or not self.currency.isalpha()
        ):
            raise ConstructionError(
                f"currency must be a 3-letter ISO 4217 code, "
                f"got {self.currency!r}."
            )

    def __add__(self, other: Money) -> Money:
        if not isinstance(other, Money):
            return NotImplemented
        if other.currency != self.currency:
            raise ValueError(
                f"Cannot add {other.currency} to {self.currency}."
            )
        return Money(self.amount + other.amount, self.currency)

    def to_dict(self) -> dict:
        return {"amount": self.amount, "currency": self.currency}

    @classmethod
    def from_dict(cls, data: dict) -> Money:
        return cls(amount=data["amount"], currency=data["currency"])


def sum_money(values: Iterable[Money], currency: str) -> Money:
    """Total of `values`, zero in `currency` when empty."""
    total = Money(0, currency)
    for value in values:
        total = total + value
    return total
