"""
JobLedger Party Primitive: Contract Participants
==================================================
Engine: Core Primitives

A Party is an identity taking part in a works contract: the
developer who commissions the job, the contractor who carries it
out, or the issuer of a registered document.

The identity layer is external. A Party only carries the
owning_key that a transition's signer set is checked against;
signature validity is never verified here.

This file contains NO persistence logic.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from core.primitives.exceptions import ConstructionError


# ══════════════════════════════════════════════════════════════
# ENUMS
# ══════════════════════════════════════════════════════════════

class PartyRole(Enum):
    """Role a party plays on a job. Used by signer rules."""
    DEVELOPER = "DEVELOPER"
    CONTRACTOR = "CONTRACTOR"


# ══════════════════════════════════════════════════════════════
# PARTY
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Party:
    """
    Identity reference for a contract participant.

    Two parties are the same party iff they share an owning_key;
    the display name does not take part in equality or hashing.

    Fields:
        name:        Display name (e.g. "John Doe, City, GB")
        owning_key:  Key identifier asserted by the signer set
    """
    name: str = field(compare=False)
    owning_key: str

    def __post_init__(self):
        if not self.name or not isinstance(self.name, str):
            raise ConstructionError("name must be non-empty string.")
        if not self.owning_key or not isinstance(self.owning_key, str):
            raise ConstructionError("owning_key must be non-empty string.")

    def to_dict(self) -> dict:
        return {"name": self.name, "owning_key": self.owning_key}

    @classmethod
    def from_dict(cls, data: dict) -> Party:
        return cls(name=data["name"], owning_key=data["owning_key"])
