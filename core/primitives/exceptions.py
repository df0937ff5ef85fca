"""
JobLedger Core Primitives: Exceptions
=======================================
Construction-time failures of entity snapshots.

A snapshot that breaks an entity invariant (e.g. a job whose
milestones mix currencies) cannot exist at all. This is distinct
from a transition rejection, which flows through RejectionReason.
"""

from __future__ import annotations


class ConstructionError(ValueError):
    """An entity snapshot violates one of its construction invariants."""
    pass
