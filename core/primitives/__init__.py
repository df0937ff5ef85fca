"""
JobLedger Core Primitives: Contract Building Blocks
=====================================================
Immutable snapshots the validators judge.

Primitives are:

- Pure Python (no framework dependency)
- Immutable (frozen dataclasses, tuple sequences)
- Deterministic (same input → same output)
- Validated at construction (ConstructionError)

Primitives:
    money: Currency amounts in integer minor units
    party: Developer / contractor / issuer identities
    job: Job, Milestone, Task snapshots and status enums
    document: Registered document records
    cash: Read-only view of the cash collaborator's states
    structural: Generic dataclass diff for frame conditions
"""
