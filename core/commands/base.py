"""
JobLedger Command Layer: Transition Contract
==============================================
Every change to a job begins as a proposed Transition.

A Transition is a frozen declaration of intent plus the snapshots
it consumes and produces. It carries intent, states and signers,
nothing else.

Rules:
- Immutable once created (frozen dataclass)
- No business logic inside
- No I/O
- intent.command_type must end with '.request'
- command_type follows engine.domain.action.request format

Inputs and outputs may mix state kinds (jobs, documents, cash);
each validator picks the kinds it governs by type, so one
transition can be checked by several validators.

A Transition is NOT a ledger entry. It is intent awaiting judgment.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, FrozenSet, Tuple, Type, TypeVar

T = TypeVar("T")


# ══════════════════════════════════════════════════════════════
# COMMAND TYPE LAW
# ══════════════════════════════════════════════════════════════

def command_type_of(intent: Any) -> str:
    """
    Read and check the command_type declared by an intent.

    jobs.milestone.pay.request → ok
    jobs.pay                   → ValueError
    """
    command_type = getattr(intent, "command_type", None)
    if not command_type or not isinstance(command_type, str):
        raise ValueError(
            f"{type(intent).__name__} does not declare a command_type."
        )

    if not command_type.endswith(".request"):
        raise ValueError(
            f"command_type '{command_type}' must end with "
            f"'.request' (e.g. 'jobs.milestone.pay.request')."
        )

    if len(command_type.split(".")) < 4:
        raise ValueError(
            f"command_type '{command_type}' must follow "
            f"engine.domain.action.request format (minimum 4 segments)."
        )

    return command_type


# ══════════════════════════════════════════════════════════════
# TRANSITION
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Transition:
    """
    Proposed state change presented to a validator.

    Fields:
        intent:    The declared intent (one of the engine intents).
        inputs:    States consumed (before snapshots).
        outputs:   States produced (after snapshots).
        signers:   Owning keys asserting the transition.
        commands:  Other collaborators' declarations carried alongside
                   (e.g. the cash collaborator's move).

    Example:
        Transition(
            intent=PayMilestone(milestone_index=0),
            inputs=(job, developer_cash),
            outputs=(paid_job, contractor_cash),
            signers=frozenset({developer.owning_key}),
            commands=(CashMove(),),
        )
    """

    intent: Any
    inputs: Tuple[Any, ...] = ()
    outputs: Tuple[Any, ...] = ()
    signers: FrozenSet[str] = field(default_factory=frozenset)
    commands: Tuple[Any, ...] = ()

    def __post_init__(self):
        command_type_of(self.intent)

        if isinstance(self.signers, str):
            raise TypeError("signers must be a collection of keys, not a str.")

        object.__setattr__(self, "inputs", tuple(self.inputs))
        object.__setattr__(self, "outputs", tuple(self.outputs))
        object.__setattr__(self, "signers", frozenset(self.signers))
        object.__setattr__(self, "commands", tuple(self.commands))

    @property
    def command_type(self) -> str:
        return command_type_of(self.intent)

    def inputs_of_type(self, kind: Type[T]) -> Tuple[T, ...]:
        return tuple(s for s in self.inputs if isinstance(s, kind))

    def outputs_of_type(self, kind: Type[T]) -> Tuple[T, ...]:
        return tuple(s for s in self.outputs if isinstance(s, kind))

    def commands_of_type(self, kind: Type[T]) -> Tuple[T, ...]:
        return tuple(c for c in self.commands if isinstance(c, kind))

    def signed_by(self, owning_key: str) -> bool:
        return owning_key in self.signers
