"""
JobLedger Core Config: Configurable Signer Rules
==================================================
Doctrine: Who must assent to a transition is data, not code.

Each intent's required signers are declared as a SignerRule and
served by a ConfigStore. Engines ship their default rules and
accept a store to override them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Protocol, Tuple

from core.primitives.party import PartyRole

logger = logging.getLogger("jobledger.config")


# ══════════════════════════════════════════════════════════════
# SIGNER RULE
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class SignerRule:
    """
    Required signers for one command type.

    roles are resolved against the job snapshot at validation
    time (e.g. DEVELOPER → job.developer.owning_key).
    """

    command_type: str
    roles: Tuple[PartyRole, ...]

    def __post_init__(self) -> None:
        if not self.command_type or not isinstance(self.command_type, str):
            raise ValueError("command_type must be a non-empty string.")
        roles = tuple(self.roles)
        for role in roles:
            if not isinstance(role, PartyRole):
                raise ValueError(
                    f"roles must contain PartyRole, got {type(role).__name__}."
                )
        if len(set(roles)) != len(roles):
            raise ValueError("roles must not repeat.")
        object.__setattr__(self, "roles", roles)

    def describe(self) -> str:
        """Human-readable clause, e.g. 'The developer should be a required signer.'"""
        names = [role.value.lower() for role in self.roles]
        if len(names) == 1:
            return f"The {names[0]} should be a required signer."
        return f"The {' and '.join(names)} should be required signers."


# ══════════════════════════════════════════════════════════════
# CONFIG STORE PROTOCOL
# ══════════════════════════════════════════════════════════════

class ConfigStore(Protocol):
    """
    Protocol for signer rule storage.

    Implementations may back this with a database, file, or in-memory store.
    """

    def get_signer_rule(self, command_type: str) -> Optional[SignerRule]:
        """Fetch the signer rule for a command type."""
        ...  # pragma: no cover


# ══════════════════════════════════════════════════════════════
# IN-MEMORY CONFIG STORE (defaults / testing)
# ══════════════════════════════════════════════════════════════

class InMemoryConfigStore:
    """Simple in-memory config store for defaults and testing."""

    def __init__(self, rules: Iterable[SignerRule] = ()) -> None:
        self._signer_rules: Dict[str, SignerRule] = {}
        for rule in rules:
            self.add_signer_rule(rule)

    def add_signer_rule(self, rule: SignerRule) -> None:
        """Register a rule; a later rule for the same command type wins."""
        if rule.command_type in self._signer_rules:
            logger.info(f"Signer rule overridden: {rule.command_type}")
        self._signer_rules[rule.command_type] = rule
        logger.debug(
            f"Signer rule registered: {rule.command_type} "
            f"roles={[r.value for r in rule.roles]}"
        )

    def get_signer_rule(self, command_type: str) -> Optional[SignerRule]:
        return self._signer_rules.get(command_type)
