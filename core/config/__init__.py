"""
JobLedger Core Config: Public API
===================================
Configurable transition rules (required signers per intent).
Doctrine: No hardcoded signer lists in validator logic.
"""

from core.config.rules import (
    ConfigStore,
    InMemoryConfigStore,
    SignerRule,
)

__all__ = [
    "SignerRule",
    "ConfigStore",
    "InMemoryConfigStore",
]
