"""
JobLedger Document Engine: Intents
====================================
Registering a supporting document is the only document intent.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

DOCUMENT_ADD_REQUEST = "documents.record.add.request"


@dataclass(frozen=True)
class AddDocument:
    """Register one new DocumentRecord."""
    command_type: ClassVar[str] = DOCUMENT_ADD_REQUEST
