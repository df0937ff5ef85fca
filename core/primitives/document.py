"""
JobLedger Document Primitive: Registered Document Record
==========================================================
Engine: Core Primitives

A DocumentRecord registers a supporting document (e.g. a site
survey) against its issuer. Milestones and tasks refer to
documents by hash through documents_required.

RULES (NON-NEGOTIABLE):
- Document records are immutable once registered
- A record is created fresh; it never consumes prior job state

This file contains NO persistence logic.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Tuple

from core.primitives.exceptions import ConstructionError
from core.primitives.party import Party


# ══════════════════════════════════════════════════════════════
# ENUMS
# ══════════════════════════════════════════════════════════════

class DocumentType(Enum):
    """Classification of registered documents."""
    SURVEY = "SURVEY"


# ══════════════════════════════════════════════════════════════
# DOCUMENT RECORD
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class DocumentRecord:
    """
    Registered document owned by its issuer.

    Fields:
        name:           Document name
        description:    What the document covers
        document_type:  DocumentType
        issuer:         Party registering the document
        linear_id:      Identity across snapshots
    """
    name: str
    description: str
    document_type: DocumentType
    issuer: Party
    linear_id: uuid.UUID = field(default_factory=uuid.uuid4)

    def __post_init__(self):
        if not self.name or not isinstance(self.name, str):
            raise ConstructionError("name must be non-empty string.")
        if not isinstance(self.description, str):
            raise ConstructionError("description must be a string.")
        if not isinstance(self.document_type, DocumentType):
            raise ConstructionError("document_type must be DocumentType enum.")
        if not isinstance(self.issuer, Party):
            raise ConstructionError("issuer must be Party.")
        if not isinstance(self.linear_id, uuid.UUID):
            raise ConstructionError("linear_id must be UUID.")

    @property
    def participants(self) -> Tuple[Party, ...]:
        return (self.issuer,)

    def to_dict(self) -> dict:
        return {
            "linear_id": str(self.linear_id),
            "name": self.name,
            "description": self.description,
            "document_type": self.document_type.value,
            "issuer": self.issuer.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> DocumentRecord:
        return cls(
            name=data["name"],
            description=data["description"],
            document_type=DocumentType(data["document_type"]),
            issuer=Party.from_dict(data["issuer"]),
            linear_id=uuid.UUID(data["linear_id"]),
        )
