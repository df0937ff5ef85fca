"""
JobLedger Document Engine: Validation Service
===============================================
Decides whether a document registration is legal.
"""

from __future__ import annotations

from typing import Optional

from core.commands.base import Transition
from core.commands.dispatcher import TransitionDispatcher, run_policies
from core.commands.outcomes import ValidationOutcome
from core.commands.rejection import RejectionReason
from engines.document.commands import AddDocument
from engines.document.policies import (
    no_job_inputs_policy,
    one_document_output_policy,
)

ADD_DOCUMENT_POLICIES = (
    no_job_inputs_policy,
    one_document_output_policy,
)


def _add_document_handler(transition: Transition) -> Optional[RejectionReason]:
    return run_policies(transition, ADD_DOCUMENT_POLICIES)


class DocumentValidator:
    """
    Document transition validator.

    Usage:
        outcome = DocumentValidator().validate(Transition(
            intent=AddDocument(),
            outputs=(record,),
            signers={issuer.owning_key},
        ))
    """

    def __init__(self):
        self._dispatcher = TransitionDispatcher(name="documents")
        self._dispatcher.register(AddDocument, _add_document_handler)

    def validate(self, transition: Transition) -> ValidationOutcome:
        return self._dispatcher.dispatch(transition)

    def verify(self, transition: Transition) -> None:
        self._dispatcher.verify(transition)

    def handles(self, intent) -> bool:
        return self._dispatcher.handles(intent)
