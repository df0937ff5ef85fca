"""
JobLedger Document Engine: Policies
=====================================
Validation policies for document registration.
"""

from __future__ import annotations

from typing import Optional

from core.commands.base import Transition
from core.commands.rejection import ReasonCode, RejectionReason
from core.primitives.document import DocumentRecord
from core.primitives.job import Job


def no_job_inputs_policy(transition: Transition) -> Optional[RejectionReason]:
    """A document is registered fresh; no job snapshot may be consumed."""
    if transition.inputs_of_type(Job):
        return RejectionReason(
            code=ReasonCode.DOCUMENT_INPUTS_CONSUMED,
            message="There should be no input states consumed.",
            policy_name="no_job_inputs_policy",
        )
    return None


def one_document_output_policy(
    transition: Transition,
) -> Optional[RejectionReason]:
    if len(transition.outputs_of_type(DocumentRecord)) != 1:
        return RejectionReason(
            code=ReasonCode.DOCUMENT_OUTPUT_COUNT,
            message="There should be one output state.",
            policy_name="one_document_output_policy",
        )
    return None
