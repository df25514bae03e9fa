"""
Approval service - evaluates checkpoints for a document.

Checkpoints are keyed by the state the document is in when a phase
completes. A checkpoint that is not enabled in ApprovalSettings passes
without consulting the decision maker.
"""

from __future__ import annotations

import logging
from typing import Optional

from ..config import ApprovalSettings
from ..document.enums import DocumentState
from ..document.work_item import PublishingDocument
from .callbacks import ApprovalCallback, AutoApprovalCallback
from .decision import ApprovalDecision, ApprovalRequest, Checkpoint
from .errors import ApprovalRejectedError

logger = logging.getLogger(__name__)


class ApprovalService:
    """The approval gate consulted by the pipeline between phases."""

    def __init__(
        self,
        approval_settings: Optional[ApprovalSettings] = None,
        callback: Optional[ApprovalCallback] = None,
    ):
        self.approval_settings = approval_settings or ApprovalSettings()
        self.callback = callback or AutoApprovalCallback()

    def is_required(self, state: DocumentState) -> bool:
        """Whether the checkpoint for ``state`` needs an explicit decision."""
        checkpoint = Checkpoint.for_state(state)
        if checkpoint is None:
            return False
        return bool(getattr(self.approval_settings, checkpoint.value))

    def decide(self, document: PublishingDocument) -> ApprovalDecision:
        """Get a decision for the document's current checkpoint.

        Returns an automatic approval attributed to "not-required" when the
        checkpoint is disabled; otherwise blocks on the decision maker.
        """
        state = document.state
        if not self.is_required(state):
            return ApprovalDecision.not_required()

        request = ApprovalRequest.create(document, state)
        logger.info(
            f"Requesting approval {request.id} for {document.page_name} "
            f"at {state.name}"
        )
        decision = self.callback.request_approval(request)
        logger.info(
            f"Approval {request.id}: {decision.decision.value} by {decision.approver}"
        )
        return decision

    def check_and_approve(self, document: PublishingDocument) -> bool:
        """Evaluate the current checkpoint.

        Returns:
            True if approved, False if changes were requested

        Raises:
            ApprovalRejectedError: If the decision maker rejected the document
        """
        decision = self.decide(document)
        if decision.is_rejected:
            raise ApprovalRejectedError(
                document.state, decision.approver, decision.feedback
            )
        return decision.is_approved
