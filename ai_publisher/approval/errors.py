"""
Approval errors.
"""

from __future__ import annotations

from typing import Optional

from ..document.enums import DocumentState


class ApprovalRejectedError(Exception):
    """
    Raised when a decision maker rejects the document at a checkpoint.

    Attributes:
        state: State the document was in when the checkpoint was evaluated
        approver: Who rejected it
        reason: Stated reason, if any
    """

    def __init__(self, state: DocumentState, approver: str, reason: Optional[str]):
        self.state = state
        self.approver = approver
        self.reason = reason
        super().__init__(
            f"Approval rejected at {state.name} by {approver}: {reason or 'no reason given'}"
        )

    def to_dict(self) -> dict:
        """Convert to dict for JSON serialization."""
        return {
            "error": "approval_rejected",
            "state": self.state.value,
            "approver": self.approver,
            "reason": self.reason,
        }


class ApprovalTimeoutError(Exception):
    """Raised when a decision maker gives up waiting for a decision."""

    def __init__(self, state: DocumentState, timeout_seconds: float):
        self.state = state
        self.timeout_seconds = timeout_seconds
        super().__init__(
            f"No approval decision at {state.name} within {timeout_seconds:g}s"
        )
