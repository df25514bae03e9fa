"""
Approval checkpoints for the publishing pipeline.

Components:
    - decision: Checkpoint names, requests and decisions
    - callbacks: Decision makers (auto-approve, console)
    - service: ApprovalService, the gate the pipeline consults between phases
"""

from .callbacks import (
    ApprovalCallback,
    AutoApprovalCallback,
    ConsoleApprovalCallback,
    get_approval_callback,
)
from .decision import (
    NOT_REQUIRED_APPROVER,
    ApprovalDecision,
    ApprovalRequest,
    Checkpoint,
    Decision,
)
from .errors import ApprovalRejectedError, ApprovalTimeoutError
from .service import ApprovalService

__all__ = [
    # Decisions
    "ApprovalDecision",
    "ApprovalRequest",
    "Checkpoint",
    "Decision",
    "NOT_REQUIRED_APPROVER",
    # Decision makers
    "ApprovalCallback",
    "AutoApprovalCallback",
    "ConsoleApprovalCallback",
    "get_approval_callback",
    # Service
    "ApprovalService",
    "ApprovalRejectedError",
    "ApprovalTimeoutError",
]
