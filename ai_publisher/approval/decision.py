"""
Approval checkpoint schemas.

A Checkpoint is a named point in the pipeline where an external decision may
halt or pass the run. An ApprovalRequest is sent to a decision maker, which
answers with an ApprovalDecision.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..document.enums import DocumentState
from ..document.primitives import generate_id, utc_now

if TYPE_CHECKING:
    from ..document.work_item import PublishingDocument


class Checkpoint(str, Enum):
    """Named approval checkpoints."""

    AFTER_RESEARCH = "after_research"
    AFTER_DRAFT = "after_draft"
    AFTER_FACTCHECK = "after_factcheck"
    BEFORE_PUBLISH = "before_publish"

    @classmethod
    def for_state(cls, state: DocumentState) -> Optional["Checkpoint"]:
        """Checkpoint evaluated when a phase in ``state`` completes, if any."""
        return _CHECKPOINTS_BY_STATE.get(state)


_CHECKPOINTS_BY_STATE: Dict[DocumentState, Checkpoint] = {
    DocumentState.RESEARCHING: Checkpoint.AFTER_RESEARCH,
    DocumentState.DRAFTING: Checkpoint.AFTER_DRAFT,
    DocumentState.FACT_CHECKING: Checkpoint.AFTER_FACTCHECK,
    DocumentState.EDITING: Checkpoint.BEFORE_PUBLISH,
}


class Decision(str, Enum):
    """The possible answers to an approval request."""

    APPROVE = "approve"
    REJECT = "reject"
    REQUEST_CHANGES = "request_changes"


NOT_REQUIRED_APPROVER = "not-required"


class ApprovalDecision(BaseModel):
    """A decision maker's answer to an approval request."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    request_id: Optional[str] = Field(
        None, description="Request this decision answers; None when no request was made"
    )
    decision: Decision
    feedback: Optional[str] = Field(
        None, description="Rejection reason or requested changes"
    )
    approver: str = Field(..., min_length=1, description="Who made the decision")
    decided_at: datetime = Field(default_factory=utc_now)

    @classmethod
    def approve(cls, request_id: Optional[str], approver: str) -> "ApprovalDecision":
        return cls(request_id=request_id, decision=Decision.APPROVE, approver=approver)

    @classmethod
    def reject(
        cls, request_id: Optional[str], approver: str, reason: Optional[str]
    ) -> "ApprovalDecision":
        return cls(
            request_id=request_id,
            decision=Decision.REJECT,
            feedback=reason,
            approver=approver,
        )

    @classmethod
    def request_changes(
        cls, request_id: Optional[str], approver: str, feedback: Optional[str]
    ) -> "ApprovalDecision":
        return cls(
            request_id=request_id,
            decision=Decision.REQUEST_CHANGES,
            feedback=feedback,
            approver=approver,
        )

    @classmethod
    def not_required(cls) -> "ApprovalDecision":
        """Automatic approval for checkpoints that need no decision."""
        return cls.approve(None, NOT_REQUIRED_APPROVER)

    @property
    def is_approved(self) -> bool:
        return self.decision is Decision.APPROVE

    @property
    def is_rejected(self) -> bool:
        return self.decision is Decision.REJECT

    @property
    def changes_requested(self) -> bool:
        return self.decision is Decision.REQUEST_CHANGES


@dataclass(frozen=True)
class ApprovalRequest:
    """A request for a decision at a pipeline checkpoint."""

    document: "PublishingDocument"
    at_state: DocumentState
    checkpoint: Optional[Checkpoint]
    summary: str
    id: str = field(default_factory=generate_id)
    requested_at: datetime = field(default_factory=utc_now)

    @classmethod
    def create(
        cls, document: "PublishingDocument", at_state: DocumentState
    ) -> "ApprovalRequest":
        return cls(
            document=document,
            at_state=at_state,
            checkpoint=Checkpoint.for_state(at_state),
            summary=summarize(document, at_state),
        )


def summarize(document: "PublishingDocument", state: DocumentState) -> str:
    """One-line description of what is being approved."""
    topic = document.topic_brief.topic

    if state is DocumentState.RESEARCHING:
        facts = document.research_brief.fact_count if document.research_brief else 0
        return f"Research complete for '{topic}': {facts} key facts gathered"

    if state is DocumentState.DRAFTING:
        words = document.draft.word_count() if document.draft else 0
        return f"Draft ready for '{topic}': ~{words} words"

    if state is DocumentState.FACT_CHECKING:
        report = document.fact_check_report
        confidence = report.overall_confidence.value if report else "N/A"
        action = report.recommended_action.value if report else "N/A"
        return f"Fact check complete for '{topic}': {confidence} confidence, {action}"

    if state is DocumentState.EDITING:
        score = document.final_article.quality_score if document.final_article else 0.0
        return f"Ready to publish '{topic}': quality score {score:.2f}"

    return f"Approval required for {topic}"
