"""
Pipeline lifecycle events.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..document.enums import DocumentState
from ..document.primitives import generate_id, utc_now

if TYPE_CHECKING:
    from ..document.work_item import PublishingDocument


class EventType(str, Enum):
    """Types of pipeline events."""

    PIPELINE_STARTED = "pipeline_started"
    PHASE_STARTED = "phase_started"
    PHASE_COMPLETED = "phase_completed"
    APPROVAL_REQUESTED = "approval_requested"
    APPROVAL_RECEIVED = "approval_received"
    REVISION_STARTED = "revision_started"
    PIPELINE_COMPLETED = "pipeline_completed"
    PIPELINE_FAILED = "pipeline_failed"
    WARNING = "warning"


class PipelineEvent(BaseModel):
    """A point-in-time record of something that happened during a run."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    id: str = Field(default_factory=generate_id)
    type: EventType
    document_id: str
    topic: str
    previous_state: Optional[DocumentState] = None
    current_state: DocumentState
    message: str
    timestamp: datetime = Field(default_factory=utc_now)

    @classmethod
    def for_document(
        cls,
        event_type: EventType,
        document: "PublishingDocument",
        message: str,
        previous_state: Optional[DocumentState] = None,
        current_state: Optional[DocumentState] = None,
    ) -> "PipelineEvent":
        return cls(
            type=event_type,
            document_id=document.id,
            topic=document.topic_brief.topic,
            previous_state=previous_state,
            current_state=current_state or document.state,
            message=message,
        )
