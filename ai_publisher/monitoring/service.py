"""
Pipeline monitoring - fans lifecycle events out to listeners and keeps metrics.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from datetime import timedelta
from typing import TYPE_CHECKING, Iterable, List, Optional

from ..document.enums import DocumentState
from .events import EventType, PipelineEvent
from .metrics import PipelineMetrics

if TYPE_CHECKING:
    from ..document.work_item import PublishingDocument

logger = logging.getLogger(__name__)


class PipelineEventListener(ABC):
    """Receives every event emitted during pipeline runs."""

    @abstractmethod
    def on_event(self, event: PipelineEvent) -> None:
        pass


class LoggingEventListener(PipelineEventListener):
    """Writes each event to the log at a level derived from its type."""

    def __init__(self, event_logger: Optional[logging.Logger] = None):
        self.logger = event_logger or logging.getLogger(f"{__name__}.events")

    def on_event(self, event: PipelineEvent) -> None:
        if event.type is EventType.PIPELINE_FAILED:
            self.logger.error(f"[{event.type.name}] {event.message}")
        elif event.type is EventType.WARNING:
            self.logger.warning(f"[{event.topic}] {event.message}")
        elif event.type in (EventType.PHASE_STARTED, EventType.PHASE_COMPLETED):
            self.logger.info(f"[{event.type.name}] {event.topic} - {event.message}")
        elif event.type in (EventType.APPROVAL_REQUESTED, EventType.APPROVAL_RECEIVED):
            self.logger.info(
                f"[{event.type.name}] {event.topic} at {event.current_state.name}"
            )
        else:
            self.logger.info(f"[{event.type.name}] {event.message}")


class PipelineMonitoringService:
    """Emits pipeline events and records metrics.

    A listener that raises is logged and skipped; it never interrupts a run.
    """

    def __init__(self, listeners: Optional[Iterable[PipelineEventListener]] = None):
        self._listeners: List[PipelineEventListener] = list(listeners or [])
        self.metrics = PipelineMetrics()

    def add_listener(self, listener: PipelineEventListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: PipelineEventListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def emit(self, event: PipelineEvent) -> None:
        for listener in list(self._listeners):
            try:
                listener.on_event(event)
            except Exception as e:
                logger.exception(
                    f"Listener {type(listener).__name__} failed on {event.type.value}: {e}"
                )

    # Lifecycle

    def pipeline_started(self, document: "PublishingDocument") -> None:
        self.metrics.record_pipeline_started()
        self.emit(
            PipelineEvent.for_document(
                EventType.PIPELINE_STARTED,
                document,
                f"Pipeline started for: {document.topic_brief.topic}",
            )
        )

    def phase_started(
        self,
        document: "PublishingDocument",
        previous_state: DocumentState,
        new_state: DocumentState,
    ) -> None:
        self.emit(
            PipelineEvent.for_document(
                EventType.PHASE_STARTED,
                document,
                f"Phase started: {new_state.name}",
                previous_state=previous_state,
                current_state=new_state,
            )
        )

    def phase_completed(
        self, document: "PublishingDocument", state: DocumentState, summary: str
    ) -> None:
        self.emit(
            PipelineEvent.for_document(
                EventType.PHASE_COMPLETED,
                document,
                summary,
                previous_state=state,
                current_state=state,
            )
        )

    def approval_requested(
        self, document: "PublishingDocument", at_state: DocumentState
    ) -> None:
        self.metrics.record_approval_requested()
        self.emit(
            PipelineEvent.for_document(
                EventType.APPROVAL_REQUESTED,
                document,
                f"Approval requested at: {at_state.name}",
                previous_state=at_state,
                current_state=at_state,
            )
        )

    def approval_received(
        self, document: "PublishingDocument", at_state: DocumentState, approved: bool
    ) -> None:
        if approved:
            self.metrics.record_approval_granted()
            message = f"Approved at: {at_state.name}"
        else:
            self.metrics.record_approval_rejected()
            message = f"Not approved at: {at_state.name}"
        self.emit(
            PipelineEvent.for_document(
                EventType.APPROVAL_RECEIVED,
                document,
                message,
                previous_state=at_state,
                current_state=at_state,
            )
        )

    def revision_started(
        self,
        document: "PublishingDocument",
        from_state: DocumentState,
        to_state: DocumentState,
        revision_number: int,
        max_revisions: int,
    ) -> None:
        self.metrics.record_revision_cycle()
        self.emit(
            PipelineEvent.for_document(
                EventType.REVISION_STARTED,
                document,
                f"Revision cycle {revision_number}/{max_revisions} started",
                previous_state=from_state,
                current_state=to_state,
            )
        )

    def pipeline_completed(self, document: "PublishingDocument", elapsed: timedelta) -> None:
        self.metrics.record_pipeline_completed(elapsed)
        self.emit(
            PipelineEvent.for_document(
                EventType.PIPELINE_COMPLETED,
                document,
                f"Pipeline completed in {elapsed.total_seconds():.3f}s",
            )
        )

    def pipeline_failed(
        self, document: "PublishingDocument", failed_at: DocumentState, error: str
    ) -> None:
        self.metrics.record_pipeline_failed(failed_at)
        self.emit(
            PipelineEvent.for_document(
                EventType.PIPELINE_FAILED,
                document,
                f"Pipeline failed at {failed_at.name}: {error}",
                previous_state=failed_at,
                current_state=failed_at,
            )
        )

    def stage_processed(self, stage: str, elapsed: timedelta) -> None:
        self.metrics.record_stage_processing(stage, elapsed)

    def warn(self, document: "PublishingDocument", message: str) -> None:
        self.emit(PipelineEvent.for_document(EventType.WARNING, document, message))

    def generate_metrics_report(self) -> str:
        return self.metrics.generate_report()
