"""Tests for pipeline monitoring."""

import logging
from datetime import timedelta

from ai_publisher.document import DocumentState
from ai_publisher.monitoring import (
    EventType,
    LoggingEventListener,
    PipelineEvent,
    PipelineEventListener,
    PipelineMetrics,
    PipelineMonitoringService,
)
from conftest import CollectingListener


class ExplodingListener(PipelineEventListener):
    def on_event(self, event):
        raise RuntimeError("listener broke")


class TestPipelineEvent:
    def test_for_document(self, document):
        event = PipelineEvent.for_document(EventType.WARNING, document, "hello")
        assert event.document_id == document.id
        assert event.topic == "event driven architecture"
        assert event.current_state is DocumentState.CREATED
        assert event.previous_state is None
        assert event.id


class TestPipelineMonitoringService:
    """Tests for event fan-out and metric recording."""

    def test_emits_to_listeners(self, document):
        listener = CollectingListener()
        service = PipelineMonitoringService([listener])

        service.pipeline_started(document)
        service.phase_started(document, DocumentState.CREATED, DocumentState.RESEARCHING)

        assert listener.types == [EventType.PIPELINE_STARTED, EventType.PHASE_STARTED]
        assert listener.events[1].previous_state is DocumentState.CREATED
        assert listener.events[1].current_state is DocumentState.RESEARCHING

    def test_failing_listener_does_not_break_others(self, document, caplog):
        listener = CollectingListener()
        service = PipelineMonitoringService([ExplodingListener(), listener])

        with caplog.at_level(logging.ERROR):
            service.warn(document, "careful")

        assert listener.types == [EventType.WARNING]
        assert "ExplodingListener" in caplog.text

    def test_add_and_remove_listener(self):
        service = PipelineMonitoringService()
        listener = CollectingListener()
        service.add_listener(listener)
        assert service.listener_count == 1
        service.remove_listener(listener)
        service.remove_listener(listener)
        assert service.listener_count == 0

    def test_records_metrics(self, document):
        service = PipelineMonitoringService()
        service.pipeline_started(document)
        service.approval_requested(document, DocumentState.EDITING)
        service.approval_received(document, DocumentState.EDITING, True)
        service.revision_started(document, DocumentState.FACT_CHECKING, DocumentState.DRAFTING, 1, 3)
        service.stage_processed("writer", timedelta(seconds=2))
        service.pipeline_failed(document, DocumentState.EDITING, "boom")

        metrics = service.metrics
        assert metrics.pipelines_started == 1
        assert metrics.approvals_requested == 1
        assert metrics.approvals_granted == 1
        assert metrics.revision_cycles == 1
        assert metrics.stage_invocations("writer") == 1
        assert metrics.failures_by_state == {DocumentState.EDITING: 1}


class TestPipelineMetrics:
    def test_processing_times(self):
        metrics = PipelineMetrics()
        for seconds in (2, 4):
            metrics.record_pipeline_started()
            metrics.record_pipeline_completed(timedelta(seconds=seconds))

        assert metrics.min_processing_seconds == 2
        assert metrics.max_processing_seconds == 4
        assert metrics.average_processing_seconds == 3
        assert metrics.success_rate == 1.0

    def test_empty_metrics(self):
        metrics = PipelineMetrics()
        assert metrics.success_rate == 0.0
        assert metrics.average_processing_seconds == 0.0
        assert metrics.min_processing_seconds == 0.0
        assert metrics.stage_average_seconds("critic") == 0.0

    def test_report_and_reset(self):
        metrics = PipelineMetrics()
        metrics.record_pipeline_started()
        metrics.record_pipeline_failed(DocumentState.FACT_CHECKING)
        metrics.record_stage_processing("editor", timedelta(seconds=1))

        report = metrics.generate_report()
        assert "Total Started: 1" in report
        assert "FACT_CHECKING: 1" in report
        assert "editor: 1 invocations" in report

        metrics.reset()
        assert metrics.pipelines_started == 0
        assert metrics.failures_by_state == {}


class TestLoggingEventListener:
    def test_failure_logged_as_error(self, document, caplog):
        listener = LoggingEventListener()
        event = PipelineEvent.for_document(EventType.PIPELINE_FAILED, document, "failed at EDITING")

        with caplog.at_level(logging.INFO):
            listener.on_event(event)

        assert caplog.records[-1].levelno == logging.ERROR
        assert "failed at EDITING" in caplog.records[-1].getMessage()

    def test_warning_logged_as_warning(self, document, caplog):
        listener = LoggingEventListener()
        with caplog.at_level(logging.INFO):
            listener.on_event(PipelineEvent.for_document(EventType.WARNING, document, "degraded"))
        assert caplog.records[-1].levelno == logging.WARNING
