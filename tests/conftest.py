"""Test configuration and fixtures."""

from pathlib import Path
from typing import List, Optional

import pytest

from ai_publisher.approval import (
    ApprovalCallback,
    ApprovalDecision,
    ApprovalRequest,
    ApprovalService,
)
from ai_publisher.config import ApprovalSettings, PipelineConfig
from ai_publisher.document import (
    ArticleDraft,
    DocumentMetadata,
    DocumentState,
    FinalArticle,
    KeyFact,
    PublishingDocument,
    ResearchBrief,
    TopicBrief,
)
from ai_publisher.monitoring import PipelineEvent, PipelineEventListener, PipelineMonitoringService
from ai_publisher.output import OutputService
from ai_publisher.pipeline import PublishingPipeline
from ai_publisher.stages import (
    StubCriticStage,
    StubEditorStage,
    StubFactCheckStage,
    StubResearchStage,
    StubWriterStage,
)


def make_topic_brief(**overrides) -> TopicBrief:
    """Create a valid topic brief with optional overrides."""
    defaults = {
        "topic": "event driven architecture",
        "target_audience": "software engineers",
        "target_word_count": 600,
        "required_sections": ["Overview", "Patterns"],
        "related_pages": ["MessageQueues"],
    }
    defaults.update(overrides)
    return TopicBrief(**defaults)


def make_research_brief() -> ResearchBrief:
    return ResearchBrief(
        key_facts=[KeyFact(fact="Events decouple producers from consumers", source_index=0)],
        suggested_outline=["Overview"],
    )


def make_draft() -> ArticleDraft:
    return ArticleDraft(content="!! Overview\nEvents everywhere.", summary="About events.")


def make_final_article(quality_score: float = 0.9) -> FinalArticle:
    return FinalArticle(
        content="!! Overview\nEvents everywhere.",
        metadata=DocumentMetadata(title="event driven architecture"),
        quality_score=quality_score,
    )


def advance_to(document: PublishingDocument, state: DocumentState) -> PublishingDocument:
    """Walk a document forward along the happy path until it reaches ``state``."""
    while document.state is not state:
        document.advance_to_next_state()
    return document


class RecordingOutputService(OutputService):
    """In-memory output service."""

    def __init__(self, existing_pages: Optional[List[str]] = None, fail_write: bool = False):
        self.existing_pages = list(existing_pages or [])
        self.fail_write = fail_write
        self.written: List[PublishingDocument] = []
        self.failed: List[tuple] = []

    def write(self, document: PublishingDocument) -> Path:
        if self.fail_write:
            raise OSError("disk full")
        self.written.append(document)
        return Path("/virtual") / f"{document.page_name}.txt"

    def write_failed_document(self, document, failed_state, error_message):
        self.failed.append((document, failed_state, error_message))
        return Path("/virtual") / f"{document.page_name}_FAILED_{failed_state.name}.txt"

    def list_existing_pages(self) -> List[str]:
        return sorted(self.existing_pages)


class ScriptedApprovalCallback(ApprovalCallback):
    """Answers approval requests from a list of decision factories."""

    def __init__(self, *decisions):
        self.decisions = list(decisions)
        self.requests: List[ApprovalRequest] = []

    def request_approval(self, request: ApprovalRequest) -> ApprovalDecision:
        self.requests.append(request)
        decide = self.decisions.pop(0) if self.decisions else _approve
        return decide(request)


def _approve(request: ApprovalRequest) -> ApprovalDecision:
    return ApprovalDecision.approve(request.id, "tester")


class CollectingListener(PipelineEventListener):
    def __init__(self):
        self.events: List[PipelineEvent] = []

    def on_event(self, event: PipelineEvent) -> None:
        self.events.append(event)

    @property
    def types(self):
        return [event.type for event in self.events]


def make_pipeline(
    *,
    fact_checker: Optional[StubFactCheckStage] = None,
    editor: Optional[StubEditorStage] = None,
    critic: Optional[StubCriticStage] = None,
    writer: Optional[StubWriterStage] = None,
    research=None,
    output: Optional[OutputService] = None,
    callback: Optional[ApprovalCallback] = None,
    listener: Optional[PipelineEventListener] = None,
    **config_overrides,
) -> PublishingPipeline:
    """Build a pipeline over stub stages with no approvals unless configured."""
    config_values = {
        "max_revision_cycles": 3,
        "approval": ApprovalSettings(before_publish=False),
        "min_editor_score": 0.8,
    }
    config_values.update(config_overrides)
    config = PipelineConfig(**config_values)

    return PublishingPipeline(
        research=research or StubResearchStage(),
        writer=writer or StubWriterStage(),
        fact_checker=fact_checker or StubFactCheckStage(),
        editor=editor or StubEditorStage(),
        critic=critic or StubCriticStage(),
        output=output or RecordingOutputService(),
        approval=ApprovalService(config.approval, callback or ScriptedApprovalCallback()),
        monitoring=PipelineMonitoringService([listener] if listener else []),
        config=config,
    )


@pytest.fixture
def topic_brief() -> TopicBrief:
    return make_topic_brief()


@pytest.fixture
def document(topic_brief) -> PublishingDocument:
    return PublishingDocument(topic_brief)
