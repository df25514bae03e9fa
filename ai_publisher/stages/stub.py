"""
Stub stages - deterministic stand-ins for the generation stages.

They prove the pipeline works end to end without a language model:
artifacts are derived from the topic brief, and the checking stages follow a
scripted list of recommendations (the last one repeats once the script runs
out).
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Union

from ..approval.callbacks import ApprovalCallback, get_approval_callback
from ..approval.service import ApprovalService
from ..config import PipelineConfig, Settings, get_settings
from ..document.artifacts import (
    ArticleDraft,
    CriticReport,
    DocumentMetadata,
    FactCheckReport,
    FinalArticle,
    KeyFact,
    QuestionableClaim,
    ResearchBrief,
    SourceCitation,
    VerifiedClaim,
)
from ..document.enums import ConfidenceLevel, RecommendedAction
from ..document.work_item import PublishingDocument
from ..monitoring.service import LoggingEventListener, PipelineMonitoringService
from ..output.service import OutputService, get_output_service
from ..pipeline.orchestrator import PublishingPipeline
from ..pipeline.stages import (
    CriticStage,
    EditorStage,
    FactCheckStage,
    ResearchStage,
    WriterStage,
)

logger = logging.getLogger(__name__)

ActionScript = Sequence[Union[RecommendedAction, str]]

DEFAULT_OUTLINE = ["Overview", "Key Concepts", "Examples", "See Also"]

# Minimum editor score a stub article must reach to count as valid.
STUB_EDITOR_MIN_SCORE = 0.7


class _Script:
    """Cycles through scripted recommendations, repeating the last one."""

    def __init__(self, actions: ActionScript):
        if not actions:
            raise ValueError("actions must not be empty")
        self.actions: List[RecommendedAction] = [
            action if isinstance(action, RecommendedAction) else RecommendedAction.parse(action)
            for action in actions
        ]
        self.position = 0

    def next(self) -> RecommendedAction:
        action = self.actions[min(self.position, len(self.actions) - 1)]
        self.position += 1
        return action


class StubResearchStage(ResearchStage):
    """Builds a research brief from the topic brief."""

    def __init__(self):
        self.calls = 0

    @property
    def name(self) -> str:
        return "research"

    def process(self, document: PublishingDocument) -> PublishingDocument:
        self.calls += 1
        brief = document.topic_brief
        outline = list(brief.required_sections) or list(DEFAULT_OUTLINE)

        sources = [SourceCitation(description=url) for url in brief.source_urls] or [
            SourceCitation(
                description=f"Reference material on {brief.topic}",
                reliability=ConfidenceLevel.HIGH,
            )
        ]
        facts = [
            KeyFact(fact=f"{brief.topic} is explained for {brief.target_audience}.", source_index=0),
            KeyFact(fact=f"{brief.topic} is covered in {len(outline)} sections.", source_index=0),
        ]

        document.set_research_brief(
            ResearchBrief(
                key_facts=facts,
                sources=sources,
                suggested_outline=outline,
                related_page_suggestions=list(brief.related_pages),
            )
        )
        logger.debug(f"Stub research produced {len(facts)} facts for {document.page_name}")
        return document

    def validate(self, document: PublishingDocument) -> bool:
        research = document.research_brief
        return research is not None and research.is_valid()


class StubWriterStage(WriterStage):
    """Writes one paragraph per outline section."""

    def __init__(self):
        self.calls = 0

    @property
    def name(self) -> str:
        return "writer"

    def process(self, document: PublishingDocument) -> PublishingDocument:
        self.calls += 1
        research = document.research_brief
        outline = research.suggested_outline if research else list(DEFAULT_OUTLINE)
        topic = document.topic_brief.topic

        sections = [f"!!! {document.title}"]
        for heading in outline:
            sections.append(f"!! {heading}\n{topic}: {heading.lower()} (draft {self.calls}).")
        if research:
            sections.extend(f"* {fact.fact}" for fact in research.key_facts)

        document.set_draft(
            ArticleDraft(
                content="\n\n".join(sections),
                summary=f"An introduction to {topic}.",
                internal_links=list(document.topic_brief.related_pages),
                metadata={"draft": str(self.calls)},
            )
        )
        return document

    def validate(self, document: PublishingDocument) -> bool:
        draft = document.draft
        return draft is not None and draft.is_valid()


class StubFactCheckStage(FactCheckStage):
    """Reports scripted recommendations against the current draft."""

    def __init__(self, actions: ActionScript = (RecommendedAction.APPROVE,)):
        self.script = _Script(actions)
        self.calls = 0

    @property
    def name(self) -> str:
        return "fact_checker"

    def process(self, document: PublishingDocument) -> PublishingDocument:
        self.calls += 1
        action = self.script.next()
        research = document.research_brief
        verified = [
            VerifiedClaim(claim=fact.fact, source_index=fact.source_index)
            for fact in (research.key_facts if research else [])
        ]
        questionable = []
        if action is not RecommendedAction.APPROVE:
            questionable.append(
                QuestionableClaim(
                    claim=f"{document.topic_brief.topic} claim {self.calls}",
                    issue="No supporting source",
                    suggestion="Cite a source or remove the claim",
                )
            )

        document.set_fact_check_report(
            FactCheckReport(
                annotated_content=document.draft.content if document.draft else "",
                verified_claims=verified,
                questionable_claims=questionable,
                overall_confidence=(
                    ConfidenceLevel.HIGH
                    if action is RecommendedAction.APPROVE
                    else ConfidenceLevel.MEDIUM
                ),
                recommended_action=action,
            )
        )
        return document

    def validate(self, document: PublishingDocument) -> bool:
        return document.fact_check_report is not None


class StubEditorStage(EditorStage):
    """Produces a final article with a fixed quality score."""

    def __init__(self, quality_score: float = 0.9):
        self.quality_score = quality_score
        self.existing_pages: List[str] = []
        self.calls = 0

    @property
    def name(self) -> str:
        return "editor"

    def set_existing_pages(self, pages: Sequence[str]) -> None:
        self.existing_pages = list(pages or [])

    def process(self, document: PublishingDocument) -> PublishingDocument:
        self.calls += 1
        draft = document.draft
        content = draft.content if draft else document.title

        wanted = set(document.topic_brief.related_pages)
        if document.research_brief:
            wanted.update(document.research_brief.related_page_suggestions)
        added_links = [page for page in self.existing_pages if page in wanted]
        if added_links:
            content += "\n\n!! See Also\n" + "\n".join(f"* [{page}]" for page in added_links)

        document.set_final_article(
            FinalArticle(
                content=content,
                metadata=DocumentMetadata(
                    title=document.title,
                    summary=draft.summary if draft else "",
                ),
                edit_summary=f"Stub edit {self.calls}",
                quality_score=self.quality_score,
                added_links=added_links,
            )
        )
        return document

    def validate(self, document: PublishingDocument) -> bool:
        article = document.final_article
        return article is not None and article.quality_score >= STUB_EDITOR_MIN_SCORE


class StubCriticStage(CriticStage):
    """Reports scripted recommendations against the final article."""

    def __init__(
        self,
        actions: ActionScript = (RecommendedAction.APPROVE,),
        overall_score: float = 0.9,
    ):
        self.script = _Script(actions)
        self.overall_score = overall_score
        self.calls = 0

    @property
    def name(self) -> str:
        return "critic"

    def process(self, document: PublishingDocument) -> PublishingDocument:
        self.calls += 1
        action = self.script.next()
        issues = [] if action is RecommendedAction.APPROVE else [f"Heading level issue {self.calls}"]

        document.set_critic_report(
            CriticReport(
                overall_score=self.overall_score,
                structure_score=self.overall_score,
                syntax_score=self.overall_score,
                readability_score=self.overall_score,
                syntax_issues=issues,
                suggestions=["Use consistent heading levels"] if issues else [],
                recommended_action=action,
            )
        )
        return document

    def validate(self, document: PublishingDocument) -> bool:
        return document.critic_report is not None


def create_stub_pipeline(
    settings: Optional[Settings] = None,
    output: Optional[OutputService] = None,
    callback: Optional[ApprovalCallback] = None,
) -> PublishingPipeline:
    """Factory function wiring stub stages into a configured pipeline.

    Args:
        settings: Application settings (default: global settings)
        output: Output service (default: from settings)
        callback: Approval decision maker (default: from settings)

    Returns:
        PublishingPipeline using stub stages
    """
    settings = settings or get_settings()
    config = PipelineConfig.from_settings(settings)

    return PublishingPipeline(
        research=StubResearchStage(),
        writer=StubWriterStage(),
        fact_checker=StubFactCheckStage(),
        editor=StubEditorStage(),
        critic=StubCriticStage(),
        output=output or get_output_service(settings),
        approval=ApprovalService(
            config.approval, callback or get_approval_callback(settings)
        ),
        monitoring=PipelineMonitoringService([LoggingEventListener()]),
        config=config,
    )
