"""
Artifact schemas attached to a PublishingDocument as it moves through the pipeline.

Each stage produces exactly one artifact type:

- TopicBrief: the originating request (fixed input)
- ResearchBrief: research stage output
- ArticleDraft: writer stage output
- FactCheckReport: fact-check stage output
- FinalArticle: editor stage output
- CriticReport: critic stage output

All artifacts are immutable once constructed.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .enums import ConfidenceLevel, RecommendedAction, ReviewVerdict
from .primitives import utc_now

_VERDICTS = {
    RecommendedAction.APPROVE: ReviewVerdict.PASS,
    RecommendedAction.REVISE: ReviewVerdict.REVISE,
    RecommendedAction.REJECT: ReviewVerdict.REJECT,
}


def _word_count(text: Optional[str]) -> int:
    if not text or not text.strip():
        return 0
    return len(text.split())


class TopicBrief(BaseModel):
    """Initial request defining what article to create."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    topic: str = Field(..., description="Main topic or title for the article")
    target_audience: str = Field(
        default="general readers", description="Who the article is written for"
    )
    target_word_count: int = Field(default=800, ge=0, description="Target length")
    required_sections: List[str] = Field(
        default_factory=list, description="Sections that must appear"
    )
    related_pages: List[str] = Field(
        default_factory=list, description="Known related pages that should be linked"
    )
    source_urls: List[str] = Field(
        default_factory=list, description="Optional source hints for research"
    )
    content_type: Optional[str] = Field(
        None, description="Kind of content (concept, tutorial, comparison, ...)"
    )
    domain_context: Optional[str] = Field(None, description="Optional domain context")
    specific_goal: Optional[str] = Field(None, description="Optional reader outcome")

    @field_validator("topic")
    @classmethod
    def _topic_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("topic must not be blank")
        return value


class KeyFact(BaseModel):
    """A key fact identified during research."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    fact: str
    source_index: int = Field(default=-1, description="Index into sources, -1 if unsourced")

    @property
    def has_source(self) -> bool:
        return self.source_index >= 0


class SourceCitation(BaseModel):
    """A source consulted during research with its assessed reliability."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    description: str
    reliability: ConfidenceLevel = ConfidenceLevel.MEDIUM


class ResearchBrief(BaseModel):
    """Research stage output: gathered facts and a suggested structure."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    key_facts: List[KeyFact] = Field(default_factory=list)
    sources: List[SourceCitation] = Field(default_factory=list)
    suggested_outline: List[str] = Field(default_factory=list)
    related_page_suggestions: List[str] = Field(default_factory=list)
    glossary: Dict[str, str] = Field(default_factory=dict)
    uncertain_areas: List[str] = Field(default_factory=list)

    def is_valid(self) -> bool:
        """Enough content to start drafting."""
        return bool(self.key_facts) and bool(self.suggested_outline)

    @property
    def fact_count(self) -> int:
        return len(self.key_facts)


class ArticleDraft(BaseModel):
    """Writer stage output."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    content: str = Field(..., description="Article body in the target markup")
    summary: str = Field(default="", description="One-paragraph summary")
    internal_links: List[str] = Field(default_factory=list)
    categories: List[str] = Field(default_factory=list)
    metadata: Dict[str, str] = Field(default_factory=dict)

    @field_validator("content")
    @classmethod
    def _content_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("content must not be blank")
        return value

    def is_valid(self) -> bool:
        return bool(self.content.strip()) and bool(self.summary.strip())

    def word_count(self) -> int:
        return _word_count(self.content)


class VerifiedClaim(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    claim: str
    status: str = "VERIFIED"
    source_index: int = -1


class QuestionableClaim(BaseModel):
    """A claim the fact checker could not verify."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    claim: str
    issue: str
    suggestion: str = ""


class FactCheckReport(BaseModel):
    """Fact-check stage output."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    annotated_content: str = ""
    verified_claims: List[VerifiedClaim] = Field(default_factory=list)
    questionable_claims: List[QuestionableClaim] = Field(default_factory=list)
    consistency_issues: List[str] = Field(default_factory=list)
    overall_confidence: ConfidenceLevel = ConfidenceLevel.LOW
    recommended_action: RecommendedAction = RecommendedAction.REVISE

    @property
    def verdict(self) -> ReviewVerdict:
        return _VERDICTS[self.recommended_action]

    def is_passed(self) -> bool:
        return self.verdict is ReviewVerdict.PASS

    def needs_revision(self) -> bool:
        return self.verdict is ReviewVerdict.REVISE

    def is_rejected(self) -> bool:
        return self.verdict is ReviewVerdict.REJECT

    @property
    def issue_count(self) -> int:
        return len(self.questionable_claims) + len(self.consistency_issues)

    def meets_confidence_threshold(self, minimum: ConfidenceLevel) -> bool:
        return self.overall_confidence.meets_minimum(minimum)

    def issue_summary(self) -> str:
        """Short description of outstanding issues for error messages."""
        parts = []
        if self.questionable_claims:
            parts.append(f"{len(self.questionable_claims)} questionable claims")
        if self.consistency_issues:
            parts.append(f"{len(self.consistency_issues)} consistency issues")
        return ", ".join(parts)


class DocumentMetadata(BaseModel):
    """Metadata for a published article."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    title: str
    summary: str = ""
    author: str = "AI Publisher"
    created_at: datetime
    updated_at: datetime

    @model_validator(mode="before")
    @classmethod
    def _default_timestamps(cls, data: Any) -> Any:
        if isinstance(data, dict):
            data = dict(data)
            created_at = data.get("created_at") or utc_now()
            data["created_at"] = created_at
            data["updated_at"] = data.get("updated_at") or created_at
        return data

    @field_validator("author")
    @classmethod
    def _default_author(cls, value: str) -> str:
        return value if value.strip() else "AI Publisher"


class FinalArticle(BaseModel):
    """Editor stage output: the publication-ready article."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    content: str
    metadata: DocumentMetadata
    edit_summary: str = ""
    quality_score: float = Field(..., ge=0.0, le=1.0)
    added_links: List[str] = Field(default_factory=list)

    def meets_quality_threshold(self, minimum_score: float) -> bool:
        return self.quality_score >= minimum_score

    def word_count(self) -> int:
        return _word_count(self.content)

    @property
    def title(self) -> str:
        return self.metadata.title


class CriticReport(BaseModel):
    """Critic stage output: final quality and syntax review."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    overall_score: float = Field(..., ge=0.0, le=1.0)
    structure_score: float = Field(default=0.0, ge=0.0, le=1.0)
    syntax_score: float = Field(default=0.0, ge=0.0, le=1.0)
    readability_score: float = Field(default=0.0, ge=0.0, le=1.0)
    structure_issues: List[str] = Field(default_factory=list)
    syntax_issues: List[str] = Field(default_factory=list)
    style_issues: List[str] = Field(default_factory=list)
    suggestions: List[str] = Field(default_factory=list)
    recommended_action: RecommendedAction = RecommendedAction.REVISE

    @property
    def verdict(self) -> ReviewVerdict:
        return _VERDICTS[self.recommended_action]

    def is_approved(self) -> bool:
        return self.verdict is ReviewVerdict.PASS

    def needs_revision(self) -> bool:
        return self.verdict is ReviewVerdict.REVISE

    def needs_rework(self) -> bool:
        return self.verdict is ReviewVerdict.REJECT

    def meets_quality_threshold(self, threshold: float) -> bool:
        return self.overall_score >= threshold

    def has_issues(self) -> bool:
        return bool(self.structure_issues or self.syntax_issues or self.style_issues)

    def issue_summary(self) -> str:
        total = len(self.structure_issues) + len(self.syntax_issues) + len(self.style_issues)
        return (
            f"{total} issues found (structure: {len(self.structure_issues)}, "
            f"syntax: {len(self.syntax_issues)}, style: {len(self.style_issues)})"
        )


class AgentContribution(BaseModel):
    """Audit record of one stage invocation."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    stage: str
    duration: timedelta
    timestamp: datetime = Field(default_factory=utc_now)
    metrics: Dict[str, Any] = Field(default_factory=dict)
