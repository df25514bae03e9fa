"""
PublishingDocument - the mutable unit of work moving through the pipeline.

A document is owned by exactly one pipeline run. Stage collaborators mutate it
only through the transition and attach methods below, which enforce the state
contract: every artifact slot can be filled only while the document is in the
state that produces it.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Sequence

from .artifacts import (
    AgentContribution,
    ArticleDraft,
    CriticReport,
    FactCheckReport,
    FinalArticle,
    ResearchBrief,
    TopicBrief,
)
from .enums import DocumentState
from .primitives import generate_id, to_camel_case, utc_now


class StateContractError(RuntimeError):
    """
    Raised when the document state contract is violated.

    This signals a programming error (illegal transition or an artifact attached
    in the wrong state), never a business outcome.

    Attributes:
        current: State the document was in
        requested: Target state of the rejected transition, if any
    """

    def __init__(
        self,
        message: str,
        current: DocumentState,
        requested: Optional[DocumentState] = None,
    ):
        self.current = current
        self.requested = requested
        super().__init__(message)


class PublishingDocument:
    """A document moving through the publishing pipeline."""

    def __init__(
        self,
        topic_brief: TopicBrief,
        document_id: Optional[str] = None,
        page_name: Optional[str] = None,
    ):
        if topic_brief is None:
            raise ValueError("topic_brief must not be None")

        self.id = document_id or generate_id()
        self.page_name = page_name or to_camel_case(topic_brief.topic)
        self.title = topic_brief.topic
        self.topic_brief = topic_brief

        self._state = DocumentState.CREATED
        self.created_at: datetime = utc_now()
        self.updated_at: datetime = self.created_at

        self._research_brief: Optional[ResearchBrief] = None
        self._draft: Optional[ArticleDraft] = None
        self._fact_check_report: Optional[FactCheckReport] = None
        self._final_article: Optional[FinalArticle] = None
        self._critic_report: Optional[CriticReport] = None

        self._contributions: List[AgentContribution] = []
        self._revision_count = 0

    # State

    @property
    def state(self) -> DocumentState:
        return self._state

    @property
    def revision_count(self) -> int:
        return self._revision_count

    def transition_to(self, new_state: DocumentState) -> None:
        """Move to ``new_state``.

        Raises:
            StateContractError: If the transition is not legal
        """
        if not self._state.can_transition_to(new_state):
            raise StateContractError(
                f"Cannot transition from {self._state.name} to {new_state.name}",
                current=self._state,
                requested=new_state,
            )
        self._state = new_state
        self._touch()

    def advance_to_next_state(self) -> None:
        """Move one step forward on the linear track."""
        following = self._state.next_in_flow()
        if following is None:
            raise StateContractError(
                f"No next state from {self._state.name}", current=self._state
            )
        self.transition_to(following)

    def revert_for_revision(self) -> None:
        """Send the document back one phase for revision.

        Only legal from FACT_CHECKING (back to DRAFTING) and CRITIQUING
        (back to EDITING). The revision counter is incremented before the
        document re-enters the producing phase.
        """
        previous = self._state.previous_for_revision()
        if previous is None:
            raise StateContractError(
                f"Cannot revert from state {self._state.name}", current=self._state
            )
        self._revision_count += 1
        self.transition_to(previous)

    def reject(self) -> None:
        self.transition_to(DocumentState.REJECTED)

    def can_revise(self, max_revision_cycles: int) -> bool:
        return not self._state.is_terminal and self._revision_count < max_revision_cycles

    @property
    def is_complete(self) -> bool:
        return self._state.is_terminal

    @property
    def is_published(self) -> bool:
        return self._state is DocumentState.PUBLISHED

    @property
    def is_rejected(self) -> bool:
        return self._state is DocumentState.REJECTED

    # Artifacts

    @property
    def research_brief(self) -> Optional[ResearchBrief]:
        return self._research_brief

    @property
    def draft(self) -> Optional[ArticleDraft]:
        return self._draft

    @property
    def fact_check_report(self) -> Optional[FactCheckReport]:
        return self._fact_check_report

    @property
    def final_article(self) -> Optional[FinalArticle]:
        return self._final_article

    @property
    def critic_report(self) -> Optional[CriticReport]:
        return self._critic_report

    def set_research_brief(self, research_brief: ResearchBrief) -> None:
        self._require_state(DocumentState.RESEARCHING, "research brief")
        self._research_brief = self._not_none(research_brief, "research_brief")
        self._touch()

    def set_draft(self, draft: ArticleDraft) -> None:
        self._require_state(DocumentState.DRAFTING, "draft")
        self._draft = self._not_none(draft, "draft")
        self._touch()

    def set_fact_check_report(self, report: FactCheckReport) -> None:
        self._require_state(DocumentState.FACT_CHECKING, "fact check report")
        self._fact_check_report = self._not_none(report, "report")
        self._touch()

    def set_final_article(self, article: FinalArticle) -> None:
        self._require_state(DocumentState.EDITING, "final article")
        self._final_article = self._not_none(article, "article")
        self._touch()

    def set_critic_report(self, report: CriticReport) -> None:
        self._require_state(DocumentState.CRITIQUING, "critic report")
        self._critic_report = self._not_none(report, "report")
        self._touch()

    def has_content(self) -> bool:
        """True once any artifact beyond the topic brief exists."""
        return any(
            artifact is not None
            for artifact in (
                self._research_brief,
                self._draft,
                self._fact_check_report,
                self._final_article,
                self._critic_report,
            )
        )

    # Audit trail

    @property
    def contributions(self) -> Sequence[AgentContribution]:
        return tuple(self._contributions)

    def record_contribution(
        self,
        stage: str,
        duration: timedelta,
        metrics: Optional[Dict[str, Any]] = None,
    ) -> AgentContribution:
        contribution = AgentContribution(
            stage=stage, duration=duration, metrics=metrics or {}
        )
        self._contributions.append(contribution)
        return contribution

    # Helpers

    def _require_state(self, expected: DocumentState, artifact: str) -> None:
        if self._state is not expected:
            raise StateContractError(
                f"Can only set {artifact} in {expected.name} state "
                f"(current: {self._state.name})",
                current=self._state,
            )

    @staticmethod
    def _not_none(value, name: str):
        if value is None:
            raise ValueError(f"{name} must not be None")
        return value

    def _touch(self) -> None:
        self.updated_at = utc_now()

    def __repr__(self) -> str:
        return (
            f"PublishingDocument(id={self.id!r}, page_name={self.page_name!r}, "
            f"state={self._state.name}, revisions={self._revision_count})"
        )
