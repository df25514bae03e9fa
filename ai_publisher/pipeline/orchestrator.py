"""
Publishing pipeline - drives one document from topic brief to a run outcome.

Flow:
1. Research: gather source material
2. Draft: write the article
3. Fact check: verify claims (revision loop back to drafting)
4. Edit: polish, link and score the article (quality gate)
5. Critique: final structure and syntax review (revision loop back to editing)
6. Publish: hand the article to the output service

Approval checkpoints are evaluated after research, drafting, fact checking
and editing. When a revision loop runs out of budget the run continues with
the last artifact and the outstanding issues are logged.
"""

from __future__ import annotations

import time
from datetime import timedelta
from pathlib import Path
from typing import Optional

import structlog

from ..approval.errors import ApprovalRejectedError, ApprovalTimeoutError
from ..approval.service import ApprovalService
from ..config import ChangesRequestedPolicy, PipelineConfig
from ..document.artifacts import CriticReport, FactCheckReport, TopicBrief
from ..document.enums import DocumentState, ReviewVerdict
from ..document.work_item import PublishingDocument
from ..monitoring.service import PipelineMonitoringService
from ..output.service import OutputService
from .errors import AgentError, StageError
from .result import PipelineFailure, PipelineResult, PipelineSuccess
from .stages import (
    CriticStage,
    EditorStage,
    FactCheckStage,
    ResearchStage,
    Stage,
    WriterStage,
)

logger = structlog.get_logger(__name__)


class PublishingPipeline:
    """Orchestrates research, drafting, fact checking, editing and critique.

    Collaborators and configuration are fixed at construction and shared by
    every run; all per-run state lives on the document.
    """

    def __init__(
        self,
        research: ResearchStage,
        writer: WriterStage,
        fact_checker: FactCheckStage,
        editor: EditorStage,
        critic: CriticStage,
        output: OutputService,
        approval: Optional[ApprovalService] = None,
        monitoring: Optional[PipelineMonitoringService] = None,
        config: Optional[PipelineConfig] = None,
    ):
        self.config = config or PipelineConfig()
        self.research = research
        self.writer = writer
        self.fact_checker = fact_checker
        self.editor = editor
        self.critic = critic
        self.output = output
        self.approval = approval or ApprovalService(self.config.approval)
        self.monitoring = monitoring or PipelineMonitoringService()

    def execute(self, topic_brief: TopicBrief) -> PipelineResult:
        """Run the full pipeline for a topic.

        Never raises for run failures; every failure is reported as a
        PipelineFailure.
        """
        started = time.monotonic()
        document = PublishingDocument(topic_brief)
        log = logger.bind(document_id=document.id, page_name=document.page_name)

        log.info("pipeline_started", topic=topic_brief.topic)
        self.monitoring.pipeline_started(document)

        try:
            self._research_phase(document, log)
            self._drafting_phase(document, log)
            self._fact_check_phase(document, log)
            self._editing_phase(document, log)
            self._critique_phase(document, log)
            output_path = self._publish_phase(document, log)

        except StageError as e:
            return self._fail(
                document, e.message, e.failed_at_state, e.retriable, started, log
            )

        except Exception as e:
            log.exception("pipeline_unexpected_error", state=document.state.value)
            return self._fail(
                document, str(e) or type(e).__name__, document.state, False, started, log
            )

        elapsed = timedelta(seconds=time.monotonic() - started)
        log.info(
            "pipeline_completed",
            output_path=str(output_path),
            revisions=document.revision_count,
            elapsed_seconds=round(elapsed.total_seconds(), 3),
        )
        self.monitoring.pipeline_completed(document, elapsed)
        return PipelineSuccess(document=document, output_path=output_path, elapsed=elapsed)

    # Phases

    def _research_phase(self, document: PublishingDocument, log) -> None:
        self._enter(document, DocumentState.RESEARCHING, log)
        self._run_stage(self.research, document, log)
        self._require_valid(self.research, document, "Research validation failed")

        summary = f"{document.research_brief.fact_count} key facts gathered"
        log.info("research_completed", summary=summary)
        self.monitoring.phase_completed(document, DocumentState.RESEARCHING, summary)
        self._check_approval(document, log)

    def _drafting_phase(self, document: PublishingDocument, log) -> None:
        self._enter(document, DocumentState.DRAFTING, log)
        self._draft(document, log)

        summary = f"{document.draft.word_count()} words"
        log.info("draft_completed", summary=summary)
        self.monitoring.phase_completed(document, DocumentState.DRAFTING, summary)
        self._check_approval(document, log)

    def _fact_check_phase(self, document: PublishingDocument, log) -> None:
        self._enter(document, DocumentState.FACT_CHECKING, log)
        max_revisions = self.config.max_revision_cycles
        revisions = 0

        while True:
            self._run_stage(self.fact_checker, document, log)
            self._require_valid(self.fact_checker, document, "Fact check validation failed")

            report = document.fact_check_report
            summary = (
                f"{len(report.verified_claims)} verified, "
                f"{len(report.questionable_claims)} questionable, "
                f"recommendation: {report.recommended_action.value}"
            )
            log.info("fact_check_completed", summary=summary, verdict=report.verdict.value)

            verdict = report.verdict
            if verdict is ReviewVerdict.REJECT:
                raise StageError(
                    f"Article rejected by fact checker: {report.issue_summary()}",
                    DocumentState.FACT_CHECKING,
                )

            if verdict is ReviewVerdict.PASS:
                self.monitoring.phase_completed(document, DocumentState.FACT_CHECKING, summary)
                if self._check_approval(document, log, allow_loop_back=True):
                    return
                if revisions >= max_revisions:
                    raise self._changes_requested(document.state, log)

            elif revisions >= max_revisions:
                self._degrade_fact_check(document, report, max_revisions, log)
                return

            revisions += 1
            self._revert(document, revisions, max_revisions, log)
            self._draft(document, log)
            document.advance_to_next_state()

    def _editing_phase(self, document: PublishingDocument, log) -> None:
        self._enter(document, DocumentState.EDITING, log)
        self._edit(document, log)

        article = document.final_article
        summary = (
            f"quality score {article.quality_score:.2f}, "
            f"{len(article.added_links)} links added"
        )
        log.info("editing_completed", summary=summary)
        self.monitoring.phase_completed(document, DocumentState.EDITING, summary)
        self._check_approval(document, log)

    def _critique_phase(self, document: PublishingDocument, log) -> None:
        self._enter(document, DocumentState.CRITIQUING, log)
        max_revisions = self.config.max_revision_cycles
        revisions = 0

        while True:
            self._run_stage(self.critic, document, log)
            self._require_valid(self.critic, document, "Critic validation failed")

            report = document.critic_report
            summary = (
                f"overall={report.overall_score:.2f}, syntax={report.syntax_score:.2f}, "
                f"recommendation={report.recommended_action.value}"
            )
            log.info("critique_completed", summary=summary, verdict=report.verdict.value)

            verdict = report.verdict
            if verdict is ReviewVerdict.PASS:
                self.monitoring.phase_completed(document, DocumentState.CRITIQUING, summary)
                self._check_approval(document, log)
                return

            if verdict is ReviewVerdict.REJECT:
                raise StageError(
                    f"Article rejected by critic: {report.issue_summary()}",
                    DocumentState.CRITIQUING,
                )

            if revisions >= max_revisions:
                self._degrade_critique(document, report, max_revisions, log)
                return

            revisions += 1
            self._revert(document, revisions, max_revisions, log)
            self._edit(document, log)
            document.advance_to_next_state()

    def _publish_phase(self, document: PublishingDocument, log) -> Path:
        log.info("publish_started")
        try:
            output_path = self.output.write(document)
        except Exception as e:
            # Persistence failures surface at EDITING; only I/O errors are retriable.
            raise StageError(
                f"Publishing failed: {e}",
                DocumentState.EDITING,
                retriable=isinstance(e, OSError),
            ) from e

        document.transition_to(DocumentState.PUBLISHED)
        log.info("published", output_path=str(output_path))
        return output_path

    # Producing steps shared by first runs and revisions

    def _draft(self, document: PublishingDocument, log) -> None:
        self._run_stage(self.writer, document, log)
        self._require_valid(self.writer, document, "Draft validation failed")

    def _edit(self, document: PublishingDocument, log) -> None:
        existing_pages = self.output.list_existing_pages()
        self.editor.set_existing_pages(existing_pages)
        log.debug("editor_context", existing_pages=len(existing_pages))

        self._run_stage(self.editor, document, log)
        self._require_valid(
            self.editor, document, "Editor validation failed - quality score below threshold"
        )

        article = document.final_article
        minimum = self.config.min_editor_score
        if not article.meets_quality_threshold(minimum):
            raise StageError(
                f"Quality score {article.quality_score:.2f} below minimum {minimum:.2f}",
                DocumentState.EDITING,
            )

    # Helpers

    def _enter(self, document: PublishingDocument, state: DocumentState, log) -> None:
        previous = document.state
        document.transition_to(state)
        log.info("phase_started", phase=state.value)
        self.monitoring.phase_started(document, previous, state)

    def _run_stage(self, stage: Stage, document: PublishingDocument, log) -> None:
        """Invoke a stage and record its contribution.

        AgentError is converted to StageError at the state the stage ran in.
        """
        state = document.state
        started = time.monotonic()
        try:
            stage.process(document)
        except AgentError as e:
            log.warning("stage_failed", stage=stage.name, state=state.value, error=e.message)
            raise StageError(
                f"{stage.name} stage failed: {e.message}", state, retriable=True
            ) from e

        elapsed = timedelta(seconds=time.monotonic() - started)
        document.record_contribution(stage.name, elapsed)
        self.monitoring.stage_processed(stage.name, elapsed)
        log.debug("stage_processed", stage=stage.name, elapsed_seconds=elapsed.total_seconds())

    @staticmethod
    def _require_valid(stage: Stage, document: PublishingDocument, message: str) -> None:
        if not stage.validate(document):
            raise StageError(message, document.state)

    def _revert(
        self, document: PublishingDocument, revision: int, max_revisions: int, log
    ) -> None:
        checking_state = document.state
        document.revert_for_revision()
        log.info(
            "revision_started",
            revision=revision,
            max_revisions=max_revisions,
            from_state=checking_state.value,
            to_state=document.state.value,
        )
        self.monitoring.revision_started(
            document, checking_state, document.state, revision, max_revisions
        )

    def _check_approval(
        self, document: PublishingDocument, log, allow_loop_back: bool = False
    ) -> bool:
        """Evaluate the checkpoint for the document's current state.

        Returns:
            True to continue, False when changes were requested and the
            caller should treat them as a revise outcome

        Raises:
            StageError: On rejection, timeout, or changes requested that
                cannot loop back
        """
        state = document.state
        if not self.approval.is_required(state):
            return True

        self.monitoring.approval_requested(document, state)
        try:
            approved = self.approval.check_and_approve(document)
        except ApprovalRejectedError as e:
            self.monitoring.approval_received(document, state, False)
            log.warning("approval_rejected", state=state.value, approver=e.approver)
            raise StageError(f"Approval rejected: {e}", e.state) from e
        except ApprovalTimeoutError as e:
            self.monitoring.approval_received(document, state, False)
            raise StageError(str(e), state, retriable=True) from e

        self.monitoring.approval_received(document, state, approved)
        if approved:
            return True

        if (
            allow_loop_back
            and self.config.changes_requested_policy is ChangesRequestedPolicy.LOOP_BACK
        ):
            log.info("approval_changes_requested", state=state.value, action="revise")
            return False

        raise self._changes_requested(state, log)

    @staticmethod
    def _changes_requested(state: DocumentState, log) -> StageError:
        log.warning("approval_changes_requested", state=state.value, action="fail")
        return StageError(
            f"Changes requested during approval at {state.name}", state, retriable=True
        )

    def _degrade_fact_check(
        self,
        document: PublishingDocument,
        report: FactCheckReport,
        max_revisions: int,
        log,
    ) -> None:
        log.warning(
            "fact_check_revisions_exhausted",
            max_revisions=max_revisions,
            questionable_claims=len(report.questionable_claims),
            consistency_issues=len(report.consistency_issues),
        )
        for claim in report.questionable_claims:
            log.warning(
                "questionable_claim",
                claim=claim.claim,
                issue=claim.issue,
                suggestion=claim.suggestion or None,
            )
        for issue in report.consistency_issues:
            log.warning("consistency_issue", issue=issue)

        message = (
            f"Fact check did not pass after {max_revisions} revisions; "
            f"continuing with {report.issue_summary() or 'no recorded issues'}"
        )
        self.monitoring.warn(document, message)
        self.monitoring.phase_completed(
            document,
            DocumentState.FACT_CHECKING,
            f"Max revisions exceeded. {len(report.questionable_claims)} questionable claims logged.",
        )

    def _degrade_critique(
        self,
        document: PublishingDocument,
        report: CriticReport,
        max_revisions: int,
        log,
    ) -> None:
        log.warning(
            "critique_revisions_exhausted",
            max_revisions=max_revisions,
            summary=report.issue_summary(),
        )
        for category, issues in (
            ("syntax", report.syntax_issues),
            ("structure", report.structure_issues),
            ("style", report.style_issues),
        ):
            for issue in issues:
                log.warning("critique_issue", category=category, issue=issue)
        for suggestion in report.suggestions:
            log.warning("critique_suggestion", suggestion=suggestion)

        message = (
            f"Critique did not pass after {max_revisions} revisions; "
            f"continuing with {report.issue_summary()}"
        )
        self.monitoring.warn(document, message)
        self.monitoring.phase_completed(
            document,
            DocumentState.CRITIQUING,
            f"Max revisions exceeded. {report.issue_summary()} logged.",
        )

    # Failure handling

    def _fail(
        self,
        document: PublishingDocument,
        message: str,
        failed_at: DocumentState,
        retriable: bool,
        started: float,
        log,
    ) -> PipelineFailure:
        elapsed = timedelta(seconds=time.monotonic() - started)
        log.error(
            "pipeline_failed",
            failed_at=failed_at.value,
            error=message,
            retriable=retriable,
        )
        self.monitoring.pipeline_failed(document, failed_at, message)

        return PipelineFailure(
            document=document,
            message=message,
            failed_at_state=failed_at,
            elapsed=elapsed,
            failed_document_path=self._save_failed_document(document, failed_at, message, log),
            retriable=retriable,
        )

    def _save_failed_document(
        self,
        document: PublishingDocument,
        failed_at: DocumentState,
        message: str,
        log,
    ) -> Optional[Path]:
        if not document.has_content():
            log.debug("debug_snapshot_skipped", reason="no content")
            return None

        try:
            path = self.output.write_failed_document(document, failed_at, message)
        except Exception as e:
            log.warning("debug_snapshot_failed", error=str(e))
            return None

        if path is not None:
            log.info("debug_snapshot_saved", path=str(path))
        return path
