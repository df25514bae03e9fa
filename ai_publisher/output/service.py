"""
Output services for finished and failed documents.

FileOutputService writes into a local directory:

    <output_directory>/
    ├── EventDrivenArchitecture.txt                         # Published article
    └── EventDrivenArchitecture_FAILED_EDITING_20240101_120000.txt   # Debug snapshot
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Union

from ..config import Settings, get_settings
from ..document.artifacts import FactCheckReport
from ..document.enums import DocumentState
from ..document.primitives import to_camel_case_or_default
from ..document.work_item import PublishingDocument

logger = logging.getLogger(__name__)

DEFAULT_PAGE_NAME = "UnnamedPage"
_RULE = "-" * 72


class OutputService(ABC):
    """Abstract base class for document output."""

    @abstractmethod
    def write(self, document: PublishingDocument) -> Path:
        """Persist the document's final article.

        Returns:
            Location the article was written to

        Raises:
            ValueError: If the document has no final article
            OSError: If the article could not be written

        The pipeline reports any exception raised here as a publishing
        failure at EDITING; only OSError is treated as retriable.
        """
        pass

    @abstractmethod
    def write_failed_document(
        self,
        document: PublishingDocument,
        failed_state: DocumentState,
        error_message: str,
    ) -> Optional[Path]:
        """Best-effort snapshot of a failed run's partial artifacts.

        Returns:
            Location of the snapshot, or None if it could not be written
        """
        pass

    @abstractmethod
    def list_existing_pages(self) -> List[str]:
        """Sorted names of pages already published."""
        pass


class FileOutputService(OutputService):
    """Local filesystem output."""

    def __init__(self, directory: Union[str, Path], extension: str = ".txt"):
        """Initialize with an output directory.

        Args:
            directory: Directory articles are written to (created on first write)
            extension: File extension including the leading dot
        """
        self.directory = Path(directory)
        self.extension = extension

    def write(self, document: PublishingDocument) -> Path:
        article = document.final_article
        if article is None:
            raise ValueError("Document has no final article to write")

        output_path = self.ensure_directory() / self.filename_for(document.page_name)
        output_path.write_text(self.format_article(article.content), encoding="utf-8")

        logger.info(
            f"Wrote article to {output_path}: {article.word_count()} words, "
            f"quality score {article.quality_score:.2f}"
        )
        return output_path

    def write_failed_document(
        self,
        document: PublishingDocument,
        failed_state: DocumentState,
        error_message: str,
    ) -> Optional[Path]:
        try:
            output_path = self.ensure_directory() / self.failed_filename_for(
                document.page_name, failed_state
            )
            output_path.write_text(
                self.format_failed_document(document, failed_state, error_message),
                encoding="utf-8",
            )
        except OSError as e:
            logger.error(f"Failed to write debug snapshot: {e}")
            return None

        logger.info(
            f"Wrote failed document to {output_path} for debugging "
            f"(failed at {failed_state.name})"
        )
        return output_path

    def list_existing_pages(self) -> List[str]:
        if not self.directory.is_dir():
            logger.debug(f"Output directory does not exist yet: {self.directory}")
            return []

        pages = sorted(
            path.name[: -len(self.extension)] if self.extension else path.name
            for path in self.directory.iterdir()
            if path.is_file() and path.name.endswith(self.extension)
        )
        logger.debug(f"Discovered {len(pages)} existing pages in {self.directory}")
        return pages

    def page_exists(self, page_name: str) -> bool:
        return (self.directory / self.filename_for(page_name)).is_file()

    def ensure_directory(self) -> Path:
        """Create the output directory if needed and return it."""
        if not self.directory.exists():
            self.directory.mkdir(parents=True, exist_ok=True)
            logger.info(f"Created output directory: {self.directory}")
        return self.directory

    # Formatting

    def filename_for(self, page_name: str) -> str:
        return to_camel_case_or_default(page_name, DEFAULT_PAGE_NAME) + self.extension

    def failed_filename_for(self, page_name: str, failed_state: DocumentState) -> str:
        timestamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")
        name = to_camel_case_or_default(page_name, DEFAULT_PAGE_NAME)
        return f"{name}_FAILED_{failed_state.name}_{timestamp}{self.extension}"

    @staticmethod
    def format_article(content: str) -> str:
        return content if content.endswith("\n") else content + "\n"

    def format_failed_document(
        self,
        document: PublishingDocument,
        failed_state: DocumentState,
        error_message: str,
    ) -> str:
        sections = [
            f"""<!--
PIPELINE FAILURE - DEBUG DOCUMENT

  Topic: {document.topic_brief.topic}
  Failed At: {failed_state.name}
  Timestamp: {datetime.now(timezone.utc).isoformat()}
  Error: {error_message}
-->
"""
        ]

        report = document.fact_check_report
        if report is not None and failed_state is DocumentState.FACT_CHECKING:
            sections.append(self._format_fact_check_issues(report))

        if document.draft is not None:
            sections.append(f"---\n\n# Draft Content\n\n{document.draft.content}\n")

        research = document.research_brief
        if research is not None:
            lines = [
                "---",
                "",
                "<!--",
                "## Research Brief Summary",
                f"Key Facts: {research.fact_count}",
                f"Sources: {len(research.sources)}",
            ]
            if research.uncertain_areas:
                lines.append("")
                lines.append("Uncertain Areas:")
                lines.extend(f"  - {area}" for area in research.uncertain_areas)
            lines.append("-->")
            sections.append("\n".join(lines) + "\n")

        return "\n".join(sections)

    @staticmethod
    def _format_fact_check_issues(report: FactCheckReport) -> str:
        lines = [
            "<!--",
            "FACT-CHECK ISSUES",
            "",
            f"Overall Confidence: {report.overall_confidence.value}",
            f"Recommendation: {report.recommended_action.value}",
            f"Verified Claims: {len(report.verified_claims)}",
            f"Questionable Claims: {len(report.questionable_claims)}",
            f"Consistency Issues: {len(report.consistency_issues)}",
            "",
        ]

        if report.questionable_claims:
            lines += [_RULE, "QUESTIONABLE CLAIMS:", _RULE, ""]
            for number, claim in enumerate(report.questionable_claims, start=1):
                lines.append(f'[{number}] CLAIM: "{claim.claim}"')
                lines.append(f"    ISSUE: {claim.issue}")
                if claim.suggestion.strip():
                    lines.append(f"    SUGGESTION: {claim.suggestion}")
                lines.append("")

        if report.consistency_issues:
            lines += [_RULE, "CONSISTENCY ISSUES:", _RULE, ""]
            lines.extend(
                f"[{number}] {issue}"
                for number, issue in enumerate(report.consistency_issues, start=1)
            )
            lines.append("")

        if report.verified_claims:
            lines += [_RULE, "VERIFIED CLAIMS (for reference):", _RULE, ""]
            lines.extend(
                f"[{number}] {claim.claim} ({claim.status})"
                for number, claim in enumerate(report.verified_claims, start=1)
            )
            lines.append("")

        lines.append("-->")
        return "\n".join(lines) + "\n"


def get_output_service(settings: Optional[Settings] = None) -> OutputService:
    """Factory function to build the configured output service."""
    settings = settings or get_settings()
    return FileOutputService(
        directory=settings.output_directory,
        extension=settings.output_file_extension,
    )
