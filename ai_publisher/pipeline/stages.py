"""
Stage collaborator interfaces.

Each stage attaches one artifact to the document while the document is in
the stage's state, and reports whether its own output is usable.

Design: the orchestrator depends only on these interfaces, so generation
backends can be swapped without changing phase sequencing.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

from ..document.work_item import PublishingDocument


class Stage(ABC):
    """Abstract base class for pipeline stages."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Stage name for logging, metrics and contributions."""
        pass

    @abstractmethod
    def process(self, document: PublishingDocument) -> PublishingDocument:
        """Produce this stage's artifact and attach it to the document.

        Args:
            document: Document in this stage's state

        Returns:
            The same document, for chaining

        Raises:
            AgentError: If the artifact could not be produced
        """
        pass

    @abstractmethod
    def validate(self, document: PublishingDocument) -> bool:
        """Whether the attached artifact is usable."""
        pass


class ResearchStage(Stage):
    """Attaches a ResearchBrief in RESEARCHING."""


class WriterStage(Stage):
    """Attaches an ArticleDraft in DRAFTING. Also used for revision drafts."""


class FactCheckStage(Stage):
    """Attaches a FactCheckReport in FACT_CHECKING."""


class EditorStage(Stage):
    """Attaches a FinalArticle in EDITING."""

    @abstractmethod
    def set_existing_pages(self, pages: Sequence[str]) -> None:
        """Names of already published pages available for cross-linking."""
        pass


class CriticStage(Stage):
    """Attaches a CriticReport in CRITIQUING."""
