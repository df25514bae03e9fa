"""
Pipeline run outcomes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from pathlib import Path
from typing import Optional, Union

from ..document.artifacts import FinalArticle
from ..document.enums import DocumentState
from ..document.work_item import PublishingDocument


@dataclass(frozen=True)
class PipelineSuccess:
    """A run that published its article."""

    document: PublishingDocument
    output_path: Path
    elapsed: timedelta
    success: bool = field(default=True, init=False)

    @property
    def final_article(self) -> Optional[FinalArticle]:
        return self.document.final_article

    @property
    def revision_count(self) -> int:
        return self.document.revision_count


@dataclass(frozen=True)
class PipelineFailure:
    """A run that stopped before publishing."""

    document: PublishingDocument
    message: str
    failed_at_state: DocumentState
    elapsed: timedelta
    failed_document_path: Optional[Path] = None
    retriable: bool = False
    success: bool = field(default=False, init=False)

    @property
    def revision_count(self) -> int:
        return self.document.revision_count


PipelineResult = Union[PipelineSuccess, PipelineFailure]
