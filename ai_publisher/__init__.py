"""
AI Publisher

Orchestrates AI-assisted article production: research, drafting, fact
checking, editing and critique, with approval checkpoints and bounded
revision loops.
"""

import importlib.metadata

__version__ = importlib.metadata.version("ai-publisher")

from .approval import ApprovalService
from .config import PipelineConfig, Settings, get_settings
from .document import DocumentState, PublishingDocument, TopicBrief
from .pipeline import (
    PipelineFailure,
    PipelineResult,
    PipelineSuccess,
    PublishingPipeline,
    StageError,
)

__all__ = [
    "ApprovalService",
    "DocumentState",
    "PipelineConfig",
    "PipelineFailure",
    "PipelineResult",
    "PipelineSuccess",
    "PublishingDocument",
    "PublishingPipeline",
    "Settings",
    "StageError",
    "TopicBrief",
    "get_settings",
]
