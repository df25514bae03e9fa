"""
Publishing pipeline orchestration.

Components:
    - orchestrator: PublishingPipeline, phase sequencing with revision loops
    - stages: Stage collaborator interfaces
    - result: PipelineSuccess / PipelineFailure run outcomes
    - errors: StageError (orchestrator failures), AgentError (stage failures)
"""

from .errors import AgentError, StageError
from .orchestrator import PublishingPipeline
from .result import PipelineFailure, PipelineResult, PipelineSuccess
from .stages import (
    CriticStage,
    EditorStage,
    FactCheckStage,
    ResearchStage,
    Stage,
    WriterStage,
)

__all__ = [
    "PublishingPipeline",
    # Outcomes
    "PipelineResult",
    "PipelineSuccess",
    "PipelineFailure",
    # Errors
    "AgentError",
    "StageError",
    # Stage interfaces
    "Stage",
    "ResearchStage",
    "WriterStage",
    "FactCheckStage",
    "EditorStage",
    "CriticStage",
]
