"""
Stage implementations.

v0: deterministic stub stages for dry runs and tests. Generation backends
implement the interfaces in ai_publisher.pipeline.stages.
"""

from .stub import (
    StubCriticStage,
    StubEditorStage,
    StubFactCheckStage,
    StubResearchStage,
    StubWriterStage,
    create_stub_pipeline,
)

__all__ = [
    "StubResearchStage",
    "StubWriterStage",
    "StubFactCheckStage",
    "StubEditorStage",
    "StubCriticStage",
    "create_stub_pipeline",
]
