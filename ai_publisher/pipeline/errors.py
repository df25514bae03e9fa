"""
Pipeline errors.

AgentError is raised by stage collaborators for their own failures.
StageError is the orchestrator's failure: it names the state the run stopped
at and whether retrying the whole run is worthwhile.
"""

from __future__ import annotations

from typing import Optional

from ..document.enums import DocumentState


class AgentError(Exception):
    """
    Raised by a stage collaborator that could not produce its artifact.

    Attributes:
        stage: Name of the failing stage, if known
        message: Human-readable error description
    """

    def __init__(self, message: str, stage: Optional[str] = None):
        self.stage = stage
        self.message = message
        super().__init__(message)


class StageError(Exception):
    """
    Raised by the orchestrator when a run cannot continue.

    Attributes:
        message: Human-readable error description
        failed_at_state: State the run stopped at
        retriable: Whether running the whole pipeline again may succeed
    """

    def __init__(
        self,
        message: str,
        failed_at_state: DocumentState,
        retriable: bool = False,
    ):
        self.message = message
        self.failed_at_state = failed_at_state
        self.retriable = retriable
        super().__init__(message)

    @property
    def cause(self) -> Optional[BaseException]:
        """The collaborator error this failure was raised from, if any."""
        return self.__cause__

    def to_dict(self) -> dict:
        """Convert to dict for JSON serialization."""
        return {
            "error": "stage_failed",
            "failed_at_state": self.failed_at_state.value,
            "message": self.message,
            "retriable": self.retriable,
        }
