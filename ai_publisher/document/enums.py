"""
Document lifecycle enums.

DocumentState defines the legal states a PublishingDocument moves through and
the transition table between them. The remaining enums are the canonical value
sets stage reports use to classify their results.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, FrozenSet, Optional


class DocumentState(str, Enum):
    """States in the document publishing lifecycle."""

    CREATED = "created"
    RESEARCHING = "researching"
    DRAFTING = "drafting"
    FACT_CHECKING = "fact_checking"
    EDITING = "editing"
    CRITIQUING = "critiquing"
    AWAITING_APPROVAL = "awaiting_approval"
    PUBLISHED = "published"
    REJECTED = "rejected"

    @property
    def is_terminal(self) -> bool:
        """True for states with no outgoing transitions."""
        return self in _TERMINAL_STATES

    @property
    def is_processing(self) -> bool:
        """True while a stage collaborator owns the document."""
        return self in _PROCESSING_STATES

    def next_in_flow(self) -> Optional["DocumentState"]:
        """Next state on the happy path, or None off the linear track."""
        return _NEXT_IN_FLOW.get(self)

    def previous_for_revision(self) -> Optional["DocumentState"]:
        """State a revision loop returns to, or None if revision is not possible."""
        return _REVISION_TARGETS.get(self)

    def valid_transitions(self) -> FrozenSet["DocumentState"]:
        """All states reachable from this one in a single transition."""
        if self.is_terminal:
            return frozenset()
        targets = {DocumentState.REJECTED}
        following = self.next_in_flow()
        if following is not None:
            targets.add(following)
        previous = self.previous_for_revision()
        if previous is not None:
            targets.add(previous)
        return frozenset(targets)

    def can_transition_to(self, target: "DocumentState") -> bool:
        """Check whether moving from this state to ``target`` is legal."""
        return target in self.valid_transitions()


_TERMINAL_STATES = frozenset({DocumentState.PUBLISHED, DocumentState.REJECTED})

_PROCESSING_STATES = frozenset(
    {
        DocumentState.RESEARCHING,
        DocumentState.DRAFTING,
        DocumentState.FACT_CHECKING,
        DocumentState.EDITING,
        DocumentState.CRITIQUING,
    }
)

# AWAITING_APPROVAL is deliberately absent: it is off the linear track.
_NEXT_IN_FLOW: Dict[DocumentState, DocumentState] = {
    DocumentState.CREATED: DocumentState.RESEARCHING,
    DocumentState.RESEARCHING: DocumentState.DRAFTING,
    DocumentState.DRAFTING: DocumentState.FACT_CHECKING,
    DocumentState.FACT_CHECKING: DocumentState.EDITING,
    DocumentState.EDITING: DocumentState.CRITIQUING,
    DocumentState.CRITIQUING: DocumentState.PUBLISHED,
}

_REVISION_TARGETS: Dict[DocumentState, DocumentState] = {
    DocumentState.FACT_CHECKING: DocumentState.DRAFTING,
    DocumentState.CRITIQUING: DocumentState.EDITING,
}


def is_legal_transition(source: DocumentState, target: DocumentState) -> bool:
    """Module-level form of ``DocumentState.can_transition_to``."""
    return source.can_transition_to(target)


class RecommendedAction(str, Enum):
    """Recommended action reported by the fact checker and the critic."""

    APPROVE = "APPROVE"
    REVISE = "REVISE"
    REJECT = "REJECT"

    @classmethod
    def parse(cls, value: Optional[str]) -> "RecommendedAction":
        """Parse a recommendation case-insensitively; unknown values mean REVISE."""
        if not value or not value.strip():
            return cls.REVISE
        try:
            return cls(value.strip().upper())
        except ValueError:
            return cls.REVISE


class ReviewVerdict(str, Enum):
    """How a revision loop should react to a checking stage's report."""

    PASS = "pass"
    REVISE = "revise"
    REJECT = "reject"


class ConfidenceLevel(str, Enum):
    """Confidence level for fact-checking assessments and source reliability."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"

    @property
    def rank(self) -> int:
        return _CONFIDENCE_RANK[self]

    def meets_minimum(self, minimum: "ConfidenceLevel") -> bool:
        return self.rank >= minimum.rank

    @classmethod
    def parse(cls, value: Optional[str]) -> "ConfidenceLevel":
        """Parse a confidence level case-insensitively; unknown values mean LOW."""
        if not value or not value.strip():
            return cls.LOW
        try:
            return cls(value.strip().upper())
        except ValueError:
            return cls.LOW


_CONFIDENCE_RANK = {
    ConfidenceLevel.LOW: 1,
    ConfidenceLevel.MEDIUM: 2,
    ConfidenceLevel.HIGH: 3,
}
