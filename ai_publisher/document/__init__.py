"""
Publishing document model.

The document is the unit of work carried through the pipeline:

- DocumentState: lifecycle states and the legal transitions between them
- PublishingDocument: the mutable work item holding one run's artifacts
- Artifacts: the immutable outputs each stage attaches to the document

Lifecycle:
    CREATED → RESEARCHING → DRAFTING → FACT_CHECKING → EDITING → CRITIQUING → PUBLISHED
    (REJECTED reachable from any non-terminal state; FACT_CHECKING → DRAFTING and
    CRITIQUING → EDITING for revisions)
"""

from .artifacts import (
    AgentContribution,
    ArticleDraft,
    CriticReport,
    DocumentMetadata,
    FactCheckReport,
    FinalArticle,
    KeyFact,
    QuestionableClaim,
    ResearchBrief,
    SourceCitation,
    TopicBrief,
    VerifiedClaim,
)
from .enums import (
    ConfidenceLevel,
    DocumentState,
    RecommendedAction,
    ReviewVerdict,
    is_legal_transition,
)
from .primitives import generate_id, to_camel_case, to_camel_case_or_default, utc_now
from .work_item import PublishingDocument, StateContractError

__all__ = [
    # Enums
    "ConfidenceLevel",
    "DocumentState",
    "RecommendedAction",
    "ReviewVerdict",
    "is_legal_transition",
    # Artifacts
    "AgentContribution",
    "ArticleDraft",
    "CriticReport",
    "DocumentMetadata",
    "FactCheckReport",
    "FinalArticle",
    "KeyFact",
    "QuestionableClaim",
    "ResearchBrief",
    "SourceCitation",
    "TopicBrief",
    "VerifiedClaim",
    # Work item
    "PublishingDocument",
    "StateContractError",
    # Primitives
    "generate_id",
    "to_camel_case",
    "to_camel_case_or_default",
    "utc_now",
]
