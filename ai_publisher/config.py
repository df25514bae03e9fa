"""
Configuration management for AI Publisher.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ChangesRequestedPolicy(str, Enum):
    """What the pipeline does when an approver asks for changes."""

    # Stop the run with a retriable failure at the checkpoint state.
    FAIL = "fail"
    # Treat the request as a revise outcome where a backward transition exists.
    LOOP_BACK = "loop_back"


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # Application
    app_name: str = Field(default="AI Publisher")
    debug: bool = Field(default=False)

    # Logging
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="json", description="'json' or 'console'")

    # Pipeline
    max_revision_cycles: int = Field(
        default=3,
        ge=0,
        description="Maximum revisions per revision loop before degrading",
    )
    phase_timeout_seconds: int = Field(
        default=300,
        ge=1,
        description="Timeout applied by callers around each phase; not enforced by the pipeline",
    )

    # Approval checkpoints
    approval_after_research: bool = Field(default=False)
    approval_after_draft: bool = Field(default=False)
    approval_after_factcheck: bool = Field(default=False)
    approval_before_publish: bool = Field(default=True)
    approval_auto_approve: bool = Field(
        default=True,
        description="Use the auto-approve decision maker instead of the console",
    )
    approval_timeout_seconds: int = Field(default=1800, ge=1)
    approval_changes_requested_policy: ChangesRequestedPolicy = Field(
        default=ChangesRequestedPolicy.FAIL
    )

    # Quality thresholds
    min_editor_score: float = Field(default=0.8, ge=0.0, le=1.0)

    # Output
    output_directory: str = Field(default="./output")
    output_file_extension: str = Field(default=".txt")


# Global settings instance
settings = Settings()


def get_settings() -> Settings:
    """Get application settings."""
    return settings


class ApprovalSettings(BaseModel):
    """Which checkpoints require an explicit approval decision."""

    model_config = ConfigDict(frozen=True)

    after_research: bool = False
    after_draft: bool = False
    after_factcheck: bool = False
    before_publish: bool = True


class PipelineConfig(BaseModel):
    """Read-only configuration for a pipeline run.

    Built once at orchestrator construction and safe to share across runs.
    """

    model_config = ConfigDict(frozen=True)

    max_revision_cycles: int = Field(default=3, ge=0)
    phase_timeout_seconds: int = Field(default=300, ge=1)
    approval: ApprovalSettings = Field(default_factory=ApprovalSettings)
    changes_requested_policy: ChangesRequestedPolicy = ChangesRequestedPolicy.FAIL
    min_editor_score: float = Field(default=0.8, ge=0.0, le=1.0)

    @classmethod
    def from_settings(cls, source: Optional[Settings] = None) -> "PipelineConfig":
        """Build a pipeline config from application settings."""
        source = source or get_settings()
        return cls(
            max_revision_cycles=source.max_revision_cycles,
            phase_timeout_seconds=source.phase_timeout_seconds,
            approval=ApprovalSettings(
                after_research=source.approval_after_research,
                after_draft=source.approval_after_draft,
                after_factcheck=source.approval_after_factcheck,
                before_publish=source.approval_before_publish,
            ),
            changes_requested_policy=source.approval_changes_requested_policy,
            min_editor_score=source.min_editor_score,
        )
