"""Tests for settings, pipeline configuration and logging setup."""

import logging

import pytest
import structlog
from pydantic import ValidationError

from ai_publisher.config import (
    ApprovalSettings,
    ChangesRequestedPolicy,
    PipelineConfig,
    Settings,
    get_settings,
)
from ai_publisher.log_config import configure_logging


class TestSettings:
    """Tests for environment-driven settings."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("MAX_REVISION_CYCLES", raising=False)
        settings = Settings()
        assert settings.max_revision_cycles == 3
        assert settings.phase_timeout_seconds == 300
        assert settings.approval_before_publish is True
        assert settings.approval_after_research is False
        assert settings.approval_auto_approve is True
        assert settings.approval_changes_requested_policy is ChangesRequestedPolicy.FAIL
        assert settings.min_editor_score == 0.8
        assert settings.output_file_extension == ".txt"

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("MAX_REVISION_CYCLES", "5")
        monkeypatch.setenv("APPROVAL_AFTER_DRAFT", "true")
        monkeypatch.setenv("APPROVAL_CHANGES_REQUESTED_POLICY", "loop_back")
        settings = Settings()
        assert settings.max_revision_cycles == 5
        assert settings.approval_after_draft is True
        assert settings.approval_changes_requested_policy is ChangesRequestedPolicy.LOOP_BACK

    def test_rejects_out_of_range_score(self):
        with pytest.raises(ValidationError):
            Settings(min_editor_score=1.5)

    def test_get_settings_returns_global(self):
        assert get_settings() is get_settings()


class TestPipelineConfig:
    def test_from_settings(self):
        config = PipelineConfig.from_settings(
            Settings(
                max_revision_cycles=1,
                approval_after_factcheck=True,
                approval_before_publish=False,
                min_editor_score=0.6,
                approval_changes_requested_policy="loop_back",
            )
        )
        assert config.max_revision_cycles == 1
        assert config.approval == ApprovalSettings(after_factcheck=True, before_publish=False)
        assert config.min_editor_score == 0.6
        assert config.changes_requested_policy is ChangesRequestedPolicy.LOOP_BACK

    def test_immutable(self):
        config = PipelineConfig()
        with pytest.raises(ValidationError):
            config.max_revision_cycles = 10


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in list(root.handlers):
        root.removeHandler(handler)
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)
    structlog.reset_defaults()


@pytest.mark.usefixtures("restore_logging")
class TestConfigureLogging:
    def test_sets_root_level(self):
        configure_logging(Settings(log_level="WARNING", log_format="console"))
        assert logging.getLogger().level == logging.WARNING

    def test_debug_overrides_level(self):
        configure_logging(Settings(debug=True, log_level="ERROR"))
        assert logging.getLogger().level == logging.DEBUG
