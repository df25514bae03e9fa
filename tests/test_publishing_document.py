"""Tests for the PublishingDocument state contract."""

from datetime import timedelta

import pytest

from ai_publisher.document import (
    DocumentState,
    PublishingDocument,
    StateContractError,
    to_camel_case,
    to_camel_case_or_default,
)
from conftest import (
    advance_to,
    make_draft,
    make_final_article,
    make_research_brief,
    make_topic_brief,
)


class TestPageName:
    """Tests for deriving page names from topics."""

    @pytest.mark.parametrize(
        "topic,expected",
        [
            ("event driven architecture", "EventDrivenArchitecture"),
            ("My-Topic_Name", "MyTopicName"),
            ("C++ templates", "CTemplates"),
            ("  spaced   out  ", "SpacedOut"),
            ("", ""),
        ],
    )
    def test_to_camel_case(self, topic, expected):
        assert to_camel_case(topic) == expected

    def test_default_when_nothing_usable(self):
        assert to_camel_case_or_default("!!!", "UnnamedPage") == "UnnamedPage"

    def test_document_page_name(self, document):
        assert document.page_name == "EventDrivenArchitecture"
        assert document.title == "event driven architecture"

    def test_explicit_id_and_page_name(self, topic_brief):
        document = PublishingDocument(topic_brief, document_id="doc-1", page_name="Custom")
        assert document.id == "doc-1"
        assert document.page_name == "Custom"


class TestTransitions:
    """Tests for state transitions on the document."""

    def test_starts_created(self, document):
        assert document.state is DocumentState.CREATED
        assert document.revision_count == 0
        assert not document.is_complete

    def test_transition_refreshes_updated_at(self, document):
        before = document.updated_at
        document.transition_to(DocumentState.RESEARCHING)
        assert document.state is DocumentState.RESEARCHING
        assert document.updated_at >= before

    def test_illegal_transition_names_pair(self, document):
        with pytest.raises(StateContractError) as exc_info:
            document.transition_to(DocumentState.EDITING)
        assert exc_info.value.current is DocumentState.CREATED
        assert exc_info.value.requested is DocumentState.EDITING
        assert "CREATED" in str(exc_info.value)
        assert "EDITING" in str(exc_info.value)

    def test_reject_from_any_non_terminal(self, document):
        advance_to(document, DocumentState.DRAFTING)
        document.reject()
        assert document.is_rejected
        assert document.is_complete
        with pytest.raises(StateContractError):
            document.transition_to(DocumentState.FACT_CHECKING)

    def test_published_is_terminal(self, document):
        advance_to(document, DocumentState.PUBLISHED)
        assert document.is_published
        with pytest.raises(StateContractError):
            document.reject()


class TestRevision:
    """Tests for revert_for_revision and can_revise."""

    def test_revert_from_fact_checking(self, document):
        advance_to(document, DocumentState.FACT_CHECKING)
        document.revert_for_revision()
        assert document.state is DocumentState.DRAFTING
        assert document.revision_count == 1

    def test_revert_from_critiquing(self, document):
        advance_to(document, DocumentState.CRITIQUING)
        document.revert_for_revision()
        assert document.state is DocumentState.EDITING
        assert document.revision_count == 1

    def test_each_revert_adds_exactly_one(self, document):
        advance_to(document, DocumentState.FACT_CHECKING)
        for expected in (1, 2, 3):
            document.revert_for_revision()
            assert document.revision_count == expected
            document.advance_to_next_state()

    @pytest.mark.parametrize(
        "state",
        [
            DocumentState.CREATED,
            DocumentState.RESEARCHING,
            DocumentState.DRAFTING,
            DocumentState.EDITING,
            DocumentState.PUBLISHED,
        ],
    )
    def test_revert_fails_elsewhere(self, document, state):
        advance_to(document, state)
        with pytest.raises(StateContractError):
            document.revert_for_revision()
        assert document.revision_count == 0

    def test_can_revise_bound(self, document):
        advance_to(document, DocumentState.FACT_CHECKING)
        assert document.can_revise(2)
        document.revert_for_revision()
        document.advance_to_next_state()
        assert document.can_revise(2)
        document.revert_for_revision()
        assert not document.can_revise(2)
        assert document.can_revise(3)

    def test_can_revise_false_when_terminal(self, document):
        document.transition_to(DocumentState.REJECTED)
        assert not document.can_revise(10)


class TestArtifacts:
    """Tests for attaching artifacts in their designated states."""

    def test_research_brief_in_researching(self, document):
        brief = make_research_brief()
        document.transition_to(DocumentState.RESEARCHING)
        document.set_research_brief(brief)
        assert document.research_brief is brief
        assert document.research_brief is brief

    def test_draft_outside_drafting_fails(self, document):
        advance_to(document, DocumentState.RESEARCHING)
        with pytest.raises(StateContractError):
            document.set_draft(make_draft())
        assert document.draft is None

    def test_final_article_only_in_editing(self, document):
        advance_to(document, DocumentState.FACT_CHECKING)
        with pytest.raises(StateContractError):
            document.set_final_article(make_final_article())
        document.advance_to_next_state()
        document.set_final_article(make_final_article())
        assert document.final_article.quality_score == 0.9

    def test_none_artifact_rejected(self, document):
        advance_to(document, DocumentState.DRAFTING)
        with pytest.raises(ValueError):
            document.set_draft(None)

    def test_has_content(self, document):
        assert not document.has_content()
        document.transition_to(DocumentState.RESEARCHING)
        document.set_research_brief(make_research_brief())
        assert document.has_content()


class TestContributions:
    """Tests for the contribution log."""

    def test_appends_in_order(self, document):
        document.record_contribution("research", timedelta(seconds=1))
        document.record_contribution("writer", timedelta(seconds=2), {"words": 10})
        assert [c.stage for c in document.contributions] == ["research", "writer"]
        assert document.contributions[1].metrics == {"words": 10}

    def test_log_is_read_only(self, document):
        document.record_contribution("research", timedelta(seconds=1))
        contributions = document.contributions
        with pytest.raises(AttributeError):
            contributions.append("x")
        assert len(document.contributions) == 1

    def test_requires_topic_brief(self):
        with pytest.raises(ValueError):
            PublishingDocument(None)

    def test_repr(self):
        document = PublishingDocument(make_topic_brief(topic="graph databases"))
        assert "GraphDatabases" in repr(document)
