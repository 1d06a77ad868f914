"""
Tests for the Core Survey Model Objects

These tests verify:
    - Question variant creation and their types
    - The scale bound invariant
    - Option id lookup for choice questions
    - Positional question id assignment
    - Survey retrieval methods and the public view
"""

from datetime import datetime, timezone

import pytest
from saysomething.model import (
    MultipleChoiceQuestion,
    Option,
    QuestionType,
    Response,
    ScaleQuestion,
    SingleChoiceQuestion,
    Survey,
    TextQuestion,
    assign_question_ids,
    option_ids_of,
)


def _survey(**overrides) -> Survey:
    fields = dict(
        id="survey_1",
        title="Feedback",
        description="",
        questions=(
            TextQuestion(id="q_0", text="Name?", required=True),
            ScaleQuestion(id="q_1", text="Rating?"),
        ),
        admin_token="secret",
        created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
    )
    fields.update(overrides)
    return Survey(**fields)


class TestQuestion:
    """Test the question variants."""

    def test_text_question_defaults(self):
        """Should create a non-required text question."""
        q = TextQuestion(id="q_0", text="Comments?")
        assert q.required is False
        assert q.type == QuestionType.TEXT

    def test_choice_question_types(self):
        """Single and multiple choice should report distinct types."""
        opts = (Option(id="a", label="A"),)
        assert SingleChoiceQuestion(id="q", text="t", options=opts).type == QuestionType.SINGLE_CHOICE
        assert MultipleChoiceQuestion(id="q", text="t", options=opts).type == QuestionType.MULTIPLE_CHOICE

    def test_scale_defaults(self):
        """Scale should default to 1..5."""
        q = ScaleQuestion(id="q", text="Rate")
        assert (q.min_value, q.max_value) == (1, 5)
        assert q.type == QuestionType.SCALE

    def test_scale_equal_bounds_allowed(self):
        """min_value == max_value is a valid (degenerate) scale."""
        q = ScaleQuestion(id="q", text="Rate", min_value=3, max_value=3)
        assert q.min_value == q.max_value

    def test_scale_inverted_bounds_rejected(self):
        """min_value > max_value is a programming error."""
        with pytest.raises(ValueError):
            ScaleQuestion(id="q", text="Rate", min_value=5, max_value=1)

    def test_questions_are_immutable(self):
        """Questions are frozen."""
        q = TextQuestion(id="q", text="t")
        with pytest.raises(AttributeError):
            q.text = "changed"

    def test_wire_names(self):
        """Enum values match the payload type names."""
        assert [t.value for t in QuestionType] == ["text", "single-choice", "multiple-choice", "scale"]


class TestOptionIds:
    """Test option_ids_of."""

    def test_option_ids(self):
        q = SingleChoiceQuestion(
            id="q", text="t", options=(Option(id="a", label="A"), Option(id="b", label="B"))
        )
        assert option_ids_of(q) == {"a", "b"}

    def test_empty_options(self):
        assert option_ids_of(MultipleChoiceQuestion(id="q", text="t")) == frozenset()

    def test_non_choice_question(self):
        """Only choice questions have options."""
        with pytest.raises(TypeError):
            option_ids_of(ScaleQuestion(id="q", text="t"))


class TestAssignQuestionIds:
    """Test positional id assignment."""

    def test_missing_ids_use_position(self):
        assert assign_question_ids([None, None, None]) == ["q_0", "q_1", "q_2"]

    def test_explicit_ids_kept(self):
        assert assign_question_ids(["name", None, "age"]) == ["name", "q_1", "age"]

    def test_empty_string_counts_as_missing(self):
        assert assign_question_ids(["", "x"]) == ["q_0", "x"]

    def test_deterministic(self):
        """Same order in, same ids out."""
        ids = [None, "custom", None]
        assert assign_question_ids(ids) == assign_question_ids(ids)

    def test_empty_input(self):
        assert assign_question_ids([]) == []


class TestSurvey:
    """Test Survey retrieval and views."""

    def test_get_question(self):
        survey = _survey()
        assert survey.get_question("q_1").text == "Rating?"
        assert survey.get_question("missing") is None

    def test_responses_default_empty(self):
        assert _survey().responses == ()

    def test_public_view_hides_token_and_responses(self):
        response = Response(id="r1", data={"q_0": "x"}, submitted_at=datetime.now(timezone.utc))
        view = _survey(responses=(response,)).public_view()
        assert view.id == "survey_1"
        assert not hasattr(view, "admin_token")
        assert not hasattr(view, "responses")
        assert len(view.questions) == 2
