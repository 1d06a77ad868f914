"""
Tests for the Response Validator.

Tests verify that validation:
    - Accepts answer sets that satisfy every constraint
    - Reports one "required" violation per missing required answer
    - Applies type-specific checks only to present answers
    - Checks scale bounds inclusively
    - Rejects undeclared choice options regardless of cardinality
"""

from datetime import datetime, timezone

import pytest
from saysomething.model import (
    MultipleChoiceQuestion,
    Option,
    ScaleQuestion,
    SingleChoiceQuestion,
    Survey,
    TextQuestion,
)
from saysomething.validator import check_answer, validate


OPTIONS = (Option(id="a", label="A"), Option(id="b", label="B"))


def make_survey(*questions) -> Survey:
    return Survey(
        id="survey_1",
        title="T",
        description="",
        questions=tuple(questions),
        admin_token="tok",
        created_at=datetime.now(timezone.utc),
    )


@pytest.fixture
def full_survey():
    return make_survey(
        TextQuestion(id="name", text="Name", required=True),
        SingleChoiceQuestion(id="one", text="Pick one", required=True, options=OPTIONS),
        MultipleChoiceQuestion(id="many", text="Pick many", options=OPTIONS),
        ScaleQuestion(id="rate", text="Rate", min_value=1, max_value=5),
    )


class TestAcceptance:

    def test_valid_answers(self, full_survey):
        answers = {"name": "Ada", "one": "a", "many": ["a", "b"], "rate": "4"}
        assert validate(full_survey, answers) == []

    def test_optional_questions_may_be_absent(self, full_survey):
        assert validate(full_survey, {"name": "Ada", "one": "b"}) == []

    def test_unknown_keys_ignored(self, full_survey):
        answers = {"name": "Ada", "one": "a", "extra": 123}
        assert validate(full_survey, answers) == []


class TestRequired:

    @pytest.mark.parametrize("empty", [None, "", []])
    def test_empty_required_answer(self, empty):
        survey = make_survey(TextQuestion(id="q", text="Your name", required=True))
        assert validate(survey, {"q": empty}) == ["Your name is required"]

    def test_missing_required_answer(self):
        survey = make_survey(TextQuestion(id="q", text="Your name", required=True))
        assert validate(survey, {}) == ["Your name is required"]

    def test_required_skips_type_checks(self):
        """An empty required choice yields exactly the one required violation."""
        survey = make_survey(MultipleChoiceQuestion(id="q", text="Pick", required=True, options=OPTIONS))
        assert validate(survey, {"q": []}) == ["Pick is required"]

    def test_all_problems_reported(self, full_survey):
        violations = validate(full_survey, {"many": ["zzz"], "rate": "9"})
        assert len(violations) == 4
        assert violations[0] == "Name is required"
        assert violations[1] == "Pick one is required"


class TestText:

    def test_non_string(self):
        survey = make_survey(TextQuestion(id="q", text="Comment"))
        assert validate(survey, {"q": 42}) == ['Question "Comment" must be text']

    def test_max_length_boundary(self):
        survey = make_survey(TextQuestion(id="q", text="Comment"))
        assert validate(survey, {"q": "x" * 5000}) == []
        violations = validate(survey, {"q": "x" * 5001})
        assert len(violations) == 1
        assert "too long" in violations[0]


class TestChoice:

    def test_unknown_option_single(self):
        survey = make_survey(SingleChoiceQuestion(id="q", text="Pick", options=OPTIONS))
        assert validate(survey, {"q": "c"}) == ['Invalid option selected for "Pick"']

    def test_unknown_option_in_list(self):
        survey = make_survey(MultipleChoiceQuestion(id="q", text="Pick", options=OPTIONS))
        assert validate(survey, {"q": ["a", "c"]}) == ['Invalid option selected for "Pick"']

    def test_single_choice_accepts_list(self):
        """Cardinality is not enforced for single-choice questions."""
        survey = make_survey(SingleChoiceQuestion(id="q", text="Pick", options=OPTIONS))
        assert validate(survey, {"q": ["a", "b"]}) == []

    def test_multiple_choice_accepts_scalar(self):
        survey = make_survey(MultipleChoiceQuestion(id="q", text="Pick", options=OPTIONS))
        assert validate(survey, {"q": "b"}) == []

    def test_non_string_option(self):
        survey = make_survey(SingleChoiceQuestion(id="q", text="Pick", options=OPTIONS))
        assert validate(survey, {"q": 1}) == ['Invalid option selected for "Pick"']
        assert validate(survey, {"q": [{"id": "a"}]}) == ['Invalid option selected for "Pick"']


class TestScale:

    @pytest.fixture
    def survey(self):
        return make_survey(ScaleQuestion(id="q", text="Rate", min_value=1, max_value=5))

    @pytest.mark.parametrize("value", ["1", "5", 1, 5, "3"])
    def test_in_range(self, survey, value):
        assert validate(survey, {"q": value}) == []

    @pytest.mark.parametrize("value", ["0", "6", 0, 6, "abc", True])
    def test_out_of_range_or_not_numeric(self, survey, value):
        assert validate(survey, {"q": value}) == ['Scale answer for "Rate" must be between 1 and 5']


def test_check_answer_single_question():
    q = ScaleQuestion(id="q", text="Rate", min_value=0, max_value=10)
    assert check_answer(q, "10") == []
    assert check_answer(q, None) == []
    assert check_answer(q, "11") != []


def test_validate_is_pure(full_survey):
    answers = {"name": "Ada", "one": "a"}
    before = dict(answers)
    validate(full_survey, answers)
    validate(full_survey, answers)
    assert answers == before


def test_overlong_numeric_scale_answer_is_a_violation():
    survey = make_survey(ScaleQuestion(id="q", text="Rate", min_value=1, max_value=5))
    assert validate(survey, {"q": "1" * 5000}) == ['Scale answer for "Rate" must be between 1 and 5']


def test_non_ascii_digits_are_not_a_scale_value():
    survey = make_survey(ScaleQuestion(id="q", text="Rate", min_value=1, max_value=5))
    assert validate(survey, {"q": "٣"}) == ['Scale answer for "Rate" must be between 1 and 5']
