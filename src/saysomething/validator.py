"""
Response Validator: checks a submitted answer set against a survey schema.

Validation is pure and total: it never mutates the survey, never raises
for a well-formed survey and answer mapping, and reports every failed
check at once so a client can show all problems together.
"""

from typing import Any, List, Mapping

from saysomething.answers import as_option_ids, is_empty_answer, parse_int_answer
from saysomething.model import (
    TEXT_MAX_LENGTH,
    ChoiceQuestion,
    Question,
    ScaleQuestion,
    Survey,
    TextQuestion,
    option_ids_of,
)


def _check_text(question: TextQuestion, answer: Any) -> List[str]:
    if not isinstance(answer, str):
        return [f'Question "{question.text}" must be text']
    if len(answer) > TEXT_MAX_LENGTH:
        return [f'Question "{question.text}" response too long (max {TEXT_MAX_LENGTH} chars)']
    return []


def _check_choice(question: ChoiceQuestion, answer: Any) -> List[str]:
    # Cardinality is not enforced: a single-choice question accepts a list.
    valid = option_ids_of(question)
    if all(isinstance(a, str) and a in valid for a in as_option_ids(answer)):
        return []
    return [f'Invalid option selected for "{question.text}"']


def _check_scale(question: ScaleQuestion, answer: Any) -> List[str]:
    num = parse_int_answer(answer)
    if num is None or num < question.min_value or num > question.max_value:
        return [
            f'Scale answer for "{question.text}" must be between '
            f"{question.min_value} and {question.max_value}"
        ]
    return []


def check_answer(question: Question, answer: Any) -> List[str]:
    """
    Validate a single answer against its question.

    Args:
        question: Schema entry
        answer: Raw answer value, or None when absent

    Returns:
        Violation messages for this question (empty = accepted)
    """
    if is_empty_answer(answer):
        if question.required:
            return [f"{question.text} is required"]
        return []

    if isinstance(question, TextQuestion):
        return _check_text(question, answer)
    if isinstance(question, ChoiceQuestion):
        return _check_choice(question, answer)
    if isinstance(question, ScaleQuestion):
        return _check_scale(question, answer)
    raise TypeError(f"Unsupported Question type: {type(question)}")


def validate(survey: Survey, raw_answers: Mapping[str, Any]) -> List[str]:
    """
    Check an answer set against every question of a survey, in schema order.

    Answers for ids the survey does not declare are ignored.

    Args:
        survey: Survey whose questions define the constraints
        raw_answers: Answers keyed by question id

    Returns:
        Flat list of human-readable violations (empty = accepted)
    """
    violations: List[str] = []
    for question in survey.questions:
        violations.extend(check_answer(question, raw_answers.get(question.id)))
    return violations
