"""
Aggregator: per-question statistics over a survey's stored responses.

Results are derived, never stored: every call recomputes from the full
response list of the given survey snapshot.

IMPORTANT: This module does NOT modify the survey.
It only produces read-only reports.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from saysomething.answers import as_option_ids, is_empty_answer, parse_int_answer
from saysomething.model import (
    ChoiceQuestion,
    Question,
    QuestionType,
    Response,
    ScaleQuestion,
    Survey,
    TextQuestion,
)


@dataclass
class QuestionResult:
    """Common header of every per-question summary."""
    id: str
    text: str
    type: QuestionType


@dataclass
class TextResult(QuestionResult):
    """All non-empty answers in submission order."""
    responses: List[object] = field(default_factory=list)


@dataclass
class OptionCount:
    id: str
    label: str
    count: int = 0


@dataclass
class ChoiceResult(QuestionResult):
    """One count per declared option, in declaration order."""
    options: List[OptionCount] = field(default_factory=list)

    def counts(self) -> Dict[str, int]:
        return {opt.id: opt.count for opt in self.options}


@dataclass
class ScaleResult(QuestionResult):
    """Integer-parsable answers and their mean (None when there are none)."""
    values: List[int] = field(default_factory=list)
    average: Optional[float] = None


@dataclass
class SurveyResults:
    """Aggregated results for a whole survey."""
    survey_id: str
    title: str
    total_responses: int = 0
    questions: List[QuestionResult] = field(default_factory=list)

    def get_question(self, question_id: str) -> Optional[QuestionResult]:
        for result in self.questions:
            if result.id == question_id:
                return result
        return None


def _aggregate_text(question: TextQuestion, responses: Sequence[Response]) -> TextResult:
    answers = [r.data.get(question.id) for r in responses]
    return TextResult(
        id=question.id,
        text=question.text,
        type=question.type,
        responses=[a for a in answers if not is_empty_answer(a)],
    )


def _aggregate_choice(question: ChoiceQuestion, responses: Sequence[Response]) -> ChoiceResult:
    counts = {opt.id: 0 for opt in question.options}

    for response in responses:
        answer = response.data.get(question.id)
        if is_empty_answer(answer):
            continue
        # A response counts at most once per option; undeclared ids are ignored.
        selected = {a for a in as_option_ids(answer) if isinstance(a, str)}
        for option_id in selected:
            if option_id in counts:
                counts[option_id] += 1

    return ChoiceResult(
        id=question.id,
        text=question.text,
        type=question.type,
        options=[OptionCount(id=opt.id, label=opt.label, count=counts[opt.id]) for opt in question.options],
    )


def _aggregate_scale(question: ScaleQuestion, responses: Sequence[Response]) -> ScaleResult:
    values = []
    for response in responses:
        num = parse_int_answer(response.data.get(question.id))
        if num is not None:
            values.append(num)

    average = None
    if values:
        average = round(sum(values) / len(values), 2)

    return ScaleResult(
        id=question.id,
        text=question.text,
        type=question.type,
        values=values,
        average=average,
    )


def aggregate_question(question: Question, responses: Sequence[Response]) -> QuestionResult:
    """Summarize the answers to one question."""
    if isinstance(question, TextQuestion):
        return _aggregate_text(question, responses)
    if isinstance(question, ChoiceQuestion):
        return _aggregate_choice(question, responses)
    if isinstance(question, ScaleQuestion):
        return _aggregate_scale(question, responses)
    raise TypeError(f"Unsupported Question type: {type(question)}")


def aggregate(survey: Survey) -> SurveyResults:
    """
    Compute results for every question of a survey snapshot.

    Question order in the output matches the survey's question order.

    Returns:
        SurveyResults with one summary per question
    """
    return SurveyResults(
        survey_id=survey.id,
        title=survey.title,
        total_responses=len(survey.responses),
        questions=[aggregate_question(q, survey.responses) for q in survey.questions],
    )
