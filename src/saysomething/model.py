"""
Core Survey Model Objects

Defines the fundamental data structures of a SaySomething survey.

These are pure data classes representing:
    - Questions (schema entries, one of four closed variants)
    - Options (choices offered by choice questions)
    - Responses (one respondent's stored answer set)
    - Surveys (root container)

ARCHITECTURAL RULE:
    These objects:
        - Know nothing about HTTP, pages or CSV formatting
        - Are immutable once built
        - Are fully serializable
        - Represent structure, not behavior
"""

from abc import ABC
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, FrozenSet, List, Mapping, Optional, Sequence, Tuple


TEXT_MAX_LENGTH = 5000


class QuestionType(Enum):
    """
    The closed set of question kinds.

    Values are the wire names used by survey payloads.
    Every consumer (validator, aggregator, serialization) matches
    over all four; adding a member means touching each of them.
    """

    TEXT = "text"
    SINGLE_CHOICE = "single-choice"
    MULTIPLE_CHOICE = "multiple-choice"
    SCALE = "scale"


@dataclass(frozen=True)
class Option:
    """
    One selectable option of a choice question.

    Properties:
        id: Identifier submitted as the answer (unique within the question)
        label: Text shown to the respondent
    """

    id: str
    label: str


@dataclass(frozen=True)
class Question(ABC):
    """
    Base class for all question variants.

    Properties:
        id:
            Identifier unique within the survey.
            Answers are keyed by this id.

        text:
            Human-readable question text, also used in violation messages

        required:
            If True, an absent or empty answer is rejected
    """

    id: str
    text: str
    required: bool = False

    @property
    def type(self) -> QuestionType:
        raise NotImplementedError


@dataclass(frozen=True)
class TextQuestion(Question):
    """Free-text question. Answers are strings of at most TEXT_MAX_LENGTH characters."""

    @property
    def type(self) -> QuestionType:
        return QuestionType.TEXT


@dataclass(frozen=True)
class ChoiceQuestion(Question):
    """
    Shared structure of single- and multiple-choice questions.

    NOTE:
        The two variants differ in name only. Neither restricts how
        many options an answer may carry.
    """

    options: Tuple[Option, ...] = ()


@dataclass(frozen=True)
class SingleChoiceQuestion(ChoiceQuestion):

    @property
    def type(self) -> QuestionType:
        return QuestionType.SINGLE_CHOICE


@dataclass(frozen=True)
class MultipleChoiceQuestion(ChoiceQuestion):

    @property
    def type(self) -> QuestionType:
        return QuestionType.MULTIPLE_CHOICE


@dataclass(frozen=True)
class ScaleQuestion(Question):
    """
    Integer rating between two inclusive bounds.

    INVARIANT:
        min_value <= max_value
    """

    min_value: int = 1
    max_value: int = 5

    def __post_init__(self) -> None:
        if self.min_value > self.max_value:
            raise ValueError(
                f"Scale question {self.id!r}: min_value {self.min_value} "
                f"exceeds max_value {self.max_value}"
            )

    @property
    def type(self) -> QuestionType:
        return QuestionType.SCALE


def option_ids_of(question: Question) -> FrozenSet[str]:
    """
    Return the valid option ids of a choice question.

    Raises:
        TypeError: If the question is not a choice question
    """
    if isinstance(question, ChoiceQuestion):
        return frozenset(opt.id for opt in question.options)
    raise TypeError(f"Question type has no options: {type(question).__name__}")


def assign_question_ids(explicit_ids: Sequence[Optional[str]]) -> List[str]:
    """
    Resolve the final id of every question from its position.

    The question at index i keeps its explicit id when one was given,
    otherwise it becomes "q_<i>". Re-submitting questions in the same
    order therefore yields the same ids.

    Args:
        explicit_ids: Creator-supplied id (or None/"") per question, in order

    Returns:
        Assigned ids, same length and order as the input
    """
    return [qid if qid else f"q_{idx}" for idx, qid in enumerate(explicit_ids)]


@dataclass(frozen=True)
class Response:
    """
    One respondent's accepted answer set.

    Properties:
        id: Unique response identifier
        data: Read-only deep copy of the answers, keyed by question id
        submitted_at: UTC acceptance time
    """

    id: str
    data: Mapping[str, Any]
    submitted_at: datetime


@dataclass(frozen=True)
class PublicSurvey:
    """A survey as shown to respondents: no responses, no admin token."""

    id: str
    title: str
    description: str
    questions: Tuple[Question, ...]
    created_at: datetime
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class Survey:
    """
    Root container for one survey.

    Instances are snapshots. The registry replaces them wholesale on
    update and attaches the current responses when a full view is read.

    Properties:
        id:
            Survey identifier, immutable after creation

        title, description:
            Display metadata, replaceable by an authorized update

        questions:
            Ordered schema; question ids are unique within the survey

        admin_token:
            Bearer secret for update/admin/export operations,
            immutable after creation

        created_at, updated_at:
            UTC timestamps; updated_at is None until the first update

        responses:
            Stored responses in submission order
    """

    id: str
    title: str
    description: str
    questions: Tuple[Question, ...]
    admin_token: str
    created_at: datetime
    updated_at: Optional[datetime] = None
    responses: Tuple[Response, ...] = field(default_factory=tuple)

    def get_question(self, question_id: str) -> Optional[Question]:
        """
        Retrieve a question by ID.

        Returns:
            Question object or None if not found
        """
        for question in self.questions:
            if question.id == question_id:
                return question
        return None

    def public_view(self) -> PublicSurvey:
        return PublicSurvey(
            id=self.id,
            title=self.title,
            description=self.description,
            questions=self.questions,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )
