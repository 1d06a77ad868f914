"""
Serialization helpers for survey objects (Question, Survey, results, etc.).

Two directions:
    - Inbound: creator payloads (JSON-like dicts, or YAML/JSON definition
      files) are parsed into model objects. Structural problems raise
      MalformedInput.
    - Outbound: model objects and results become camelCase dicts matching
      the HTTP API's wire format, and JSON/YAML text from those dicts.
"""
from __future__ import annotations

import dataclasses
import json
import os
import re
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

import yaml

from saysomething.aggregator import (
    ChoiceResult,
    QuestionResult,
    ScaleResult,
    SurveyResults,
    TextResult,
)
from saysomething.answers import thaw_answers
from saysomething.errors import MalformedInput
from saysomething.links import SurveyLinks
from saysomething.model import (
    ChoiceQuestion,
    MultipleChoiceQuestion,
    Option,
    PublicSurvey,
    Question,
    QuestionType,
    Response,
    ScaleQuestion,
    SingleChoiceQuestion,
    Survey,
    TextQuestion,
    assign_question_ids,
)


_INT_RE = re.compile(r"^\s*[+-]?[0-9]{1,20}\s*$")


@dataclass(frozen=True)
class SurveyPayload:
    """A parsed creation/update payload, ready for the registry."""

    title: str
    description: str
    questions: Tuple[Question, ...]
    survey_id: Optional[str] = None
    admin_token: Optional[str] = None


# =============================================================================
# Inbound
# =============================================================================


def _int_field(d: Mapping[str, Any], key: str, default: int) -> int:
    value = d.get(key)
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        raise MalformedInput(f"{key} must be an integer")
    if isinstance(value, int):
        return value
    if isinstance(value, str) and _INT_RE.match(value):
        return int(value)
    raise MalformedInput(f"{key} must be an integer")


def option_from_dict(d: Any, index: int) -> Option:
    if not isinstance(d, Mapping):
        raise MalformedInput("Each option must be an object")
    option_id = d.get("id") or f"opt_{index}"
    label = d.get("label")
    if label is None:
        label = ""
    if not isinstance(label, str):
        raise MalformedInput("Option label must be a string")
    return Option(id=str(option_id), label=label)


def _options_from_list(raw: Any, question_id: str) -> Tuple[Option, ...]:
    if not isinstance(raw, list):
        raise MalformedInput(f"Choice question {question_id} needs a list of options")
    options = tuple(option_from_dict(o, idx) for idx, o in enumerate(raw))
    ids = [opt.id for opt in options]
    if len(ids) != len(set(ids)):
        raise MalformedInput(f"Duplicate option ids in question {question_id}")
    return options


def question_from_dict(d: Mapping[str, Any], question_id: str) -> Question:
    """
    Build a Question from its wire form.

    Args:
        d: Question payload ({text, type, required, options?, minValue?, maxValue?})
        question_id: Id already assigned to this question

    Raises:
        MalformedInput: On unknown type or invalid type-specific fields
    """
    text = d.get("text", "")
    if not isinstance(text, str):
        raise MalformedInput(f"Question {question_id} text must be a string")
    required = d.get("required")
    if required is None:
        required = False
    if not isinstance(required, bool):
        raise MalformedInput(f"Question {question_id} required must be true or false")

    try:
        qtype = QuestionType(d.get("type"))
    except ValueError:
        raise MalformedInput(f"Unknown question type for {question_id}: {d.get('type')!r}")

    if qtype is QuestionType.TEXT:
        return TextQuestion(id=question_id, text=text, required=required)
    if qtype is QuestionType.SINGLE_CHOICE:
        options = _options_from_list(d.get("options"), question_id)
        return SingleChoiceQuestion(id=question_id, text=text, required=required, options=options)
    if qtype is QuestionType.MULTIPLE_CHOICE:
        options = _options_from_list(d.get("options"), question_id)
        return MultipleChoiceQuestion(id=question_id, text=text, required=required, options=options)
    if qtype is QuestionType.SCALE:
        min_value = _int_field(d, "minValue", 1)
        max_value = _int_field(d, "maxValue", 5)
        if min_value > max_value:
            raise MalformedInput(f"Scale question {question_id}: minValue exceeds maxValue")
        return ScaleQuestion(
            id=question_id, text=text, required=required,
            min_value=min_value, max_value=max_value,
        )
    raise TypeError(f"Unsupported question type: {qtype}")


def questions_from_payload(raw: Any) -> Tuple[Question, ...]:
    """
    Parse and id-assign a survey's questions.

    Accepts wire dicts and ready Question objects (mixed is fine).
    Questions without an id get "q_<index>".

    Raises:
        MalformedInput: If questions is not a non-empty list, an entry is
            neither a mapping nor a Question, or ids collide
    """
    if not isinstance(raw, (list, tuple)) or len(raw) == 0:
        raise MalformedInput("Invalid survey data: questions must be a non-empty list")

    explicit_ids: List[Optional[str]] = []
    for entry in raw:
        if isinstance(entry, Question):
            explicit_ids.append(entry.id)
        elif isinstance(entry, Mapping):
            qid = entry.get("id")
            explicit_ids.append(str(qid) if qid else None)
        else:
            raise MalformedInput("Invalid survey data: each question must be an object")

    assigned = assign_question_ids(explicit_ids)
    if len(assigned) != len(set(assigned)):
        raise MalformedInput("Invalid survey data: duplicate question ids")

    questions = []
    for entry, qid in zip(raw, assigned):
        if isinstance(entry, Question):
            questions.append(dataclasses.replace(entry, id=qid))
        else:
            questions.append(question_from_dict(entry, qid))
    return tuple(questions)


def survey_payload(
    title: Any,
    description: Any,
    questions: Any,
    survey_id: Optional[str] = None,
    admin_token: Optional[str] = None,
) -> SurveyPayload:
    """Validate the structural parts of a creation/update request."""
    if not isinstance(title, str) or not title.strip():
        raise MalformedInput("Invalid survey data: title is required")
    if description is not None and not isinstance(description, str):
        raise MalformedInput("Invalid survey data: description must be a string")
    return SurveyPayload(
        title=title,
        description=description or "",
        questions=questions_from_payload(questions),
        survey_id=survey_id or None,
        admin_token=admin_token or None,
    )


def survey_payload_from_dict(d: Any) -> SurveyPayload:
    """Parse a whole definition ({title, description, questions, surveyId?, adminToken?})."""
    if not isinstance(d, Mapping):
        raise MalformedInput("Invalid survey data: expected an object")
    return survey_payload(
        d.get("title"),
        d.get("description"),
        d.get("questions"),
        survey_id=d.get("surveyId"),
        admin_token=d.get("adminToken"),
    )


def survey_payload_from_json(s: str) -> SurveyPayload:
    return survey_payload_from_dict(json.loads(s))


def survey_payload_from_yaml(s: str) -> SurveyPayload:
    return survey_payload_from_dict(yaml.safe_load(s))


def load_survey_definition(path: Union[str, os.PathLike]) -> SurveyPayload:
    """
    Read a survey definition file. ".json" files are parsed as JSON,
    everything else as YAML.

    Raises:
        FileNotFoundError: If the file doesn't exist
        MalformedInput: If the content is not a valid definition
    """
    with open(path, "r", encoding="utf-8") as f:
        content = f.read()
    if os.fspath(path).lower().endswith(".json"):
        return survey_payload_from_json(content)
    return survey_payload_from_yaml(content)


# =============================================================================
# Outbound
# =============================================================================


def _timestamp(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    return value.isoformat()


def option_to_dict(o: Option) -> Dict[str, Any]:
    return {"id": o.id, "label": o.label}


def question_to_dict(q: Question) -> Dict[str, Any]:
    d: Dict[str, Any] = {
        "id": q.id,
        "text": q.text,
        "type": q.type.value,
        "required": q.required,
    }
    if isinstance(q, TextQuestion):
        return d
    if isinstance(q, ChoiceQuestion):
        d["options"] = [option_to_dict(o) for o in q.options]
        return d
    if isinstance(q, ScaleQuestion):
        d["minValue"] = q.min_value
        d["maxValue"] = q.max_value
        return d
    raise TypeError(f"Unsupported Question type: {type(q)}")


def response_to_dict(r: Response) -> Dict[str, Any]:
    return {"id": r.id, "data": thaw_answers(r.data), "submittedAt": _timestamp(r.submitted_at)}


def public_survey_to_dict(s: Union[PublicSurvey, Survey]) -> Dict[str, Any]:
    d = {
        "id": s.id,
        "title": s.title,
        "description": s.description,
        "questions": [question_to_dict(q) for q in s.questions],
        "createdAt": _timestamp(s.created_at),
    }
    if s.updated_at is not None:
        d["updatedAt"] = _timestamp(s.updated_at)
    return d


def survey_to_dict(s: Survey) -> Dict[str, Any]:
    """Full admin view, including the token and every response."""
    d = public_survey_to_dict(s)
    d["adminToken"] = s.admin_token
    d["responses"] = [response_to_dict(r) for r in s.responses]
    return d


def question_result_to_dict(r: QuestionResult) -> Dict[str, Any]:
    d: Dict[str, Any] = {"id": r.id, "text": r.text, "type": r.type.value}
    if isinstance(r, TextResult):
        d["responses"] = thaw_answers(list(r.responses))
        return d
    if isinstance(r, ChoiceResult):
        d["options"] = [{"id": o.id, "label": o.label, "count": o.count} for o in r.options]
        return d
    if isinstance(r, ScaleResult):
        d["values"] = list(r.values)
        d["average"] = r.average
        return d
    raise TypeError(f"Unsupported QuestionResult type: {type(r)}")


def results_to_dict(r: SurveyResults) -> Dict[str, Any]:
    return {
        "surveyId": r.survey_id,
        "title": r.title,
        "totalResponses": r.total_responses,
        "questions": [question_result_to_dict(q) for q in r.questions],
    }


def creation_receipt(survey: Survey, links: SurveyLinks) -> Dict[str, Any]:
    """Body returned to the creator: the ids and links needed to share and manage."""
    return {
        "id": survey.id,
        "adminToken": survey.admin_token,
        "clientUrl": links.client_url,
        "adminUrl": links.admin_url,
    }


def survey_to_json(s: Survey) -> str:
    return json.dumps(survey_to_dict(s), sort_keys=True)


def survey_to_yaml(s: Survey) -> str:
    return yaml.safe_dump(survey_to_dict(s), sort_keys=False)


def results_to_json(r: SurveyResults) -> str:
    return json.dumps(results_to_dict(r), sort_keys=True)
