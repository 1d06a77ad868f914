"""
CSV export of a survey's raw responses.

Layout:
    "Response ID","Submitted At",<question text>,...
    one row per response, in submission order

Every field is double-quoted; list answers are joined with "; ".
"""

import csv
from io import StringIO
from typing import Any, List

from saysomething.answers import is_empty_answer
from saysomething.model import Response, Survey


def _cell(value: Any) -> str:
    if is_empty_answer(value):
        return ""
    if isinstance(value, (list, tuple)):
        return "; ".join(_cell(v) for v in value)
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def response_row(survey: Survey, response: Response) -> List[str]:
    row = [response.id, response.submitted_at.isoformat()]
    row.extend(_cell(response.data.get(q.id)) for q in survey.questions)
    return row


def survey_to_csv(survey: Survey) -> str:
    """Render all responses of a survey snapshot as CSV text."""
    out = StringIO()
    writer = csv.writer(out, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(["Response ID", "Submitted At"] + [q.text for q in survey.questions])
    for response in survey.responses:
        writer.writerow(response_row(survey, response))
    return out.getvalue()


def csv_filename(survey: Survey) -> str:
    return f"{survey.id}_results.csv"
