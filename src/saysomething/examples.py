"""
Example survey builder for demos and tests.

Builds a short event-feedback survey covering every question type:
a required free-text question, a single-choice, a multiple-choice and
a 1-5 rating scale.
"""
from typing import Any, Dict, List

from saysomething.model import (
    MultipleChoiceQuestion,
    Option,
    Question,
    ScaleQuestion,
    SingleChoiceQuestion,
    TextQuestion,
)


def build_example_questions(scale_max: int = 5) -> List[Question]:
    return [
        TextQuestion(id="name", text="What is your name?", required=True),
        SingleChoiceQuestion(
            id="track",
            text="Which track did you attend?",
            options=(
                Option(id="web", label="Web"),
                Option(id="data", label="Data"),
                Option(id="ops", label="Ops"),
            ),
        ),
        MultipleChoiceQuestion(
            id="topics",
            text="Which topics should we cover next time?",
            options=(
                Option(id="testing", label="Testing"),
                Option(id="typing", label="Typing"),
                Option(id="packaging", label="Packaging"),
            ),
        ),
        ScaleQuestion(id="rating", text="How would you rate the event?", min_value=1, max_value=scale_max),
    ]


def build_example_payload() -> Dict[str, Any]:
    """The same survey in wire form, as a creator would POST it (ids left to the server)."""
    return {
        "title": "Event Feedback",
        "description": "Tell us how it went",
        "questions": [
            {"text": "What is your name?", "type": "text", "required": True},
            {
                "text": "Which track did you attend?",
                "type": "single-choice",
                "options": [{"id": "web", "label": "Web"}, {"id": "data", "label": "Data"}],
            },
            {
                "text": "Which topics should we cover next time?",
                "type": "multiple-choice",
                "options": [{"label": "Testing"}, {"label": "Typing"}],
            },
            {"text": "How would you rate the event?", "type": "scale", "minValue": 1, "maxValue": 5},
        ],
    }
