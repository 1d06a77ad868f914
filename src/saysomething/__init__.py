"""
SaySomething survey engine.

Validates survey responses against a question schema, stores accepted
responses in memory and aggregates live per-question statistics.

ARCHITECTURAL GUARANTEE:
------------------------
This package contains ZERO knowledge of:
    - HTTP routing
    - Page rendering
    - QR-code images

Transports call into SurveyRegistry and translate SurveyError
subclasses into their own responses (see SurveyError.http_status).
"""

from saysomething.errors import (
    AlreadyActive,
    MalformedInput,
    NotFound,
    SurveyError,
    Unauthorized,
    ValidationFailed,
)
from saysomething.registry import SurveyRegistry

__version__ = "0.1.0"

__all__ = [
    "SurveyRegistry",
    "SurveyError",
    "NotFound",
    "Unauthorized",
    "AlreadyActive",
    "ValidationFailed",
    "MalformedInput",
]
