"""
Error taxonomy for survey operations.

Every error is recoverable by the caller. Each carries the HTTP status the
boundary layer should answer with, so transports need no lookup table.
"""

from typing import List, Sequence


class SurveyError(Exception):
    """Base class for all survey operation failures."""

    http_status = 500


class NotFound(SurveyError):
    """Raised when no survey exists with the requested id."""

    http_status = 404

    def __init__(self, survey_id: str):
        self.survey_id = survey_id
        super().__init__(f"Survey not found: {survey_id}")


class Unauthorized(SurveyError):
    """Raised when a supplied admin token does not match the survey's."""

    http_status = 403

    def __init__(self, survey_id: str):
        self.survey_id = survey_id
        super().__init__(f"Unauthorized for survey: {survey_id}")


class AlreadyActive(SurveyError):
    """Raised when creating a survey while one is already active."""

    http_status = 409

    def __init__(self, survey_id: str):
        self.survey_id = survey_id
        super().__init__(f"A survey is already active in this environment: {survey_id}")


class ValidationFailed(SurveyError):
    """Raised when a submitted response breaks one or more question constraints."""

    http_status = 400

    def __init__(self, violations: Sequence[str]):
        self.violations: List[str] = list(violations)
        super().__init__("; ".join(self.violations))


class MalformedInput(SurveyError):
    """Raised when a creation, update or submission payload is structurally invalid."""

    http_status = 400
