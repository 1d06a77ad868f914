"""
Response Store: append-only collection of accepted responses.

The store performs no locking of its own. Its owner (the registry) holds
the survey's lock around every append and snapshot, so a reader always
sees a whole number of appended responses.
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Iterator, List, Mapping, Optional, Tuple

from saysomething.answers import freeze_answers
from saysomething.model import Response


def new_response_id() -> str:
    return f"response_{uuid.uuid4().hex}"


class ResponseStore:
    """Responses of one survey, in submission order. No edit, no delete."""

    def __init__(self) -> None:
        self._responses: List[Response] = []

    def append(self, data: Mapping[str, Any], submitted_at: Optional[datetime] = None) -> Response:
        """
        Store a new response built from already-validated answers.

        Args:
            data: Answers keyed by question id
            submitted_at: Acceptance time (defaults to now, UTC)

        Returns:
            The stored Response with its fresh id
        """
        response = Response(
            id=new_response_id(),
            data=freeze_answers(data),
            submitted_at=submitted_at or datetime.now(timezone.utc),
        )
        self._responses.append(response)
        return response

    def snapshot(self) -> Tuple[Response, ...]:
        return tuple(self._responses)

    def __len__(self) -> int:
        return len(self._responses)

    def __iter__(self) -> Iterator[Response]:
        return iter(self.snapshot())
