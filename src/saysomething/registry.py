"""
Survey Registry: owns every survey of the process and serializes its mutations.

One registry is built at process start and handed to the request handlers.
It enforces two policies:
    - single active survey: the first creation wins, later ones fail
    - admin token: update, admin view and export require the survey's token

CONCURRENCY:
    Each survey has its own lock. Mutations (update, submit) hold it for
    their whole duration; reads hold it only long enough to take a
    snapshot, then compute outside it. A read therefore sees the state
    before or after a mutation, never in between.
"""

import hmac
import logging
import secrets
import threading
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional

from saysomething.aggregator import SurveyResults, aggregate
from saysomething.answers import freeze_answers
from saysomething.config import Settings
from saysomething.errors import AlreadyActive, MalformedInput, NotFound, Unauthorized, ValidationFailed
from saysomething.export import survey_to_csv
from saysomething.links import SurveyLinks, survey_links
from saysomething.model import PublicSurvey, Survey
from saysomething.serialization import SurveyPayload, load_survey_definition, survey_payload
from saysomething.store import ResponseStore
from saysomething.validator import validate

logger = logging.getLogger(__name__)


def generate_admin_token(nbytes: int = 16) -> str:
    return secrets.token_urlsafe(nbytes)


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class _SurveyEntry:
    """Registry-private record: current definition, its responses and its lock."""
    definition: Survey
    store: ResponseStore = field(default_factory=ResponseStore)
    lock: threading.Lock = field(default_factory=threading.Lock)

    def snapshot(self) -> Survey:
        with self.lock:
            return replace(self.definition, responses=self.store.snapshot())


class SurveyRegistry:
    """In-memory surveys keyed by id."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or Settings()
        self._surveys: Dict[str, _SurveyEntry] = {}
        self._active_id: Optional[str] = None
        self._next_id = 1
        self._lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings: Settings) -> "SurveyRegistry":
        """Build a registry, pre-seeding the survey file when one is configured."""
        registry = cls(settings)
        if settings.survey_file:
            registry.load_survey_file(settings.survey_file)
        return registry

    @property
    def active_survey_id(self) -> Optional[str]:
        return self._active_id

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _entry(self, survey_id: str) -> _SurveyEntry:
        entry = self._surveys.get(survey_id)
        if entry is None:
            raise NotFound(survey_id)
        return entry

    @staticmethod
    def _authorize(entry: _SurveyEntry, token: Optional[str]) -> None:
        expected = entry.definition.admin_token
        if token is None or not hmac.compare_digest(str(token).encode(), expected.encode()):
            raise Unauthorized(entry.definition.id)

    def _allocate_id(self) -> str:
        while True:
            survey_id = f"survey_{self._next_id}"
            self._next_id += 1
            if survey_id not in self._surveys:
                return survey_id

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def create_survey(
        self,
        title: Any,
        description: Any,
        questions: Any,
        admin_token: Optional[str] = None,
        survey_id: Optional[str] = None,
    ) -> Survey:
        """
        Create the process' survey.

        Args:
            title: Non-empty survey title
            description: Optional description (None becomes "")
            questions: Non-empty list of question dicts or Question objects
            admin_token: Token to use; a fresh random one when omitted
            survey_id: Id to use; "survey_<n>" when omitted

        Raises:
            AlreadyActive: If a survey already exists (carries its id)
            MalformedInput: If title or questions are structurally invalid
        """
        # The single-active rule is reported ahead of any payload problem.
        with self._lock:
            if self._active_id is not None:
                raise AlreadyActive(self._active_id)
        payload = survey_payload(title, description, questions, survey_id=survey_id, admin_token=admin_token)
        return self._create(payload)

    def _create(self, payload: SurveyPayload) -> Survey:
        with self._lock:
            if self._active_id is not None:
                raise AlreadyActive(self._active_id)

            survey = Survey(
                id=payload.survey_id or self._allocate_id(),
                title=payload.title,
                description=payload.description,
                questions=payload.questions,
                admin_token=payload.admin_token or generate_admin_token(self.settings.admin_token_bytes),
                created_at=_now(),
            )
            self._surveys[survey.id] = _SurveyEntry(definition=survey)
            self._active_id = survey.id

        logger.info("Survey created: %s (%d questions)", survey.id, len(survey.questions))
        return survey

    def load_survey_file(self, path: str) -> Survey:
        """Pre-seed the survey from a YAML or JSON definition file."""
        survey = self._create(load_survey_definition(path))
        logger.info("Survey loaded from %s", path)
        return survey

    def update_survey(
        self,
        survey_id: str,
        token: Optional[str],
        title: Any,
        description: Any,
        questions: Any,
    ) -> Survey:
        """
        Replace title, description and questions of a survey.

        Responses, id and admin token are kept. Question ids are
        re-assigned from the new question order.

        Raises:
            NotFound, Unauthorized, MalformedInput
        """
        entry = self._entry(survey_id)
        self._authorize(entry, token)
        payload = survey_payload(title, description, questions)

        with entry.lock:
            entry.definition = replace(
                entry.definition,
                title=payload.title,
                description=payload.description,
                questions=payload.questions,
                updated_at=_now(),
            )
            updated = replace(entry.definition, responses=entry.store.snapshot())

        logger.info("Survey updated: %s", survey_id)
        return updated

    def submit_response(self, survey_id: str, raw_answers: Any) -> str:
        """
        Validate and store one response.

        Returns:
            The new response id

        Raises:
            NotFound: Unknown survey
            MalformedInput: If the answers are not a mapping
            ValidationFailed: If any question constraint is broken
        """
        entry = self._entry(survey_id)
        if not isinstance(raw_answers, Mapping):
            raise MalformedInput("Response must be an object keyed by question id")

        # Validate the same frozen copy that gets stored, against the
        # definition in force when the append happens.
        answers = freeze_answers(raw_answers)
        with entry.lock:
            violations = validate(entry.definition, answers)
            if violations:
                raise ValidationFailed(violations)
            response = entry.store.append(answers)

        logger.debug("Response %s stored for survey %s", response.id, survey_id)
        return response.id

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_public_view(self, survey_id: str) -> PublicSurvey:
        return self._entry(survey_id).snapshot().public_view()

    def get_admin_view(self, survey_id: str, token: Optional[str]) -> Survey:
        entry = self._entry(survey_id)
        self._authorize(entry, token)
        return entry.snapshot()

    def get_results(self, survey_id: str, token: Optional[str] = None) -> SurveyResults:
        """
        Aggregate a survey's responses.

        Results are public; a token is only checked when a non-empty one is supplied.
        """
        entry = self._entry(survey_id)
        if token:
            self._authorize(entry, token)
        return aggregate(entry.snapshot())

    def export_csv(self, survey_id: str, token: Optional[str]) -> str:
        return survey_to_csv(self.get_admin_view(survey_id, token))

    def links_for(self, survey: Survey) -> SurveyLinks:
        return survey_links(self.settings.base_url, survey.id, survey.admin_token)

    def health(self) -> Dict[str, Any]:
        return {"status": "ok", "surveys": len(self._surveys)}
