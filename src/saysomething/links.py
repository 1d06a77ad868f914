"""Shareable URLs for a survey, built from the configured public base URL."""

from dataclasses import dataclass
from urllib.parse import quote, urlencode


@dataclass(frozen=True)
class SurveyLinks:
    client_url: str
    admin_url: str
    results_url: str


def survey_links(base_url: str, survey_id: str, admin_token: str) -> SurveyLinks:
    """
    Build the respondent, admin and results links of a survey.

    The admin link carries the token as a query parameter, so it is
    itself a secret.
    """
    base = base_url.rstrip("/")
    sid = quote(survey_id, safe="")
    return SurveyLinks(
        client_url=f"{base}/survey/{sid}",
        admin_url=f"{base}/admin/{sid}?{urlencode({'token': admin_token})}",
        results_url=f"{base}/results/{sid}",
    )
