from typing import Any, Dict, Optional, Protocol
import pydantic
import requests
from requests import RequestException

from reportcard.config.logger import get_logger
from reportcard.config.settings import settings
from reportcard.core.models import ReportResult, SubmissionPayload


log = get_logger("scorer")


class CollaboratorError(Exception):
    pass


class Scorer(Protocol):
    def generate_report_card(
        self,
        name: str,
        total_marks: float,
        total_max_marks: float,
        num_subjects: int,
    ) -> ReportResult: ...


class HttpScorerService:
    REPORT_CARD_PATH = "/generate_report_card"

    def __init__(self, endpoint: str, timeout: Optional[float] = None) -> None:
        if not endpoint:
            raise CollaboratorError("Missing REPORTCARD_SCORER_URL in environment")
        self.endpoint = endpoint.rstrip("/")
        self.timeout = timeout

    @classmethod
    def from_settings(cls) -> "HttpScorerService":
        return cls(settings.scorer_url, settings.scorer_timeout)

    def generate_report_card(
        self,
        name: str,
        total_marks: float,
        total_max_marks: float,
        num_subjects: int,
    ) -> ReportResult:
        payload = SubmissionPayload(
            name=name,
            total_marks=total_marks,
            total_max_marks=total_max_marks,
            num_subjects=num_subjects,
        )
        log.info("Requesting report card for %d subject(s)", num_subjects)
        data = self._post(self.REPORT_CARD_PATH, payload.model_dump())
        try:
            return ReportResult.model_validate(data)
        except pydantic.ValidationError as exc:
            raise CollaboratorError("Scorer returned a malformed report card") from exc

    def _post(self, path: str, payload: Dict[str, Any]) -> Any:
        url = f"{self.endpoint}{path}"
        try:
            res = requests.post(url, json=payload, timeout=self.timeout)
        except RequestException as exc:
            log.warning("Scorer unreachable at %s: %s", url, exc)
            raise CollaboratorError(f"Could not reach the scorer: {exc}") from exc
        try:
            data = res.json()
        except ValueError:
            if res.status_code >= 400:
                raise CollaboratorError(f"Scorer failed with HTTP {res.status_code}")
            raise CollaboratorError("Scorer returned a non-JSON response")

        if res.status_code >= 400:
            message = self._error_message(data) or f"Scorer failed with HTTP {res.status_code}"
            log.warning("Scorer rejected request: %s", message)
            raise CollaboratorError(message)

        return data

    @staticmethod
    def _error_message(data: Any) -> str:
        if not isinstance(data, dict):
            return ""
        for key in ("message", "detail", "error"):
            value = data.get(key)
            if value:
                return str(value)
        return ""
