from __future__ import annotations

import logging
import re
from typing import Any

import pydantic
import requests

from pingconsole.errors import (
    ApiError,
    InvalidResponseError,
    NetworkError,
    ValidationError,
)
from pingconsole.models import ProbeResult
from pingconsole.profile import DeploymentProfile

logger = logging.getLogger(__name__)

DEFAULT_RESULTS_LIMIT = 50

_URL_SCHEME_RE = re.compile(r"^https?://", re.IGNORECASE)


def validate_url(url: str | None) -> str:
    url = (url or "").strip()
    if not url or not _URL_SCHEME_RE.match(url):
        raise ValidationError(
            "Please enter a valid URL starting with http:// or https://"
        )
    return url


def _validate_limit(limit: Any) -> int:
    if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
        raise ValidationError(f"limit must be a positive integer, got {limit!r}")
    return limit


def _error_message(resp: requests.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        body = None

    if isinstance(body, dict):
        for key in ("error", "message"):
            value = body.get(key)
            if value:
                return str(value)
    return f"HTTP {resp.status_code}"


class MonitorApiClient:
    """Talks to the probe backend: submit a check, list results, clear them.

    Every failure leaves this class as a ``ConsoleError`` subclass; callers
    never see ``requests`` exceptions.
    """

    def __init__(
        self,
        base_url: str,
        *,
        profile: DeploymentProfile | None = None,
        timeout_s: float | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.profile = profile or DeploymentProfile()
        self.timeout_s = timeout_s
        # None: every call goes through requests.request with its own session.
        self._session = session

    def _request(self, method: str, path: str, *, expect_json: bool = True, **kwargs) -> Any:
        url = f"{self.base_url}{path}"
        logger.debug("%s %s", method, url)
        try:
            send = self._session.request if self._session is not None else requests.request
            resp = send(method, url, timeout=self.timeout_s, **kwargs)
        except requests.RequestException as exc:
            logger.warning("%s %s failed: %s", method, url, exc)
            raise NetworkError(
                f"Network error: {exc.__class__.__name__}: {exc}"
            ) from exc

        if not 200 <= resp.status_code < 300:
            message = _error_message(resp)
            logger.warning("%s %s returned HTTP %s: %s", method, url, resp.status_code, message)
            raise ApiError(message, status_code=resp.status_code)

        if not expect_json:
            return None

        try:
            return resp.json()
        except ValueError as exc:
            snippet = resp.text[:120].replace("\n", "\\n")
            logger.warning("%s %s returned invalid JSON: %s", method, url, snippet)
            raise NetworkError(f"Network error: invalid JSON response: {snippet}") from exc

    def submit_check(self, url: str) -> ProbeResult:
        url = validate_url(url)
        payload = self._request("POST", self.profile.check_path, json={"url": url})

        statut = payload.get("statut") if isinstance(payload, dict) else None
        if not statut:
            raise InvalidResponseError("Invalid API response: missing 'statut'")
        try:
            return ProbeResult.model_validate(statut)
        except pydantic.ValidationError as exc:
            raise InvalidResponseError(
                f"Invalid API response: {exc.error_count()} bad field(s) in 'statut'"
            ) from exc

    def fetch_recent(self, limit: int = DEFAULT_RESULTS_LIMIT) -> list[ProbeResult]:
        limit = _validate_limit(limit)
        payload = self._request("GET", self.profile.results_path, params={"limit": limit})

        if isinstance(payload, dict):
            items = payload.get("resultats") or []
        elif isinstance(payload, list):
            items = payload
        else:
            raise InvalidResponseError("Invalid API response: expected a list of results")

        if not isinstance(items, list):
            raise InvalidResponseError("Invalid API response: 'resultats' is not a list")
        try:
            return [ProbeResult.model_validate(item) for item in items]
        except pydantic.ValidationError as exc:
            raise InvalidResponseError("Invalid API response: malformed result entry") from exc

    def clear_all(self) -> None:
        self._request("DELETE", self.profile.results_path, expect_json=False)
