"""Remote job board API: one JSON endpoint, authenticated by an API key header."""
from __future__ import annotations

import requests

from jobhub.errors import FetchError, ParseError
from jobhub.log import get_logger
from jobhub.models import FetchResult
from jobhub.normalize import normalize_many
from jobhub.retry import call_with_retry
from jobhub.sources.base import JobSource

log = get_logger(__name__)

API_KEY_HEADER = "x-api-key"


class RemoteJobSource(JobSource):
    name = "remote"

    def __init__(
        self,
        url: str,
        api_key: str = "",
        *,
        timeout: float = 15.0,
        attempts: int = 1,
        session: requests.Session | None = None,
    ) -> None:
        self.url = url
        self.api_key = api_key
        self.timeout = timeout
        self.attempts = attempts
        self.session = session or requests.Session()

    def _get(self) -> requests.Response:
        headers = {"Accept": "application/json"}
        if self.api_key:
            headers[API_KEY_HEADER] = self.api_key
        r = self.session.get(self.url, headers=headers, timeout=self.timeout)
        r.raise_for_status()
        return r

    def _fetch_payload(self) -> object:
        try:
            r = call_with_retry(
                self._get,
                max_attempts=self.attempts,
                base_delay=1.5,
                retryable=(requests.ConnectionError, requests.Timeout),
            )
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            raise FetchError(f"HTTP {status} from {self.url}", status_code=status) from exc
        except requests.RequestException as exc:
            raise FetchError(f"request to {self.url} failed: {exc}") from exc
        try:
            return r.json()
        except ValueError as exc:
            raise ParseError(f"response from {self.url} is not JSON") from exc

    def fetch(self) -> FetchResult:
        try:
            jobs = normalize_many(self._fetch_payload())
        except FetchError as exc:
            log.warning("Remote fetch failed, continuing with local jobs only: %s", exc)
            return FetchResult(jobs=[], error=exc)
        log.info("Fetched %d remote job(s) from %s", len(jobs), self.url)
        return FetchResult(jobs=jobs)
