"""DICOMweb QIDO-RS client.

Calls the `/studies` search endpoint over HTTP, with retry/backoff on
transient failures.
"""

from __future__ import annotations

import random
import time
from typing import Any, Mapping, Optional

import requests

from StudyFinder.utils.log import log

DEFAULT_TIMEOUT = 30.0
MAX_ATTEMPTS = 4
BASE_PAUSE = 0.5
MAX_SLEEP = 8.0

RETRYABLE_STATUS = {429, 500, 502, 503, 504}

HEADERS = {
    "User-Agent": "study-finder/0.1",
    "Accept": "application/dicom+json, application/json;q=0.9",
}


class QidoApiClient:
    """Low-level HTTP client for a QIDO-RS service.

    Responsible only for making network requests and returning the decoded
    DICOM JSON payload. Query compilation and parsing are handled elsewhere.
    """

    def __init__(
        self,
        qido_root: str,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        auth_token: Optional[str] = None,
        max_attempts: int = MAX_ATTEMPTS,
    ) -> None:
        self.qido_root = qido_root.rstrip("/")
        self.timeout = timeout
        self.max_attempts = max_attempts
        self._session = requests.Session()
        self._session.headers.update(HEADERS)
        if auth_token:
            self._session.headers["Authorization"] = f"Bearer {auth_token}"

    def close(self) -> None:
        """Close the underlying HTTP session and release pooled connections."""
        self._session.close()

    def __enter__(self) -> QidoApiClient:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def search_studies(self, params: Mapping[str, str]) -> list[dict[str, Any]]:
        """Search studies and return the DICOM JSON result list.

        Args:
            params: QIDO-RS query parameters.

        Returns:
            List of DICOM JSON study objects. Empty when the server answers
            204 No Content.

        Raises:
            requests.RequestException: Last request error after retries.
            ValueError: If the response body is not a JSON list.
        """
        url = f"{self.qido_root}/studies"
        resp = self._get_with_retry(url, params=params)
        resp.raise_for_status()
        if resp.status_code == 204 or not resp.content:
            return []
        payload = resp.json()
        if not isinstance(payload, list):
            raise ValueError(f"QIDO-RS response must be a JSON list, got {type(payload).__name__}")
        log.debug("QIDO-RS response ok: status=%s studies=%d", resp.status_code, len(payload))
        return payload

    def _get_with_retry(self, url: str, *, params: Mapping[str, str]) -> requests.Response:
        """Issue GET request with retry/backoff.

        Retries on timeouts/connection errors and selected HTTP status codes.

        Raises:
            requests.RequestException: Last observed error when all attempts failed.
        """
        last_err: Exception | None = None

        for attempt in range(1, self.max_attempts + 1):
            try:
                log.debug("QIDO-RS request attempt %d/%d to %s params=%s", attempt, self.max_attempts, url, dict(params))
                resp = self._session.get(url, params=params, timeout=self.timeout)
                if resp.status_code in RETRYABLE_STATUS:
                    raise requests.exceptions.HTTPError(f"HTTP {resp.status_code}", response=resp)
                return resp
            except (requests.exceptions.Timeout, requests.exceptions.ConnectionError) as e:
                last_err = e
            except requests.exceptions.HTTPError as e:
                last_err = e

            if attempt < self.max_attempts:
                log.debug("QIDO-RS retrying after attempt %d (error=%s)", attempt, last_err)
                self._sleep_backoff(attempt)

        assert last_err is not None
        raise last_err

    @staticmethod
    def _sleep_backoff(attempt: int) -> None:
        delay = min(BASE_PAUSE * (2 ** (attempt - 1)) + random.uniform(0, 0.25), MAX_SLEEP)
        time.sleep(delay)
