"""HTTP collaborator that downloads pages with locale negotiation and retries."""

from __future__ import annotations

import logging
import re
import time
from typing import Any, Callable, Sequence

import requests

from filmtags.config import DEFAULT_MAX_RETRIES, DEFAULT_TIMEOUT_SECONDS, DEFAULT_USER_AGENT
from filmtags.errors import PageUnavailableError
from filmtags.locale import Locale

logger = logging.getLogger(__name__)

_RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}
_LANGUAGE_RANGE_RE = re.compile(r"^[a-z]{2}(-[A-Z]{2})?$")


def accept_language(languages: Sequence[Locale | str]) -> str:
    """Join language ranges for ``Accept-Language``, rejecting malformed values."""

    ranges: list[str] = []
    for language in languages:
        value = language.http_header if isinstance(language, Locale) else language
        if not _LANGUAGE_RANGE_RE.fullmatch(value):
            raise ValueError(f"Malformed language string: {value!r}")
        ranges.append(value)
    return ",".join(ranges)


def _is_retryable(exc: Exception) -> bool:
    if isinstance(exc, _HttpStatusError):
        return exc.status_code in _RETRYABLE_STATUS_CODES
    return isinstance(exc, (requests.ConnectionError, requests.Timeout))


class _HttpStatusError(Exception):
    def __init__(self, status_code: int, reason: str) -> None:
        super().__init__(f"HTTP response: {status_code} {reason}".strip())
        self.status_code = status_code


class PageFetcher:
    """Fetch page bodies through a ``requests`` session."""

    def __init__(
        self,
        *,
        languages: Sequence[Locale] = (),
        user_agent: str = DEFAULT_USER_AGENT,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        max_retries: int = DEFAULT_MAX_RETRIES,
        retry_base_seconds: float = 0.5,
        session: Any | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if max_retries < 0:
            raise ValueError("max_retries cannot be negative")
        if retry_base_seconds < 0:
            raise ValueError("retry_base_seconds cannot be negative")

        self._session = session or requests.Session()
        self._headers = {
            "User-Agent": user_agent,
            "Accept-Charset": "utf-8",
            "Accept": "text/html,application/xhtml+xml",
        }
        if languages:
            self._headers["Accept-Language"] = accept_language(languages)
        self._timeout_seconds = timeout_seconds
        self._max_retries = max_retries
        self._retry_base_seconds = retry_base_seconds
        self._sleep = sleep

    @property
    def headers(self) -> dict[str, str]:
        return dict(self._headers)

    def fetch(self, url: str) -> bytes:
        """Return the body of ``url``; any failure maps to ``PageUnavailableError``."""

        attempts = self._max_retries + 1
        last_error: Exception | None = None

        for attempt in range(attempts):
            try:
                return self._request(url)
            except (requests.RequestException, _HttpStatusError) as exc:
                last_error = exc
                should_retry = attempt < self._max_retries and _is_retryable(exc)
                if not should_retry:
                    break
                delay = self._retry_base_seconds * (2**attempt)
                logger.warning("Fetching %s failed (%s), retrying in %.2fs", url, exc, delay)
                self._sleep(delay)

        detail = str(last_error) if last_error is not None else "unknown HTTP error"
        raise PageUnavailableError(url, f"Page unavailable after {attempts} attempt(s): {detail}") from last_error

    def _request(self, url: str) -> bytes:
        logger.debug("GET %s", url)
        response = self._session.get(url, headers=self._headers, timeout=self._timeout_seconds)
        body = response.content
        if response.status_code >= 300:
            raise _HttpStatusError(response.status_code, getattr(response, "reason", "") or "")
        return body
