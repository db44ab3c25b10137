"""HTTP client with rate-limit and server-error retry policy."""

from __future__ import annotations

import logging
import math
import time
from collections.abc import Callable, Mapping
from typing import Any

from requests import Response, Session
from requests.exceptions import RequestException

from .errors import (
    ApiError,
    InvalidCredentialsError,
    RateLimitError,
    UpstreamServerError,
)

SleepFn = Callable[[float], None]


def make_session(user_agent: str) -> Session:
    """Create a plain requests session; retries are handled by RetryingClient."""
    session = Session()
    session.headers.update({"User-Agent": user_agent, "Content-Type": "application/json"})
    return session


def parse_retry_after(headers: Mapping[str, str] | None) -> float | None:
    """Return the Retry-After delay in seconds, or None unless it is a finite value >= 0."""
    if not headers:
        return None
    value = headers.get("retry-after") or headers.get("Retry-After")
    if value is None:
        return None
    try:
        seconds = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(seconds) or seconds < 0:
        return None
    return seconds


def error_message_from_body(response: Response) -> str | None:
    """Extract an upstream error message from a JSON error body."""
    try:
        payload = response.json()
    except ValueError:
        return None
    if not isinstance(payload, dict):
        return None
    error = payload.get("error")
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    if isinstance(error, str) and error:
        return error
    if payload.get("message"):
        return str(payload["message"])
    return None


class RetryingClient:
    """POST JSON to one upstream, retrying 429 and 5xx with backoff.

    401 fails immediately with InvalidCredentialsError. Any other failure
    (other status codes, transport errors, non-JSON bodies) is raised as
    ApiError on the first occurrence.
    """

    def __init__(
        self,
        *,
        session: Session,
        service: str,
        timeout: float,
        logger: logging.Logger,
        max_attempts: int = 3,
        base_delay_ms: int = 1000,
        sleep_fn: SleepFn = time.sleep,
    ) -> None:
        self._session = session
        self._service = service
        self._timeout = timeout
        self._logger = logger
        self._max_attempts = max_attempts
        self._base_delay_ms = base_delay_ms
        self._sleep = sleep_fn

    def post_json(
        self, url: str, *, headers: dict[str, str], payload: dict[str, Any]
    ) -> Any:
        for attempt in range(self._max_attempts):
            last_attempt = attempt >= self._max_attempts - 1
            try:
                response = self._session.post(
                    url, headers=headers, json=payload, timeout=self._timeout
                )
            except RequestException as exc:
                message = str(exc) or f"An error occurred with the {self._service} API."
                raise ApiError(message) from exc

            status = response.status_code
            if status == 429:
                retry_after = parse_retry_after(response.headers)
                if retry_after is None:
                    retry_after = 2**attempt * self._base_delay_ms / 1000
                if last_attempt:
                    raise RateLimitError(
                        f"{self._service} rate limit reached. "
                        f"Please wait {retry_after:g} seconds before trying again.",
                        status_code=429,
                        retry_after=retry_after,
                    )
                self._logger.warning(
                    "%s rate limit reached. Retrying in %gs (attempt %d/%d)...",
                    self._service,
                    retry_after,
                    attempt + 1,
                    self._max_attempts,
                )
                self._sleep(retry_after)
                continue

            if status == 401:
                raise InvalidCredentialsError(
                    f"Invalid {self._service} API key. Please check your configuration.",
                    status_code=401,
                )

            if status >= 500:
                if last_attempt:
                    raise UpstreamServerError(
                        f"{self._service} server error. Please try again later.",
                        status_code=status,
                    )
                delay_ms = 2**attempt * self._base_delay_ms
                self._logger.warning(
                    "%s server error (HTTP %d). Retrying in %dms (attempt %d/%d)...",
                    self._service,
                    status,
                    delay_ms,
                    attempt + 1,
                    self._max_attempts,
                )
                self._sleep(delay_ms / 1000)
                continue

            if status >= 400:
                message = error_message_from_body(response)
                raise ApiError(
                    message or f"An error occurred with the {self._service} API (HTTP {status}).",
                    status_code=status,
                )

            try:
                return response.json()
            except ValueError as exc:
                raise ApiError(
                    f"{self._service} returned a non-JSON response.", status_code=status
                ) from exc

        raise ApiError(f"{self._service} request failed after multiple attempts.")
