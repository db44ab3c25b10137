"""Custom exceptions for the contact finder domain."""

from __future__ import annotations


class FinderError(Exception):
    """Base exception for this project."""


class ConfigError(FinderError):
    """Raised when runtime configuration is invalid."""


class ApiError(FinderError):
    """Raised when an upstream API call fails.

    ``status_code`` and ``retry_after`` (seconds) are set when the upstream
    answered with an HTTP status; they are ``None`` for transport failures.
    """

    def __init__(
        self, message: str, status_code: int | None = None, retry_after: float | None = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.retry_after = retry_after

    @property
    def retryable(self) -> bool:
        return self.status_code == 429 or (self.status_code or 0) >= 500


class InvalidCredentialsError(ApiError):
    """Raised on HTTP 401; never retried."""


class RateLimitError(ApiError):
    """Raised when HTTP 429 persists after every attempt."""


class UpstreamServerError(ApiError):
    """Raised when HTTP 5xx persists after every attempt."""


class ResponseParseError(FinderError):
    """Raised when an upstream payload cannot be interpreted."""
