"""Runtime configuration model."""

from __future__ import annotations

from dataclasses import dataclass

from .validation import validate_runtime_constraints

DEFAULT_USER_AGENT = "RecruiterFinder/1.0"
DEFAULT_MODEL = "gpt-4o"
DEFAULT_REQUEST_TIMEOUT = 30.0
DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_BASE_DELAY_MS = 1000
DEFAULT_WORKERS = 4
DEFAULT_PROFILE_RESULTS = 10


@dataclass(frozen=True)
class FinderConfig:
    """Validated configuration used by the contact pipeline."""

    serper_key: str
    openai_key: str
    model: str = DEFAULT_MODEL
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    base_delay_ms: int = DEFAULT_BASE_DELAY_MS
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    workers: int = DEFAULT_WORKERS
    profile_results: int = DEFAULT_PROFILE_RESULTS
    find_emails: bool = True
    user_agent: str = DEFAULT_USER_AGENT
    show_progress: bool = True

    def __post_init__(self) -> None:
        validate_runtime_constraints(
            max_attempts=self.max_attempts,
            base_delay_ms=self.base_delay_ms,
            request_timeout=self.request_timeout,
            workers=self.workers,
            profile_results=self.profile_results,
        )
