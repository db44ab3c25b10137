import logging
from typing import Any

import pytest
import requests

from recruiter_finder.errors import (
    ApiError,
    InvalidCredentialsError,
    RateLimitError,
    UpstreamServerError,
)
from recruiter_finder.http_client import RetryingClient, make_session, parse_retry_after


class FakeResponse:
    def __init__(
        self,
        *,
        status_code: int = 200,
        payload: Any = None,
        headers: dict[str, str] | None = None,
        invalid_json: bool = False,
    ) -> None:
        self.status_code = status_code
        self._payload = {} if payload is None else payload
        self.headers = headers or {}
        self._invalid_json = invalid_json

    def json(self) -> Any:
        if self._invalid_json:
            raise ValueError("not json")
        return self._payload


class FakeSession:
    def __init__(self, responses: list[FakeResponse], raise_error: bool = False) -> None:
        self._responses = responses
        self._raise_error = raise_error
        self.calls: list[dict[str, Any]] = []

    def post(self, url: str, **kwargs: Any) -> FakeResponse:
        self.calls.append({"url": url, **kwargs})
        if self._raise_error:
            raise requests.ConnectionError("network down")
        return self._responses.pop(0)


def _client(session: FakeSession, sleeps: list[float], max_attempts: int = 3) -> RetryingClient:
    return RetryingClient(
        session=session,  # type: ignore[arg-type]
        service="OpenAI",
        timeout=5.0,
        logger=logging.getLogger("test"),
        max_attempts=max_attempts,
        base_delay_ms=1000,
        sleep_fn=sleeps.append,
    )


def test_success_returns_payload_and_sends_json() -> None:
    session = FakeSession([FakeResponse(payload={"ok": True})])
    sleeps: list[float] = []
    result = _client(session, sleeps).post_json(
        "https://api.test/x", headers={"X-API-KEY": "k"}, payload={"q": "hello"}
    )
    assert result == {"ok": True}
    assert session.calls[0]["json"] == {"q": "hello"}
    assert session.calls[0]["headers"] == {"X-API-KEY": "k"}
    assert session.calls[0]["timeout"] == 5.0
    assert sleeps == []


def test_rate_limit_honors_retry_after_header() -> None:
    session = FakeSession(
        [
            FakeResponse(status_code=429, headers={"retry-after": "2"}),
            FakeResponse(payload={"ok": True}),
        ]
    )
    sleeps: list[float] = []
    assert _client(session, sleeps).post_json("u", headers={}, payload={}) == {"ok": True}
    assert sleeps == [2.0]
    assert len(session.calls) == 2


def test_rate_limit_reads_canonical_case_header() -> None:
    session = FakeSession(
        [
            FakeResponse(status_code=429, headers={"Retry-After": "7"}),
            FakeResponse(payload=[]),
        ]
    )
    sleeps: list[float] = []
    _client(session, sleeps).post_json("u", headers={}, payload={})
    assert sleeps == [7.0]


def test_rate_limit_exhaustion_uses_exponential_fallback() -> None:
    session = FakeSession([FakeResponse(status_code=429) for _ in range(3)])
    sleeps: list[float] = []
    with pytest.raises(RateLimitError) as excinfo:
        _client(session, sleeps).post_json("u", headers={}, payload={})
    assert sleeps == [1.0, 2.0]
    assert excinfo.value.status_code == 429
    assert excinfo.value.retry_after == 4.0
    assert "4 seconds" in str(excinfo.value)
    assert excinfo.value.retryable is True


def test_unauthorized_fails_without_retry() -> None:
    session = FakeSession([FakeResponse(status_code=401), FakeResponse()])
    sleeps: list[float] = []
    with pytest.raises(InvalidCredentialsError) as excinfo:
        _client(session, sleeps).post_json("u", headers={}, payload={})
    assert excinfo.value.status_code == 401
    assert excinfo.value.retryable is False
    assert len(session.calls) == 1
    assert sleeps == []


def test_server_errors_back_off_then_succeed() -> None:
    session = FakeSession(
        [
            FakeResponse(status_code=500),
            FakeResponse(status_code=502),
            FakeResponse(payload={"ok": True}),
        ]
    )
    sleeps: list[float] = []
    assert _client(session, sleeps).post_json("u", headers={}, payload={}) == {"ok": True}
    assert sleeps == [1.0, 2.0]


def test_server_error_exhaustion_carries_status() -> None:
    session = FakeSession([FakeResponse(status_code=503), FakeResponse(status_code=503)])
    sleeps: list[float] = []
    with pytest.raises(UpstreamServerError) as excinfo:
        _client(session, sleeps, max_attempts=2).post_json("u", headers={}, payload={})
    assert excinfo.value.status_code == 503
    assert sleeps == [1.0]


def test_other_client_error_uses_upstream_message() -> None:
    session = FakeSession(
        [FakeResponse(status_code=400, payload={"error": {"message": "model not found"}})]
    )
    sleeps: list[float] = []
    with pytest.raises(ApiError) as excinfo:
        _client(session, sleeps).post_json("u", headers={}, payload={})
    assert str(excinfo.value) == "model not found"
    assert excinfo.value.status_code == 400
    assert len(session.calls) == 1


def test_other_client_error_falls_back_to_generic_message() -> None:
    session = FakeSession([FakeResponse(status_code=403, invalid_json=True)])
    with pytest.raises(ApiError) as excinfo:
        _client(session, []).post_json("u", headers={}, payload={})
    assert "OpenAI API" in str(excinfo.value)


def test_transport_error_is_not_retried() -> None:
    session = FakeSession([], raise_error=True)
    sleeps: list[float] = []
    with pytest.raises(ApiError) as excinfo:
        _client(session, sleeps).post_json("u", headers={}, payload={})
    assert "network down" in str(excinfo.value)
    assert excinfo.value.status_code is None
    assert len(session.calls) == 1


def test_non_json_success_body_raises() -> None:
    session = FakeSession([FakeResponse(invalid_json=True)])
    with pytest.raises(ApiError):
        _client(session, []).post_json("u", headers={}, payload={})


def test_parse_retry_after_handles_missing_and_invalid() -> None:
    assert parse_retry_after(None) is None
    assert parse_retry_after({}) is None
    assert parse_retry_after({"retry-after": "Wed, 21 Oct 2015 07:28:00 GMT"}) is None
    assert parse_retry_after({"retry-after": "1.5"}) == 1.5


def test_make_session_sets_headers() -> None:
    session = make_session("my-agent")
    assert session.headers["User-Agent"] == "my-agent"
    assert session.headers["Content-Type"] == "application/json"


@pytest.mark.parametrize("value", ["-1", "nan", "inf"])
def test_rate_limit_ignores_non_finite_or_negative_retry_after(value: str) -> None:
    session = FakeSession(
        [
            FakeResponse(status_code=429, headers={"retry-after": value}),
            FakeResponse(payload={"ok": True}),
        ]
    )
    sleeps: list[float] = []
    assert _client(session, sleeps).post_json("u", headers={}, payload={}) == {"ok": True}
    assert sleeps == [1.0]
    assert parse_retry_after({"retry-after": value}) is None
