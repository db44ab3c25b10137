"""OpenAI chat-completion client."""

from __future__ import annotations

import logging
from typing import Any

from .errors import ResponseParseError
from .http_client import RetryingClient

OPENAI_CHAT_URL = "https://api.openai.com/v1/chat/completions"


class OpenAIChatClient:
    """Return the first choice's content from ``/v1/chat/completions``."""

    def __init__(
        self, *, http: RetryingClient, api_key: str, model: str, logger: logging.Logger
    ) -> None:
        self._http = http
        self._api_key = api_key
        self._model = model
        self._logger = logger

    def complete(self, messages: list[dict[str, str]], temperature: float | None = None) -> str:
        body: dict[str, Any] = {"model": self._model, "messages": messages}
        if temperature is not None:
            body["temperature"] = temperature
        payload = self._http.post_json(
            OPENAI_CHAT_URL,
            headers={
                "Authorization": f"Bearer {self._api_key}",
                "Content-Type": "application/json",
            },
            payload=body,
        )
        try:
            content = payload["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as exc:
            raise ResponseParseError("Chat completion response has no message content.") from exc
        if not isinstance(content, str):
            raise ResponseParseError("Chat completion content is not text.")
        self._logger.debug("Chat completion returned %d characters", len(content))
        return content
