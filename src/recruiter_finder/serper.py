"""Serper search API client."""

from __future__ import annotations

import logging

from .http_client import RetryingClient
from .models import SearchHit

SERPER_SEARCH_URL = "https://google.serper.dev/search"


class SerperClient:
    """Thin wrapper around the Serper ``/search`` endpoint."""

    def __init__(self, *, http: RetryingClient, api_key: str, logger: logging.Logger) -> None:
        self._http = http
        self._api_key = api_key
        self._logger = logger

    def search(self, query: str, num: int) -> list[SearchHit]:
        """Return organic hits; a missing or malformed ``organic`` list yields ``[]``."""
        self._logger.debug("Serper query (num=%d): %s", num, query)
        payload = self._http.post_json(
            SERPER_SEARCH_URL,
            headers={"X-API-KEY": self._api_key, "Content-Type": "application/json"},
            payload={"q": query, "num": num},
        )
        organic = payload.get("organic") if isinstance(payload, dict) else None
        if not isinstance(organic, list):
            return []
        return [SearchHit.from_payload(item) for item in organic if isinstance(item, dict)]
