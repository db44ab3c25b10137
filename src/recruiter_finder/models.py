"""Protocols and lightweight model types."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol


class Source(str, Enum):
    """Lookup strategy that produced an email candidate."""

    COMPANY_WEBSITE = "Company Website"
    WEB_SEARCH = "Web Search"
    CODE_HOST = "Code Host"
    SOCIAL_MEDIA = "Social Media"


class Confidence(str, Enum):
    """Confidence tier attached to an email candidate."""

    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class ContactType(str, Enum):
    """Classification returned by profile analysis."""

    HIRING_MANAGER = "Hiring Manager"
    RECRUITER = "Recruiter"
    PEER = "Peer"
    IRRELEVANT = "Irrelevant"


@dataclass(frozen=True)
class SearchHit:
    """One organic search result row."""

    title: str
    snippet: str
    link: str

    @classmethod
    def from_payload(cls, item: dict[str, Any]) -> SearchHit:
        return cls(
            title=str(item.get("title") or ""),
            snippet=str(item.get("snippet") or ""),
            link=str(item.get("link") or ""),
        )

    @property
    def text(self) -> str:
        return f"{self.title} {self.snippet}"


@dataclass(frozen=True)
class EmailCandidate:
    """An extracted email with provenance and confidence."""

    email: str
    source: Source
    confidence: Confidence


@dataclass
class AnalyzedContact:
    """A profile scored and classified by the chat model.

    ``id`` is the index of the input profile the model was asked about.
    """

    id: int
    name: str
    role: str
    score: int
    type: ContactType
    reason: str
    link: str
    email: str | None = None


class SearchClientProtocol(Protocol):
    """Contract for the search API wrapper."""

    def search(self, query: str, num: int) -> list[SearchHit]:
        """Return organic hits for a query."""


class ChatClientProtocol(Protocol):
    """Contract for the chat-completion API wrapper."""

    def complete(self, messages: list[dict[str, str]], temperature: float | None = None) -> str:
        """Return the first completion's message content."""
