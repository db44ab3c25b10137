"""Concurrent multi-source email resolution."""

from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor

from .models import EmailCandidate, SearchClientProtocol
from .scoring import rank_candidates
from .sources import (
    SourceFn,
    search_code_host,
    search_company_website,
    search_social_media,
    search_web,
)
from .validation import is_valid_email_shape

# Concatenation order doubles as the tie-breaker between equal confidence tiers.
DEFAULT_SOURCES: tuple[SourceFn, ...] = (
    search_company_website,
    search_web,
    search_code_host,
    search_social_media,
)


def gather_candidates(
    search_client: SearchClientProtocol,
    name: str,
    company: str,
    role: str | None,
    *,
    logger: logging.Logger,
    sources: tuple[SourceFn, ...] = DEFAULT_SOURCES,
) -> list[EmailCandidate]:
    """Run every source concurrently and concatenate results in source order."""
    if not sources:
        return []
    with ThreadPoolExecutor(max_workers=len(sources)) as executor:
        futures: list[Future[list[EmailCandidate]]] = [
            executor.submit(source, search_client, name, company, role, logger=logger)
            for source in sources
        ]

    candidates: list[EmailCandidate] = []
    for source, future in zip(sources, futures):
        try:
            candidates.extend(future.result())
        except Exception as exc:
            logger.warning("Email source %s failed: %s", source.__name__, exc)
    return candidates


def resolve_email(
    search_client: SearchClientProtocol,
    name: str,
    company: str,
    role: str | None = None,
    *,
    logger: logging.Logger,
    sources: tuple[SourceFn, ...] = DEFAULT_SOURCES,
) -> str:
    """Return the highest-confidence email for a person, or an empty string.

    Only the top-ranked candidate is considered; if it fails the minimal
    shape check the result is empty.
    """
    candidates = gather_candidates(
        search_client, name, company, role, logger=logger, sources=sources
    )
    logger.debug("Email candidates for %s at %s: %d", name, company, len(candidates))
    if not candidates:
        return ""

    best = rank_candidates(candidates)[0]
    if is_valid_email_shape(best.email):
        logger.info(
            "Best email for %s: %s (%s, %s)",
            name,
            best.email,
            best.source.value,
            best.confidence.value,
        )
        return best.email
    logger.info("Top email candidate for %s failed validation: %r", name, best.email)
    return ""
