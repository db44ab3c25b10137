"""Per-source email searches and the LinkedIn profile query."""

from __future__ import annotations

import logging
from collections.abc import Callable

from .errors import FinderError
from .extraction import company_slugs, extract_emails
from .models import Confidence, EmailCandidate, SearchClientProtocol, SearchHit, Source
from .scoring import company_email_confidence

SourceFn = Callable[..., list[EmailCandidate]]

WEB_QUERY_TEMPLATES = ('"{name}" "{company}" email',)


def build_company_query(name: str, company: str) -> str:
    """Query scoped to the company's likely .com domains."""
    concatenated, hyphenated = company_slugs(company)
    domains = [concatenated] if concatenated == hyphenated else [concatenated, hyphenated]
    sites = " OR ".join(f"site:{domain}.com" for domain in domains)
    return f'"{name}" "{company}" (email OR contact OR "@") ({sites})'


def build_web_queries(
    name: str, company: str, role: str | None, templates: tuple[str, ...] = WEB_QUERY_TEMPLATES
) -> list[str]:
    """Expand each web query template with the person, company and role."""
    return [template.format(name=name, company=company, role=role or "") for template in templates]


def build_code_host_query(name: str, company: str) -> str:
    """Query scoped to GitHub."""
    return f'"{name}" "{company}" site:github.com'


def build_social_query(name: str, company: str) -> str:
    """Query scoped to Twitter and X."""
    return f'"{name}" "{company}" (site:twitter.com OR site:x.com)'


def build_profile_query(company: str, role: str) -> str:
    """LinkedIn people query for the role and common hiring titles."""
    return (
        f'site:linkedin.com/in/ "{company}" '
        f'("{role}" OR "Talent Acquisition" OR "Recruiter" OR "Head of" OR "Manager")'
    )


def _hit_emails(hits: list[SearchHit]) -> list[str]:
    emails: list[str] = []
    for hit in hits:
        emails.extend(extract_emails(hit.text.lower()))
    return emails


def _run_query(
    search_client: SearchClientProtocol,
    query: str,
    num: int,
    *,
    source: Source,
    logger: logging.Logger,
) -> list[str]:
    try:
        hits = search_client.search(query, num)
    except FinderError as exc:
        logger.warning("%s search failed for %r: %s", source.value, query, exc)
        return []
    return _hit_emails(hits)


def search_company_website(
    search_client: SearchClientProtocol,
    name: str,
    company: str,
    role: str | None = None,
    *,
    logger: logging.Logger,
) -> list[EmailCandidate]:
    """Emails found on the company's own domains; High when the address is on one of them."""
    emails = _run_query(
        search_client,
        build_company_query(name, company),
        3,
        source=Source.COMPANY_WEBSITE,
        logger=logger,
    )
    return [
        EmailCandidate(
            email=email,
            source=Source.COMPANY_WEBSITE,
            confidence=company_email_confidence(email, company),
        )
        for email in emails
    ]


def search_web(
    search_client: SearchClientProtocol,
    name: str,
    company: str,
    role: str | None = None,
    *,
    logger: logging.Logger,
    templates: tuple[str, ...] = WEB_QUERY_TEMPLATES,
) -> list[EmailCandidate]:
    """General web search over one or more query variants, de-duplicated case-insensitively."""
    candidates: list[EmailCandidate] = []
    seen: set[str] = set()
    for query in build_web_queries(name, company, role, templates):
        for email in _run_query(search_client, query, 2, source=Source.WEB_SEARCH, logger=logger):
            key = email.lower()
            if key in seen:
                continue
            seen.add(key)
            candidates.append(
                EmailCandidate(email=email, source=Source.WEB_SEARCH, confidence=Confidence.MEDIUM)
            )
    return candidates


def search_code_host(
    search_client: SearchClientProtocol,
    name: str,
    company: str,
    role: str | None = None,
    *,
    logger: logging.Logger,
) -> list[EmailCandidate]:
    """Emails from code-host pages; always Medium."""
    emails = _run_query(
        search_client,
        build_code_host_query(name, company),
        3,
        source=Source.CODE_HOST,
        logger=logger,
    )
    return [
        EmailCandidate(email=email, source=Source.CODE_HOST, confidence=Confidence.MEDIUM)
        for email in emails
    ]


def search_social_media(
    search_client: SearchClientProtocol,
    name: str,
    company: str,
    role: str | None = None,
    *,
    logger: logging.Logger,
) -> list[EmailCandidate]:
    """Emails from social profiles; always Low."""
    emails = _run_query(
        search_client,
        build_social_query(name, company),
        3,
        source=Source.SOCIAL_MEDIA,
        logger=logger,
    )
    return [
        EmailCandidate(email=email, source=Source.SOCIAL_MEDIA, confidence=Confidence.LOW)
        for email in emails
    ]


def search_profiles(
    search_client: SearchClientProtocol, company: str, role: str, num: int = 10
) -> list[SearchHit]:
    """Return LinkedIn profile hits for people likely to hire for ``role``.

    Errors propagate: without profiles there is nothing to analyze.
    """
    return search_client.search(build_profile_query(company, role), num)
