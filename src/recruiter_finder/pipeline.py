"""Core orchestration pipeline."""

from __future__ import annotations

import logging
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import replace

from tqdm import tqdm

from .analysis import analyze_profiles
from .config import FinderConfig
from .http_client import RetryingClient, make_session
from .io_csv import write_rows
from .models import (
    AnalyzedContact,
    ChatClientProtocol,
    ContactType,
    SearchClientProtocol,
    SearchHit,
)
from .openai_chat import OpenAIChatClient
from .resolver import resolve_email
from .serper import SerperClient
from .sources import search_profiles
from .validation import email_has_mail_host

ResolveFn = Callable[..., str]
MxCheckFn = Callable[[str], bool]


def build_clients(
    config: FinderConfig, *, logger: logging.Logger
) -> tuple[SerperClient, OpenAIChatClient]:
    """Build the search and chat clients sharing one HTTP session."""
    session = make_session(config.user_agent)

    def retrying(service: str) -> RetryingClient:
        return RetryingClient(
            session=session,
            service=service,
            timeout=config.request_timeout,
            logger=logger,
            max_attempts=config.max_attempts,
            base_delay_ms=config.base_delay_ms,
        )

    search_client = SerperClient(http=retrying("Serper"), api_key=config.serper_key, logger=logger)
    chat_client = OpenAIChatClient(
        http=retrying("OpenAI"), api_key=config.openai_key, model=config.model, logger=logger
    )
    return search_client, chat_client


def join_profiles(
    contacts: list[AnalyzedContact], profiles: list[SearchHit], *, logger: logging.Logger
) -> list[AnalyzedContact]:
    """Drop contacts whose id matches no profile and fill missing links from the profile."""
    joined: list[AnalyzedContact] = []
    for contact in contacts:
        if not 0 <= contact.id < len(profiles):
            logger.warning("Discarding analyzed contact with unknown id %d", contact.id)
            continue
        if not contact.link:
            contact = replace(contact, link=profiles[contact.id].link)
        joined.append(contact)
    return joined


def resolve_missing_emails(
    contacts: list[AnalyzedContact],
    company: str,
    *,
    search_client: SearchClientProtocol,
    workers: int,
    show_progress: bool,
    logger: logging.Logger,
    resolve_fn: ResolveFn = resolve_email,
) -> list[AnalyzedContact]:
    """Look up an email for every relevant contact the analysis left without one."""
    pending = [
        (position, contact)
        for position, contact in enumerate(contacts)
        if not contact.email and contact.type is not ContactType.IRRELEVANT and contact.name
    ]
    logger.info("Resolving emails for %d contacts", len(pending))
    found: dict[int, str] = {}
    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = {
            executor.submit(
                resolve_fn, search_client, contact.name, company, contact.role, logger=logger
            ): position
            for position, contact in pending
        }
        iterator = as_completed(futures)
        if show_progress:
            iterator = tqdm(iterator, total=len(futures), desc="resolving emails")
        for future in iterator:
            try:
                email = future.result()
            except Exception as exc:  # pragma: no cover - resolve_email absorbs source failures
                logger.debug("Email resolution failed: %s", exc)
                continue
            if email:
                found[futures[future]] = email
    return [
        replace(contact, email=found[position]) if position in found else contact
        for position, contact in enumerate(contacts)
    ]


def find_contacts(
    config: FinderConfig,
    company: str,
    role: str,
    *,
    search_client: SearchClientProtocol,
    chat_client: ChatClientProtocol,
    job_description: str | None = None,
    location: str | None = None,
    resolve_fn: ResolveFn = resolve_email,
    logger: logging.Logger,
) -> list[AnalyzedContact]:
    """Search profiles, analyze them, optionally resolve emails, best score first."""
    profiles = search_profiles(search_client, company, role, num=config.profile_results)
    logger.info("Profiles found for %s at %s: %d", role, company, len(profiles))
    if not profiles:
        return []

    contacts = analyze_profiles(
        chat_client, profiles, role, job_description, location, logger=logger
    )
    contacts = join_profiles(contacts, profiles, logger=logger)
    if config.find_emails:
        contacts = resolve_missing_emails(
            contacts,
            company,
            search_client=search_client,
            workers=config.workers,
            show_progress=config.show_progress,
            logger=logger,
            resolve_fn=resolve_fn,
        )
    return sorted(contacts, key=lambda contact: contact.score, reverse=True)


def _to_csv_rows(
    contacts: list[AnalyzedContact], *, mx_checker: MxCheckFn
) -> list[dict[str, str]]:
    rows: list[dict[str, str]] = []
    for contact in contacts:
        email = contact.email or ""
        mx_ok = ""
        if email:
            mx_ok = "yes" if mx_checker(email) else "no"
        rows.append(
            {
                "id": str(contact.id),
                "name": contact.name,
                "role": contact.role,
                "type": contact.type.value,
                "score": str(contact.score),
                "reason": contact.reason,
                "link": contact.link,
                "email": email,
                "email_mx_ok": mx_ok,
            }
        )
    return rows


def run_pipeline(
    config: FinderConfig,
    company: str,
    role: str,
    output: str,
    *,
    job_description: str | None = None,
    location: str | None = None,
    mx_checker: MxCheckFn = email_has_mail_host,
    logger: logging.Logger,
) -> str:
    """Build concrete clients, find contacts, and write CSV output."""
    search_client, chat_client = build_clients(config, logger=logger)
    contacts = find_contacts(
        config,
        company,
        role,
        search_client=search_client,
        chat_client=chat_client,
        job_description=job_description,
        location=location,
        logger=logger,
    )
    write_rows(output, _to_csv_rows(contacts, mx_checker=mx_checker))
    return output
