"""CLI entrypoint for recruiter-finder."""

from __future__ import annotations

import argparse
import os
from collections.abc import Sequence

from .analysis import draft_message
from .config import (
    DEFAULT_BASE_DELAY_MS,
    DEFAULT_MAX_ATTEMPTS,
    DEFAULT_MODEL,
    DEFAULT_PROFILE_RESULTS,
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_WORKERS,
    FinderConfig,
)
from .errors import ConfigError, FinderError
from .logging_utils import configure_logging, get_logger
from .models import AnalyzedContact, ContactType
from .pipeline import build_clients, run_pipeline
from .resolver import resolve_email
from .validation import load_text_file, require_key


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--serper-key", help="Serper API key (or set SERPER_API_KEY env var).")
    parser.add_argument("--openai-key", help="OpenAI API key (or set OPENAI_API_KEY env var).")
    parser.add_argument("--model", default=DEFAULT_MODEL, help="Chat model name.")
    parser.add_argument(
        "--max-attempts",
        type=int,
        default=DEFAULT_MAX_ATTEMPTS,
        help="Attempts per API call for rate-limit and server errors.",
    )
    parser.add_argument(
        "--base-delay-ms",
        type=int,
        default=DEFAULT_BASE_DELAY_MS,
        help="Base delay for exponential backoff, in milliseconds.",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=DEFAULT_REQUEST_TIMEOUT,
        help="Per-request timeout in seconds.",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")


def build_parser() -> argparse.ArgumentParser:
    """Build CLI parser."""
    parser = argparse.ArgumentParser(
        description="Recruiter Finder - locate hiring contacts, guess their email, draft outreach."
    )
    commands = parser.add_subparsers(dest="command", required=True)

    contacts = commands.add_parser("contacts", help="Find and rank contacts for a company/role.")
    contacts.add_argument("company", help="Target company.")
    contacts.add_argument("role", help="Target role.")
    description_group = contacts.add_mutually_exclusive_group(required=False)
    description_group.add_argument("--job-description", help="Job description text.")
    description_group.add_argument("--job-description-file", help="Path to job description.")
    contacts.add_argument("--location", help="Job location.")
    contacts.add_argument("--output", default="contacts.csv", help="Output CSV path.")
    contacts.add_argument(
        "--num",
        type=int,
        default=DEFAULT_PROFILE_RESULTS,
        help="Profile search results to analyze.",
    )
    contacts.add_argument(
        "--no-emails", action="store_true", help="Skip email resolution for contacts."
    )
    contacts.add_argument(
        "--workers",
        type=int,
        default=DEFAULT_WORKERS,
        help="Contacts resolved in parallel.",
    )
    contacts.add_argument("--no-progress", action="store_true", help="Disable tqdm progress bars.")
    _add_common_arguments(contacts)

    find_email = commands.add_parser("find-email", help="Guess one person's email address.")
    find_email.add_argument("name", help="Person's full name.")
    find_email.add_argument("company", help="Company the person works at.")
    find_email.add_argument("--role", help="Person's role (used by some query variants).")
    _add_common_arguments(find_email)

    draft = commands.add_parser("draft", help="Draft a LinkedIn note and cold email.")
    draft.add_argument("--name", required=True, help="Contact name.")
    draft.add_argument("--contact-role", required=True, help="Contact's current role.")
    draft.add_argument(
        "--type",
        default=ContactType.HIRING_MANAGER.value,
        choices=[member.value for member in ContactType],
        help="Contact type.",
    )
    draft.add_argument("--role", required=True, help="Role you are applying for.")
    context_group = draft.add_mutually_exclusive_group(required=True)
    context_group.add_argument("--context", help="Your background (stack, experience).")
    context_group.add_argument("--context-file", help="Path to a file with your background.")
    _add_common_arguments(draft)
    return parser


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse CLI input."""
    return build_parser().parse_args(argv)


def namespace_to_config(args: argparse.Namespace) -> FinderConfig:
    """Convert CLI args to validated FinderConfig."""
    return FinderConfig(
        serper_key=args.serper_key or os.getenv("SERPER_API_KEY") or "",
        openai_key=args.openai_key or os.getenv("OPENAI_API_KEY") or "",
        model=args.model,
        max_attempts=args.max_attempts,
        base_delay_ms=args.base_delay_ms,
        request_timeout=args.timeout,
        workers=getattr(args, "workers", DEFAULT_WORKERS),
        profile_results=getattr(args, "num", DEFAULT_PROFILE_RESULTS),
        find_emails=not getattr(args, "no_emails", False),
        show_progress=not getattr(args, "no_progress", False),
    )


def _run_contacts(args: argparse.Namespace, config: FinderConfig) -> None:
    logger = get_logger()
    require_key(config.serper_key, "--serper-key", "SERPER_API_KEY")
    require_key(config.openai_key, "--openai-key", "OPENAI_API_KEY")
    job_description = args.job_description
    if args.job_description_file:
        job_description = load_text_file(args.job_description_file)
    output = run_pipeline(
        config,
        args.company,
        args.role,
        args.output,
        job_description=job_description,
        location=args.location,
        logger=logger,
    )
    logger.info("Wrote contacts to %s", output)


def _run_find_email(args: argparse.Namespace, config: FinderConfig) -> None:
    logger = get_logger()
    require_key(config.serper_key, "--serper-key", "SERPER_API_KEY")
    search_client, _ = build_clients(config, logger=logger)
    email = resolve_email(search_client, args.name, args.company, args.role, logger=logger)
    if email:
        print(email)
    else:
        logger.info("No email found for %s at %s", args.name, args.company)


def _run_draft(args: argparse.Namespace, config: FinderConfig) -> None:
    logger = get_logger()
    require_key(config.openai_key, "--openai-key", "OPENAI_API_KEY")
    user_context = args.context or load_text_file(args.context_file)
    contact = AnalyzedContact(
        id=0,
        name=args.name,
        role=args.contact_role,
        score=0,
        type=ContactType(args.type),
        reason="",
        link="",
    )
    _, chat_client = build_clients(config, logger=logger)
    print(draft_message(chat_client, contact, args.role, user_context, logger=logger))


COMMANDS = {
    "contacts": _run_contacts,
    "find-email": _run_find_email,
    "draft": _run_draft,
}


def main(argv: Sequence[str] | None = None) -> int:
    """CLI entrypoint."""
    args = parse_args(argv)
    configure_logging(args.verbose)
    logger = get_logger()
    try:
        config = namespace_to_config(args)
        COMMANDS[args.command](args, config)
    except ConfigError as exc:
        logger.error("Invalid configuration: %s", exc)
        return 2
    except FinderError as exc:
        logger.error("%s", exc)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
