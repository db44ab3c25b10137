"""Pure text extraction utilities."""

from __future__ import annotations

import re

EMAIL_REGEX = re.compile(r"\b[a-zA-Z0-9._%+\-]+@[a-zA-Z0-9.\-]+\.[a-zA-Z]{2,}\b", re.IGNORECASE)
PLACEHOLDER_DOMAINS = ("example.com", "test.com", "domain.com", "email.com")


def extract_emails(text: str) -> list[str]:
    """Return email-like tokens in order of appearance, minus placeholder addresses."""
    return [
        match.group(0)
        for match in EMAIL_REGEX.finditer(text or "")
        if not any(placeholder in match.group(0).lower() for placeholder in PLACEHOLDER_DOMAINS)
    ]


def email_domain(email: str) -> str:
    """Return the lowercase part after the last ``@``."""
    return email.rsplit("@", maxsplit=1)[-1].lower()


def company_slugs(company: str) -> tuple[str, str]:
    """Return the concatenated and hyphenated lowercase forms of a company name."""
    lowered = company.strip().lower()
    return re.sub(r"\s+", "", lowered), re.sub(r"\s+", "-", lowered)
