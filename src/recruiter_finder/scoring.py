"""Confidence rules and candidate ranking."""

from __future__ import annotations

from .extraction import company_slugs, email_domain
from .models import Confidence, EmailCandidate

CONFIDENCE_RANK = {Confidence.HIGH: 3, Confidence.MEDIUM: 2, Confidence.LOW: 1}


def company_email_confidence(email: str, company: str) -> Confidence:
    """High when the email domain carries the company name, else Medium."""
    domain = email_domain(email)
    concatenated, hyphenated = company_slugs(company)
    if concatenated and (concatenated in domain or hyphenated in domain):
        return Confidence.HIGH
    return Confidence.MEDIUM


def rank_candidates(candidates: list[EmailCandidate]) -> list[EmailCandidate]:
    """Sort by confidence, highest first; equal tiers keep discovery order."""
    return sorted(candidates, key=lambda item: CONFIDENCE_RANK[item.confidence], reverse=True)
