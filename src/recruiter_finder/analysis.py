"""Profile scoring and outreach drafting through the chat model."""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Sequence
from typing import Any

from .errors import ResponseParseError
from .models import AnalyzedContact, ChatClientProtocol, ContactType, SearchHit

JSON_SYSTEM_PROMPT = "You are a helpful JSON assistant."
CODE_FENCE_REGEX = re.compile(r"```(?:json)?", re.IGNORECASE)

ANALYSIS_PROMPT = """\
You are a recruitment expert. Here is a list of LinkedIn search results for someone \
looking for the position of '{target_role}'.
Job description (context): {job_description}
Job location (context): {location}

Analyze each profile and return a strict JSON list. For each profile, identify:
1. The Name (extracted from the title).
2. The Current Role.
3. The "Potential Score" (0-100): Probability that this person could hire me or get me an interview.
4. The "Type": "Hiring Manager" (potential boss), "Recruiter" (HR), "Peer" (Colleague), \
or "Irrelevant".
5. A short "Reason" (one sentence) explaining why this contact is relevant.
6. The email address (extract from the snippet if available, look for patterns like \
"email", "contact", "@company.com", or any visible email format. If not found, leave empty "").
7. The LinkedIn URL.

Here are the profiles:
{profiles}

Respond ONLY with the JSON array (no markdown, no text before/after).
Format: [{{"id": 0, "name": "...", "role": "...", "score": 80, "type": "...", \
"reason": "...", "link": "...", "email": "..."}}]
"""

DRAFT_PROMPT = """\
Role: You are a career coach helping a candidate write a genuine, warm, and professional \
cold email.

Task: Draft a LinkedIn note (max 300 chars) and a short cold email.

Input Data:
- Target Role: {target_role}
- Context: {user_context}
- Contact: {name} ({role})
- Type: {contact_type}

Guidelines & Tone:
1. **Tone:** Warm, polite, and humble ("Quiet Confidence").
    - **Be Enterprising:** Don't just ask if they are hiring. Propose a value exchange.
    - **Be Humble yet Ready:** Express a strong desire to learn from the best \
(e.g., "thrilled to learn"), but assert operational readiness (e.g., "ready to contribute").
    - **No Arrogance:** Avoid comparing yourself to others. Focus on your own unique path.
    - **DO** be concise and clear.
2. **Structure:**
    - **Opening:** Polite and friendly (e.g., "Hope you're having a good week").
    - **The "Who":** Introduce yourself as a student AND an apprentice \
(emphasize the dual experience).
    - **The Value:** Mention the specific tech stack (from Context) and your years of \
experience as a sign of reliability and autonomy, not superiority.
    - **The Goal:** Express enthusiasm for the company and a desire to contribute to the \
team's success while learning.
    - **The CTA (Call to Action):** Ask directly for a brief chat or call \
(e.g., "Are you open to a 10-min chat?").

3. Output Format:
**[LinkedIn Message]**
(Under 300 chars. Friendly and clear.)

**[Cold Email]**
Subject: (Clear and professional)
Body:
- Warm Salutation
- Introduction (Student + Apprentice)
- Connection to the role (Skills + Enthusiasm)
- Soft CTA
- Warm Sign-off
"""


def format_profiles(profiles: Sequence[SearchHit]) -> str:
    """One line per profile, tagged with its positional id."""
    return "\n".join(
        f"ID: {index}, Title: {profile.title}, Snippet: {profile.snippet}, Link: {profile.link}"
        for index, profile in enumerate(profiles)
    )


def build_analysis_prompt(
    profiles: Sequence[SearchHit],
    target_role: str,
    job_description: str | None = None,
    location: str | None = None,
) -> str:
    return ANALYSIS_PROMPT.format(
        target_role=target_role,
        job_description=job_description or "Not provided",
        location=location or "Not provided",
        profiles=format_profiles(profiles),
    )


def build_draft_prompt(contact: AnalyzedContact, target_role: str, user_context: str) -> str:
    return DRAFT_PROMPT.format(
        target_role=target_role,
        user_context=user_context,
        name=contact.name,
        role=contact.role,
        contact_type=contact.type.value,
    )


def strip_code_fences(content: str) -> str:
    """Remove markdown code-fence markers the model may wrap JSON in."""
    return CODE_FENCE_REGEX.sub("", content).strip()


def _parse_contact_type(value: Any) -> ContactType:
    text = str(value or "").strip().lower()
    for member in ContactType:
        if member.value.lower() == text:
            return member
    return ContactType.IRRELEVANT


def contact_from_payload(item: dict[str, Any]) -> AnalyzedContact:
    """Build an AnalyzedContact from one element of the model's JSON array."""
    try:
        contact_id = int(item["id"])
        score = int(round(float(item.get("score") or 0)))
    except (KeyError, TypeError, ValueError) as exc:
        raise ResponseParseError(f"Invalid contact entry: {item!r}") from exc
    email = str(item.get("email") or "").strip()
    return AnalyzedContact(
        id=contact_id,
        name=str(item.get("name") or ""),
        role=str(item.get("role") or ""),
        score=max(0, min(100, score)),
        type=_parse_contact_type(item.get("type")),
        reason=str(item.get("reason") or ""),
        link=str(item.get("link") or ""),
        email=email or None,
    )


def parse_contacts(content: str) -> list[AnalyzedContact]:
    """Parse the model's (possibly fenced) JSON array into contacts."""
    cleaned = strip_code_fences(content)
    try:
        payload = json.loads(cleaned)
    except json.JSONDecodeError as exc:
        raise ResponseParseError(f"Model did not return valid JSON: {exc}") from exc
    if not isinstance(payload, list):
        raise ResponseParseError("Model response is not a JSON array.")
    contacts: list[AnalyzedContact] = []
    for item in payload:
        if not isinstance(item, dict):
            raise ResponseParseError(f"Contact entry is not an object: {item!r}")
        contacts.append(contact_from_payload(item))
    return contacts


def analyze_profiles(
    chat_client: ChatClientProtocol,
    profiles: Sequence[SearchHit],
    target_role: str,
    job_description: str | None = None,
    location: str | None = None,
    *,
    logger: logging.Logger,
) -> list[AnalyzedContact]:
    """Score and classify profiles; contact ``id`` is the profile's index."""
    if not profiles:
        return []
    prompt = build_analysis_prompt(profiles, target_role, job_description, location)
    logger.info("Analyzing %d profiles for role %r", len(profiles), target_role)
    content = chat_client.complete(
        [
            {"role": "system", "content": JSON_SYSTEM_PROMPT},
            {"role": "user", "content": prompt},
        ],
        temperature=0,
    )
    contacts = parse_contacts(content)
    logger.info("Model returned %d analyzed contacts", len(contacts))
    return contacts


def draft_message(
    chat_client: ChatClientProtocol,
    contact: AnalyzedContact,
    target_role: str,
    user_context: str,
    *,
    logger: logging.Logger,
) -> str:
    """Return the model's LinkedIn note and cold email draft as raw text."""
    logger.info("Drafting outreach for %s (%s)", contact.name, contact.type.value)
    return chat_client.complete(
        [{"role": "user", "content": build_draft_prompt(contact, target_role, user_context)}]
    )
