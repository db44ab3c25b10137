"""Validation and runtime guardrails."""

from __future__ import annotations

import re
from functools import lru_cache
from pathlib import Path

import dns.exception
import dns.resolver

from .errors import ConfigError

EMAIL_SHAPE_REGEX = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def is_valid_email_shape(email: str) -> bool:
    """Minimal ``local@domain.tld`` check; no whitespace, single ``@``."""
    return bool(EMAIL_SHAPE_REGEX.match(email or ""))


def load_text_file(path: str) -> str:
    """Load a UTF-8 text file stripped of surrounding whitespace."""
    return Path(path).read_text(encoding="utf-8").strip()


def validate_runtime_constraints(
    *,
    max_attempts: int,
    base_delay_ms: int,
    request_timeout: float,
    workers: int,
    profile_results: int,
) -> None:
    """Validate CLI/runtime configuration and raise ConfigError on invalid values."""
    if max_attempts < 1:
        raise ConfigError("--max-attempts must be >= 1.")
    if base_delay_ms < 0:
        raise ConfigError("--base-delay-ms must be >= 0.")
    if request_timeout <= 0:
        raise ConfigError("--timeout must be > 0.")
    if workers < 1:
        raise ConfigError("--workers must be >= 1.")
    if not 1 <= profile_results <= 100:
        raise ConfigError("--num must be between 1 and 100.")


def require_key(value: str | None, flag: str, env_var: str) -> str:
    """Return a non-empty API key or raise ConfigError naming where to set it."""
    if not value:
        raise ConfigError(f"Missing API key: pass {flag} or set {env_var}.")
    return value


def email_has_mail_host(email: str) -> bool:
    """True when the address's domain publishes an MX record, or at least an A record."""
    local, _, domain = email.rpartition("@")
    if not local or not domain:
        return False
    return domain_accepts_mail(domain.lower())


@lru_cache(maxsize=256)
def domain_accepts_mail(domain: str) -> bool:
    """Cached per domain; contacts at one company share a lookup."""
    for record_type in ("MX", "A"):
        try:
            if dns.resolver.resolve(domain, record_type, lifetime=8):
                return True
        except (dns.resolver.NoAnswer, dns.resolver.NoNameservers):
            continue
        except dns.resolver.NXDOMAIN:
            return False
        except dns.exception.DNSException:
            return False
    return False
