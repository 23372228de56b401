"""
Well-formedness checks for user-supplied IPs and domains.

These are offered to the UI bridge so it can reject input before it
reaches a mutation.  The parser and the command engine never call them:
a hosts file is read and written as-is.
"""
from __future__ import annotations

import ipaddress
import re

from core.host_record import COMMENT_INDICATOR
from core.validation_result import ValidationResult

MAX_DOMAIN_LENGTH = 253

_LABEL_RE = re.compile(r"^(?!-)[A-Za-z0-9-]{1,63}(?<!-)$")


def validate_ip(ip: str) -> ValidationResult:
    """Check that *ip* is an IPv4 or IPv6 address."""
    errors: list[str] = []
    warnings: list[str] = []

    text = ip.strip()
    if not text:
        errors.append("IP address cannot be empty.")
        return ValidationResult(errors=errors)

    try:
        addr = ipaddress.ip_address(text)
    except ValueError:
        errors.append(f"Invalid IP address: {text}")
        return ValidationResult(errors=errors)

    if addr.is_unspecified and addr.version == 6:
        warnings.append("Unspecified IPv6 address '::' does not block or redirect reliably.")

    return ValidationResult(errors=errors, warnings=warnings)


def validate_domain(domain: str) -> ValidationResult:
    """Check that *domain* is a single host name that survives a re-parse."""
    errors: list[str] = []
    warnings: list[str] = []

    text = domain.strip()
    if not text:
        errors.append("Domain cannot be empty.")
        return ValidationResult(errors=errors)

    if any(ch.isspace() for ch in text):
        errors.append("Domain cannot contain whitespace.")
    if text.startswith(COMMENT_INDICATOR):
        errors.append(f"Domain cannot start with '{COMMENT_INDICATOR}'.")
    if errors:
        return ValidationResult(errors=errors)

    if len(text) > MAX_DOMAIN_LENGTH:
        errors.append(f"Domain is longer than {MAX_DOMAIN_LENGTH} characters.")

    labels = text.rstrip(".").split(".")
    bad = [label for label in labels if not _LABEL_RE.match(label)]
    if bad:
        errors.append(f"Invalid domain label(s): {', '.join(repr(b) for b in bad)}")
    elif len(labels) == 1 and text.lower() != "localhost":
        warnings.append("Single-label host name; most resolvers only consult it for exact matches.")

    return ValidationResult(errors=errors, warnings=warnings)
