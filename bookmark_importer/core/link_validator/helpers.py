"""
Helper functions for link validation.

Contains the status-code tables and the pure classification rules used by
the link validator.
"""

from typing import Any, Optional
from urllib.parse import urlsplit

from ..data_models import ValidationStatus

PROBE_SCHEMES = {"http", "https"}

# May require login or sit behind bot protection; not treated as dead
SUSPICIOUS_CODES = {
    401,
    403,
    405,
    429,
    500,
    502,
    503,
    504,
    520,
    521,
    522,
    523,
    524,
}

INVALID_CODES = {404, 410, 451}


def is_ok_status(status_code: int) -> bool:
    return 200 <= status_code < 300


def classify_status_code(status_code: int) -> ValidationStatus:
    """
    Classify a probe response by its final status code.

    Args:
        status_code: HTTP status code after redirects

    Returns:
        ValidationStatus for the link
    """
    if is_ok_status(status_code):
        return ValidationStatus.VALID
    if status_code in SUSPICIOUS_CODES:
        return ValidationStatus.SUSPICIOUS
    if status_code in INVALID_CODES:
        return ValidationStatus.INVALID
    if 400 <= status_code < 500:
        return ValidationStatus.INVALID
    return ValidationStatus.SUSPICIOUS


def classify_url(url: Any) -> Optional[ValidationStatus]:
    """
    Classify a URL that should not be probed.

    Args:
        url: Candidate URL

    Returns:
        INVALID for empty or unparsable URLs, SUSPICIOUS for parseable
        non-http(s) URLs, or None when the URL should be probed
    """
    if not url or not isinstance(url, str) or not url.strip():
        return ValidationStatus.INVALID

    try:
        parsed = urlsplit(url.strip())
    except ValueError:
        return ValidationStatus.INVALID

    if not parsed.scheme:
        return ValidationStatus.INVALID

    if parsed.scheme.lower() not in PROBE_SCHEMES:
        return ValidationStatus.SUSPICIOUS

    if not parsed.hostname:
        return ValidationStatus.INVALID

    return None


__all__ = [
    "INVALID_CODES",
    "PROBE_SCHEMES",
    "SUSPICIOUS_CODES",
    "classify_status_code",
    "classify_url",
    "is_ok_status",
]
