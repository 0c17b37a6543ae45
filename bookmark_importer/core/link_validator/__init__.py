"""
Link validation package.

Probes bookmark URLs concurrently and classifies each as valid,
suspicious, invalid or pending.
"""

from .helpers import (
    INVALID_CODES,
    SUSPICIOUS_CODES,
    classify_status_code,
    classify_url,
)
from .validator import CONCURRENCY, TIMEOUT_SECONDS, LinkValidator

__all__ = [
    "CONCURRENCY",
    "INVALID_CODES",
    "SUSPICIOUS_CODES",
    "TIMEOUT_SECONDS",
    "LinkValidator",
    "classify_status_code",
    "classify_url",
]
