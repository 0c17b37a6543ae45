"""
Error hierarchy for the Bookmark Importer.

All custom exceptions for the importer are defined here. Stages below the
import committer never raise across their public boundary; the exceptions
below are raised by collaborators (sources, stores, configuration) and are
converted into structured results where the pipeline requires it.
"""

from typing import Optional


# ============================================================================
# Unified Exception Hierarchy for Bookmark Importer
# ============================================================================


class BookmarkImporterError(Exception):
    """Base exception for all bookmark importer errors."""

    error_code = "UNKNOWN_ERROR"

    def __init__(self, message: str = "", error_code: Optional[str] = None):
        super().__init__(message)
        if error_code is not None:
            self.error_code = error_code


# ============================================================================
# Configuration Errors
# ============================================================================


class ConfigurationError(BookmarkImporterError):
    """Configuration-related errors."""

    error_code = "CONFIG_ERROR"


# ============================================================================
# Source Errors
# ============================================================================


class BookmarkSourceError(BookmarkImporterError):
    """Raised when a bookmark tree cannot be read from its source."""

    error_code = "SOURCE_ERROR"


# ============================================================================
# Storage Errors
# ============================================================================


class StorageError(BookmarkImporterError):
    """Raised when the page store cannot be read or written."""

    error_code = "STORAGE_ERROR"


class QuotaExceededError(StorageError):
    """Raised when a write would push the store past its capacity limit."""

    error_code = "QUOTA_EXCEEDED"


def resolve_error_code(error: BaseException) -> str:
    """
    Map an exception raised during commit to a result error code.

    Args:
        error: Exception raised by the store

    Returns:
        Error code string for ImportResult
    """
    if isinstance(error, BookmarkImporterError):
        return error.error_code
    return BookmarkImporterError.error_code


__all__ = [
    "BookmarkImporterError",
    "ConfigurationError",
    "BookmarkSourceError",
    "StorageError",
    "QuotaExceededError",
    "resolve_error_code",
]
