"""Utility modules for the Bookmark Importer."""

from .error_handler import (
    BookmarkImporterError,
    BookmarkSourceError,
    ConfigurationError,
    QuotaExceededError,
    StorageError,
)
from .logging_setup import setup_logging

__all__ = [
    "BookmarkImporterError",
    "BookmarkSourceError",
    "ConfigurationError",
    "QuotaExceededError",
    "StorageError",
    "setup_logging",
]
