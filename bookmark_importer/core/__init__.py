"""
Core bookmark import modules.

This package contains the import pipeline: tree flattening and
deduplication, pagination, import limiting, link validation and the
commit protocol.
"""

from .bookmark_importer import BookmarkImporter
from .data_models import (
    ImportPreview,
    ImportResult,
    Page,
    ParsedBookmark,
    ParseResult,
    ParseStats,
    ValidationProgress,
    ValidationStatus,
)
from .import_committer import ImportCommitter
from .import_limiter import MAX_IMPORT_COUNT, LimitResult, apply_import_limit
from .link_validator import LinkValidator
from .paginator import FolderEntry, Paginator, PagingPolicy, items_per_page_from_grid
from .tree_flattener import BookmarkTreeFlattener, normalize_url

__all__ = [
    "BookmarkImporter",
    "BookmarkTreeFlattener",
    "FolderEntry",
    "ImportCommitter",
    "ImportPreview",
    "ImportResult",
    "LimitResult",
    "LinkValidator",
    "MAX_IMPORT_COUNT",
    "Page",
    "Paginator",
    "PagingPolicy",
    "ParsedBookmark",
    "ParseResult",
    "ParseStats",
    "ValidationProgress",
    "ValidationStatus",
    "apply_import_limit",
    "items_per_page_from_grid",
    "normalize_url",
]
