"""
Page layout for imported bookmarks.

Converts selected folders into fixed-capacity pages under one of two
policies: strict paging keeps every folder on its own pages, SmartCompact
merges small consecutive folders so pages are better filled.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Optional, Sequence

from .data_models import Page, ParsedBookmark

DEFAULT_ITEMS_PER_PAGE = 24
MIN_PAGE_FILL_TARGET = 12
UNCATEGORIZED_PAGE_NAME = "uncategorized"
MERGED_NAME_SEPARATOR = " + "

# Launchpad grid density bounds
GRID_DEFAULT_COLS = 6
GRID_DEFAULT_ROWS = 4
GRID_COL_MIN = 4
GRID_COL_MAX = 10
GRID_ROW_MIN = 2
GRID_ROW_MAX = 6


class PagingPolicy(Enum):
    """Layout policy for turning folders into pages."""

    STRICT = "strict"
    SMART_COMPACT = "smart_compact"


@dataclass
class FolderEntry:
    """A folder selected for import, in the order it should be laid out."""

    folder_name: str
    bookmarks: List[ParsedBookmark]


def _to_int(value: Any, default: int) -> int:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(number) or math.isinf(number):
        return default
    return int(number)


def items_per_page_from_grid(
    columns: Any = None,
    rows: Any = None,
    fallback: int = DEFAULT_ITEMS_PER_PAGE,
) -> int:
    """
    Derive page capacity from the launchpad grid settings.

    Args:
        columns: Configured grid columns (clamped to the supported range)
        rows: Configured grid rows (clamped to the supported range)
        fallback: Capacity used when the grid yields no usable value

    Returns:
        Number of items that fit on one page
    """
    cols = _to_int(columns, GRID_DEFAULT_COLS)
    rows_ = _to_int(rows, GRID_DEFAULT_ROWS)

    safe_cols = max(GRID_COL_MIN, min(GRID_COL_MAX, cols))
    safe_rows = max(GRID_ROW_MIN, min(GRID_ROW_MAX, rows_))

    capacity = safe_cols * safe_rows
    return capacity if capacity > 0 else fallback


class Paginator:
    """Lays out folder entries as pages."""

    def __init__(
        self,
        items_per_page: int = DEFAULT_ITEMS_PER_PAGE,
        min_fill_target: Optional[int] = None,
    ):
        """
        Initialize the paginator.

        Args:
            items_per_page: Page capacity
            min_fill_target: SmartCompact flush threshold; defaults to
                ``min(12, items_per_page)``
        """
        if items_per_page < 1:
            raise ValueError(f"items_per_page must be positive, got {items_per_page}")

        self.items_per_page = items_per_page
        target = MIN_PAGE_FILL_TARGET if min_fill_target is None else min_fill_target
        self.min_fill_target = max(1, min(target, items_per_page))

    def paginate(
        self,
        entries: Sequence[FolderEntry],
        policy: PagingPolicy = PagingPolicy.SMART_COMPACT,
    ) -> List[Page]:
        """
        Lay out entries under the given policy.

        Args:
            entries: Folders in layout order
            policy: Paging policy

        Returns:
            Ordered list of pages
        """
        if policy is PagingPolicy.SMART_COMPACT:
            return self.smart_compact(entries)
        return self.strict(entries)

    def strict(self, entries: Sequence[FolderEntry]) -> List[Page]:
        """Give every folder its own page(s)."""
        pages: List[Page] = []
        for entry in entries:
            pages.extend(self.create_pages(entry.bookmarks, entry.folder_name))
        return pages

    def smart_compact(self, entries: Sequence[FolderEntry]) -> List[Page]:
        """
        Merge consecutive small folders until they reach the fill target.

        Folders at or above the target are laid out on their own, after
        flushing whatever small folders were pending before them.
        """
        pages: List[Page] = []
        pending_items: List[ParsedBookmark] = []
        pending_names: List[str] = []

        def flush() -> None:
            if pending_items:
                name = MERGED_NAME_SEPARATOR.join(pending_names)
                pages.extend(self.create_pages(list(pending_items), name))
            pending_items.clear()
            pending_names.clear()

        for entry in entries:
            if len(entry.bookmarks) >= self.min_fill_target:
                flush()
                pages.extend(self.create_pages(entry.bookmarks, entry.folder_name))
                continue

            pending_items.extend(entry.bookmarks)
            pending_names.append(entry.folder_name)
            if len(pending_items) >= self.min_fill_target:
                flush()

        flush()
        return pages

    def create_pages(self, items: Sequence[ParsedBookmark], base_name: str) -> List[Page]:
        """
        Split items into pages of at most ``items_per_page``.

        Multi-page splits are named ``"<base> (i/N)"``; a single page keeps
        the bare name. No items yields no pages.
        """
        size = self.items_per_page
        total_pages = math.ceil(len(items) / size)

        pages = []
        for i in range(total_pages):
            chunk = list(items[i * size : (i + 1) * size])
            name = f"{base_name} ({i + 1}/{total_pages})" if total_pages > 1 else base_name
            pages.append(Page(name=name, items=chunk))
        return pages
