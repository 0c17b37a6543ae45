"""
Import size limiting.

Caps the number of bookmarks committed in one import, truncating the page
that crosses the ceiling and dropping every page after it.
"""

from dataclasses import dataclass
from typing import List, Sequence

from .data_models import Page

MAX_IMPORT_COUNT = 500


@dataclass
class LimitResult:
    """Pages kept under the cap together with truncation accounting."""

    pages: List[Page]
    total_items: int
    total_before_cap: int
    over_limit: bool
    truncated_count: int


def apply_import_limit(pages: Sequence[Page], cap: int = MAX_IMPORT_COUNT) -> LimitResult:
    """
    Keep at most ``cap`` items across ``pages``, in order.

    Args:
        pages: Ordered pages
        cap: Maximum number of items to keep

    Returns:
        LimitResult with the kept pages and truncation counters
    """
    total_before_cap = sum(len(page.items) for page in pages)

    kept: List[Page] = []
    running = 0
    for page in pages:
        remaining = cap - running
        if remaining <= 0:
            break

        if len(page.items) <= remaining:
            kept.append(page)
            running += len(page.items)
        else:
            kept.append(Page(name=page.name, items=list(page.items[:remaining])))
            running += remaining
            break

    over_limit = total_before_cap > cap
    return LimitResult(
        pages=kept,
        total_items=running,
        total_before_cap=total_before_cap,
        over_limit=over_limit,
        truncated_count=total_before_cap - cap if over_limit else 0,
    )
