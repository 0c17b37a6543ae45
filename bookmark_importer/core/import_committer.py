"""
Import commit protocol.

Writes the final page set to the store in one bulk call, picking the
insertion point, re-applying the import cap and converting every store
failure into an ImportResult.
"""

import inspect
import logging
from typing import Any, Callable, Dict, List, Optional, Sequence

from ..utils.error_handler import resolve_error_code
from .data_models import ImportResult, Page
from .data_sources.protocol import PageStore
from .import_limiter import MAX_IMPORT_COUNT, apply_import_limit

logger = logging.getLogger(__name__)

ImportProgressCallback = Callable[[int, int], None]


def _to_count(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


class ImportCommitter:
    """Commits pages of bookmarks to a PageStore."""

    def __init__(self, store: PageStore, max_import_count: int = MAX_IMPORT_COUNT):
        self.store = store
        self.max_import_count = max_import_count

    async def execute_import(
        self,
        pages: Sequence[Page],
        on_progress: Optional[ImportProgressCallback] = None,
    ) -> ImportResult:
        """
        Commit pages to the store.

        Args:
            pages: Pages to import, in order
            on_progress: Called with ``(done, total)`` before and after the write

        Returns:
            ImportResult; store failures are reported here, never raised
        """
        limited = apply_import_limit(pages, self.max_import_count)
        total = limited.total_items

        if total == 0:
            return ImportResult(status="success", success=0, failed=0, pages=0)

        if limited.over_limit:
            logger.warning(
                f"Import capped at {self.max_import_count} items, "
                f"{limited.truncated_count} dropped"
            )

        self._notify(on_progress, 0, total)

        try:
            start_index = self._insertion_index()
            pages_data = self._build_pages_data(limited.pages, start_index)
            reply = self.store.bulk_add_items(pages_data)
            if inspect.isawaitable(reply):
                reply = await reply
        except Exception as e:
            logger.error(f"Bulk import failed: {e}")
            return ImportResult(
                status="failed",
                success=0,
                failed=total,
                pages=0,
                error_code=resolve_error_code(e),
                error_message=str(e) or type(e).__name__,
            )

        reply = reply if isinstance(reply, dict) else {}
        success = _to_count(reply.get("success"))
        failed = _to_count(reply.get("failed"))
        status = reply.get("status") or (
            "failed" if failed > 0 and success == 0 else "success"
        )

        self._notify(on_progress, success, total)

        if status == "failed":
            logger.error(
                f"Store rejected import: {reply.get('errorCode')} "
                f"{reply.get('errorMessage') or ''}".rstrip()
            )
        else:
            logger.info(
                f"Imported {success}/{total} bookmarks on {len(limited.pages)} pages"
                + (f" ({failed} failed)" if failed else "")
            )

        return ImportResult(
            status=status,
            success=success,
            failed=failed,
            pages=0 if status == "failed" else len(limited.pages),
            error_code=reply.get("errorCode"),
            error_message=reply.get("errorMessage"),
        )

    def _insertion_index(self) -> int:
        """Index of the first page to write: reuse a trailing empty page."""
        page_count = self.store.get_page_count()
        if page_count <= 0:
            return 0
        last_page = self.store.get_page(page_count - 1)
        return page_count - 1 if not last_page else page_count

    @staticmethod
    def _build_pages_data(pages: Sequence[Page], start_index: int) -> List[Dict[str, Any]]:
        return [
            {
                "pageIndex": start_index + offset,
                "items": [bookmark.to_store_item() for bookmark in page.items],
            }
            for offset, page in enumerate(pages)
        ]

    @staticmethod
    def _notify(on_progress: Optional[ImportProgressCallback], done: int, total: int) -> None:
        if on_progress is not None:
            on_progress(done, total)
