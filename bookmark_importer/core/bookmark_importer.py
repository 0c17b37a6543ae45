"""
Bookmark Import Pipeline

Ties the pipeline stages together behind the interface the UI layer uses:
parse the browser's bookmark tree, preview a selection as pages, optionally
validate links, and commit the result to the page store.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence

from .data_models import (
    ImportPreview,
    ImportResult,
    Page,
    ParseResult,
    ValidationStatus,
)
from .data_sources.protocol import BookmarkSource, PageStore
from .import_committer import ImportCommitter, ImportProgressCallback
from .import_limiter import MAX_IMPORT_COUNT, apply_import_limit
from .link_validator import LinkValidator
from .link_validator.validator import ProgressCallback
from .paginator import (
    DEFAULT_ITEMS_PER_PAGE,
    UNCATEGORIZED_PAGE_NAME,
    FolderEntry,
    Paginator,
    PagingPolicy,
    items_per_page_from_grid,
)
from .tree_flattener import EXTREME_COUNT_THRESHOLD, BookmarkTreeFlattener

logger = logging.getLogger(__name__)


class BookmarkImporter:
    """
    Imports a browser bookmark tree into a paged link store.

    Collaborators are injected so that each pipeline run works against an
    explicit source, store and validator rather than shared module state.
    """

    def __init__(
        self,
        source: BookmarkSource,
        store: PageStore,
        validator: Optional[LinkValidator] = None,
        items_per_page: int = DEFAULT_ITEMS_PER_PAGE,
        min_fill_target: Optional[int] = None,
        max_import_count: int = MAX_IMPORT_COUNT,
        extreme_threshold: int = EXTREME_COUNT_THRESHOLD,
    ):
        self.source = source
        self.store = store
        self.validator = validator or LinkValidator()
        self.paginator = Paginator(items_per_page, min_fill_target)
        self.committer = ImportCommitter(store, max_import_count)
        self.max_import_count = max_import_count
        self.extreme_threshold = extreme_threshold

        self._parsed = ParseResult()
        self._abort_requested = False

    @classmethod
    def from_config(
        cls,
        config,
        source: BookmarkSource,
        store: PageStore,
        validator: Optional[LinkValidator] = None,
    ) -> "BookmarkImporter":
        """Build an importer from an ImporterConfig."""
        return cls(
            source=source,
            store=store,
            validator=validator or LinkValidator.from_config(config.network),
            items_per_page=items_per_page_from_grid(
                config.paging.grid_columns, config.paging.grid_rows
            ),
            min_fill_target=config.paging.min_fill_target,
            max_import_count=config.limits.max_import_count,
            extreme_threshold=config.limits.extreme_count_threshold,
        )

    @property
    def items_per_page(self) -> int:
        return self.paginator.items_per_page

    def parse_bookmark_tree(self) -> ParseResult:
        """
        Read and flatten the source tree.

        The store's current URLs are snapshotted once here and used for
        deduplication for the rest of the run.

        Raises:
            BookmarkSourceError: If the source cannot be read
        """
        existing_urls = [item.get("url") for item in self.store.get_all_items()]
        flattener = BookmarkTreeFlattener(existing_urls, self.extreme_threshold)

        tree = self.source.get_tree()
        self._parsed = flattener.flatten(tree)
        return self._parsed

    def preview_import(
        self,
        selected_folders: Optional[Iterable[str]] = None,
        include_loose: bool = True,
        smart_compact: bool = True,
    ) -> ImportPreview:
        """
        Lay out the selected folders as pages and apply the import cap.

        Args:
            selected_folders: Folder names to include; ``None`` selects all
            include_loose: Whether loose bookmarks are added as
                ``uncategorized`` after the folders
            smart_compact: Use SmartCompact instead of strict paging

        Returns:
            ImportPreview for the selection
        """
        selected = None if selected_folders is None else set(selected_folders)

        entries: List[FolderEntry] = []
        for folder_name, bookmarks in self._parsed.folders.items():
            if selected is not None and folder_name not in selected:
                continue
            if bookmarks:
                entries.append(FolderEntry(folder_name, list(bookmarks)))

        if include_loose and self._parsed.loose_bookmarks:
            entries.append(
                FolderEntry(UNCATEGORIZED_PAGE_NAME, list(self._parsed.loose_bookmarks))
            )

        policy = PagingPolicy.SMART_COMPACT if smart_compact else PagingPolicy.STRICT
        pages = self.paginator.paginate(entries, policy)
        limited = apply_import_limit(pages, self.max_import_count)

        return ImportPreview(
            pages=limited.pages,
            total_items=limited.total_items,
            total_pages=len(limited.pages),
            duplicate_count=self._parsed.stats.duplicate_count,
            over_limit=limited.over_limit,
            truncated_count=limited.truncated_count,
            is_extreme=limited.total_before_cap >= self.extreme_threshold,
        )

    async def execute_import(
        self,
        pages: Sequence[Page],
        on_progress: Optional[ImportProgressCallback] = None,
    ) -> ImportResult:
        return await self.committer.execute_import(pages, on_progress)

    async def validate_batch(
        self,
        items: Iterable[Any],
        on_progress: Optional[ProgressCallback] = None,
    ) -> Dict[Any, ValidationStatus]:
        return await self.validator.validate_batch(items, on_progress)

    def abort(self) -> None:
        """Abort a running validation."""
        if self.validator.is_validating():
            self._abort_requested = True
        self.validator.abort()

    def is_validating(self) -> bool:
        return self.validator.is_validating()

    @staticmethod
    def filter_valid_pages(
        pages: Sequence[Page],
        results: Optional[Dict[Any, ValidationStatus]],
    ) -> List[Page]:
        """
        Drop links classified INVALID, and any page left empty.

        Links with no result, or PENDING/SUSPICIOUS results, are kept.
        """
        if not results:
            return list(pages)

        filtered = []
        for page in pages:
            items = [
                item
                for item in page.items
                if results.get(item.url) is not ValidationStatus.INVALID
            ]
            if items:
                filtered.append(Page(name=page.name, items=items))
        return filtered

    @staticmethod
    def count_invalid_links(results: Optional[Dict[Any, ValidationStatus]]) -> int:
        if not results:
            return 0
        return sum(1 for status in results.values() if status is ValidationStatus.INVALID)

    async def import_with_validation(
        self,
        pages: Sequence[Page],
        on_validate_progress: Optional[ProgressCallback] = None,
        on_import_progress: Optional[ImportProgressCallback] = None,
    ) -> Optional[ImportResult]:
        """
        Validate every link on ``pages``, drop invalid ones, then commit.

        Returns:
            ImportResult with ``skipped`` set to the number of invalid links
            (0 when validation produced no results),
            or None when the validation was aborted and nothing was committed
        """
        self._abort_requested = False
        items = [item for page in pages for item in page.items]

        results = await self.validator.validate_batch(items, on_validate_progress)

        if self._abort_requested:
            self._abort_requested = False
            logger.info("Validation aborted, import not committed")
            return None

        pages_to_import = list(pages)
        skipped = 0
        if results:
            pages_to_import = self.filter_valid_pages(pages, results)
            skipped = self.count_invalid_links(results)
            logger.info(f"Skipping {skipped} invalid links")

        result = await self.committer.execute_import(pages_to_import, on_import_progress)
        result.skipped = skipped
        return result
