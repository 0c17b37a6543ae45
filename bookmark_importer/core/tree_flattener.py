"""
Bookmark Tree Flattening and Deduplication Module

Walks a browser bookmark tree into top-level folder buckets and a loose
list, dropping links that already exist in the store or that appear more
than once in the tree.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Set
from urllib.parse import urlsplit

from .data_models import ParsedBookmark, ParseResult, ParseStats

logger = logging.getLogger(__name__)

EXTREME_COUNT_THRESHOLD = 1000

# Depth of the synthetic root and of the browser's system containers
# (bookmark bar, other bookmarks, mobile); both are walked through.
ROOT_DEPTH = 0
SYSTEM_CONTAINER_DEPTH = 1
TOP_LEVEL_FOLDER_DEPTH = 2

DEFAULT_PORTS = {"http": ":80", "https": ":443"}


def normalize_url(url: Any) -> str:
    """
    Normalize URL for duplicate comparison.

    The result is ``scheme://host/path`` lowercased, with query string,
    fragment, default ports and a single trailing slash removed. URLs
    without a scheme or that fail to parse fall back to the lowercased,
    trimmed input.

    Args:
        url: URL to normalize

    Returns:
        Normalized URL string
    """
    if not url:
        return ""

    raw = str(url).strip()

    try:
        parsed = urlsplit(raw)
        if not parsed.scheme:
            raise ValueError("missing scheme")
        path = parsed.path[:-1] if parsed.path.endswith("/") else parsed.path
        if not parsed.netloc:
            return f"{parsed.scheme}:{path}".lower()
        scheme = parsed.scheme.lower()
        host = parsed.netloc.rpartition("@")[2].lower()
        default_port = DEFAULT_PORTS.get(scheme)
        if default_port and host.endswith(default_port):
            host = host[: -len(default_port)]
        return f"{scheme}://{host}{path}".lower()
    except ValueError:
        fallback = raw.lower()
        return fallback[:-1] if fallback.endswith("/") else fallback


class BookmarkTreeFlattener:
    """
    Flattens a bookmark tree into folder buckets.

    Only top-level folder names survive: children of nested folders are
    merged into their nearest top-level ancestor. The existing-URL set is
    captured once when the flattener is created and is never refreshed.
    """

    def __init__(
        self,
        existing_urls: Optional[Iterable[str]] = None,
        extreme_threshold: int = EXTREME_COUNT_THRESHOLD,
    ):
        """
        Initialize the flattener.

        Args:
            existing_urls: URLs already present in the store
            extreme_threshold: Bookmark count that marks a tree as extreme
        """
        self.extreme_threshold = extreme_threshold
        self._existing: Set[str] = {
            normalize_url(url) for url in (existing_urls or []) if url
        }
        self._seen: Set[str] = set()
        self._folders: Dict[str, List[ParsedBookmark]] = {}
        self._loose: List[ParsedBookmark] = []
        self._duplicate_count = 0

    def flatten(self, tree: Any) -> ParseResult:
        """
        Flatten a bookmark tree.

        Args:
            tree: Root node, or a list whose first element is the root node

        Returns:
            ParseResult with folders, loose bookmarks and stats
        """
        self._seen = set(self._existing)
        self._folders = {}
        self._loose = []
        self._duplicate_count = 0

        root = tree[0] if isinstance(tree, list) and tree else tree
        self._walk(root, None, ROOT_DEPTH)

        stats = self._calculate_stats()
        logger.info(
            f"Flattened bookmark tree: {stats.total_bookmarks} bookmarks in "
            f"{stats.folder_count} folders, {stats.duplicate_count} duplicates"
        )
        return ParseResult(
            folders=self._folders,
            loose_bookmarks=self._loose,
            stats=stats,
        )

    def _walk(self, node: Any, top_level_folder: Optional[str], depth: int) -> None:
        if not isinstance(node, dict):
            return

        children = node.get("children")
        if not isinstance(children, list):
            children = None

        if depth < TOP_LEVEL_FOLDER_DEPTH:
            for child in children or []:
                self._walk(child, None, depth + 1)
            return

        url = node.get("url")
        if url:
            self._add_link(node, url, top_level_folder)
            return

        if children is None:
            return

        if depth == TOP_LEVEL_FOLDER_DEPTH:
            top_level_folder = self._title_of(node)
            self._folders.setdefault(top_level_folder, [])

        for child in children:
            self._walk(child, top_level_folder, depth + 1)

    def _add_link(self, node: Dict[str, Any], url: Any, folder: Optional[str]) -> None:
        if not isinstance(url, str):
            return

        normalized = normalize_url(url)
        if normalized in self._seen:
            self._duplicate_count += 1
            return
        self._seen.add(normalized)

        bookmark = ParsedBookmark(title=self._title_of(node), url=url, icon="")
        if folder is not None:
            self._folders[folder].append(bookmark)
        else:
            self._loose.append(bookmark)

    @staticmethod
    def _title_of(node: Dict[str, Any]) -> str:
        title = node.get("title")
        return title if isinstance(title, str) else ""

    def _calculate_stats(self) -> ParseStats:
        total = sum(len(items) for items in self._folders.values())
        total += len(self._loose)

        return ParseStats(
            folder_count=len(self._folders),
            total_bookmarks=total,
            loose_bookmarks=len(self._loose),
            duplicate_count=self._duplicate_count,
            is_extreme=total >= self.extreme_threshold,
        )
