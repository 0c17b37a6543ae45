"""
Collaborator protocols for the import pipeline.

The importer reads a bookmark tree from a source and commits pages to a
store. Both are injected, so any object with these methods can be used.
"""

from abc import abstractmethod
from typing import Any, Dict, List, Protocol, runtime_checkable

# A node is {"title": str, "url": str} for links or
# {"title": str, "children": [...]} for containers.
BookmarkNode = Dict[str, Any]


@runtime_checkable
class BookmarkSource(Protocol):
    """Provides the browser's bookmark tree."""

    @abstractmethod
    def get_tree(self) -> List[BookmarkNode]:
        """
        Return the bookmark tree.

        Returns:
            List whose first element is the synthetic root node; the root's
            children are the browser's system containers

        Raises:
            BookmarkSourceError: If the tree cannot be read
        """
        ...


@runtime_checkable
class PageStore(Protocol):
    """
    Paged link store the importer commits into.

    Example Usage:
        >>> store = JSONPageStore(Path("quicklinks_store.json"))
        >>> existing = [item["url"] for item in store.get_all_items()]
        >>> reply = await store.bulk_add_items([{"pageIndex": 1, "items": [...]}])
    """

    @abstractmethod
    def get_all_items(self) -> List[Dict[str, Any]]:
        """Return every stored item across all pages."""
        ...

    @abstractmethod
    def get_page_count(self) -> int:
        """Return the number of pages, including a trailing empty page."""
        ...

    @abstractmethod
    def get_page(self, index: int) -> List[Dict[str, Any]]:
        """Return the items on page ``index``, or an empty list."""
        ...

    @abstractmethod
    async def bulk_add_items(self, pages_data: List[Dict[str, Any]]) -> Dict[str, Any]:
        """
        Write several pages of items in one operation.

        Args:
            pages_data: ``[{"pageIndex": int, "items": [{title, url, icon}]}]``

        Returns:
            Reply with ``success`` and ``failed`` counts and optionally
            ``status``, ``errorCode`` and ``errorMessage``

        Raises:
            QuotaExceededError: If the write would exceed the store quota
            StorageError: If the write fails
        """
        ...
