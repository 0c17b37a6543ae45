"""
Data models for the Bookmark Importer.

This module defines the structures that flow through the import pipeline,
from the flattened bookmark tree to the final commit result.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

UNTITLED = "Untitled"


class ValidationStatus(str, Enum):
    """Reachability classification for a probed link."""

    PENDING = "pending"
    VALID = "valid"
    SUSPICIOUS = "suspicious"
    INVALID = "invalid"


@dataclass(frozen=True)
class ParsedBookmark:
    """A single link leaf taken from the source bookmark tree."""

    title: str
    url: str
    icon: str = ""

    def to_store_item(self) -> Dict[str, str]:
        """Shape this bookmark the way the page store expects it."""
        return {
            "title": self.title or UNTITLED,
            "url": self.url,
            "icon": self.icon or "",
        }


@dataclass
class Page:
    """A named, fixed-capacity group of bookmarks."""

    name: str
    items: List[ParsedBookmark] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.items)


@dataclass
class ParseStats:
    """Summary counters produced while flattening a bookmark tree."""

    folder_count: int = 0
    total_bookmarks: int = 0
    loose_bookmarks: int = 0
    duplicate_count: int = 0
    is_extreme: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization"""
        return {
            "folderCount": self.folder_count,
            "totalBookmarks": self.total_bookmarks,
            "looseBookmarks": self.loose_bookmarks,
            "duplicateCount": self.duplicate_count,
            "isExtreme": self.is_extreme,
        }


@dataclass
class ParseResult:
    """
    Output of flattening a bookmark tree.

    ``folders`` preserves the order in which top-level folders were first
    encountered, so iterating it yields folders in tree order.
    """

    folders: Dict[str, List[ParsedBookmark]] = field(default_factory=dict)
    loose_bookmarks: List[ParsedBookmark] = field(default_factory=list)
    stats: ParseStats = field(default_factory=ParseStats)


@dataclass
class ImportPreview:
    """Derived view of what an import would commit for a given selection."""

    pages: List[Page]
    total_items: int
    total_pages: int
    duplicate_count: int
    over_limit: bool
    truncated_count: int
    is_extreme: bool

    def get_summary(self) -> str:
        """Get human-readable summary"""
        summary = (
            f"Import Preview:\n"
            f"  Pages: {self.total_pages}\n"
            f"  Bookmarks: {self.total_items}\n"
            f"  Duplicates skipped: {self.duplicate_count}"
        )
        if self.over_limit:
            summary += f"\n  Truncated (over limit): {self.truncated_count}"
        return summary


@dataclass
class ValidationProgress:
    """Running counters reported after each probed link."""

    current: int = 0
    total: int = 0
    valid: int = 0
    suspicious: int = 0
    invalid: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {
            "current": self.current,
            "total": self.total,
            "valid": self.valid,
            "suspicious": self.suspicious,
            "invalid": self.invalid,
        }


@dataclass
class ImportResult:
    """Outcome of committing pages to the store."""

    status: str
    success: int = 0
    failed: int = 0
    pages: int = 0
    error_code: Optional[str] = None
    error_message: Optional[str] = None
    skipped: Optional[int] = None

    @property
    def is_success(self) -> bool:
        return self.status == "success"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization"""
        data: Dict[str, Any] = {
            "status": self.status,
            "success": self.success,
            "failed": self.failed,
            "pages": self.pages,
        }
        if self.error_code is not None:
            data["errorCode"] = self.error_code
        if self.error_message is not None:
            data["errorMessage"] = self.error_message
        if self.skipped is not None:
            data["skipped"] = self.skipped
        return data
