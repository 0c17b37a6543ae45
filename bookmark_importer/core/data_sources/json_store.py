"""
File-backed paged link store.

Stores launchpad pages as a JSON document and enforces a byte quota on
every bulk write, mirroring the capacity limits of browser sync storage.
"""

import asyncio
import json
import logging
import os
import time
import uuid
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ...utils.error_handler import QuotaExceededError, StorageError

logger = logging.getLogger(__name__)

MAX_TITLE_LENGTH = 200
MAX_URL_LENGTH = 2000
MAX_ICON_LENGTH = 2000
DEFAULT_QUOTA_BYTES = 102400


class JSONPageStore:
    """
    Paged store persisted to a JSON file.

    The store always reports at least one page; a fresh store has a single
    empty page that the first import fills.
    """

    def __init__(
        self,
        file_path: Union[str, Path],
        quota_bytes: int = DEFAULT_QUOTA_BYTES,
    ):
        """
        Initialize the store.

        Args:
            file_path: JSON file holding the pages
            quota_bytes: Maximum serialized size of the store
        """
        self.file_path = Path(file_path)
        self.quota_bytes = quota_bytes
        self._pages: List[List[Dict[str, Any]]] = self._load()

    def _load(self) -> List[List[Dict[str, Any]]]:
        if not self.file_path.exists():
            return [[]]

        try:
            with open(self.file_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise StorageError(f"Failed to load store {self.file_path}: {e}") from e

        pages = data.get("pages") if isinstance(data, dict) else None
        if not isinstance(pages, list):
            raise StorageError(f"Store {self.file_path} has no pages list")

        pages = [page for page in pages if isinstance(page, list)]
        return pages or [[]]

    def get_all_items(self) -> List[Dict[str, Any]]:
        return [item for page in self._pages for item in page]

    def get_page_count(self) -> int:
        return len(self._pages)

    def get_page(self, index: int) -> List[Dict[str, Any]]:
        if 0 <= index < len(self._pages):
            return list(self._pages[index])
        return []

    async def bulk_add_items(self, pages_data: List[Dict[str, Any]]) -> Dict[str, Any]:
        """
        Append pages of items in a single write.

        Groups are ordered by ``pageIndex``; a trailing empty page is
        reused before new pages are created. Items without a URL are
        counted as failed.

        Raises:
            QuotaExceededError: If the result would exceed ``quota_bytes``
            StorageError: If the file cannot be written
        """
        groups: Dict[int, List[Dict[str, Any]]] = {}
        failed = 0
        for page_data in pages_data or []:
            items = page_data.get("items") or []
            page_index = page_data.get("pageIndex")
            target = page_index if isinstance(page_index, int) else 0
            for item_data in items:
                item = self._make_item(item_data)
                if item is None:
                    failed += 1
                    continue
                groups.setdefault(target, []).append(item)

        added = sum(len(items) for items in groups.values())
        if added == 0:
            return {"status": "success", "success": 0, "failed": failed}

        next_pages = [list(page) for page in self._pages]
        while next_pages and not next_pages[-1]:
            next_pages.pop()
        for index in sorted(groups):
            next_pages.append(groups[index])

        payload = json.dumps({"pages": next_pages}, ensure_ascii=False)
        size = len(payload.encode("utf-8"))
        if size > self.quota_bytes:
            raise QuotaExceededError(
                f"Store quota exceeded: {size} bytes needed, "
                f"{self.quota_bytes} allowed"
            )

        await asyncio.to_thread(self._write, payload)
        self._pages = next_pages

        logger.info(f"Stored {added} items on {len(groups)} new pages")
        return {"status": "success", "success": added, "failed": failed}

    def _make_item(self, item_data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        url = str(item_data.get("url") or "")
        if not url:
            return None
        return {
            "_id": uuid.uuid4().hex,
            "title": str(item_data.get("title") or "")[:MAX_TITLE_LENGTH],
            "url": url[:MAX_URL_LENGTH],
            "icon": str(item_data.get("icon") or "")[:MAX_ICON_LENGTH],
            "createdAt": int(time.time() * 1000),
        }

    def _write(self, payload: str) -> None:
        tmp_path = self.file_path.with_suffix(self.file_path.suffix + ".tmp")
        try:
            self.file_path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                f.write(payload)
            os.replace(tmp_path, self.file_path)
        except OSError as e:
            raise StorageError(f"Failed to write store {self.file_path}: {e}") from e
