"""
Chrome profile bookmark source.

Reads the ``Bookmarks`` JSON file from a Chrome (or Chromium-based) profile
directory and exposes it as a bookmark tree.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Union

from ...utils.error_handler import BookmarkSourceError

logger = logging.getLogger(__name__)

# Chrome's fixed root containers, in the order the browser shows them
ROOT_KEYS = ("bookmark_bar", "other", "synced")


class ChromeJSONSource:
    """Bookmark source backed by a Chrome ``Bookmarks`` file."""

    def __init__(self, file_path: Union[str, Path]):
        self.file_path = Path(file_path)

    def get_tree(self) -> List[Dict[str, Any]]:
        try:
            with open(self.file_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError as e:
            raise BookmarkSourceError(f"File not found: {self.file_path}") from e
        except (OSError, ValueError) as e:
            raise BookmarkSourceError(
                f"Failed to read Chrome bookmarks from {self.file_path}: {e}"
            ) from e

        roots = data.get("roots") if isinstance(data, dict) else None
        if not isinstance(roots, dict):
            raise BookmarkSourceError(
                f"{self.file_path} is not a Chrome bookmarks file (missing roots)"
            )

        keys = [key for key in ROOT_KEYS if key in roots]
        keys += [key for key in roots if key not in ROOT_KEYS]

        containers = [
            self._convert(roots[key]) for key in keys if isinstance(roots[key], dict)
        ]
        logger.debug(f"Loaded {len(containers)} root containers from {self.file_path}")
        return [{"title": "", "children": containers}]

    def _convert(self, node: Dict[str, Any]) -> Dict[str, Any]:
        converted: Dict[str, Any] = {"title": node.get("name", "")}
        if node.get("type") == "url":
            converted["url"] = node.get("url", "")
            return converted

        children = node.get("children")
        if isinstance(children, list):
            converted["children"] = [
                self._convert(child) for child in children if isinstance(child, dict)
            ]
        else:
            converted["children"] = []
        return converted
