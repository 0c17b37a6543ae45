"""
Netscape HTML bookmark source.

Reads the HTML bookmark export produced by Chrome, Firefox and Edge and
exposes it as a bookmark tree. The toolbar folder and the remaining
top-level entries become the tree's system containers.
"""

import logging
import re
from pathlib import Path
from typing import Any, Dict, List, Union

from bs4 import BeautifulSoup

from ...utils.error_handler import BookmarkSourceError

logger = logging.getLogger(__name__)

OTHER_BOOKMARKS_TITLE = "Other bookmarks"


class NetscapeHTMLSource:
    """Bookmark source backed by a Netscape bookmark file."""

    DOCTYPE_PATTERN = r"<!DOCTYPE\s+NETSCAPE-Bookmark-file-1>"
    SUPPORTED_ENCODINGS = ["utf-8", "utf-16", "iso-8859-1"]

    def __init__(self, file_path: Union[str, Path]):
        self.file_path = Path(file_path)

    def get_tree(self) -> List[Dict[str, Any]]:
        if not self.file_path.exists():
            raise BookmarkSourceError(f"File not found: {self.file_path}")

        soup = BeautifulSoup(self._read_html_file(), "html.parser")
        root_dl = soup.find("dl")
        if root_dl is None:
            raise BookmarkSourceError(
                "No bookmark data found (missing <DL> elements)"
            )

        toolbars: List[Dict[str, Any]] = []
        others: List[Dict[str, Any]] = []
        for node, is_toolbar in self._process_dl(root_dl, top_level=True):
            (toolbars if is_toolbar else others).append(node)

        containers = toolbars + [{"title": OTHER_BOOKMARKS_TITLE, "children": others}]
        return [{"title": "", "children": containers}]

    def _read_html_file(self) -> str:
        for encoding in self.SUPPORTED_ENCODINGS:
            try:
                with open(self.file_path, "r", encoding=encoding) as f:
                    content = f.read()
            except UnicodeError:
                continue
            except OSError as e:
                raise BookmarkSourceError(f"Error reading file: {e}") from e
            if re.search(self.DOCTYPE_PATTERN, content, re.IGNORECASE):
                return content

        raise BookmarkSourceError(
            "File does not appear to be a Netscape bookmark export (missing DOCTYPE)"
        )

    @staticmethod
    def _folder_dl(h3):
        """Return the DL that holds a folder's entries, if it follows the H3."""
        for sibling in h3.next_siblings:
            name = getattr(sibling, "name", None)
            if name is None or name == "p":
                continue
            return sibling if name == "dl" else None
        return None

    def _process_dl(self, dl_element, top_level: bool = False):
        """
        Yield ``(node, is_toolbar)`` for each entry directly inside a DL.

        Unclosed DT tags nest inside each other when parsed, so entries
        are matched by their nearest enclosing DL instead of by position.
        """
        for dt in dl_element.find_all("dt"):
            if dt.find_parent("dl") is not dl_element:
                continue

            h3 = dt.find("h3", recursive=False)
            a_tag = dt.find("a", recursive=False)

            if h3 is not None:
                sub_dl = self._folder_dl(h3)
                children = (
                    [node for node, _ in self._process_dl(sub_dl)] if sub_dl is not None else []
                )
                is_toolbar = (
                    top_level
                    and str(h3.get("personal_toolbar_folder", "")).lower() == "true"
                )
                yield {"title": h3.get_text().strip(), "children": children}, is_toolbar

            elif a_tag is not None:
                url = a_tag.get("href")
                if not url:
                    logger.warning("Bookmark found without URL, skipping")
                    continue
                yield {"title": a_tag.get_text().strip(), "url": url}, False
