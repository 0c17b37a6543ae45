"""
Data sources and stores for the import pipeline.
"""

from .chrome_json_source import ChromeJSONSource
from .json_store import JSONPageStore
from .netscape_html_source import NetscapeHTMLSource
from .protocol import BookmarkNode, BookmarkSource, PageStore

__all__ = [
    "BookmarkNode",
    "BookmarkSource",
    "ChromeJSONSource",
    "JSONPageStore",
    "NetscapeHTMLSource",
    "PageStore",
]
