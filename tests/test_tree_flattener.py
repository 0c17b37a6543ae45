"""
Unit tests for the bookmark tree flattener.

Tests URL normalization, folder flattening and deduplication against the
existing-store snapshot.
"""

import pytest

from bookmark_importer.core.data_models import ParsedBookmark
from bookmark_importer.core.tree_flattener import BookmarkTreeFlattener, normalize_url
from tests.fixtures.test_data import browser_tree, folder, folder_of_links, link


class TestNormalizeUrl:
    """Test URL normalization for duplicate comparison."""

    def test_case_slash_query_fragment_insensitive(self):
        assert normalize_url("https://EX.com/a/?q=1#x") == normalize_url("https://ex.com/a")

    def test_normalized_form(self):
        assert normalize_url("https://Example.COM/Path/") == "https://example.com/path"

    def test_root_path(self):
        assert normalize_url("https://example.com/") == "https://example.com"

    def test_port_is_kept(self):
        assert normalize_url("http://localhost:8080/app") == "http://localhost:8080/app"

    @pytest.mark.parametrize(
        "with_port, without_port",
        [
            ("https://ex.com:443/a", "https://ex.com/a"),
            ("http://EX.com:80/", "http://ex.com"),
        ],
    )
    def test_default_port_is_dropped(self, with_port, without_port):
        assert normalize_url(with_port) == normalize_url(without_port)

    def test_non_default_port_is_kept(self):
        assert normalize_url("https://ex.com:4443/a") == "https://ex.com:4443/a"
        assert normalize_url("http://ex.com:443/a") == "http://ex.com:443/a"

    def test_userinfo_is_dropped(self):
        assert normalize_url("https://user:pw@example.com/x") == "https://example.com/x"

    def test_scheme_is_significant(self):
        assert normalize_url("http://example.com") != normalize_url("https://example.com")

    def test_malformed_falls_back_to_lowercase(self):
        assert normalize_url("  Not A URL/ ") == "not a url"

    def test_bad_ipv6_falls_back(self):
        assert normalize_url("http://[::1/x") == "http://[::1/x"

    @pytest.mark.parametrize("value", ["", None])
    def test_empty(self, value):
        assert normalize_url(value) == ""

    @pytest.mark.parametrize(
        "url",
        [
            "https://EX.com/a/?q=1#x",
            "https://example.com/",
            "example.com/path/",
            "mailto:someone@example.com",
            "javascript:void(0)",
        ],
    )
    def test_idempotent(self, url):
        once = normalize_url(url)
        assert normalize_url(once) == once


class TestBookmarkTreeFlattener:
    """Test tree flattening and deduplication."""

    def test_flatten_sample_tree(self, sample_tree):
        result = BookmarkTreeFlattener().flatten(sample_tree)

        assert list(result.folders) == ["Work", "Empty", "Reading"]
        assert [b.title for b in result.folders["Work"]] == ["Docs", "Tracker", "Wiki"]
        assert result.folders["Empty"] == []
        assert [b.title for b in result.folders["Reading"]] == ["Blog"]
        assert [b.title for b in result.loose_bookmarks] == ["Loose News", "Loose Mail"]

    def test_stats(self, sample_tree):
        stats = BookmarkTreeFlattener().flatten(sample_tree).stats

        assert stats.folder_count == 3
        assert stats.total_bookmarks == 6
        assert stats.loose_bookmarks == 2
        assert stats.duplicate_count == 1
        assert stats.is_extreme is False

    def test_bookmarks_keep_original_url_and_empty_icon(self, sample_tree):
        result = BookmarkTreeFlattener().flatten(sample_tree)

        assert result.folders["Reading"][0] == ParsedBookmark(
            title="Blog", url="https://blog.example.com/post?utm=1", icon=""
        )

    def test_existing_urls_are_skipped(self, sample_tree):
        flattener = BookmarkTreeFlattener(
            existing_urls=["https://WIKI.example.com/", "https://news.example.com?ref=x"]
        )
        result = flattener.flatten(sample_tree)

        assert [b.title for b in result.folders["Work"]] == ["Docs", "Tracker"]
        assert [b.title for b in result.loose_bookmarks] == ["Loose Mail"]
        assert result.stats.duplicate_count == 3

    def test_first_occurrence_wins(self):
        tree = browser_tree(
            bar=[folder("A", link("first", "https://x.example.com/page"))],
            other=[folder("B", link("second", "https://X.example.com/page/#top"))],
        )
        result = BookmarkTreeFlattener().flatten(tree)

        assert [b.title for b in result.folders["A"]] == ["first"]
        assert result.folders["B"] == []
        assert result.stats.duplicate_count == 1

    def test_default_port_duplicates_existing_url(self):
        tree = browser_tree(bar=[folder("A", link("explicit port", "https://ex.com:443/a"))])
        result = BookmarkTreeFlattener(existing_urls=["https://ex.com/a"]).flatten(tree)

        assert result.folders["A"] == []
        assert result.stats.duplicate_count == 1

    def test_same_folder_name_in_two_containers_merges(self):
        tree = browser_tree(
            bar=[folder("Dev", link("one", "https://one.example.com"))],
            other=[folder("Dev", link("two", "https://two.example.com"))],
        )
        result = BookmarkTreeFlattener().flatten(tree)

        assert list(result.folders) == ["Dev"]
        assert [b.title for b in result.folders["Dev"]] == ["one", "two"]

    def test_every_leaf_accounted_for_once(self, sample_tree):
        result = BookmarkTreeFlattener().flatten(sample_tree)

        placed = [b for items in result.folders.values() for b in items]
        placed += result.loose_bookmarks
        assert len(placed) == len({id(b) for b in placed})
        assert len(placed) + result.stats.duplicate_count == 7

    def test_malformed_nodes_are_skipped(self):
        tree = [
            {
                "title": "",
                "children": [
                    None,
                    "junk",
                    {
                        "title": "Bookmarks bar",
                        "children": [
                            None,
                            {"title": "no url, no children"},
                            {"title": "bad children", "children": "oops"},
                            {"title": "numeric url", "url": 42},
                            {"title": 7, "url": "https://untitled.example.com"},
                            folder("Good", None, link("ok", "https://ok.example.com")),
                        ],
                    },
                    {"title": "Other bookmarks", "children": None},
                ],
            }
        ]
        result = BookmarkTreeFlattener().flatten(tree)

        assert list(result.folders) == ["Good"]
        assert [b.url for b in result.folders["Good"]] == ["https://ok.example.com"]
        assert [b.title for b in result.loose_bookmarks] == [""]

    @pytest.mark.parametrize("tree", [None, [], {}, "tree", [None]])
    def test_empty_or_invalid_tree(self, tree):
        result = BookmarkTreeFlattener().flatten(tree)

        assert result.folders == {}
        assert result.loose_bookmarks == []
        assert result.stats.total_bookmarks == 0

    def test_root_dict_accepted(self, sample_tree):
        result = BookmarkTreeFlattener().flatten(sample_tree[0])
        assert result.stats.total_bookmarks == 6

    def test_links_directly_in_system_container_depth_are_ignored(self):
        tree = [folder("", link("odd", "https://odd.example.com"), folder("Bar"))]
        result = BookmarkTreeFlattener().flatten(tree)

        assert result.stats.total_bookmarks == 0

    def test_extreme_threshold(self):
        tree = browser_tree(bar=[folder_of_links("Big", 10)])

        assert BookmarkTreeFlattener(extreme_threshold=10).flatten(tree).stats.is_extreme
        assert not BookmarkTreeFlattener(extreme_threshold=11).flatten(tree).stats.is_extreme

    def test_default_extreme_threshold_is_1000(self):
        tree = browser_tree(bar=[folder_of_links("Big", 1000)])
        assert BookmarkTreeFlattener().flatten(tree).stats.is_extreme

    def test_repeat_flatten_uses_same_snapshot(self, sample_tree):
        flattener = BookmarkTreeFlattener(existing_urls=["https://docs.example.com"])

        first = flattener.flatten(sample_tree)
        second = flattener.flatten(sample_tree)

        assert first.stats.to_dict() == second.stats.to_dict()
        assert second.stats.duplicate_count == 2
