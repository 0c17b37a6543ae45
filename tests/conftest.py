"""
Pytest configuration and shared fixtures for bookmark importer tests.
"""

import shutil
import tempfile
from pathlib import Path
from typing import Any, Dict, Generator, List

import pytest

from tests.fixtures.mock_utilities import FakeStore
from tests.fixtures.test_data import browser_tree, folder, link

# ============================================================================
# Pytest Configuration
# ============================================================================


@pytest.fixture(autouse=True)
def online_by_default(monkeypatch):
    """Keep a developer's offline-mode env var from leaking into tests."""
    monkeypatch.delenv("BOOKMARK_IMPORTER_OFFLINE_MODE", raising=False)


# ============================================================================
# Temporary Directory Fixtures
# ============================================================================


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    temp_path = Path(tempfile.mkdtemp(prefix="bookmark_import_test_"))
    try:
        yield temp_path
    finally:
        if temp_path.exists():
            shutil.rmtree(temp_path)


# ============================================================================
# Collaborator Fixtures
# ============================================================================


@pytest.fixture
def fake_store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def sample_tree() -> List[Dict[str, Any]]:
    """A tree with nested folders, loose links and duplicates."""
    return browser_tree(
        bar=[
            folder(
                "Work",
                link("Docs", "https://docs.example.com/"),
                folder(
                    "Projects",
                    link("Tracker", "https://tracker.example.com/board"),
                    folder("Deep", link("Wiki", "https://wiki.example.com")),
                ),
            ),
            link("Loose News", "https://news.example.com"),
            folder("Empty"),
        ],
        other=[
            folder(
                "Reading",
                link("Blog", "https://blog.example.com/post?utm=1"),
                link("Docs again", "https://DOCS.example.com"),
            ),
            link("Loose Mail", "https://mail.example.com/inbox#unread"),
        ],
    )
