"""
Tests for the import commit protocol.
"""

import pytest

from bookmark_importer.core.data_models import Page, ParsedBookmark
from bookmark_importer.core.import_committer import ImportCommitter
from bookmark_importer.utils.error_handler import QuotaExceededError, StorageError
from tests.fixtures.mock_utilities import FakeStore
from tests.fixtures.test_data import make_pages


class TestImportCommitter:
    """Test ImportCommitter.execute_import."""

    @pytest.mark.asyncio
    async def test_successful_import(self, fake_store):
        progress = []
        result = await ImportCommitter(fake_store).execute_import(
            make_pages(24, 6), lambda done, total: progress.append((done, total))
        )

        assert result.status == "success"
        assert result.success == 30
        assert result.failed == 0
        assert result.pages == 2
        assert progress == [(0, 30), (30, 30)]
        assert len(fake_store.bulk_calls) == 1

    @pytest.mark.asyncio
    async def test_zero_items_skips_store(self, fake_store):
        progress = []
        result = await ImportCommitter(fake_store).execute_import(
            [Page("empty")], lambda *args: progress.append(args)
        )

        assert result.to_dict() == {"status": "success", "success": 0, "failed": 0, "pages": 0}
        assert fake_store.bulk_calls == []
        assert progress == []

    @pytest.mark.asyncio
    async def test_fills_trailing_empty_page(self):
        store = FakeStore(pages=[[{"url": "https://a.example.com"}], []])
        await ImportCommitter(store).execute_import(make_pages(3, 2))

        assert [p["pageIndex"] for p in store.bulk_calls[0]] == [1, 2]

    @pytest.mark.asyncio
    async def test_appends_after_non_empty_last_page(self):
        store = FakeStore(pages=[[{"url": "https://a.example.com"}]])
        await ImportCommitter(store).execute_import(make_pages(3))

        assert [p["pageIndex"] for p in store.bulk_calls[0]] == [1]

    @pytest.mark.asyncio
    async def test_store_without_pages_starts_at_zero(self):
        store = FakeStore(pages=[])
        await ImportCommitter(store).execute_import(make_pages(1))

        assert store.bulk_calls[0][0]["pageIndex"] == 0

    @pytest.mark.asyncio
    async def test_item_shape(self, fake_store):
        page = Page(
            "p",
            [
                ParsedBookmark(title="", url="https://untitled.example.com"),
                ParsedBookmark(title="Kept", url="https://k.example.com", icon="ico"),
            ],
        )
        await ImportCommitter(fake_store).execute_import([page])

        assert fake_store.bulk_calls[0][0]["items"] == [
            {"title": "Untitled", "url": "https://untitled.example.com", "icon": ""},
            {"title": "Kept", "url": "https://k.example.com", "icon": "ico"},
        ]

    @pytest.mark.asyncio
    async def test_cap_reapplied(self, fake_store):
        progress = []
        result = await ImportCommitter(fake_store).execute_import(
            make_pages(*([24] * 25)), lambda done, total: progress.append((done, total))
        )

        submitted = sum(len(p["items"]) for p in fake_store.bulk_calls[0])
        assert submitted == 500
        assert len(fake_store.bulk_calls[0]) == 21
        assert progress[0] == (0, 500)
        assert result.success == 500

    @pytest.mark.asyncio
    async def test_partial_failure_is_success(self):
        store = FakeStore(reply={"success": 450, "failed": 50})
        progress = []
        result = await ImportCommitter(store).execute_import(
            make_pages(250, 250), lambda done, total: progress.append((done, total))
        )

        assert result.status == "success"
        assert result.success == 450
        assert result.failed == 50
        assert result.pages == 2
        assert progress == [(0, 500), (450, 500)]

    @pytest.mark.asyncio
    async def test_total_failure_reply(self):
        store = FakeStore(reply={"success": 0, "failed": 5})
        result = await ImportCommitter(store).execute_import(make_pages(5))

        assert result.status == "failed"
        assert result.pages == 0

    @pytest.mark.asyncio
    async def test_store_reported_status_wins(self):
        store = FakeStore(
            reply={
                "status": "failed",
                "success": 0,
                "failed": 5,
                "errorCode": "QUOTA_EXCEEDED",
                "errorMessage": "sync quota",
            }
        )
        result = await ImportCommitter(store).execute_import(make_pages(5))

        assert result.status == "failed"
        assert result.error_code == "QUOTA_EXCEEDED"
        assert result.error_message == "sync quota"

    @pytest.mark.asyncio
    async def test_quota_exception_becomes_result(self):
        store = FakeStore(error=QuotaExceededError("quota"))
        progress = []
        result = await ImportCommitter(store).execute_import(
            make_pages(250, 250), lambda done, total: progress.append((done, total))
        )

        assert result.to_dict() == {
            "status": "failed",
            "success": 0,
            "failed": 500,
            "pages": 0,
            "errorCode": "QUOTA_EXCEEDED",
            "errorMessage": "quota",
        }
        assert progress == [(0, 500)]

    @pytest.mark.asyncio
    async def test_unknown_exception_becomes_result(self):
        store = FakeStore(error=RuntimeError("disk on fire"))
        result = await ImportCommitter(store).execute_import(make_pages(3))

        assert result.status == "failed"
        assert result.failed == 3
        assert result.error_code == "UNKNOWN_ERROR"
        assert result.error_message == "disk on fire"

    @pytest.mark.asyncio
    async def test_storage_error_code(self):
        store = FakeStore(error=StorageError("read only"))
        result = await ImportCommitter(store).execute_import(make_pages(3))

        assert result.error_code == "STORAGE_ERROR"

    @pytest.mark.asyncio
    async def test_synchronous_store_supported(self):
        class SyncStore(FakeStore):
            def bulk_add_items(self, pages_data):
                return {"success": 2, "failed": 0}

        result = await ImportCommitter(SyncStore()).execute_import(make_pages(2))
        assert result.success == 2

    @pytest.mark.asyncio
    async def test_malformed_reply_counts(self):
        store = FakeStore(reply={"success": "many", "failed": None})
        result = await ImportCommitter(store).execute_import(make_pages(2))

        assert result.status == "success"
        assert result.success == 0
        assert result.failed == 0
