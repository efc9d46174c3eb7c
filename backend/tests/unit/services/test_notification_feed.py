"""
Unit Tests for NotificationFeed
"""
from datetime import datetime, timedelta
from unittest.mock import AsyncMock

import pytest

from app.gateway import InMemoryRecordStore
from app.models.enums import Entity
from app.services.notification_feed import NotificationFeed


def notification(index: int, read_at=None) -> dict:
    created = datetime(2024, 6, 1, 12, 0) - timedelta(minutes=index)
    return {
        "id": f"n-{index}",
        "user_id": "stu-1",
        "title": f"Notice {index}",
        "message": "Something happened",
        "type": "system",
        "read_at": read_at,
        "created_at": created,
    }


@pytest.fixture
def read_time() -> datetime:
    return datetime(2024, 5, 30, 8, 15)


@pytest.fixture
def store(read_time) -> InMemoryRecordStore:
    items = [notification(i) for i in range(3)] + [notification(i, read_at=read_time) for i in range(3, 5)]
    return InMemoryRecordStore({Entity.NOTIFICATIONS: items})


class TestMarkAllRead:

    async def test_clears_unread_and_keeps_read_timestamps(self, store, read_time):
        feed = NotificationFeed(store, "stu-1")
        await feed.load()
        assert feed.unread_count == 3

        marked = await feed.mark_all_read()

        assert marked == 3
        assert feed.unread_count == 0
        for record_id in ("n-3", "n-4"):
            stored = await store.fetch_one(Entity.NOTIFICATIONS, record_id)
            assert stored["read_at"] == read_time

    async def test_single_bulk_update(self, store):
        store.update_many = AsyncMock(wraps=store.update_many)
        feed = NotificationFeed(store, "stu-1")
        await feed.load()

        await feed.mark_all_read()

        store.update_many.assert_awaited_once()
        ids = store.update_many.await_args.args[1]
        assert sorted(ids) == ["n-0", "n-1", "n-2"]

    async def test_only_loaded_page_is_marked(self):
        store = InMemoryRecordStore({Entity.NOTIFICATIONS: [notification(i) for i in range(12)]})
        feed = NotificationFeed(store, "stu-1", page_size=10)
        await feed.load()

        await feed.mark_all_read()

        still_unread = await store.count(Entity.NOTIFICATIONS, {"user_id": "stu-1", "read_at": None})
        assert still_unread == 2

    async def test_nothing_unread(self, read_time):
        store = InMemoryRecordStore({Entity.NOTIFICATIONS: [notification(0, read_at=read_time)]})
        store.update_many = AsyncMock()
        feed = NotificationFeed(store, "stu-1")
        await feed.load()

        assert await feed.mark_all_read() == 0
        store.update_many.assert_not_awaited()


class TestFeed:

    async def test_newest_first_and_scoped_to_user(self, store):
        await store.insert(Entity.NOTIFICATIONS, {
            "user_id": "stu-2", "title": "Not yours", "type": "system",
            "created_at": datetime(2025, 1, 1),
        })
        feed = NotificationFeed(store, "stu-1")

        items = await feed.load()

        assert [n["id"] for n in items] == ["n-0", "n-1", "n-2", "n-3", "n-4"]

    async def test_mark_read_skips_already_read(self, store, read_time):
        store.update = AsyncMock(wraps=store.update)
        feed = NotificationFeed(store, "stu-1")
        await feed.load()

        await feed.mark_read("n-3")
        store.update.assert_not_awaited()

        await feed.mark_read("n-0")
        assert feed.unread_count == 2
        stored = await store.fetch_one(Entity.NOTIFICATIONS, "n-0")
        assert stored["read_at"] is not None

    async def test_mark_read_outside_page_keeps_existing_timestamp(self, read_time):
        old = {**notification(20, read_at=read_time), "id": "old"}
        store = InMemoryRecordStore({Entity.NOTIFICATIONS: [notification(i) for i in range(10)] + [old]})
        store.update = AsyncMock(wraps=store.update)
        feed = NotificationFeed(store, "stu-1", page_size=10)
        await feed.load()
        assert "old" not in [n["id"] for n in feed.items]

        await feed.mark_read("old")

        store.update.assert_not_awaited()
        stored = await store.fetch_one(Entity.NOTIFICATIONS, "old")
        assert stored["read_at"] == read_time

    async def test_mark_read_outside_page_unread(self):
        store = InMemoryRecordStore({Entity.NOTIFICATIONS: [notification(i) for i in range(11)]})
        feed = NotificationFeed(store, "stu-1", page_size=10)
        await feed.load()

        await feed.mark_read("n-10")

        stored = await store.fetch_one(Entity.NOTIFICATIONS, "n-10")
        assert stored["read_at"] is not None
        assert feed.unread_count == 10

    async def test_to_dict(self, store):
        feed = NotificationFeed(store, "stu-1")
        await feed.load()

        payload = feed.to_dict()

        assert payload["unread_count"] == 3
        assert len(payload["notifications"]) == 5
