"""
Notification Feed

One loaded page of a user's notifications, newest first. Read state is
tracked against that page: marking everything read only touches the unread
items that were loaded, never the whole table.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from app.core.config import settings
from app.gateway.base import RecordStore
from app.models.enums import Entity


class NotificationFeed:
    """Polled notification list for one user"""

    def __init__(self, store: RecordStore, user_id: str, page_size: Optional[int] = None):
        self.store = store
        self.user_id = user_id
        self.page_size = page_size or settings.NOTIFICATION_PAGE_SIZE
        self.items: List[Dict[str, Any]] = []

    async def load(self) -> List[Dict[str, Any]]:
        self.items = await self.store.fetch_collection(
            Entity.NOTIFICATIONS,
            filters={"user_id": self.user_id},
            order=[("created_at", True)],
            limit=self.page_size,
        )
        return self.items

    @property
    def unread_count(self) -> int:
        return sum(1 for item in self.items if item.get("read_at") is None)

    def _loaded(self, notification_id: str) -> Optional[Dict[str, Any]]:
        for item in self.items:
            if item["id"] == notification_id:
                return item
        return None

    async def mark_read(self, notification_id: str) -> None:
        """Mark one notification read. Already-read items keep their read_at."""
        item = self._loaded(notification_id)
        current = item if item is not None else await self.store.fetch_one(Entity.NOTIFICATIONS, notification_id)
        if current is not None and current.get("read_at") is not None:
            return

        now = datetime.utcnow()
        await self.store.update(Entity.NOTIFICATIONS, notification_id, {"read_at": now})
        if item is not None:
            item["read_at"] = now

    async def mark_all_read(self) -> int:
        """Mark the loaded page's unread items read in one call; returns how many"""
        unread_ids = [item["id"] for item in self.items if item.get("read_at") is None]
        if not unread_ids:
            return 0

        now = datetime.utcnow()
        await self.store.update_many(Entity.NOTIFICATIONS, unread_ids, {"read_at": now})
        for item in self.items:
            if item["id"] in unread_ids:
                item["read_at"] = now
        return len(unread_ids)

    def to_dict(self) -> Dict[str, Any]:
        return {"notifications": self.items, "unread_count": self.unread_count}
