"""
Notification API Endpoints

Clients poll the list; it returns the latest page and the unread count for
that page.
"""

from fastapi import APIRouter, Depends

from app.core.app_state import AppState
from app.core.exceptions import RecordNotFoundError
from app.models.enums import Entity
from app.modules.auth.dependencies import get_app_state
from app.services.notification_feed import NotificationFeed
from app.utils.fallback import load_or_empty, with_warning

router = APIRouter()


@router.get("")
async def list_notifications(state: AppState = Depends(get_app_state)):
    feed = NotificationFeed(state.store, state.profile_id)
    _, warning = await load_or_empty(feed.load(), [], "notifications")
    return with_warning(feed.to_dict(), warning)


@router.post("/{notification_id}/read")
async def mark_notification_read(
    notification_id: str,
    state: AppState = Depends(get_app_state)
):
    """Mark one of the caller's notifications read"""
    feed = NotificationFeed(state.store, state.profile_id)
    await feed.load()

    if all(item["id"] != notification_id for item in feed.items):
        notification = await state.store.fetch_one(Entity.NOTIFICATIONS, notification_id)
        if notification is None or notification["user_id"] != state.profile_id:
            raise RecordNotFoundError("notification", notification_id)

    await feed.mark_read(notification_id)
    return feed.to_dict()


@router.post("/read-all")
async def mark_all_notifications_read(state: AppState = Depends(get_app_state)):
    """Mark every unread notification in the latest page read"""
    feed = NotificationFeed(state.store, state.profile_id)
    await feed.load()
    marked = await feed.mark_all_read()
    return {**feed.to_dict(), "marked": marked}
