from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Any, Dict

from app.core.app_state import AppState
from app.core.config import settings
from app.core.database import get_db
from app.core.exceptions import AuthenticationError, AuthorizationError
from app.core.logging_config import set_user_id
from app.core.security import get_current_user_token
from app.gateway import RecordStore, SQLRecordStore, get_memory_store
from app.models.enums import Entity, Role, is_reviewer, is_senior_reviewer


def is_mock_request(request: Request) -> bool:
    """Mock mode is on globally or for this request via ?mock=1"""
    return settings.USE_MOCK_DATA or request.query_params.get("mock") == "1"


async def get_record_store(
    request: Request,
    db: AsyncSession = Depends(get_db)
) -> RecordStore:
    """Record store for this request: demo fixtures in mock mode, the database otherwise"""
    if is_mock_request(request):
        return get_memory_store()
    return SQLRecordStore(db)


async def get_app_state(
    request: Request,
    payload: Dict[str, Any] = Depends(get_current_user_token),
    store: RecordStore = Depends(get_record_store)
) -> AppState:
    """Session state for the token's profile"""
    profile = await store.fetch_one(Entity.PROFILES, payload["sub"])
    if profile is None:
        raise AuthenticationError("Profile not found")

    state = AppState(store, mock_mode=is_mock_request(request))
    state.start(profile)
    set_user_id(profile["id"])
    request.state.profile_id = profile["id"]
    return state


async def get_current_profile(
    state: AppState = Depends(get_app_state)
) -> Dict[str, Any]:
    """Get current signed-in profile"""
    return state.profile


async def get_current_student(
    profile: Dict[str, Any] = Depends(get_current_profile)
) -> Dict[str, Any]:
    """Require a student profile"""
    if Role(profile["role"]) is not Role.STUDENT:
        raise AuthorizationError("Student access required")
    return profile


async def get_current_reviewer(
    profile: Dict[str, Any] = Depends(get_current_profile)
) -> Dict[str, Any]:
    """Require faculty or admin"""
    if not is_reviewer(profile):
        raise AuthorizationError("Faculty access required")
    return profile


async def get_current_senior(
    profile: Dict[str, Any] = Depends(get_current_profile)
) -> Dict[str, Any]:
    """Require senior faculty or admin"""
    if not is_senior_reviewer(profile):
        raise AuthorizationError("Senior faculty or admin access required")
    return profile
