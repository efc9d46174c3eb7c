"""
Activity API Endpoints

Students log activities as drafts (or submit right away) and send drafts for
review. The co-curricular page shows approved activities with stats.
"""

from typing import Any, Dict, Optional
from fastapi import APIRouter, Depends, Query, status

from app.core.app_state import AppState
from app.modules.auth.dependencies import get_app_state, get_current_student
from app.schemas.records import ActivityCreate
from app.services import analytics
from app.services.activity_service import ActivityService
from app.utils.fallback import load_or_empty, with_warning

router = APIRouter()


@router.get("")
async def list_my_activities(
    category: Optional[str] = Query(None),
    approved_only: bool = Query(False),
    student: Dict[str, Any] = Depends(get_current_student),
    state: AppState = Depends(get_app_state)
):
    activities, warning = await load_or_empty(
        ActivityService(state.store).list_for_student(student["id"], category, approved_only),
        [],
        "list_activities",
    )
    return with_warning({"activities": activities, "total": len(activities)}, warning)


@router.get("/co-curricular")
async def co_curricular_overview(
    student: Dict[str, Any] = Depends(get_current_student),
    state: AppState = Depends(get_app_state)
):
    """Approved co-curricular activities grouped by type and by year"""
    empty = {
        "activities": [],
        "stats": analytics.activity_stats([]),
        "by_type": [],
        "by_year": [],
    }
    overview, warning = await load_or_empty(
        ActivityService(state.store).co_curricular_overview(student["id"]), empty, "co_curricular"
    )
    return with_warning(overview, warning)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_activity(
    data: ActivityCreate,
    student: Dict[str, Any] = Depends(get_current_student),
    state: AppState = Depends(get_app_state)
):
    return await ActivityService(state.store).create(student, **data.model_dump())


@router.post("/{activity_id}/submit")
async def submit_activity(
    activity_id: str,
    student: Dict[str, Any] = Depends(get_current_student),
    state: AppState = Depends(get_app_state)
):
    """Send a draft for review"""
    return await ActivityService(state.store).submit(student, activity_id)
