"""
Institution Analytics API Endpoints (senior faculty and admin)

- Overview: totals, approval rates, charts and top students
- Leaderboard
- Institutional report requests
"""

from typing import Any, Dict
from fastapi import APIRouter, Depends, Query, status

from app.core.app_state import AppState
from app.core.config import settings
from app.modules.auth.dependencies import get_app_state, get_current_senior
from app.schemas.records import ReportCreate
from app.services.dashboard_service import DashboardService
from app.services.report_service import ReportService
from app.utils.fallback import load_or_empty, with_warning

router = APIRouter()


@router.get("/overview")
async def get_overview(
    actor: Dict[str, Any] = Depends(get_current_senior),
    state: AppState = Depends(get_app_state)
):
    return await DashboardService(state.store).overview(actor)


@router.get("/leaderboard")
async def get_leaderboard(
    limit: int = Query(settings.LEADERBOARD_SIZE, ge=1, le=100),
    actor: Dict[str, Any] = Depends(get_current_senior),
    state: AppState = Depends(get_app_state)
):
    """Students ranked by total credits"""
    students, warning = await load_or_empty(
        DashboardService(state.store).leaderboard(actor, limit), [], "leaderboard"
    )
    return with_warning({"students": students}, warning)


@router.get("/reports")
async def list_reports(
    actor: Dict[str, Any] = Depends(get_current_senior),
    state: AppState = Depends(get_app_state)
):
    reports, warning = await load_or_empty(
        ReportService(state.store).list_reports(actor), [], "list_reports"
    )
    return with_warning({"reports": reports, "total": len(reports)}, warning)


@router.post("/reports", status_code=status.HTTP_201_CREATED)
async def request_report(
    data: ReportCreate,
    actor: Dict[str, Any] = Depends(get_current_senior),
    state: AppState = Depends(get_app_state)
):
    """Create a report record in generating state"""
    return await ReportService(state.store).request_report(
        actor,
        title=data.title,
        description=data.description,
        report_type=data.report_type,
        parameters=data.parameters,
    )


@router.delete("/reports/{report_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_report(
    report_id: str,
    actor: Dict[str, Any] = Depends(get_current_senior),
    state: AppState = Depends(get_app_state)
):
    await ReportService(state.store).delete_report(actor, report_id)
