"""
Faculty Review API Endpoints

Junior faculty see their assigned students only; senior faculty and admins
see everyone. Every decision needs a non-empty remark.
"""

from typing import Any, Dict
from fastapi import APIRouter, Depends

from app.core.app_state import AppState
from app.modules.auth.dependencies import get_app_state, get_current_reviewer
from app.schemas.records import DecisionRequest
from app.services.activity_service import ActivityService
from app.services.certificate_workflow import CertificateWorkflow
from app.services.dashboard_service import DashboardService
from app.utils.fallback import load_or_empty, with_warning

router = APIRouter()


@router.get("/queue")
async def get_review_queue(
    reviewer: Dict[str, Any] = Depends(get_current_reviewer),
    state: AppState = Depends(get_app_state)
):
    """Visible certificates split into pending and processed, each with its student"""
    queue, warning = await load_or_empty(
        CertificateWorkflow(state.store).reviewer_queue(reviewer),
        {"pending": [], "processed": []},
        "reviewer_queue",
    )
    return with_warning(queue, warning)


@router.get("/students")
async def list_assigned_students(
    reviewer: Dict[str, Any] = Depends(get_current_reviewer),
    state: AppState = Depends(get_app_state)
):
    students, warning = await load_or_empty(
        CertificateWorkflow(state.store).assigned_students(reviewer), [], "assigned_students"
    )
    return with_warning({"students": students, "total": len(students)}, warning)


@router.get("/students/{student_id}")
async def get_student_detail(
    student_id: str,
    reviewer: Dict[str, Any] = Depends(get_current_reviewer),
    state: AppState = Depends(get_app_state)
):
    """Summary, monthly timeline, category and status charts, and recent certificates"""
    return await DashboardService(state.store).student_detail(reviewer, student_id)


@router.post("/certificates/{certificate_id}/decision")
async def decide_certificate(
    certificate_id: str,
    decision: DecisionRequest,
    reviewer: Dict[str, Any] = Depends(get_current_reviewer),
    state: AppState = Depends(get_app_state)
):
    return await CertificateWorkflow(state.store).decide(
        reviewer, certificate_id, decision.action, decision.remark
    )


@router.post("/activities/{activity_id}/decision")
async def decide_activity(
    activity_id: str,
    decision: DecisionRequest,
    reviewer: Dict[str, Any] = Depends(get_current_reviewer),
    state: AppState = Depends(get_app_state)
):
    return await ActivityService(state.store).decide(
        reviewer, activity_id, decision.action, decision.remark
    )
