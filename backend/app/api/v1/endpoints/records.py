"""
Academic Records API Endpoints (read-only transcript)
"""

from typing import Any, Dict
from fastapi import APIRouter, Depends

from app.core.app_state import AppState
from app.modules.auth.dependencies import get_app_state, get_current_student
from app.services.academic_service import AcademicRecordService, academic_stats
from app.utils.fallback import load_or_empty, with_warning

router = APIRouter()


@router.get("/academic")
async def get_academic_records(
    student: Dict[str, Any] = Depends(get_current_student),
    state: AppState = Depends(get_app_state)
):
    """Transcript records with totals, grouped by year and by semester"""
    empty = {"records": [], "stats": academic_stats([]), "by_year": [], "by_semester": []}
    transcript, warning = await load_or_empty(
        AcademicRecordService(state.store).transcript(student["id"]), empty, "academic_records"
    )
    return with_warning(transcript, warning)
