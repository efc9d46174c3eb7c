"""
Dashboard Service
Fetches records for the analytics, leaderboard and faculty student pages and
hands them to the pure aggregations in app.services.analytics.
"""

from typing import Any, Dict, List

from app.core.config import settings
from app.core.exceptions import AuthorizationError, RecordNotFoundError
from app.gateway.base import RecordStore
from app.models.enums import Entity, Role
from app.services import analytics
from app.services.certificate_workflow import visible_student_ids
from app.services.report_service import require_senior


class DashboardService:
    """Read-only dashboard view-models"""

    def __init__(self, store: RecordStore):
        self.store = store

    async def achievement_summaries(self) -> List[Dict[str, Any]]:
        """student_achievements_summary, derived from the current records"""
        students = await self.store.fetch_collection(Entity.PROFILES, filters={"role": Role.STUDENT.value})
        certificates = await self.store.fetch_collection(Entity.CERTIFICATES)
        activities = await self.store.fetch_collection(Entity.ACTIVITIES)
        academic_records = await self.store.fetch_collection(Entity.ACADEMIC_RECORDS)
        return analytics.build_achievement_summaries(students, certificates, activities, academic_records)

    async def overview(self, actor: Dict[str, Any]) -> Dict[str, Any]:
        require_senior(actor)

        total_students = await self.store.count(Entity.PROFILES, {"role": Role.STUDENT.value})
        total_faculty = await self.store.count(Entity.PROFILES, {"role": Role.FACULTY.value})
        certificates = await self.store.fetch_collection(Entity.CERTIFICATES)
        activities = await self.store.fetch_collection(Entity.ACTIVITIES)
        summaries = await self.achievement_summaries()

        overview = analytics.institution_overview(
            total_students, total_faculty, certificates, activities, summaries
        )
        overview["top_students"] = analytics.leaderboard(summaries, settings.LEADERBOARD_WIDGET_SIZE)
        return overview

    async def leaderboard(self, actor: Dict[str, Any], limit: int = None) -> List[Dict[str, Any]]:
        require_senior(actor)
        return analytics.leaderboard(await self.achievement_summaries(), limit or settings.LEADERBOARD_SIZE)

    async def student_detail(self, reviewer: Dict[str, Any], student_id: str) -> Dict[str, Any]:
        """Faculty page for one student; junior faculty only for their assigned students"""
        visible = await visible_student_ids(self.store, reviewer)
        if visible is not None and student_id not in visible:
            raise AuthorizationError("This student is not assigned to you")

        student = await self.store.fetch_one(Entity.PROFILES, student_id)
        if student is None or Role(student["role"]) is not Role.STUDENT:
            raise RecordNotFoundError("student", student_id)

        certificates = await self.store.fetch_collection(
            Entity.CERTIFICATES, filters={"student_id": student_id}, order=[("uploaded_at", False)]
        )
        return analytics.student_detail(student, certificates, settings.STUDENT_RECENT_CERTIFICATES)
