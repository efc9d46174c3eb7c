"""
Activity Service
Student-logged activities: draft -> submitted -> approved | rejected
"""

from datetime import date, datetime
from typing import Any, Dict, List, Optional

from app.core.exceptions import (
    AuthorizationError,
    InvalidTransitionError,
    RecordNotFoundError,
    ValidationError,
)
from app.core.logging_config import logger
from app.gateway.base import RecordStore
from app.models.enums import ActivityStatus, Category, Entity, NotificationType, ReviewAction, Role
from app.services import analytics
from app.services.certificate_workflow import notify, parse_action, require_remark, visible_student_ids
from app.services.processing_guard import ProcessingGuard, processing_guard


class ActivityService:
    """Service for student activity records"""

    def __init__(self, store: RecordStore, guard: ProcessingGuard = processing_guard):
        self.store = store
        self.guard = guard

    async def _get(self, activity_id: str) -> Dict[str, Any]:
        activity = await self.store.fetch_one(Entity.ACTIVITIES, activity_id)
        if activity is None:
            raise RecordNotFoundError("activity", activity_id)
        return activity

    # =====================================================
    # LISTING
    # =====================================================

    async def list_for_student(
        self,
        student_id: str,
        category: Optional[str] = None,
        approved_only: bool = False,
    ) -> List[Dict[str, Any]]:
        """A student's activities, latest start date first"""
        filters: Dict[str, Any] = {"student_id": student_id}
        if category is not None:
            try:
                filters["category"] = Category(category).value
            except ValueError:
                raise ValidationError(f"Unknown category '{category}'", field="category")
        if approved_only:
            filters["status"] = ActivityStatus.APPROVED.value

        return await self.store.fetch_collection(
            Entity.ACTIVITIES, filters=filters, order=[("start_date", True)]
        )

    async def co_curricular_overview(self, student_id: str) -> Dict[str, Any]:
        """Approved co-curricular activities with stats, type groups and year groups"""
        activities = await self.list_for_student(
            student_id, category=Category.CO_CURRICULAR.value, approved_only=True
        )
        return {
            "activities": activities,
            "stats": analytics.activity_stats(activities),
            "by_type": analytics.group_by_activity_type(activities),
            "by_year": analytics.group_by_year(activities),
        }

    # =====================================================
    # STUDENT ACTIONS
    # =====================================================

    async def create(
        self,
        student: Dict[str, Any],
        title: str,
        category: str = Category.CO_CURRICULAR.value,
        activity_type: Optional[str] = None,
        description: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        organization: Optional[str] = None,
        location: Optional[str] = None,
        credits_earned: int = 0,
        submit: bool = False,
    ) -> Dict[str, Any]:
        """Log a new activity as a draft, or submit it right away"""
        if Role(student["role"]) is not Role.STUDENT:
            raise AuthorizationError("Only students can log activities")

        title = (title or "").strip()
        if not title:
            raise ValidationError("Title is required", field="title")
        if credits_earned is None or credits_earned < 0:
            raise ValidationError("Credits cannot be negative", field="credits_earned")
        if start_date and end_date and end_date < start_date:
            raise ValidationError("End date cannot be before start date", field="end_date")
        try:
            category = Category(category)
        except ValueError:
            raise ValidationError(f"Unknown category '{category}'", field="category")

        status = ActivityStatus.SUBMITTED if submit else ActivityStatus.DRAFT
        activity = await self.store.insert(Entity.ACTIVITIES, {
            "student_id": student["id"],
            "title": title,
            "description": description,
            "category": category.value,
            "activity_type": activity_type,
            "status": status.value,
            "start_date": start_date,
            "end_date": end_date,
            "organization": organization,
            "location": location,
            "credits_earned": credits_earned,
            "created_at": datetime.utcnow(),
        })

        logger.log_workflow_event("activity", activity["id"], status.value, actor_id=student["id"])
        return activity

    async def submit(self, student: Dict[str, Any], activity_id: str) -> Dict[str, Any]:
        """Send a draft activity for review"""
        activity = await self._get(activity_id)
        if activity["student_id"] != student["id"]:
            raise AuthorizationError("You can only submit your own activities")

        current = ActivityStatus(activity["status"])
        if current is not ActivityStatus.DRAFT:
            raise InvalidTransitionError("activity", activity_id, current.value, ActivityStatus.SUBMITTED.value)

        await self.store.update(Entity.ACTIVITIES, activity_id, {"status": ActivityStatus.SUBMITTED.value})
        logger.log_workflow_event("activity", activity_id, "submitted", actor_id=student["id"])

        await notify(
            self.store, student["id"], "Activity Submitted",
            f"Your {activity['title']} activity is under review.",
            NotificationType.ACTIVITY_SUBMITTED,
        )
        return {**activity, "status": ActivityStatus.SUBMITTED.value}

    # =====================================================
    # REVIEWER ACTIONS
    # =====================================================

    async def decide(
        self,
        reviewer: Dict[str, Any],
        activity_id: str,
        action: Any,
        remark: Optional[str],
    ) -> Dict[str, Any]:
        """Approve or reject a submitted activity, same remark and visibility rules as certificates"""
        remark = require_remark(remark)
        action = parse_action(action)

        async with self.guard.hold(activity_id):
            activity = await self._get(activity_id)

            visible = await visible_student_ids(self.store, reviewer)
            if visible is not None and activity["student_id"] not in visible:
                raise AuthorizationError("This activity belongs to a student outside your assignment")

            current = ActivityStatus(activity["status"])
            if current is not ActivityStatus.SUBMITTED:
                raise InvalidTransitionError("activity", activity_id, current.value, action.resulting_status)

            changes = {
                "status": action.resulting_status,
                "verified_by": reviewer["id"],
                "verified_at": datetime.utcnow(),
                "remark": remark,
            }
            if action is ReviewAction.REJECT:
                changes["rejection_reason"] = remark

            await self.store.update(Entity.ACTIVITIES, activity_id, changes)

        logger.log_workflow_event("activity", activity_id, action.resulting_status, actor_id=reviewer["id"])

        if action is ReviewAction.APPROVE:
            await notify(
                self.store, activity["student_id"], "Activity Approved",
                f"Your {activity['title']} activity has been approved!",
                NotificationType.ACTIVITY_APPROVED,
            )
        else:
            await notify(
                self.store, activity["student_id"], "Activity Rejected",
                f"Your {activity['title']} activity was rejected: {remark}",
                NotificationType.ACTIVITY_REJECTED,
            )

        return {**activity, **changes}
