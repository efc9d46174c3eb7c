"""
Certificate Workflow
Upload by students, review queue and approve/reject decisions by faculty
"""

import time
from datetime import datetime
from pathlib import PurePosixPath
from typing import Any, Dict, List, Optional, Set

from app.core.config import settings
from app.core.exceptions import (
    AuthorizationError,
    InvalidTransitionError,
    RecordNotFoundError,
    RecordStoreError,
    ValidationError,
)
from app.core.logging_config import logger
from app.gateway.base import RecordStore
from app.models.enums import (
    Category,
    CertificateStatus,
    Entity,
    NotificationType,
    ReviewAction,
    Role,
    is_reviewer,
    is_senior_reviewer,
)
from app.services.processing_guard import ProcessingGuard, processing_guard

UNKNOWN_STUDENT = {"id": "", "full_name": "Unknown", "email": "Unknown", "student_id_number": None}


def require_remark(remark: Optional[str]) -> str:
    """Trimmed remark, or ValidationError when there is none"""
    cleaned = (remark or "").strip()
    if not cleaned:
        raise ValidationError("Please provide a remark before proceeding.", field="remark")
    return cleaned


def parse_action(action: Any) -> ReviewAction:
    try:
        return ReviewAction(action)
    except ValueError:
        raise ValidationError(f"Unknown action '{action}', expected approve or reject", field="action")


async def visible_student_ids(store: RecordStore, reviewer: Dict[str, Any]) -> Optional[Set[str]]:
    """
    Students a reviewer may act on.

    Returns None when the reviewer sees every student (senior faculty and
    admins), otherwise the ids of students assigned to them.
    """
    if not is_reviewer(reviewer):
        raise AuthorizationError("Only faculty can review submissions")
    if is_senior_reviewer(reviewer):
        return None
    students = await store.fetch_collection(
        Entity.PROFILES,
        filters={"role": Role.STUDENT.value, "assigned_faculty_id": reviewer["id"]},
    )
    return {student["id"] for student in students}


async def notify(store: RecordStore, user_id: str, title: str, message: str, type_: NotificationType) -> None:
    """Insert a notification; a failure is logged and never propagates"""
    try:
        await store.insert(Entity.NOTIFICATIONS, {
            "user_id": user_id,
            "title": title,
            "message": message,
            "type": type_.value,
            "created_at": datetime.utcnow(),
        })
    except RecordStoreError as e:
        logger.log_error_with_context(e, context="notify", notification_type=type_.value, user_id=user_id)


class CertificateWorkflow:
    """Certificate lifecycle: pending -> approved | rejected"""

    def __init__(self, store: RecordStore, guard: ProcessingGuard = processing_guard):
        self.store = store
        self.guard = guard

    # =====================================================
    # STUDENT SIDE
    # =====================================================

    async def upload(
        self,
        student: Dict[str, Any],
        title: str,
        description: Optional[str],
        category: str,
        file_name: Optional[str],
        content: Optional[bytes],
    ) -> Dict[str, Any]:
        """Store the file and create a pending certificate"""
        if Role(student["role"]) is not Role.STUDENT:
            raise AuthorizationError("Only students can upload certificates")

        title = (title or "").strip()
        if not title:
            raise ValidationError("Title is required", field="title")
        if not file_name or not content:
            raise ValidationError("Please select a file to upload", field="file")

        try:
            category = Category(category)
        except ValueError:
            raise ValidationError(f"Unknown category '{category}'", field="category")

        extension = PurePosixPath(file_name).suffix.lower().lstrip(".")
        if extension not in settings.ALLOWED_EXTENSIONS:
            raise ValidationError(
                f"File type '.{extension}' not allowed. Allowed: {', '.join(settings.ALLOWED_EXTENSIONS)}",
                field="file"
            )
        if len(content) > settings.MAX_UPLOAD_SIZE:
            raise ValidationError(
                f"File too large. Maximum size is {settings.MAX_UPLOAD_SIZE // 1024 // 1024}MB",
                field="file"
            )

        path = f"{student['user_id']}/{int(time.time() * 1000)}.{extension}"
        file_url = await self.store.upload_file(settings.CERTIFICATE_BUCKET, path, content)

        certificate = await self.store.insert(Entity.CERTIFICATES, {
            "student_id": student["id"],
            "title": title,
            "description": (description or "").strip() or None,
            "category": category.value,
            "status": CertificateStatus.PENDING.value,
            "file_url": file_url,
            "file_name": file_name,
            "uploaded_at": datetime.utcnow(),
        })

        logger.log_workflow_event("certificate", certificate["id"], "uploaded", actor_id=student["id"])
        return certificate

    async def list_for_student(self, student_id: str) -> List[Dict[str, Any]]:
        """A student's certificates, newest first"""
        return await self.store.fetch_collection(
            Entity.CERTIFICATES,
            filters={"student_id": student_id},
            order=[("uploaded_at", True)],
        )

    # =====================================================
    # REVIEWER SIDE
    # =====================================================

    async def assigned_students(self, reviewer: Dict[str, Any]) -> List[Dict[str, Any]]:
        """Students the reviewer can see, by name"""
        filters: Dict[str, Any] = {"role": Role.STUDENT.value}
        if not is_senior_reviewer(reviewer):
            if not is_reviewer(reviewer):
                raise AuthorizationError("Only faculty can review submissions")
            filters["assigned_faculty_id"] = reviewer["id"]
        return await self.store.fetch_collection(Entity.PROFILES, filters=filters, order=[("full_name", False)])

    async def reviewer_queue(self, reviewer: Dict[str, Any]) -> Dict[str, Any]:
        """Visible certificates with their student, split into pending and processed"""
        visible = await visible_student_ids(self.store, reviewer)
        if visible is not None and not visible:
            return {"pending": [], "processed": []}

        filters = {"student_id": sorted(visible)} if visible is not None else None
        certificates = await self.store.fetch_collection(
            Entity.CERTIFICATES, filters=filters, order=[("uploaded_at", True)]
        )

        student_ids = sorted({c["student_id"] for c in certificates})
        students: Dict[str, Dict[str, Any]] = {}
        if student_ids:
            for profile in await self.store.fetch_collection(Entity.PROFILES, filters={"id": student_ids}):
                students[profile["id"]] = {
                    "id": profile["id"],
                    "full_name": profile.get("full_name"),
                    "email": profile.get("email"),
                    "student_id_number": profile.get("student_id_number"),
                }

        pending, processed = [], []
        for certificate in certificates:
            if certificate["student_id"] not in students:
                logger.warning(
                    f"Certificate {certificate['id']} references missing student {certificate['student_id']}",
                    extra={"event_type": "missing_join", "record_id": certificate["id"]}
                )
            item = {**certificate, "student": students.get(certificate["student_id"], dict(UNKNOWN_STUDENT))}
            if CertificateStatus(certificate["status"]) is CertificateStatus.PENDING:
                pending.append(item)
            else:
                processed.append(item)

        return {"pending": pending, "processed": processed}

    async def decide(
        self,
        reviewer: Dict[str, Any],
        certificate_id: str,
        action: Any,
        remark: Optional[str],
    ) -> Dict[str, Any]:
        """
        Approve or reject a pending certificate.

        A trimmed-empty remark fails before the store is touched. Reject
        copies the remark into rejection_reason; approve leaves it as is.
        The student is notified afterwards; a failed notification does not
        undo the decision.
        """
        remark = require_remark(remark)
        action = parse_action(action)

        async with self.guard.hold(certificate_id):
            certificate = await self.store.fetch_one(Entity.CERTIFICATES, certificate_id)
            if certificate is None:
                raise RecordNotFoundError("certificate", certificate_id)

            visible = await visible_student_ids(self.store, reviewer)
            if visible is not None and certificate["student_id"] not in visible:
                raise AuthorizationError("This certificate belongs to a student outside your assignment")

            current = CertificateStatus(certificate["status"])
            if current is not CertificateStatus.PENDING:
                raise InvalidTransitionError("certificate", certificate_id, current.value, action.resulting_status)

            changes = {
                "status": action.resulting_status,
                "verified_by": reviewer["id"],
                "verified_at": datetime.utcnow(),
                "remark": remark,
            }
            if action is ReviewAction.REJECT:
                changes["rejection_reason"] = remark

            await self.store.update(Entity.CERTIFICATES, certificate_id, changes)

        logger.log_workflow_event("certificate", certificate_id, action.resulting_status, actor_id=reviewer["id"])

        if action is ReviewAction.APPROVE:
            await notify(
                self.store, certificate["student_id"], "Certificate Approved",
                f"Your {certificate['title']} has been approved!",
                NotificationType.CERTIFICATE_APPROVED,
            )
        else:
            await notify(
                self.store, certificate["student_id"], "Certificate Rejected",
                f"Your {certificate['title']} was rejected: {remark}",
                NotificationType.CERTIFICATE_REJECTED,
            )

        return {**certificate, **changes}
