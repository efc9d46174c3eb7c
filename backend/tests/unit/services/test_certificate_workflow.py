"""
Unit Tests for the certificate workflow
Tests for: upload validation, reviewer queue, approve/reject decisions, visibility
"""
import pytest
from unittest.mock import AsyncMock

from app.core.config import settings
from app.core.exceptions import (
    AuthorizationError,
    InvalidTransitionError,
    OperationInProgressError,
    RecordNotFoundError,
    RecordStoreError,
    ValidationError,
)
from app.models.enums import Entity
from app.services.certificate_workflow import CertificateWorkflow, require_remark


@pytest.fixture
def workflow(memory_store, guard) -> CertificateWorkflow:
    return CertificateWorkflow(memory_store, guard=guard)


async def profile(store, profile_id: str) -> dict:
    return await store.fetch_one(Entity.PROFILES, profile_id)


class TestRemark:

    @pytest.mark.parametrize("remark", ["", "   ", None, "\n\t"])
    def test_blank_remark_rejected(self, remark):
        with pytest.raises(ValidationError) as exc_info:
            require_remark(remark)
        assert exc_info.value.field == "remark"

    def test_remark_is_trimmed(self):
        assert require_remark("  looks good ") == "looks good"


class TestDecide:
    """Approve / reject on pending certificates"""

    @pytest.mark.parametrize("remark", ["", "   "])
    async def test_empty_remark_never_mutates(self, workflow, memory_store, remark):
        reviewer = await profile(memory_store, "fac-1")
        memory_store.update = AsyncMock(wraps=memory_store.update)

        with pytest.raises(ValidationError):
            await workflow.decide(reviewer, "mock-1", "approve", remark)

        memory_store.update.assert_not_called()
        certificate = await memory_store.fetch_one(Entity.CERTIFICATES, "mock-1")
        assert certificate["status"] == "pending"
        assert certificate["remark"] is None

    async def test_approve_moves_to_processed(self, workflow, memory_store):
        reviewer = await profile(memory_store, "fac-2")

        before = await workflow.reviewer_queue(reviewer)
        assert "mock-1" in [c["id"] for c in before["pending"]]

        result = await workflow.decide(reviewer, "mock-1", "approve", "ok")

        assert result["status"] == "approved"
        after = await workflow.reviewer_queue(reviewer)
        assert "mock-1" not in [c["id"] for c in after["pending"]]
        assert "mock-1" in [c["id"] for c in after["processed"]]

        stored = await memory_store.fetch_one(Entity.CERTIFICATES, "mock-1")
        assert stored["status"] == "approved"
        assert stored["remark"] == "ok"
        assert stored["rejection_reason"] is None
        assert stored["verified_by"] == "fac-2"
        assert stored["verified_at"] is not None

    async def test_reject_sets_reason(self, workflow, memory_store):
        reviewer = await profile(memory_store, "fac-1")

        await workflow.decide(reviewer, "m4", "reject", "bad scan")

        stored = await memory_store.fetch_one(Entity.CERTIFICATES, "m4")
        assert stored["status"] == "rejected"
        assert stored["rejection_reason"] == "bad scan"
        assert stored["remark"] == "bad scan"

    async def test_unknown_action(self, workflow, memory_store):
        reviewer = await profile(memory_store, "fac-1")

        with pytest.raises(ValidationError) as exc_info:
            await workflow.decide(reviewer, "mock-1", "escalate", "ok")
        assert exc_info.value.field == "action"

    async def test_already_decided_is_conflict(self, workflow, memory_store):
        reviewer = await profile(memory_store, "fac-1")

        with pytest.raises(InvalidTransitionError):
            await workflow.decide(reviewer, "m1", "reject", "changed my mind")

        stored = await memory_store.fetch_one(Entity.CERTIFICATES, "m1")
        assert stored["status"] == "approved"

    async def test_missing_certificate(self, workflow, memory_store):
        reviewer = await profile(memory_store, "fac-1")

        with pytest.raises(RecordNotFoundError):
            await workflow.decide(reviewer, "does-not-exist", "approve", "ok")

    async def test_junior_faculty_limited_to_assigned_students(self, workflow, memory_store):
        await memory_store.insert(Entity.CERTIFICATES, {
            "id": "carol-pending", "student_id": "stu-3", "title": "Lab Safety",
            "category": "academic", "status": "pending",
        })
        junior = await profile(memory_store, "fac-2")

        with pytest.raises(AuthorizationError):
            await workflow.decide(junior, "carol-pending", "approve", "ok")

        senior = await profile(memory_store, "fac-1")
        result = await workflow.decide(senior, "carol-pending", "approve", "ok")
        assert result["status"] == "approved"

    async def test_students_cannot_review(self, workflow, memory_store):
        student = await profile(memory_store, "stu-1")

        with pytest.raises(AuthorizationError):
            await workflow.decide(student, "mock-1", "approve", "ok")

    async def test_in_flight_decision_is_refused(self, workflow, memory_store, guard):
        reviewer = await profile(memory_store, "fac-1")

        async with guard.hold("mock-1"):
            with pytest.raises(OperationInProgressError):
                await workflow.decide(reviewer, "mock-1", "approve", "ok")

        stored = await memory_store.fetch_one(Entity.CERTIFICATES, "mock-1")
        assert stored["status"] == "pending"
        assert not guard.is_processing("mock-1")

    async def test_guard_released_after_failure(self, workflow, memory_store, guard):
        reviewer = await profile(memory_store, "fac-1")

        with pytest.raises(InvalidTransitionError):
            await workflow.decide(reviewer, "m1", "approve", "ok")

        assert not guard.is_processing("m1")

    async def test_student_is_notified(self, workflow, memory_store):
        reviewer = await profile(memory_store, "fac-1")

        await workflow.decide(reviewer, "m4", "reject", "bad scan")

        notifications = await memory_store.fetch_collection(
            Entity.NOTIFICATIONS, filters={"user_id": "stu-1", "type": "certificate_rejected"}
        )
        assert len(notifications) == 1
        assert "bad scan" in notifications[0]["message"]
        assert notifications[0]["read_at"] is None

    async def test_failed_notification_keeps_decision(self, workflow, memory_store):
        reviewer = await profile(memory_store, "fac-1")
        memory_store.insert = AsyncMock(side_effect=RecordStoreError("insert", "notifications", "offline"))

        result = await workflow.decide(reviewer, "mock-1", "approve", "ok")

        assert result["status"] == "approved"
        stored = await memory_store.fetch_one(Entity.CERTIFICATES, "mock-1")
        assert stored["status"] == "approved"


class TestReviewerQueue:

    async def test_junior_sees_assigned_students_only(self, workflow, memory_store):
        junior = await profile(memory_store, "fac-2")

        queue = await workflow.reviewer_queue(junior)

        students = {c["student_id"] for c in queue["pending"] + queue["processed"]}
        assert students == {"stu-1", "stu-2"}
        assert all(c["status"] == "pending" for c in queue["pending"])
        assert all(c["status"] != "pending" for c in queue["processed"])

    async def test_senior_sees_everyone(self, workflow, memory_store):
        senior = await profile(memory_store, "fac-1")

        queue = await workflow.reviewer_queue(senior)

        assert len(queue["pending"]) + len(queue["processed"]) == 7
        first = queue["pending"][0]
        assert first["student"]["full_name"] in {"Alice Johnson", "Bob Smith", "Carol Danvers"}

    async def test_missing_student_gets_placeholder(self, workflow, memory_store):
        await memory_store.insert(Entity.CERTIFICATES, {
            "id": "orphan", "student_id": "ghost", "title": "Orphaned",
            "category": "academic", "status": "pending",
        })
        admin = await profile(memory_store, "admin-1")

        queue = await workflow.reviewer_queue(admin)

        orphan = next(c for c in queue["pending"] if c["id"] == "orphan")
        assert orphan["student"]["full_name"] == "Unknown"
        assert orphan["student"]["email"] == "Unknown"

    async def test_junior_without_students_gets_empty_queue(self, memory_store, guard):
        await memory_store.insert(Entity.PROFILES, {
            "id": "fac-new", "full_name": "New Faculty", "email": "new@example.edu",
            "role": "faculty", "faculty_level": "junior",
        })
        workflow = CertificateWorkflow(memory_store, guard=guard)
        reviewer = await profile(memory_store, "fac-new")

        assert await workflow.reviewer_queue(reviewer) == {"pending": [], "processed": []}

    async def test_assigned_students_sorted_by_name(self, workflow, memory_store):
        junior = await profile(memory_store, "fac-2")

        students = await workflow.assigned_students(junior)

        assert [s["full_name"] for s in students] == ["Alice Johnson", "Bob Smith"]


class TestUpload:

    async def test_upload_creates_pending_certificate(self, workflow, memory_store):
        student = await profile(memory_store, "stu-1")

        certificate = await workflow.upload(
            student, title="  AWS Cloud Practitioner ", description="", category="academic",
            file_name="aws.PDF", content=b"%PDF-1.4 test",
        )

        assert certificate["status"] == "pending"
        assert certificate["title"] == "AWS Cloud Practitioner"
        assert certificate["description"] is None
        assert certificate["file_url"].startswith("memory://certificates/user-stu-1/")
        assert certificate["file_url"].endswith(".pdf")
        assert list(memory_store.files.values()) == [b"%PDF-1.4 test"]

    async def test_rejects_disallowed_extension(self, workflow, memory_store):
        student = await profile(memory_store, "stu-1")

        with pytest.raises(ValidationError) as exc_info:
            await workflow.upload(student, "Title", None, "academic", "payload.exe", b"MZ")
        assert exc_info.value.field == "file"
        assert memory_store.files == {}

    async def test_rejects_oversized_file(self, workflow, memory_store, monkeypatch):
        monkeypatch.setattr(settings, "MAX_UPLOAD_SIZE", 4)
        student = await profile(memory_store, "stu-1")

        with pytest.raises(ValidationError):
            await workflow.upload(student, "Title", None, "academic", "big.pdf", b"12345")

    async def test_requires_title_and_file(self, workflow, memory_store):
        student = await profile(memory_store, "stu-1")

        with pytest.raises(ValidationError):
            await workflow.upload(student, "   ", None, "academic", "a.pdf", b"x")
        with pytest.raises(ValidationError):
            await workflow.upload(student, "Title", None, "academic", None, None)

    async def test_rejects_unknown_category(self, workflow, memory_store):
        student = await profile(memory_store, "stu-1")

        with pytest.raises(ValidationError):
            await workflow.upload(student, "Title", None, "sports", "a.pdf", b"x")

    async def test_faculty_cannot_upload(self, workflow, memory_store):
        reviewer = await profile(memory_store, "fac-1")

        with pytest.raises(AuthorizationError):
            await workflow.upload(reviewer, "Title", None, "academic", "a.pdf", b"x")

    async def test_list_for_student_newest_first(self, workflow):
        certificates = await workflow.list_for_student("stu-1")

        assert [c["id"] for c in certificates] == ["m4", "mock-1", "m3", "m2", "m1"]
