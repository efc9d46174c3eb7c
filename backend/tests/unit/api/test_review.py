"""
API Tests for the faculty review endpoints
"""
from httpx import AsyncClient

from app.gateway import SQLRecordStore
from app.models.enums import Entity


class TestQueue:

    async def test_junior_queue_scoped(self, seeded_client: AsyncClient, junior_headers):
        response = await seeded_client.get("/api/v1/faculty/queue", headers=junior_headers)

        assert response.status_code == 200
        data = response.json()
        students = {c["student_id"] for c in data["pending"] + data["processed"]}
        assert students == {"stu-1", "stu-2"}
        assert all(c["student"]["full_name"] for c in data["pending"])

    async def test_students_cannot_open_queue(self, seeded_client: AsyncClient, student_headers):
        response = await seeded_client.get("/api/v1/faculty/queue", headers=student_headers)

        assert response.status_code == 403
        assert response.json()["code"] == "NOT_AUTHORIZED"

    async def test_assigned_students(self, seeded_client: AsyncClient, junior_headers):
        response = await seeded_client.get("/api/v1/faculty/students", headers=junior_headers)

        assert response.status_code == 200
        assert [s["id"] for s in response.json()["students"]] == ["stu-1", "stu-2"]

    async def test_student_detail(self, seeded_client: AsyncClient, junior_headers):
        response = await seeded_client.get("/api/v1/faculty/students/stu-1", headers=junior_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["summary"]["total"] == 5
        assert data["recent_certificates"][0]["id"] == "m4"

    async def test_student_detail_outside_assignment(self, seeded_client: AsyncClient, junior_headers):
        response = await seeded_client.get("/api/v1/faculty/students/stu-3", headers=junior_headers)

        assert response.status_code == 403


class TestCertificateDecision:

    async def test_approve(self, seeded_client: AsyncClient, seeded_db, junior_headers):
        response = await seeded_client.post(
            "/api/v1/faculty/certificates/mock-1/decision",
            json={"action": "approve", "remark": "ok"},
            headers=junior_headers,
        )

        assert response.status_code == 200
        assert response.json()["status"] == "approved"

        stored = await SQLRecordStore(seeded_db).fetch_one(Entity.CERTIFICATES, "mock-1")
        assert stored["status"] == "approved"
        assert stored["remark"] == "ok"
        assert stored["rejection_reason"] is None

    async def test_empty_remark_is_rejected(self, seeded_client: AsyncClient, seeded_db, senior_headers):
        response = await seeded_client.post(
            "/api/v1/faculty/certificates/mock-1/decision",
            json={"action": "reject", "remark": "   "},
            headers=senior_headers,
        )

        assert response.status_code == 400
        body = response.json()
        assert body["code"] == "VALIDATION_ERROR"
        assert body["details"]["field"] == "remark"

        stored = await SQLRecordStore(seeded_db).fetch_one(Entity.CERTIFICATES, "mock-1")
        assert stored["status"] == "pending"

    async def test_reject_then_conflict(self, seeded_client: AsyncClient, senior_headers):
        url = "/api/v1/faculty/certificates/m4/decision"

        first = await seeded_client.post(url, json={"action": "reject", "remark": "bad scan"}, headers=senior_headers)
        assert first.status_code == 200
        assert first.json()["rejection_reason"] == "bad scan"

        second = await seeded_client.post(url, json={"action": "approve", "remark": "ok"}, headers=senior_headers)
        assert second.status_code == 409
        assert second.json()["code"] == "INVALID_TRANSITION"

    async def test_unknown_certificate(self, seeded_client: AsyncClient, senior_headers):
        response = await seeded_client.post(
            "/api/v1/faculty/certificates/nope/decision",
            json={"action": "approve", "remark": "ok"},
            headers=senior_headers,
        )

        assert response.status_code == 404
        assert response.json()["code"] == "CERTIFICATE_NOT_FOUND"

    async def test_decision_notifies_student(self, seeded_client: AsyncClient, senior_headers, student_headers):
        before = await seeded_client.get("/api/v1/notifications", headers=student_headers)

        await seeded_client.post(
            "/api/v1/faculty/certificates/m4/decision",
            json={"action": "approve", "remark": "verified"},
            headers=senior_headers,
        )

        response = await seeded_client.get("/api/v1/notifications", headers=student_headers)

        data = response.json()
        assert len(data["notifications"]) == len(before.json()["notifications"]) + 1
        assert data["unread_count"] == before.json()["unread_count"] + 1


class TestActivityDecision:

    async def test_approve_submitted_activity(self, seeded_client: AsyncClient, junior_headers):
        response = await seeded_client.post(
            "/api/v1/faculty/activities/act-5/decision",
            json={"action": "approve", "remark": "attendance verified"},
            headers=junior_headers,
        )

        assert response.status_code == 200
        assert response.json()["status"] == "approved"

    async def test_draft_activity_conflict(self, seeded_client: AsyncClient, junior_headers):
        response = await seeded_client.post(
            "/api/v1/faculty/activities/act-6/decision",
            json={"action": "approve", "remark": "ok"},
            headers=junior_headers,
        )

        assert response.status_code == 409
