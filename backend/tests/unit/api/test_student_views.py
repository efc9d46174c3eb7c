"""
API Tests for the student pages: certificates, activities, transcript, notifications
"""
from unittest.mock import AsyncMock

from httpx import AsyncClient

from app.core.exceptions import RecordStoreError
from app.gateway import SQLRecordStore


class TestCertificates:

    async def test_list_newest_first(self, seeded_client: AsyncClient, student_headers):
        response = await seeded_client.get("/api/v1/certificates", headers=student_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 5
        assert [c["id"] for c in data["certificates"]][:2] == ["m4", "mock-1"]
        assert "warning" not in data

    async def test_upload_and_download(self, seeded_client: AsyncClient, student_headers):
        response = await seeded_client.post(
            "/api/v1/certificates",
            data={"title": "AWS Cloud Practitioner", "category": "academic"},
            files={"file": ("aws.pdf", b"%PDF-1.4 certificate", "application/pdf")},
            headers=student_headers,
        )

        assert response.status_code == 201
        certificate = response.json()
        assert certificate["status"] == "pending"
        assert certificate["file_name"] == "aws.pdf"
        assert "/api/v1/storage/certificates/user-stu-1/" in certificate["file_url"]

        path = certificate["file_url"].split("http://test", 1)[1]
        download = await seeded_client.get(path)
        assert download.status_code == 200
        assert download.content == b"%PDF-1.4 certificate"

    async def test_upload_rejects_extension(self, seeded_client: AsyncClient, student_headers):
        response = await seeded_client.post(
            "/api/v1/certificates",
            data={"title": "Script"},
            files={"file": ("run.sh", b"#!/bin/sh", "text/x-sh")},
            headers=student_headers,
        )

        assert response.status_code == 400
        assert response.json()["details"]["field"] == "file"

    async def test_upload_without_file(self, seeded_client: AsyncClient, student_headers):
        response = await seeded_client.post(
            "/api/v1/certificates", data={"title": "Missing"}, headers=student_headers
        )

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"

    async def test_faculty_cannot_list_student_certificates(self, seeded_client: AsyncClient, senior_headers):
        response = await seeded_client.get("/api/v1/certificates", headers=senior_headers)

        assert response.status_code == 403

    async def test_store_failure_falls_back_to_empty_list(
        self, seeded_client: AsyncClient, student_headers, monkeypatch
    ):
        monkeypatch.setattr(
            SQLRecordStore,
            "fetch_collection",
            AsyncMock(side_effect=RecordStoreError("fetch", "certificates", "connection reset")),
        )

        response = await seeded_client.get("/api/v1/certificates", headers=student_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["certificates"] == []
        assert "connection reset" in data["warning"]

    async def test_recommendations(self, seeded_client: AsyncClient, student_headers):
        response = await seeded_client.get("/api/v1/certificates/recommendations", headers=student_headers)

        assert response.status_code == 200
        assert [r["id"] for r in response.json()["recommendations"]] == ["3", "7", "9"]


class TestActivities:

    async def test_create_and_submit(self, seeded_client: AsyncClient, headers_for):
        headers = headers_for("stu-2")
        created = await seeded_client.post(
            "/api/v1/activities",
            json={"title": "Hackathon Mentor", "activity_type": "volunteering", "credits_earned": 2},
            headers=headers,
        )
        assert created.status_code == 201
        assert created.json()["status"] == "draft"

        submitted = await seeded_client.post(
            f"/api/v1/activities/{created.json()['id']}/submit", headers=headers
        )
        assert submitted.status_code == 200
        assert submitted.json()["status"] == "submitted"

    async def test_end_before_start(self, seeded_client: AsyncClient, student_headers):
        response = await seeded_client.post(
            "/api/v1/activities",
            json={"title": "Trip", "start_date": "2024-03-02", "end_date": "2024-03-01"},
            headers=student_headers,
        )

        assert response.status_code == 400

    async def test_co_curricular_overview(self, seeded_client: AsyncClient, student_headers):
        response = await seeded_client.get("/api/v1/activities/co-curricular", headers=student_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["stats"]["total_credits"] == 8
        assert [g["year"] for g in data["by_year"]] == ["2024", "2023"]

    async def test_filtered_list(self, seeded_client: AsyncClient, student_headers):
        response = await seeded_client.get(
            "/api/v1/activities", params={"approved_only": "true"}, headers=student_headers
        )

        assert response.status_code == 200
        assert response.json()["total"] == 4


class TestAcademicRecords:

    async def test_transcript(self, seeded_client: AsyncClient, student_headers):
        response = await seeded_client.get("/api/v1/records/academic", headers=student_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["stats"]["total_credits"] == 10
        assert data["stats"]["current_cgpa"] == 3.8
        assert [g["key"] for g in data["by_year"]] == ["2023-24", "2022-23"]


class TestNotifications:

    async def test_list_and_mark_all(self, seeded_client: AsyncClient, student_headers):
        listing = await seeded_client.get("/api/v1/notifications", headers=student_headers)
        assert listing.status_code == 200
        assert listing.json()["unread_count"] == 2

        marked = await seeded_client.post("/api/v1/notifications/read-all", headers=student_headers)
        assert marked.status_code == 200
        assert marked.json()["marked"] == 2
        assert marked.json()["unread_count"] == 0

        again = await seeded_client.get("/api/v1/notifications", headers=student_headers)
        assert again.json()["unread_count"] == 0

    async def test_mark_one(self, seeded_client: AsyncClient, student_headers):
        response = await seeded_client.post("/api/v1/notifications/notif-1/read", headers=student_headers)

        assert response.status_code == 200
        assert response.json()["unread_count"] == 1

    async def test_cannot_mark_someone_elses(self, seeded_client: AsyncClient, headers_for):
        response = await seeded_client.post("/api/v1/notifications/notif-1/read", headers=headers_for("stu-2"))

        assert response.status_code == 404
