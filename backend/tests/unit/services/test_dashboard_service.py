"""
Unit Tests for the analytics dashboards and institutional reports
"""
import pytest

from app.core.exceptions import AuthorizationError, RecordNotFoundError, ValidationError
from app.models.enums import Entity
from app.services.dashboard_service import DashboardService
from app.services.report_service import ReportService


async def profile(store, profile_id: str) -> dict:
    return await store.fetch_one(Entity.PROFILES, profile_id)


class TestOverview:

    async def test_institution_totals(self, memory_store):
        senior = await profile(memory_store, "fac-1")

        overview = await DashboardService(memory_store).overview(senior)

        assert overview["total_students"] == 3
        assert overview["total_faculty"] == 2
        assert overview["total_certificates"] == 7
        assert overview["total_activities"] == 7
        assert overview["total_submissions"] == 14
        assert overview["approved_certificates"] == 3
        assert overview["pending_certificates"] == 2
        assert overview["rejected_certificates"] == 2
        assert overview["certificate_approval_rate"] == 43
        assert [s["student_id"] for s in overview["top_students"]] == ["stu-1", "stu-3", "stu-2"]

    async def test_junior_faculty_refused(self, memory_store):
        junior = await profile(memory_store, "fac-2")

        with pytest.raises(AuthorizationError):
            await DashboardService(memory_store).overview(junior)

    async def test_leaderboard_limit(self, memory_store):
        admin = await profile(memory_store, "admin-1")

        board = await DashboardService(memory_store).leaderboard(admin, limit=2)

        assert [s["student_id"] for s in board] == ["stu-1", "stu-3"]
        assert board[0]["total_credits"] == 8
        assert board[0]["achievements"] == 6


class TestStudentDetail:

    async def test_assigned_student(self, memory_store):
        junior = await profile(memory_store, "fac-2")

        detail = await DashboardService(memory_store).student_detail(junior, "stu-1")

        assert detail["student"]["full_name"] == "Alice Johnson"
        assert detail["summary"]["total"] == 5
        assert detail["summary"]["progress"] == 40
        assert detail["recent_certificates"][0]["id"] == "m4"

    async def test_unassigned_student_refused(self, memory_store):
        junior = await profile(memory_store, "fac-2")

        with pytest.raises(AuthorizationError):
            await DashboardService(memory_store).student_detail(junior, "stu-3")

    async def test_not_a_student(self, memory_store):
        senior = await profile(memory_store, "fac-1")

        with pytest.raises(RecordNotFoundError):
            await DashboardService(memory_store).student_detail(senior, "fac-2")


class TestReports:

    async def test_request_and_delete(self, memory_store):
        senior = await profile(memory_store, "fac-1")
        service = ReportService(memory_store)

        report = await service.request_report(
            senior, title="NIRF 2024", report_type="nirf", parameters={"year": 2024}
        )

        assert report["status"] == "generating"
        assert report["generated_by"] == "fac-1"
        assert [r["id"] for r in await service.list_reports(senior)][0] == report["id"]

        await service.delete_report(senior, report["id"])
        assert await memory_store.fetch_one(Entity.INSTITUTIONAL_REPORTS, report["id"]) is None

    async def test_unknown_report_type(self, memory_store):
        senior = await profile(memory_store, "fac-1")

        with pytest.raises(ValidationError):
            await ReportService(memory_store).request_report(senior, title="X", report_type="annual")

    async def test_delete_missing(self, memory_store):
        senior = await profile(memory_store, "fac-1")

        with pytest.raises(RecordNotFoundError):
            await ReportService(memory_store).delete_report(senior, "nope")

    async def test_students_refused(self, memory_store):
        student = await profile(memory_store, "stu-1")

        with pytest.raises(AuthorizationError):
            await ReportService(memory_store).list_reports(student)
