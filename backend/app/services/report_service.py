"""
Institutional Reports
Accreditation (NAAC, AICTE, NIRF) and internal report requests.
Requests are recorded as 'generating'; completion is written by the report job.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from app.core.exceptions import AuthorizationError, RecordNotFoundError, ValidationError
from app.core.logging_config import logger
from app.gateway.base import RecordStore
from app.models.enums import Entity, ReportStatus, ReportType, is_senior_reviewer


def require_senior(actor: Dict[str, Any]) -> None:
    if not is_senior_reviewer(actor):
        raise AuthorizationError("Institutional analytics are limited to senior faculty and administrators")


class ReportService:
    """Service for institutional report records"""

    def __init__(self, store: RecordStore):
        self.store = store

    async def list_reports(self, actor: Dict[str, Any]) -> List[Dict[str, Any]]:
        require_senior(actor)
        return await self.store.fetch_collection(
            Entity.INSTITUTIONAL_REPORTS, order=[("created_at", True)]
        )

    async def request_report(
        self,
        actor: Dict[str, Any],
        title: str,
        description: Optional[str] = None,
        report_type: str = ReportType.INTERNAL.value,
        parameters: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        require_senior(actor)

        title = (title or "").strip()
        if not title:
            raise ValidationError("Report title is required", field="title")
        try:
            report_type = ReportType(report_type)
        except ValueError:
            raise ValidationError(f"Unknown report type '{report_type}'", field="report_type")

        report = await self.store.insert(Entity.INSTITUTIONAL_REPORTS, {
            "title": title,
            "description": description,
            "report_type": report_type.value,
            "generated_by": actor["id"],
            "parameters": parameters or {},
            "status": ReportStatus.GENERATING.value,
            "created_at": datetime.utcnow(),
        })

        logger.log_workflow_event("report", report["id"], "requested", actor_id=actor["id"], report_type=report_type.value)
        return report

    async def delete_report(self, actor: Dict[str, Any], report_id: str) -> None:
        require_senior(actor)
        if await self.store.fetch_one(Entity.INSTITUTIONAL_REPORTS, report_id) is None:
            raise RecordNotFoundError("report", report_id)

        await self.store.delete(Entity.INSTITUTIONAL_REPORTS, report_id)
        logger.log_workflow_event("report", report_id, "deleted", actor_id=actor["id"])
