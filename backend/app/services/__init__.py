from app.services.certificate_workflow import CertificateWorkflow
from app.services.activity_service import ActivityService
from app.services.academic_service import AcademicRecordService
from app.services.notification_feed import NotificationFeed
from app.services.portfolio_service import PortfolioService
from app.services.report_service import ReportService
from app.services.dashboard_service import DashboardService
from app.services.processing_guard import ProcessingGuard, processing_guard

__all__ = [
    # Review workflows
    "CertificateWorkflow",
    "ActivityService",
    "ProcessingGuard",
    "processing_guard",
    # Student views
    "AcademicRecordService",
    "NotificationFeed",
    "PortfolioService",
    # Institution views
    "ReportService",
    "DashboardService",
]
