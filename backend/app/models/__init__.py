# Re-export all models for convenient imports
from app.models.records import (
    Profile,
    Certificate,
    Activity,
    Notification,
    InstitutionalReport,
    AcademicRecord,
)
from app.models.enums import (
    Entity,
    Role,
    FacultyLevel,
    Category,
    CertificateStatus,
    ActivityStatus,
    ReportType,
    ReportStatus,
    ReviewAction,
    NotificationType,
)

# Table for each record store entity
MODEL_FOR_ENTITY = {
    Entity.PROFILES: Profile,
    Entity.CERTIFICATES: Certificate,
    Entity.ACTIVITIES: Activity,
    Entity.NOTIFICATIONS: Notification,
    Entity.INSTITUTIONAL_REPORTS: InstitutionalReport,
    Entity.ACADEMIC_RECORDS: AcademicRecord,
}

__all__ = [
    # Tables
    "Profile",
    "Certificate",
    "Activity",
    "Notification",
    "InstitutionalReport",
    "AcademicRecord",
    "MODEL_FOR_ENTITY",
    # Enums
    "Entity",
    "Role",
    "FacultyLevel",
    "Category",
    "CertificateStatus",
    "ActivityStatus",
    "ReportType",
    "ReportStatus",
    "ReviewAction",
    "NotificationType",
]
