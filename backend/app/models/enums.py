"""
Closed value sets shared by the record store, services and API.

Records travel through the gateway as plain dicts holding the raw string
values; services convert them with ``Enum(value)`` at the point of use.
"""
import enum


class Entity(str, enum.Enum):
    """Tables reachable through the record store"""
    PROFILES = "profiles"
    CERTIFICATES = "certificates"
    ACTIVITIES = "activities"
    NOTIFICATIONS = "notifications"
    INSTITUTIONAL_REPORTS = "institutional_reports"
    ACADEMIC_RECORDS = "academic_records"


class Role(str, enum.Enum):
    STUDENT = "student"
    FACULTY = "faculty"
    ADMIN = "admin"


class FacultyLevel(str, enum.Enum):
    JUNIOR = "junior"
    SENIOR = "senior"
    ADMIN = "admin"


class Category(str, enum.Enum):
    ACADEMIC = "academic"
    CO_CURRICULAR = "co_curricular"


class CertificateStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class ActivityStatus(str, enum.Enum):
    DRAFT = "draft"
    SUBMITTED = "submitted"
    APPROVED = "approved"
    REJECTED = "rejected"


class ReportType(str, enum.Enum):
    NAAC = "naac"
    AICTE = "aicte"
    NIRF = "nirf"
    INTERNAL = "internal"
    CUSTOM = "custom"


class ReportStatus(str, enum.Enum):
    GENERATING = "generating"
    COMPLETED = "completed"
    FAILED = "failed"


class ReviewAction(str, enum.Enum):
    """Decision a reviewer takes on a pending submission"""
    APPROVE = "approve"
    REJECT = "reject"

    @property
    def resulting_status(self) -> str:
        if self is ReviewAction.APPROVE:
            return "approved"
        return "rejected"


class NotificationType(str, enum.Enum):
    CERTIFICATE_APPROVED = "certificate_approved"
    CERTIFICATE_REJECTED = "certificate_rejected"
    ACTIVITY_APPROVED = "activity_approved"
    ACTIVITY_REJECTED = "activity_rejected"
    ACTIVITY_SUBMITTED = "activity_submitted"
    MESSAGE = "message"
    SYSTEM = "system"


def is_senior_reviewer(profile: dict) -> bool:
    """Senior faculty, faculty with admin level, and admins see every student"""
    role = Role(profile["role"])
    if role is Role.ADMIN:
        return True
    if role is Role.FACULTY:
        level = profile.get("faculty_level")
        return level is not None and FacultyLevel(level) in (FacultyLevel.SENIOR, FacultyLevel.ADMIN)
    return False


def is_reviewer(profile: dict) -> bool:
    return Role(profile["role"]) in (Role.FACULTY, Role.ADMIN)
