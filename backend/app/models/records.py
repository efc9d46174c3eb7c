"""
Campus Records tables.

Status and category columns hold the raw enum values as strings; the record
store hands rows out as plain dicts and services convert them with the enums
in app.models.enums.
"""
from sqlalchemy import Column, String, Integer, Float, DateTime, Date, Text, ForeignKey, JSON, Index
from datetime import datetime

from app.core.database import Base
from app.core.types import GUID, JSONList, generate_uuid


class Profile(Base):
    """Student, faculty or admin profile"""
    __tablename__ = "profiles"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    user_id = Column(GUID, nullable=False, default=generate_uuid, index=True)
    full_name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, index=True)
    role = Column(String(20), nullable=False, default="student", index=True)

    # Faculty only
    faculty_level = Column(String(20), nullable=True)  # junior / senior / admin

    # Student only
    student_id_number = Column(String(50), nullable=True)
    assigned_faculty_id = Column(GUID, ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True, index=True)

    # Resume fields
    phone = Column(String(30), nullable=True)
    address = Column(Text, nullable=True)
    date_of_birth = Column(Date, nullable=True)
    bio = Column(Text, nullable=True)
    skills = Column(JSONList, default=list)
    languages = Column(JSONList, default=list)
    interests = Column(JSONList, default=list)
    github_url = Column(String(500), nullable=True)
    linkedin_url = Column(String(500), nullable=True)
    portfolio_url = Column(String(500), nullable=True)
    custom_links = Column(JSONList, default=list)  # [{name, url, icon}]

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<Profile {self.email} ({self.role})>"


class Certificate(Base):
    """Uploaded certificate awaiting or past review"""
    __tablename__ = "certificates"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    student_id = Column(GUID, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    category = Column(String(20), nullable=False, default="academic")
    status = Column(String(20), nullable=False, default="pending", index=True)

    file_url = Column(String(1000), nullable=True)
    file_name = Column(String(255), nullable=True)
    uploaded_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Review
    verified_by = Column(GUID, ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True)
    verified_at = Column(DateTime, nullable=True)
    remark = Column(Text, nullable=True)
    rejection_reason = Column(Text, nullable=True)

    __table_args__ = (
        Index("ix_certificates_student_uploaded", "student_id", "uploaded_at"),
    )

    def __repr__(self):
        return f"<Certificate {self.title} [{self.status}]>"


class Activity(Base):
    """Co-curricular or academic activity logged by a student"""
    __tablename__ = "activities"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    student_id = Column(GUID, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    category = Column(String(20), nullable=False, default="co_curricular")
    activity_type = Column(String(50), nullable=True)  # leadership, sports, cultural, volunteering, competition...
    status = Column(String(20), nullable=False, default="draft", index=True)

    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)
    organization = Column(String(255), nullable=True)
    location = Column(String(255), nullable=True)
    credits_earned = Column(Integer, nullable=True, default=0)

    file_url = Column(String(1000), nullable=True)
    file_name = Column(String(255), nullable=True)

    verified_by = Column(GUID, ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True)
    verified_at = Column(DateTime, nullable=True)
    remark = Column(Text, nullable=True)
    rejection_reason = Column(Text, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<Activity {self.title} [{self.status}]>"


class Notification(Base):
    """Per-user notification, polled by the client"""
    __tablename__ = "notifications"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    user_id = Column(GUID, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=True)
    type = Column(String(50), nullable=False, default="system")
    read_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)


class InstitutionalReport(Base):
    """Accreditation or internal report request"""
    __tablename__ = "institutional_reports"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    report_type = Column(String(20), nullable=False, default="internal")
    generated_by = Column(GUID, ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True)
    parameters = Column(JSON, nullable=True)
    file_url = Column(String(1000), nullable=True)
    status = Column(String(20), nullable=False, default="generating")
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    completed_at = Column(DateTime, nullable=True)


class AcademicRecord(Base):
    """One graded subject in a student's transcript"""
    __tablename__ = "academic_records"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    student_id = Column(GUID, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    semester = Column(String(50), nullable=False)
    subject_code = Column(String(20), nullable=False)
    subject_name = Column(String(255), nullable=False)
    credits = Column(Integer, nullable=False, default=0)
    grade = Column(String(5), nullable=True)
    grade_points = Column(Float, nullable=True)
    cgpa = Column(Float, nullable=True)
    academic_year = Column(String(20), nullable=False)  # e.g., "2023-24"
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
