"""
Demo records served in mock mode and used to seed a fresh database.

Three students, two reviewers and an admin. Alice (stu-1) has a full
history: certificates across several months, approved co-curricular
activities, transcript rows and notifications.
"""
from copy import deepcopy
from datetime import date, datetime, timedelta
from typing import Any, Dict, List, Optional

from app.models.enums import Entity


SENIOR_FACULTY_ID = "fac-1"
JUNIOR_FACULTY_ID = "fac-2"
ADMIN_ID = "admin-1"


def _profile(**fields) -> Dict[str, Any]:
    record = {
        "user_id": None,
        "faculty_level": None,
        "student_id_number": None,
        "assigned_faculty_id": None,
        "phone": None,
        "address": None,
        "date_of_birth": None,
        "bio": None,
        "skills": [],
        "languages": [],
        "interests": [],
        "github_url": None,
        "linkedin_url": None,
        "portfolio_url": None,
        "custom_links": [],
        "created_at": datetime(2023, 8, 1, 9, 0),
        "updated_at": datetime(2023, 8, 1, 9, 0),
    }
    record.update(fields)
    record["user_id"] = record["user_id"] or f"user-{record['id']}"
    return record


def _certificate(now: datetime, days_ago: int, **fields) -> Dict[str, Any]:
    record = {
        "description": None,
        "file_url": None,
        "file_name": None,
        "uploaded_at": now - timedelta(days=days_ago),
        "verified_by": None,
        "verified_at": None,
        "remark": None,
        "rejection_reason": None,
    }
    record.update(fields)
    if record["status"] != "pending" and record["verified_at"] is None:
        record["verified_at"] = record["uploaded_at"] + timedelta(hours=6)
    return record


def _activity(now: datetime, **fields) -> Dict[str, Any]:
    record = {
        "description": None,
        "category": "co_curricular",
        "activity_type": None,
        "start_date": None,
        "end_date": None,
        "organization": None,
        "location": None,
        "credits_earned": 0,
        "file_url": None,
        "file_name": None,
        "verified_by": None,
        "verified_at": None,
        "remark": None,
        "rejection_reason": None,
        "created_at": now,
    }
    record.update(fields)
    return record


def build_fixtures(now: Optional[datetime] = None) -> Dict[Entity, List[Dict[str, Any]]]:
    """Fresh copy of the demo records, timestamps relative to ``now``"""
    now = now or datetime.utcnow()

    profiles = [
        _profile(
            id=SENIOR_FACULTY_ID, full_name="Dr. Meera Iyer", email="meera.iyer@example.edu",
            role="faculty", faculty_level="senior",
        ),
        _profile(
            id=JUNIOR_FACULTY_ID, full_name="Dr. Rahul Verma", email="rahul.verma@example.edu",
            role="faculty", faculty_level="junior",
        ),
        _profile(
            id=ADMIN_ID, full_name="Registrar Office", email="registrar@example.edu", role="admin",
        ),
        _profile(
            id="stu-1", full_name="Alice Johnson", email="alice@example.edu", role="student",
            student_id_number="2021-CSE-034", assigned_faculty_id=JUNIOR_FACULTY_ID,
            phone="+1 (555) 123-4567",
            address="123 University Ave, College Town, ST 12345",
            date_of_birth=date(2000, 5, 15),
            bio=(
                "Passionate computer science student with interests in web development, "
                "artificial intelligence, and open source contributions."
            ),
            skills=["JavaScript", "Python", "React", "Node.js", "SQL", "Git", "Docker", "AWS"],
            languages=["English (Native)", "Spanish (Intermediate)", "French (Basic)"],
            interests=["Web Development", "Machine Learning", "Open Source", "Photography", "Hiking"],
            github_url="https://github.com/alicejohnson",
            linkedin_url="https://linkedin.com/in/alicejohnson",
            portfolio_url="alicejohnson.dev",
            custom_links=[
                {"name": "Personal Blog", "url": "https://myblog.com", "icon": "Globe"},
                {"name": "Research Paper", "url": "arxiv.org/paper123", "icon": "BookOpen"},
            ],
        ),
        _profile(
            id="stu-2", full_name="Bob Smith", email="bob@example.edu", role="student",
            student_id_number="2020-EEE-112", assigned_faculty_id=JUNIOR_FACULTY_ID,
        ),
        _profile(
            id="stu-3", full_name="Carol Danvers", email="carol@example.edu", role="student",
            student_id_number="2019-MECH-076", assigned_faculty_id=SENIOR_FACULTY_ID,
        ),
    ]

    certificates = [
        _certificate(
            now, 1, id="mock-1", student_id="stu-1", title="National Science Fair",
            description="Participation certificate", category="co_curricular", status="pending",
            file_url="https://example.com/cert1.pdf", file_name="cert1.pdf",
        ),
        _certificate(
            now, 2, id="mock-2", student_id="stu-2", title="B.Tech Degree",
            description="Verified by registrar", category="academic", status="approved",
            file_url="https://example.com/cert2.pdf", file_name="cert2.pdf",
            verified_by=SENIOR_FACULTY_ID, remark="Excellent achievement",
        ),
        _certificate(
            now, 3, id="mock-3", student_id="stu-3", title="Hackathon Winner",
            description="First place", category="co_curricular", status="rejected",
            file_url="https://example.com/cert3.pdf", file_name="cert3.pdf",
            verified_by=SENIOR_FACULTY_ID, remark="Please re-upload a clearer copy",
            rejection_reason="Illegible scan",
        ),
        _certificate(
            now, 40, id="m1", student_id="stu-1", title="Hackathon Winner",
            description="First place", category="co_curricular", status="approved",
            file_url="https://example.com/hack.pdf", file_name="hack.pdf",
            verified_by=JUNIOR_FACULTY_ID, remark="Great work",
        ),
        _certificate(
            now, 32, id="m2", student_id="stu-1", title="Science Fair",
            description="Participation", category="co_curricular", status="rejected",
            file_url="https://example.com/sci.pdf", file_name="sci.pdf",
            verified_by=JUNIOR_FACULTY_ID, remark="Illegible scan", rejection_reason="Illegible scan",
        ),
        _certificate(
            now, 5, id="m3", student_id="stu-1", title="Python Programming Certificate",
            description="Completed advanced Python programming course", category="academic",
            status="approved", file_url="https://example.com/python_cert.pdf",
            file_name="python_cert.pdf", verified_by=JUNIOR_FACULTY_ID, remark="Verified by registrar",
        ),
        _certificate(
            now, 0, id="m4", student_id="stu-1", title="Workshop",
            description="ML workshop", category="academic", status="pending",
            file_url="https://example.com/ws.pdf", file_name="ws.pdf",
        ),
    ]

    activities = [
        _activity(
            now, id="act-1", student_id="stu-1", title="Student Council President",
            description="Led student council initiatives and represented student body",
            activity_type="leadership", status="approved",
            start_date=date(2023, 9, 1), end_date=date(2024, 5, 31),
            organization="University Student Council", location="Campus", credits_earned=3,
            verified_by=JUNIOR_FACULTY_ID,
        ),
        _activity(
            now, id="act-2", student_id="stu-1", title="Annual Tech Fest Volunteer",
            description="Organized and managed technical events during the annual fest",
            activity_type="volunteering", status="approved",
            start_date=date(2024, 3, 15), end_date=date(2024, 3, 17),
            organization="Tech Fest Committee", location="Main Auditorium", credits_earned=2,
            verified_by=JUNIOR_FACULTY_ID,
        ),
        _activity(
            now, id="act-3", student_id="stu-1", title="Inter-University Basketball Championship",
            description="Represented university in basketball tournament",
            activity_type="sports", status="approved",
            start_date=date(2024, 2, 10), end_date=date(2024, 2, 12),
            organization="University Sports Committee", location="Sports Complex", credits_earned=2,
            verified_by=JUNIOR_FACULTY_ID,
        ),
        _activity(
            now, id="act-4", student_id="stu-1", title="Cultural Dance Performance",
            description="Performed traditional dance at cultural evening",
            activity_type="cultural", status="approved",
            start_date=date(2024, 1, 20), end_date=date(2024, 1, 20),
            organization="Cultural Committee", location="Main Hall", credits_earned=1,
            verified_by=JUNIOR_FACULTY_ID,
        ),
        _activity(
            now, id="act-5", student_id="stu-1", title="Leadership Workshop",
            description="Participated in leadership development workshop",
            activity_type="workshop", status="submitted",
            start_date=date(2024, 4, 6), end_date=date(2024, 4, 6),
            organization="Career Development Cell", location="Seminar Hall", credits_earned=1,
        ),
        _activity(
            now, id="act-6", student_id="stu-2", title="Robotics Club Build Season",
            category="co_curricular", activity_type="competition", status="draft",
            start_date=date(2024, 1, 8), organization="Robotics Club", credits_earned=0,
        ),
        _activity(
            now, id="act-7", student_id="stu-3", title="Thermal Systems Lab Project",
            category="academic", activity_type="research", status="approved",
            start_date=date(2023, 11, 2), end_date=date(2024, 2, 28),
            organization="Mechanical Engineering Department", credits_earned=4,
            verified_by=SENIOR_FACULTY_ID,
        ),
    ]

    notifications = [
        {
            "id": "notif-1", "user_id": "stu-1", "title": "Certificate Approved",
            "message": "Your Python Programming Certificate has been approved!",
            "type": "certificate_approved", "read_at": None, "created_at": now,
        },
        {
            "id": "notif-2", "user_id": "stu-1", "title": "Activity Submitted",
            "message": "Your Leadership Workshop activity is under review.",
            "type": "activity_submitted", "read_at": None, "created_at": now - timedelta(hours=1),
        },
        {
            "id": "notif-3", "user_id": "stu-1", "title": "New Message",
            "message": "You have a new message from Dr. Verma.",
            "type": "message", "read_at": now - timedelta(hours=2), "created_at": now - timedelta(hours=2),
        },
    ]

    academic_records = [
        {
            "id": "rec-1", "student_id": "stu-1", "semester": "Fall 2023", "subject_code": "CS101",
            "subject_name": "Introduction to Computer Science", "credits": 3, "grade": "A",
            "grade_points": 4.0, "cgpa": 3.8, "academic_year": "2023-24", "created_at": now,
        },
        {
            "id": "rec-2", "student_id": "stu-1", "semester": "Fall 2023", "subject_code": "MATH201",
            "subject_name": "Calculus II", "credits": 4, "grade": "B+",
            "grade_points": 3.3, "cgpa": 3.8, "academic_year": "2023-24", "created_at": now,
        },
        {
            "id": "rec-3", "student_id": "stu-1", "semester": "Spring 2023", "subject_code": "ENG101",
            "subject_name": "English Composition", "credits": 3, "grade": "A-",
            "grade_points": 3.7, "cgpa": 3.7, "academic_year": "2022-23",
            "created_at": now - timedelta(days=200),
        },
        {
            "id": "rec-4", "student_id": "stu-3", "semester": "Fall 2023", "subject_code": "ME301",
            "subject_name": "Heat Transfer", "credits": 4, "grade": "B",
            "grade_points": 3.0, "cgpa": 3.2, "academic_year": "2023-24", "created_at": now,
        },
    ]

    institutional_reports = [
        {
            "id": "report-1", "title": "NAAC Self Study 2023-24",
            "description": "Criterion 5 student support and progression",
            "report_type": "naac", "generated_by": SENIOR_FACULTY_ID,
            "parameters": {"academic_year": "2023-24"},
            "file_url": "https://example.com/reports/naac-2023-24.pdf", "status": "completed",
            "created_at": now - timedelta(days=14), "completed_at": now - timedelta(days=14, hours=-1),
        },
    ]

    return deepcopy({
        Entity.PROFILES: profiles,
        Entity.CERTIFICATES: certificates,
        Entity.ACTIVITIES: activities,
        Entity.NOTIFICATIONS: notifications,
        Entity.INSTITUTIONAL_REPORTS: institutional_reports,
        Entity.ACADEMIC_RECORDS: academic_records,
    })
