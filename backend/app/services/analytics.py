"""
Aggregation & Analytics

Pure functions that turn record lists into dashboard view-models.
Nothing here touches the record store; callers fetch first and pass the
records in. Every aggregate is derived from the records given, with null
numerics counted as zero and empty inputs giving zero-valued results.
"""

import math
from datetime import date, datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Sequence

from app.models.enums import ActivityStatus, Category, CertificateStatus


def round_half_up(value: float, digits: int = 0) -> float:
    """Round with halves going up, matching the dashboards' display rounding"""
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def to_datetime(value: Any) -> Optional[datetime]:
    """Naive UTC datetime for a date, datetime or ISO string; None when missing"""
    if value is None or value == "":
        return None
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.replace(tzinfo=None)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    raise TypeError(f"Unsupported date value: {value!r}")


def month_key(value: Any) -> Optional[str]:
    """'YYYY-MM' for a date value; None when missing"""
    moment = to_datetime(value)
    if moment is None:
        return None
    return f"{moment.year}-{moment.month:02d}"


def year_key(value: Any) -> str:
    """Calendar year of a date value, 'Unknown' when missing"""
    moment = to_datetime(value)
    if moment is None:
        return "Unknown"
    return str(moment.year)


# ==================== Counts & rates ====================

def status_breakdown(records: Sequence[Dict[str, Any]], activities: bool = False) -> Dict[str, int]:
    """
    Count records by review status.

    For activities a ``submitted`` record counts as pending and drafts only
    count toward the total.
    """
    breakdown = {"total": len(records), "approved": 0, "pending": 0, "rejected": 0}

    for record in records:
        if activities:
            status = ActivityStatus(record["status"])
            if status is ActivityStatus.APPROVED:
                breakdown["approved"] += 1
            elif status is ActivityStatus.SUBMITTED:
                breakdown["pending"] += 1
            elif status is ActivityStatus.REJECTED:
                breakdown["rejected"] += 1
            elif status is ActivityStatus.DRAFT:
                pass
        else:
            status = CertificateStatus(record["status"])
            if status is CertificateStatus.APPROVED:
                breakdown["approved"] += 1
            elif status is CertificateStatus.PENDING:
                breakdown["pending"] += 1
            elif status is CertificateStatus.REJECTED:
                breakdown["rejected"] += 1

    return breakdown


def approval_rate(approved: int, total: int) -> int:
    """Whole-number percentage of approved records, 0 when there are none"""
    if total <= 0:
        return 0
    return int(round_half_up(approved / total * 100))


def total_credits(activities: Iterable[Dict[str, Any]]) -> int:
    return sum(activity.get("credits_earned") or 0 for activity in activities)


def average_credits_per_student(summaries: Sequence[Dict[str, Any]]) -> float:
    if not summaries:
        return 0.0
    return sum(summary.get("total_credits") or 0 for summary in summaries) / len(summaries)


# ==================== Chart series ====================

def monthly_series(records: Iterable[Dict[str, Any]], date_field: str = "uploaded_at") -> List[Dict[str, Any]]:
    """Uploads and approvals per month. Only months with records appear, ascending."""
    buckets: Dict[str, Dict[str, Any]] = {}
    for record in records:
        key = month_key(record.get(date_field))
        if key is None:
            continue
        bucket = buckets.setdefault(key, {"month": key, "uploads": 0, "approved": 0})
        bucket["uploads"] += 1
        if record.get("status") == CertificateStatus.APPROVED.value:
            bucket["approved"] += 1
    return [buckets[key] for key in sorted(buckets)]


def category_series(records: Iterable[Dict[str, Any]], date_field: str = "uploaded_at") -> List[Dict[str, Any]]:
    """Per-month counts split by category, ascending"""
    buckets: Dict[str, Dict[str, Any]] = {}
    for record in records:
        key = month_key(record.get(date_field))
        if key is None:
            continue
        bucket = buckets.setdefault(key, {"month": key, "academic": 0, "co_curricular": 0})
        if Category(record["category"]) is Category.ACADEMIC:
            bucket["academic"] += 1
        else:
            bucket["co_curricular"] += 1
    return [buckets[key] for key in sorted(buckets)]


def status_counts(records: Sequence[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Pie series: approved, pending, rejected"""
    return [
        {"name": status.value, "value": sum(1 for r in records if r.get("status") == status.value)}
        for status in (CertificateStatus.APPROVED, CertificateStatus.PENDING, CertificateStatus.REJECTED)
    ]


def category_counts(records: Sequence[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Pie series: academic, co_curricular"""
    return [
        {"name": category.value, "value": sum(1 for r in records if r.get("category") == category.value)}
        for category in (Category.ACADEMIC, Category.CO_CURRICULAR)
    ]


# ==================== Student achievements ====================

def build_achievement_summaries(
    students: Sequence[Dict[str, Any]],
    certificates: Sequence[Dict[str, Any]],
    activities: Sequence[Dict[str, Any]],
    academic_records: Sequence[Dict[str, Any]] = (),
) -> List[Dict[str, Any]]:
    """Derive one achievement summary per student"""
    summaries = {
        student["id"]: {
            "student_id": student["id"],
            "full_name": student.get("full_name"),
            "student_id_number": student.get("student_id_number"),
            "total_certificates": 0,
            "approved_certificates": 0,
            "total_activities": 0,
            "approved_activities": 0,
            "total_credits": 0,
            "current_cgpa": None,
        }
        for student in students
    }

    for certificate in certificates:
        summary = summaries.get(certificate.get("student_id"))
        if summary is None:
            continue
        summary["total_certificates"] += 1
        if CertificateStatus(certificate["status"]) is CertificateStatus.APPROVED:
            summary["approved_certificates"] += 1

    for activity in activities:
        summary = summaries.get(activity.get("student_id"))
        if summary is None:
            continue
        summary["total_activities"] += 1
        if ActivityStatus(activity["status"]) is ActivityStatus.APPROVED:
            summary["approved_activities"] += 1
            summary["total_credits"] += activity.get("credits_earned") or 0

    newest: Dict[str, Dict[str, Any]] = {}
    for record in academic_records:
        student_id = record.get("student_id")
        recorded = to_datetime(record.get("created_at")) or datetime.min
        current = newest.get(student_id)
        if current is None or recorded > (to_datetime(current.get("created_at")) or datetime.min):
            newest[student_id] = record
    for student_id, record in newest.items():
        if student_id in summaries:
            summaries[student_id]["current_cgpa"] = record.get("cgpa")

    return list(summaries.values())


def leaderboard(summaries: Sequence[Dict[str, Any]], limit: int = 10) -> List[Dict[str, Any]]:
    """Top students by total credits; ties keep their input order"""
    ranked = sorted(summaries, key=lambda s: s.get("total_credits") or 0, reverse=True)
    return [
        {**summary, "achievements": (summary.get("approved_certificates") or 0) + (summary.get("approved_activities") or 0)}
        for summary in ranked[:limit]
    ]


# ==================== Dashboards ====================

def institution_overview(
    total_students: int,
    total_faculty: int,
    certificates: Sequence[Dict[str, Any]],
    activities: Sequence[Dict[str, Any]],
    summaries: Sequence[Dict[str, Any]],
) -> Dict[str, Any]:
    """Institution-wide analytics dashboard model"""
    certificate_counts = status_breakdown(certificates)
    activity_counts = status_breakdown(activities, activities=True)
    average = average_credits_per_student(summaries)

    return {
        "total_students": total_students,
        "total_faculty": total_faculty,
        "total_certificates": certificate_counts["total"],
        "total_activities": activity_counts["total"],
        "total_submissions": certificate_counts["total"] + activity_counts["total"],
        "approved_certificates": certificate_counts["approved"],
        "approved_activities": activity_counts["approved"],
        "pending_certificates": certificate_counts["pending"],
        "pending_activities": activity_counts["pending"],
        "rejected_certificates": certificate_counts["rejected"],
        "rejected_activities": activity_counts["rejected"],
        "total_credits": total_credits(activities),
        "average_credits_per_student": average,
        "average_credits_display": round_half_up(average, 1),
        "certificate_approval_rate": approval_rate(certificate_counts["approved"], certificate_counts["total"]),
        "activity_approval_rate": approval_rate(activity_counts["approved"], activity_counts["total"]),
    }


def student_detail(
    student: Dict[str, Any],
    certificates: Sequence[Dict[str, Any]],
    recent_limit: int = 8,
) -> Dict[str, Any]:
    """Faculty view of one student's certificate history"""
    chronological = sorted(certificates, key=lambda c: to_datetime(c.get("uploaded_at")) or datetime.min)
    counts = status_breakdown(chronological)

    return {
        "student": {
            "id": student["id"],
            "full_name": student.get("full_name"),
            "email": student.get("email"),
            "student_id_number": student.get("student_id_number"),
        },
        "summary": {**counts, "progress": approval_rate(counts["approved"], counts["total"])},
        "timeline": monthly_series(chronological),
        "category_timeline": category_series(chronological),
        "status_counts": status_counts(chronological),
        "category_counts": category_counts(chronological),
        "recent_certificates": list(reversed(chronological))[:recent_limit],
    }


# ==================== Activity records ====================

def activity_stats(activities: Sequence[Dict[str, Any]]) -> Dict[str, Any]:
    total = len(activities)
    credits = total_credits(activities)
    return {
        "total_activities": total,
        "total_credits": credits,
        "activity_types": len({a.get("activity_type") for a in activities}),
        "average_credits": credits / total if total else 0,
    }


def group_by_activity_type(activities: Sequence[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Groups keyed by activity type, largest group first"""
    groups: Dict[str, List[Dict[str, Any]]] = {}
    for activity in activities:
        groups.setdefault(activity.get("activity_type") or "other", []).append(activity)
    ordered = sorted(groups.items(), key=lambda item: len(item[1]), reverse=True)
    return [{"activity_type": key, "activities": items} for key, items in ordered]


def group_by_year(activities: Sequence[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Groups keyed by start year, newest year first; undated activities last under 'Unknown'"""
    groups: Dict[str, List[Dict[str, Any]]] = {}
    for activity in activities:
        groups.setdefault(year_key(activity.get("start_date")), []).append(activity)
    ordered = sorted(groups, key=lambda key: (key != "Unknown", key), reverse=True)
    return [{"year": key, "activities": groups[key]} for key in ordered]
