"""
Academic Records - transcript stats and groupings
"""

from typing import Any, Dict, List, Sequence

from app.gateway.base import RecordStore
from app.models.enums import Entity

# Display order: latest academic year, then semester, first
DISPLAY_ORDER = [("academic_year", True), ("semester", True)]


def academic_stats(records: Sequence[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Totals over records already in display order.

    current_cgpa is the cgpa of the first record; missing grade points count
    as zero in the average.
    """
    total = len(records)
    return {
        "total_credits": sum(record.get("credits") or 0 for record in records),
        "current_cgpa": (records[0].get("cgpa") or 0) if records else 0,
        "total_subjects": total,
        "average_grade_points": (
            sum(record.get("grade_points") or 0 for record in records) / total if total else 0
        ),
    }


def _grouped(records: Sequence[Dict[str, Any]], key_for) -> List[Dict[str, Any]]:
    groups: Dict[str, List[Dict[str, Any]]] = {}
    for record in records:
        groups.setdefault(key_for(record), []).append(record)
    return [{"key": key, "records": groups[key]} for key in sorted(groups, reverse=True)]


def group_by_academic_year(records: Sequence[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return _grouped(records, lambda r: r["academic_year"])


def group_by_semester(records: Sequence[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return _grouped(records, lambda r: f"{r['academic_year']} - {r['semester']}")


class AcademicRecordService:
    """Read-only transcript view for a student"""

    def __init__(self, store: RecordStore):
        self.store = store

    async def list_for_student(self, student_id: str) -> List[Dict[str, Any]]:
        return await self.store.fetch_collection(
            Entity.ACADEMIC_RECORDS, filters={"student_id": student_id}, order=DISPLAY_ORDER
        )

    async def transcript(self, student_id: str) -> Dict[str, Any]:
        records = await self.list_for_student(student_id)
        return {
            "records": records,
            "stats": academic_stats(records),
            "by_year": group_by_academic_year(records),
            "by_semester": group_by_semester(records),
        }
