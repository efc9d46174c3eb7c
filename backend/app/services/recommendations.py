"""
Student recommendations derived from approved certificate counts
"""

from typing import Any, Dict, List, Sequence

from app.core.config import settings
from app.models.enums import Category, CertificateStatus


def _item(id_: str, title: str, description: str, category: Category, type_: str, priority: str, action_label: str) -> Dict[str, Any]:
    return {
        "id": id_,
        "title": title,
        "description": description,
        "category": category.value,
        "type": type_,
        "priority": priority,
        "action_label": action_label,
    }


def recommend(certificates: Sequence[Dict[str, Any]], limit: int = None) -> List[Dict[str, Any]]:
    """
    Suggestions based on approved academic and co-curricular certificates.

    Academic: 3+ approved suggests advanced work, 1-2 a fundamentals course,
    none a starter workshop. Co-curricular: 2+ suggests leadership and
    competitions, 1 community service, none clubs. One general item is
    always added.
    """
    limit = limit or settings.MAX_RECOMMENDATIONS
    approved = [c for c in certificates if CertificateStatus(c["status"]) is CertificateStatus.APPROVED]
    academic = sum(1 for c in approved if Category(c["category"]) is Category.ACADEMIC)
    co_curricular = sum(1 for c in approved if Category(c["category"]) is Category.CO_CURRICULAR)

    items: List[Dict[str, Any]] = []

    if academic >= 3:
        items.append(_item(
            "1", "Advanced Data Science Certification",
            "Based on your strong academic performance, consider pursuing advanced certifications in emerging fields.",
            Category.ACADEMIC, "certification", "high", "Learn More",
        ))
        items.append(_item(
            "2", "Research Project Opportunities",
            "Join ongoing research projects to enhance your academic portfolio and gain practical experience.",
            Category.ACADEMIC, "course", "medium", "Apply",
        ))
    elif academic >= 1:
        items.append(_item(
            "3", "Programming Fundamentals Course",
            "Strengthen your technical foundation with comprehensive programming courses.",
            Category.ACADEMIC, "course", "high", "Enroll",
        ))
    else:
        items.append(_item(
            "4", "Academic Writing Workshop",
            "Start building your academic portfolio with essential writing and research skills.",
            Category.ACADEMIC, "course", "high", "Register",
        ))

    if co_curricular >= 2:
        items.append(_item(
            "5", "Leadership Development Program",
            "Your active participation in co-curricular activities makes you a great candidate for leadership roles.",
            Category.CO_CURRICULAR, "event", "high", "Apply",
        ))
        items.append(_item(
            "6", "Inter-University Competition",
            "Represent your institution in prestigious competitions and showcase your talents.",
            Category.CO_CURRICULAR, "competition", "medium", "Participate",
        ))
    elif co_curricular >= 1:
        items.append(_item(
            "7", "Community Service Initiative",
            "Expand your co-curricular involvement through meaningful community service projects.",
            Category.CO_CURRICULAR, "volunteering", "medium", "Join",
        ))
    else:
        items.append(_item(
            "8", "Student Clubs & Organizations",
            "Start your co-curricular journey by joining clubs that align with your interests.",
            Category.CO_CURRICULAR, "club", "high", "Explore",
        ))

    items.append(_item(
        "9", "Skill Assessment Workshop",
        "Identify your strengths and areas for improvement with comprehensive skill evaluation.",
        Category.ACADEMIC, "course", "low", "Schedule",
    ))

    return items[:limit]
