# Pydantic schemas
from app.schemas.records import (
    ProfileUpdate,
    ProfileResponse,
    ResumeUpdate,
    CustomLink,
    DecisionRequest,
    ActivityCreate,
    ReportCreate,
)

__all__ = [
    "ProfileUpdate",
    "ProfileResponse",
    "ResumeUpdate",
    "CustomLink",
    "DecisionRequest",
    "ActivityCreate",
    "ReportCreate",
]
