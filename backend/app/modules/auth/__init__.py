from app.modules.auth.dependencies import (
    get_record_store,
    get_app_state,
    get_current_profile,
    get_current_student,
    get_current_reviewer,
    get_current_senior,
)

__all__ = [
    "get_record_store",
    "get_app_state",
    "get_current_profile",
    "get_current_student",
    "get_current_reviewer",
    "get_current_senior",
]
