from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from typing import Any, Dict, List, Optional, Union
from datetime import date, datetime


# ==================== Profile ====================

class ProfileUpdate(BaseModel):
    """Fields a user may change on their own profile"""
    model_config = ConfigDict(extra="forbid")

    full_name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[EmailStr] = None

    @field_validator("full_name")
    @classmethod
    def strip_name(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("Full name cannot be blank")
        return v.strip() if v is not None else v


class CustomLink(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    url: str = Field(..., min_length=1, max_length=500)
    icon: Optional[str] = None

    @field_validator("name", "url")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v.strip()


class ResumeUpdate(BaseModel):
    """Resume section of the portfolio. List fields accept a comma-separated string."""
    model_config = ConfigDict(extra="forbid")

    phone: Optional[str] = Field(None, max_length=30)
    address: Optional[str] = None
    date_of_birth: Optional[date] = None
    bio: Optional[str] = None
    skills: Optional[Union[str, List[str]]] = None
    languages: Optional[Union[str, List[str]]] = None
    interests: Optional[Union[str, List[str]]] = None
    github_url: Optional[str] = None
    linkedin_url: Optional[str] = None
    portfolio_url: Optional[str] = None
    custom_links: Optional[List[CustomLink]] = None


class ProfileResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: Optional[str] = None
    full_name: str
    email: str
    role: str
    faculty_level: Optional[str] = None
    student_id_number: Optional[str] = None
    assigned_faculty_id: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    date_of_birth: Optional[date] = None
    bio: Optional[str] = None
    skills: List[str] = []
    languages: List[str] = []
    interests: List[str] = []
    github_url: Optional[str] = None
    linkedin_url: Optional[str] = None
    portfolio_url: Optional[str] = None
    custom_links: List[Dict[str, Any]] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# ==================== Review ====================

class DecisionRequest(BaseModel):
    action: str = Field(..., description="approve or reject")
    remark: str = ""


# ==================== Activities ====================

class ActivityCreate(BaseModel):
    title: str = Field(..., max_length=255)
    description: Optional[str] = None
    category: str = "co_curricular"
    activity_type: Optional[str] = Field(None, max_length=50)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    organization: Optional[str] = Field(None, max_length=255)
    location: Optional[str] = Field(None, max_length=255)
    credits_earned: int = 0
    submit: bool = False


# ==================== Reports ====================

class ReportCreate(BaseModel):
    title: str = Field(..., max_length=255)
    description: Optional[str] = None
    report_type: str = "internal"
    parameters: Dict[str, Any] = {}
