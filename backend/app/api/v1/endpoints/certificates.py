"""
Certificate API Endpoints (student side)

- Own certificate list
- Upload (multipart file + fields), created as pending
- Recommendations from approved certificates
"""

from typing import Any, Dict, Optional
from fastapi import APIRouter, Depends, File, Form, UploadFile, status

from app.core.app_state import AppState
from app.modules.auth.dependencies import get_app_state, get_current_student
from app.models.enums import Category
from app.services.certificate_workflow import CertificateWorkflow
from app.services.recommendations import recommend
from app.utils.fallback import load_or_empty, with_warning

router = APIRouter()


@router.get("")
async def list_my_certificates(
    student: Dict[str, Any] = Depends(get_current_student),
    state: AppState = Depends(get_app_state)
):
    """The signed-in student's certificates, newest first"""
    certificates, warning = await load_or_empty(
        CertificateWorkflow(state.store).list_for_student(student["id"]), [], "list_certificates"
    )
    return with_warning({"certificates": certificates, "total": len(certificates)}, warning)


@router.post("", status_code=status.HTTP_201_CREATED)
async def upload_certificate(
    title: str = Form(...),
    description: Optional[str] = Form(None),
    category: str = Form(Category.ACADEMIC.value),
    file: UploadFile = File(...),
    student: Dict[str, Any] = Depends(get_current_student),
    state: AppState = Depends(get_app_state)
):
    """Upload a certificate file; the certificate starts as pending"""
    content = await file.read()
    return await CertificateWorkflow(state.store).upload(
        student,
        title=title,
        description=description,
        category=category,
        file_name=file.filename,
        content=content,
    )


@router.get("/recommendations")
async def get_recommendations(
    student: Dict[str, Any] = Depends(get_current_student),
    state: AppState = Depends(get_app_state)
):
    certificates, warning = await load_or_empty(
        CertificateWorkflow(state.store).list_for_student(student["id"]), [], "recommendations"
    )
    return with_warning({"recommendations": recommend(certificates)}, warning)
