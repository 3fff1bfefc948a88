from fastapi import APIRouter, Body, Depends, File, Form, Request, UploadFile
from sqlalchemy.orm import Session
from typing import List, Optional
import logging

from eteeap.auth.dependencies import get_current_admin
from eteeap.database import get_db
from eteeap.models.user import User
from eteeap.schemas.admin import (
    ActivityLogOut,
    ApplicationStatusUpdate,
    DocumentStatusUpdate,
    RemarkCreate,
    RemarkOut,
    SupportedStatusKeys,
    VerifyFileRequest,
)
from eteeap.services import admin_service, profile_service
from eteeap.utils.upload import DEFAULT_PROFILE_PICTURE, IMAGE_TYPES, PROFILE_SUBDIR, public_url, save_upload

router = APIRouter(
    prefix="/admin",
    tags=["Admin"]
)

logger = logging.getLogger(__name__)


# ------------------ Applications ------------------

@router.get("/applications")
def list_applications(
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin)
):
    return admin_service.list_applications(db)


@router.patch("/applications/{application_id}/status")
def update_application_status(
    application_id: int,
    data: ApplicationStatusUpdate,
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin)
):
    application = admin_service.set_application_status(db, application_id, data.status, admin.id)
    return application


@router.patch("/applications/{application_id}/documents/{document_name}/status")
def update_document_status(
    application_id: int,
    document_name: str,
    data: DocumentStatusUpdate,
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin)
):
    application = admin_service.set_document_status(
        db, application_id, document_name, data.status, data.remark, admin.id
    )
    return application


@router.post("/applications/{application_id}/verify/{file_key}")
def verify_file(
    application_id: int,
    file_key: str,
    data: Optional[VerifyFileRequest] = Body(None),
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin)
):
    verified = data.verified if data is not None else None
    return admin_service.verify_file(db, application_id, file_key, verified, admin.id)


@router.delete("/applications/{application_id}")
def delete_application(
    application_id: int,
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin)
):
    deleted = admin_service.delete_application(db, application_id, admin.id)
    return {"message": "Application deleted", "deleted": deleted}


# ------------------ Document remarks ------------------

@router.get("/applications/{application_id}/remarks/{document_name}", response_model=RemarkOut)
def get_remark(
    application_id: int,
    document_name: str,
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin)
):
    return admin_service.latest_remark(db, application_id, document_name)


@router.post("/applications/{application_id}/remarks/{document_name}", response_model=RemarkOut)
def add_remark(
    application_id: int,
    document_name: str,
    data: RemarkCreate,
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin)
):
    return admin_service.add_remark(db, application_id, document_name, data.remark, admin.id)


@router.get("/document-status-keys", response_model=SupportedStatusKeys)
def document_status_keys(
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin)
):
    return {"supported": admin_service.document_status_keys(db)}


# ------------------ Activity & dashboard ------------------

@router.get("/activity-logs", response_model=List[ActivityLogOut])
def activity_logs(
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin)
):
    return admin_service.list_activity_logs(db)


@router.get("/dashboard-stats")
def dashboard_stats(
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin)
):
    return admin_service.dashboard_stats(db)


# ------------------ Admin profile ------------------

def _admin_profile(request: Request, admin: User) -> dict:
    return {
        "id": admin.id,
        "fullname": admin.fullname,
        "email": admin.email,
        "role": admin.role,
        "profile_picture": public_url(request, admin.profile_picture, DEFAULT_PROFILE_PICTURE),
    }


@router.get("/profile")
def get_profile(request: Request, admin: User = Depends(get_current_admin)):
    return _admin_profile(request, admin)


@router.put("/profile")
def update_profile(
    request: Request,
    fullname: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    password: Optional[str] = Form(None),
    profile_picture: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin)
):
    picture_path = None
    if profile_picture is not None and profile_picture.filename:
        picture_path = save_upload(profile_picture, PROFILE_SUBDIR, IMAGE_TYPES)

    admin = profile_service.update_profile(db, admin, fullname, email, password, picture_path)
    return {"message": "Profile updated", "user": _admin_profile(request, admin)}
