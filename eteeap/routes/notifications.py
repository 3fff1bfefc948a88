from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from sqlalchemy.orm import Session
from typing import List, Optional

from eteeap.auth.dependencies import get_current_user
from eteeap.database import get_db
from eteeap.models.user import User
from eteeap.schemas.notification import MarkReadRequest, NotificationOut
from eteeap.services import application_service, notification_service

router = APIRouter(
    prefix="/notifications",
    tags=["Notifications"]
)


@router.get("", response_model=List[NotificationOut])
def list_notifications(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return notification_service.build_notifications(db, current_user.id)


@router.post("/mark-read")
def mark_read(
    data: MarkReadRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    notification_service.mark_read(db, current_user.id, data.notification_key)
    return {"success": True}


@router.post("/resubmit")
def resubmit_document(
    application_id: Optional[int] = Form(None),
    document_name: Optional[str] = Form(None),
    file: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    if application_id is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="application_id required")

    application = application_service.resubmit_document(db, current_user, application_id, document_name, file)
    return {
        "success": True,
        "message": "Document resubmitted",
        "file_path": getattr(application, document_name),
    }
