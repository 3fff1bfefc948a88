from fastapi import APIRouter, Depends, Form, Request
from sqlalchemy.orm import Session
from starlette.datastructures import UploadFile as StarletteUploadFile
from typing import Optional

from eteeap.auth.dependencies import get_current_user
from eteeap.database import get_db
from eteeap.models.user import User
from eteeap.services import application_service
from eteeap.utils.documents import DOCUMENT_KEYS

router = APIRouter(
    prefix="/submit_application",
    tags=["Applications"]
)


@router.post("")
async def submit_application(
    request: Request,
    program_name: Optional[str] = Form(None),
    full_name: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    phone: Optional[str] = Form(None),
    marital_status: Optional[str] = Form(None),
    is_business_owner: Optional[bool] = Form(None),
    business_name: Optional[str] = Form(None),
    is_draft: bool = Form(False),
    draft_id: Optional[int] = Form(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Multipart submission. Each known document key may carry one file;
    `is_draft` saves without the final-submission checks and `draft_id`
    continues an existing draft.
    """
    form = await request.form()
    files = {
        key: form.get(key)
        for key in DOCUMENT_KEYS
        if isinstance(form.get(key), StarletteUploadFile)
    }
    fields = {
        "program_name": program_name,
        "full_name": full_name,
        "email": email,
        "phone": phone,
        "marital_status": marital_status,
        "is_business_owner": is_business_owner,
        "business_name": business_name,
    }

    application = application_service.submit_application(
        db, current_user, fields, files, is_draft=is_draft, draft_id=draft_id
    )
    return {
        "success": True,
        "message": "Draft saved" if is_draft else "Application submitted",
        "application_id": application.id,
    }


@router.get("/drafts")
def list_drafts(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return application_service.list_drafts(db, current_user.id)


@router.delete("/drafts/{draft_id}")
def delete_draft(
    draft_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    application_service.delete_draft(db, current_user, draft_id)
    return {"success": True, "message": "Draft deleted"}
