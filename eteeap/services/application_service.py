# eteeap/services/application_service.py
import logging
from typing import Any, Dict, List, Mapping, Optional

from fastapi import HTTPException, UploadFile, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from eteeap.models.application import Application
from eteeap.models.document_remark import DocumentRemark
from eteeap.models.user import User
from eteeap.models.verified_file import VerifiedFile
from eteeap.services.activity_logger import log_activity
from eteeap.utils.documents import DOCUMENT_KEYS, is_document_key
from eteeap.utils.live_schema import live_applications_table
from eteeap.utils.upload import APPLICATION_SUBDIR, save_upload

logger = logging.getLogger(__name__)

APPLICANT_FIELDS = (
    "program_name",
    "full_name",
    "email",
    "phone",
    "marital_status",
    "is_business_owner",
    "business_name",
)


def _summary(application: Application) -> Dict[str, Any]:
    return {
        "id": application.id,
        "program_name": application.program_name,
        "full_name": application.full_name,
        "email": application.email,
        "phone": application.phone,
        "status": application.status,
        "created_at": application.created_at,
        "updated_at": application.updated_at,
    }


def _draft(application: Application) -> Dict[str, Any]:
    data = _summary(application)
    data.update({field: getattr(application, field) for field in APPLICANT_FIELDS})
    data.update({key: getattr(application, key) for key in DOCUMENT_KEYS})
    return data


def list_own_applications(db: Session, user_id: int) -> List[Dict[str, Any]]:
    applications = db.query(Application).filter(
        Application.user_id == user_id,
        Application.is_draft.is_(False),
    ).order_by(Application.created_at.desc(), Application.id.desc()).all()
    return [_summary(a) for a in applications]


def application_detail(db: Session, user_id: int, application_id: int) -> Dict[str, Any]:
    """
    The caller's own application with the latest remark per document and a
    `<key>_verified` boolean for every known document.
    """
    table = live_applications_table(db)
    row = db.execute(
        select(table).where(table.c.id == application_id, table.c.user_id == user_id)
    ).mappings().first()
    if row is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Application not found")

    remarks = db.query(DocumentRemark).filter(
        DocumentRemark.application_id == application_id
    ).order_by(DocumentRemark.created_at.desc(), DocumentRemark.id.desc()).all()

    latest_remarks: Dict[str, Dict[str, Any]] = {}
    for remark in remarks:
        if remark.document_name not in latest_remarks:
            latest_remarks[remark.document_name] = {"remark": remark.remark, "date": remark.created_at}

    verified_keys = {
        key for (key,) in db.query(VerifiedFile.file_key).filter(VerifiedFile.application_id == application_id).all()
    }
    verified = {f"{key}_verified": key in verified_keys for key in DOCUMENT_KEYS}
    for key in verified_keys - set(DOCUMENT_KEYS):
        verified[f"{key}_verified"] = True

    return {"application": dict(row), "remarks": latest_remarks, "verified": verified}


# ------------------ Drafts & submission ------------------

def list_drafts(db: Session, user_id: int) -> List[Dict[str, Any]]:
    drafts = db.query(Application).filter(
        Application.user_id == user_id,
        Application.is_draft.is_(True),
    ).order_by(Application.created_at.desc(), Application.id.desc()).all()
    return [_draft(d) for d in drafts]


def _own_draft(db: Session, user_id: int, draft_id: int) -> Application:
    draft = db.query(Application).filter(
        Application.id == draft_id,
        Application.user_id == user_id,
        Application.is_draft.is_(True),
    ).first()
    if not draft:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Draft not found")
    return draft


def delete_draft(db: Session, user: User, draft_id: int) -> None:
    draft = _own_draft(db, user.id, draft_id)
    db.delete(draft)
    db.commit()
    log_activity(db, user.id, user.role, "delete_draft", f"Deleted draft {draft_id}")


def submit_application(
    db: Session,
    user: User,
    fields: Mapping[str, Any],
    files: Mapping[str, Optional[UploadFile]],
    is_draft: bool = False,
    draft_id: Optional[int] = None,
) -> Application:
    """
    Save a draft or a final submission. Continuing a draft updates it in
    place; fields and files left out keep their previous values.
    """
    application = _own_draft(db, user.id, draft_id) if draft_id is not None else Application(user_id=user.id)

    if not is_draft:
        # Fields left out of the form keep the draft's values
        missing = [
            name for name in ("program_name", "full_name", "email")
            if not (fields.get(name) if fields.get(name) is not None else getattr(application, name))
        ]
        if missing:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Missing required fields: {', '.join(missing)}"
            )

    for name in APPLICANT_FIELDS:
        value = fields.get(name)
        if value is not None:
            setattr(application, name, value)

    for key, upload in files.items():
        if upload is None or not upload.filename:
            continue
        if not is_document_key(key):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Invalid document name: {key}")
        setattr(application, key, save_upload(upload, APPLICATION_SUBDIR))

    application.is_draft = is_draft
    if not is_draft:
        application.status = "Pending"

    if draft_id is None:
        db.add(application)
    db.commit()
    db.refresh(application)

    if is_draft:
        log_activity(db, user.id, user.role, "save_draft", f"Saved draft {application.id} for {application.program_name or 'no program'}")
    else:
        log_activity(db, user.id, user.role, "submit_application", f"Submitted application {application.id} for {application.program_name}")
    return application


def resubmit_document(db: Session, user: User, application_id: int, document_name: str, upload: Optional[UploadFile]) -> Application:
    if not is_document_key(document_name):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid document_name")
    if upload is None or not upload.filename:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="File is required")

    application = db.query(Application).filter(
        Application.id == application_id,
        Application.user_id == user.id,
    ).first()
    if not application:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Application not found")

    setattr(application, document_name, save_upload(upload, APPLICATION_SUBDIR))
    db.add(DocumentRemark(
        application_id=application.id,
        document_name=document_name,
        remark=f"User resubmitted {document_name}",
    ))
    db.commit()
    db.refresh(application)

    log_activity(db, user.id, user.role, "resubmit_document", f"Resubmitted '{document_name}' for application {application.id}")
    return application
