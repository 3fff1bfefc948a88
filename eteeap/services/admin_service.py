# eteeap/services/admin_service.py
import logging
from collections import Counter, defaultdict
from datetime import datetime
from typing import Any, Dict, List, Optional, Set

from fastapi import HTTPException, status
from sqlalchemy import update
from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.orm import Session

from eteeap.models.activity_log import ActivityLog
from eteeap.models.application import Application
from eteeap.models.document_remark import DocumentRemark
from eteeap.models.user import User
from eteeap.models.verified_file import VerifiedFile
from eteeap.utils.documents import (
    DOCUMENT_KEYS,
    DOCUMENT_STATUSES,
    REQUIRED_DOCUMENT_KEYS,
    is_document_key,
    normalize_application_status,
    verified_flags,
)
from eteeap.utils.live_schema import (
    fetch_application_row,
    fetch_application_rows,
    is_unknown_column_error,
    live_applications_table,
    remark_column,
    status_column,
    supported_status_keys,
)
from eteeap.services.activity_logger import log_activity

logger = logging.getLogger(__name__)

LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Application not found")


def verified_keys_by_application(db: Session, application_ids: Optional[List[int]] = None) -> Dict[int, Set[str]]:
    query = db.query(VerifiedFile.application_id, VerifiedFile.file_key)
    if application_ids is not None:
        if not application_ids:
            return {}
        query = query.filter(VerifiedFile.application_id.in_(application_ids))

    verified: Dict[int, Set[str]] = defaultdict(set)
    for application_id, file_key in query.all():
        verified[application_id].add(file_key)
    return verified


def with_verified_flags(db: Session, row: Dict[str, Any]) -> Dict[str, Any]:
    keys = verified_keys_by_application(db, [row["id"]]).get(row["id"], set())
    return {**row, **verified_flags(keys)}


# ------------------ Applications ------------------

def list_applications(db: Session) -> List[Dict[str, Any]]:
    """Submitted applications, newest first, each with `<key>_verified` flags."""
    rows = fetch_application_rows(db)
    verified = verified_keys_by_application(db)
    return [{**row, **verified_flags(verified.get(row["id"], set()))} for row in rows]


def set_application_status(db: Session, application_id: int, new_status: Optional[str], actor_id: Optional[int]) -> Dict[str, Any]:
    if not new_status:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Status is required")

    normalized = normalize_application_status(new_status)
    if normalized is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid status value")

    application = db.query(Application).filter(Application.id == application_id).first()
    if not application:
        raise _not_found()

    application.status = normalized
    db.commit()

    log_activity(
        db, actor_id, "admin", "update_application_status",
        f"Set application {application_id} status to {normalized}"
    )
    return fetch_application_row(db, application_id)


def set_document_status(
    db: Session,
    application_id: int,
    document_name: Optional[str],
    new_status: Optional[str],
    remark: Optional[str],
    actor_id: Optional[int],
) -> Dict[str, Any]:
    """
    Write `<document>_status` (and `<document>_remark` when present) on an
    application. Deployments without the status column get the unchanged
    row back.
    """
    if not document_name or not new_status:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Document name and status are required")

    normalized = str(new_status).strip().lower()
    if normalized not in DOCUMENT_STATUSES:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid status value")

    if not is_document_key(document_name):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid document name")

    table = live_applications_table(db)
    if status_column(document_name) not in table.c:
        logger.info(f"applications has no {status_column(document_name)} column; leaving application {application_id} unchanged")
        row = fetch_application_row(db, application_id, table)
        if row is None:
            raise _not_found()
        return row

    values = {status_column(document_name): normalized}
    if remark_column(document_name) in table.c:
        values[remark_column(document_name)] = remark or None
    if "updated_at" in table.c:
        values["updated_at"] = datetime.utcnow()

    try:
        result = db.execute(update(table).where(table.c.id == application_id).values(values))
        db.commit()
    except DBAPIError as e:
        db.rollback()
        if is_unknown_column_error(e):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Document does not support status updates")
        raise

    if result.rowcount == 0:
        raise _not_found()

    log_activity(
        db, actor_id, "admin", "update_document_status",
        f"Updated document '{document_name}' status to '{normalized}' on application {application_id}"
    )
    return fetch_application_row(db, application_id, table)


def document_status_keys(db: Session) -> List[str]:
    return supported_status_keys(live_applications_table(db))


def delete_application(db: Session, application_id: int, actor_id: Optional[int]) -> Dict[str, Any]:
    snapshot = fetch_application_row(db, application_id)
    if snapshot is None:
        raise _not_found()

    db.query(VerifiedFile).filter(VerifiedFile.application_id == application_id).delete(synchronize_session=False)
    db.query(DocumentRemark).filter(DocumentRemark.application_id == application_id).delete(synchronize_session=False)
    db.query(Application).filter(Application.id == application_id).delete(synchronize_session=False)
    db.commit()

    log_activity(db, actor_id, "admin", "delete_application", f"Deleted application {application_id}")
    return snapshot


# ------------------ File verification ------------------

def _verification_exists(db: Session, application_id: int, file_key: str) -> bool:
    return db.query(VerifiedFile.id).filter(
        VerifiedFile.application_id == application_id,
        VerifiedFile.file_key == file_key,
    ).first() is not None


def _insert_verification(db: Session, application_id: int, file_key: str, actor_id: Optional[int]) -> bool:
    """Insert the (application, key) marker; False when it already existed."""
    if _verification_exists(db, application_id, file_key):
        return False
    db.add(VerifiedFile(application_id=application_id, file_key=file_key, verified_by=actor_id))
    try:
        db.commit()
    except IntegrityError:
        # Concurrent insert won the unique constraint
        db.rollback()
        return False
    return True


def verify_file(
    db: Session,
    application_id: int,
    file_key: str,
    verified: Optional[int],
    actor_id: Optional[int],
) -> Dict[str, Any]:
    """
    verified=1 marks the document verified, verified=0 clears the mark.
    With no flag the call only ever marks, answering "Already verified" when
    the mark exists.
    """
    if not is_document_key(file_key):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid document name")

    table = live_applications_table(db)
    if fetch_application_row(db, application_id, table) is None:
        raise _not_found()

    if verified is None:
        if not _insert_verification(db, application_id, file_key, actor_id):
            return {"message": "Already verified"}
        log_activity(db, actor_id, "admin", "verify_file", f"Verified file '{file_key}' for application {application_id}")
    elif int(verified) == 1:
        if _insert_verification(db, application_id, file_key, actor_id):
            log_activity(db, actor_id, "admin", "verify_file", f"Verified file '{file_key}' for application {application_id}")
    else:
        db.query(VerifiedFile).filter(
            VerifiedFile.application_id == application_id,
            VerifiedFile.file_key == file_key,
        ).delete(synchronize_session=False)
        db.commit()
        log_activity(db, actor_id, "admin", "unverify_file", f"Un-verified file '{file_key}' for application {application_id}")

    return with_verified_flags(db, fetch_application_row(db, application_id, table))


# ------------------ Document remarks ------------------

def latest_remark(db: Session, application_id: int, document_name: str) -> Dict[str, Any]:
    remark = db.query(DocumentRemark).filter(
        DocumentRemark.application_id == application_id,
        DocumentRemark.document_name == document_name,
    ).order_by(DocumentRemark.created_at.desc(), DocumentRemark.id.desc()).first()

    if not remark:
        return {"remark": "", "created_at": None}
    return {"remark": remark.remark, "created_at": remark.created_at}


def add_remark(db: Session, application_id: int, document_name: str, remark: str, actor_id: Optional[int]) -> Dict[str, Any]:
    if not db.query(Application.id).filter(Application.id == application_id).first():
        raise _not_found()

    db.add(DocumentRemark(application_id=application_id, document_name=document_name, remark=remark))
    db.commit()

    log_activity(
        db, actor_id, "admin", "add_document_remark",
        f"Added remark for document '{document_name}' on application {application_id}: {remark}"
    )
    return latest_remark(db, application_id, document_name)


# ------------------ Activity & dashboard ------------------

def list_activity_logs(db: Session, limit: int = 1000) -> List[Dict[str, Any]]:
    rows = (
        db.query(ActivityLog, User.fullname)
        .outerjoin(User, User.id == ActivityLog.user_id)
        .order_by(ActivityLog.created_at.desc(), ActivityLog.id.desc())
        .limit(limit)
        .all()
    )
    return [{
        "id": log.id,
        "date": log.created_at.strftime(LOG_DATE_FORMAT) if log.created_at else "",
        "user": fullname or "Unknown User",
        "role": log.role,
        "action": log.action,
        "details": log.details or "",
    } for log, fullname in rows]


def dashboard_stats(db: Session) -> Dict[str, Any]:
    applications = db.query(Application).filter(Application.is_draft.is_(False)).all()
    verified = verified_keys_by_application(db)

    status_counts = Counter((a.status or "").lower() for a in applications)

    incomplete = 0
    awaiting = 0
    for application in applications:
        keys = verified.get(application.id, set())
        if any(key not in keys for key in REQUIRED_DOCUMENT_KEYS):
            incomplete += 1
        if any(getattr(application, key) and key not in keys for key in DOCUMENT_KEYS):
            awaiting += 1

    programs = Counter(a.program_name or "N/A" for a in applications)
    months = Counter(a.created_at.strftime("%Y-%m") for a in applications if a.created_at)

    return {
        "totalApplicants": len(applications),
        "accepted": status_counts.get("accepted", 0),
        "rejected": status_counts.get("rejected", 0),
        "pendingVerifications": status_counts.get("pending", 0),
        "incompleteRequirements": incomplete,
        "docsAwaiting": awaiting,
        "programDistribution": [{"program": p, "count": c} for p, c in programs.most_common()],
        "monthlyApplicants": [{"month": m, "count": months[m]} for m in sorted(months)],
    }
