# eteeap/services/account_service.py
import logging
from typing import Dict, List

from sqlalchemy.orm import Session

from eteeap.models.activity_log import ActivityLog
from eteeap.models.application import Application
from eteeap.models.document_remark import DocumentRemark
from eteeap.models.notification_read import NotificationRead
from eteeap.models.password_reset import PasswordReset
from eteeap.models.user import User
from eteeap.models.verified_file import VerifiedFile

logger = logging.getLogger(__name__)


def related_row_counts(db: Session, user_ids: List[int]) -> Dict[str, int]:
    if not user_ids:
        return {"applications": 0, "activity_logs": 0}
    return {
        "applications": db.query(Application).filter(Application.user_id.in_(user_ids)).count(),
        "activity_logs": db.query(ActivityLog).filter(ActivityLog.user_id.in_(user_ids)).count(),
    }


def delete_users_cascade(db: Session, user_ids: List[int]) -> Dict[str, int]:
    """
    Delete users and everything hanging off them, children first. Does not
    commit: the caller owns the transaction.
    """
    if not user_ids:
        return {}

    app_ids = [row[0] for row in db.query(Application.id).filter(Application.user_id.in_(user_ids)).all()]
    deleted = {"verified_files": 0, "document_remarks": 0, "applications": 0}

    if app_ids:
        deleted["verified_files"] = db.query(VerifiedFile).filter(
            VerifiedFile.application_id.in_(app_ids)
        ).delete(synchronize_session=False)
        deleted["document_remarks"] = db.query(DocumentRemark).filter(
            DocumentRemark.application_id.in_(app_ids)
        ).delete(synchronize_session=False)
        deleted["applications"] = db.query(Application).filter(
            Application.id.in_(app_ids)
        ).delete(synchronize_session=False)

    deleted["notification_reads"] = db.query(NotificationRead).filter(
        NotificationRead.user_id.in_([str(uid) for uid in user_ids])
    ).delete(synchronize_session=False)
    deleted["activity_logs"] = db.query(ActivityLog).filter(
        ActivityLog.user_id.in_(user_ids)
    ).delete(synchronize_session=False)
    deleted["password_resets"] = db.query(PasswordReset).filter(
        PasswordReset.user_id.in_(user_ids)
    ).delete(synchronize_session=False)
    deleted["users"] = db.query(User).filter(User.id.in_(user_ids)).delete(synchronize_session=False)

    logger.info(f"Cascade delete for users {user_ids}: {deleted}")
    return deleted
