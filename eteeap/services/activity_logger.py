# eteeap/services/activity_logger.py
import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from eteeap.config import settings
from eteeap.models.activity_log import ActivityLog
from eteeap.models.user import User

logger = logging.getLogger(__name__)


def _fallback_actor_id(db: Session) -> Optional[int]:
    if settings.SYSTEM_ACTOR_ID is not None:
        return settings.SYSTEM_ACTOR_ID
    admin = db.query(User.id).filter(User.role == "admin").order_by(User.id).first()
    return admin[0] if admin else None


def log_activity(db: Session, user_id: Optional[int], role: str, action: str, details: str) -> Optional[ActivityLog]:
    """
    Append an audit row. When no actor is given the configured system actor
    is used, otherwise the first administrator; with neither, nothing is
    written. Failures are logged and rolled back, never raised.
    """
    try:
        uid = user_id if user_id is not None else _fallback_actor_id(db)
        if uid is None:
            logger.warning(f"log_activity: no actor for '{action}' and no admin user found; skipping")
            return None

        entry = ActivityLog(user_id=uid, role=role, action=action, details=details)
        db.add(entry)
        db.commit()
        db.refresh(entry)
        return entry
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Activity log error for '{action}': {e}")
        return None
