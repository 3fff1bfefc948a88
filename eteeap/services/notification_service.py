# eteeap/services/notification_service.py
import calendar
import logging
from datetime import datetime
from typing import Any, Dict, List

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from eteeap.models.application import Application
from eteeap.models.document_remark import DocumentRemark
from eteeap.models.notification_read import NotificationRead

logger = logging.getLogger(__name__)

PER_SOURCE_LIMIT = 50


def unix_ts(value: datetime) -> int:
    # Stored timestamps are naive UTC
    return calendar.timegm(value.timetuple())


def remark_key(remark_id: int) -> str:
    return f"remark:{remark_id}"


def status_key(application_id: int, ts: int) -> str:
    return f"status:{application_id}:{ts}"


def build_notifications(db: Session, user_id: int) -> List[Dict[str, Any]]:
    """
    Remark and status notifications for the caller's applications, newest
    first, each flagged `read` from the caller's read markers.
    """
    app_ids = [row[0] for row in db.query(Application.id).filter(
        Application.user_id == user_id,
        Application.is_draft.is_(False),
    ).all()]
    if not app_ids:
        return []

    remarks = db.query(DocumentRemark).filter(
        DocumentRemark.application_id.in_(app_ids)
    ).order_by(DocumentRemark.created_at.desc(), DocumentRemark.id.desc()).limit(PER_SOURCE_LIMIT).all()

    statuses = db.query(Application).filter(
        Application.id.in_(app_ids)
    ).order_by(Application.updated_at.desc(), Application.id.desc()).limit(PER_SOURCE_LIMIT).all()

    notifications: List[Dict[str, Any]] = []
    for r in remarks:
        ts = unix_ts(r.created_at)
        notifications.append({
            "id": r.id,
            "application_id": r.application_id,
            "document_name": r.document_name,
            "title": r.document_name,
            "message": r.remark,
            "date": r.created_at,
            "ts": ts,
            "type": "remark",
            "notification_key": remark_key(r.id),
        })
    for a in statuses:
        ts = unix_ts(a.updated_at)
        notifications.append({
            "id": a.id,
            "application_id": a.id,
            "document_name": None,
            "title": f"Application Status: {a.status}",
            "message": a.status,
            "date": a.updated_at,
            "ts": ts,
            "type": "status",
            "notification_key": status_key(a.id, ts),
        })

    notifications.sort(key=lambda n: (n["date"], n["notification_key"]), reverse=True)

    keys = [n["notification_key"] for n in notifications]
    read_keys = {
        key for (key,) in db.query(NotificationRead.notification_key).filter(
            NotificationRead.user_id == str(user_id),
            NotificationRead.notification_key.in_(keys),
        ).all()
    }
    for n in notifications:
        n["read"] = n["notification_key"] in read_keys
    return notifications


def mark_read(db: Session, user_id: int, notification_key: str) -> NotificationRead:
    if not notification_key:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="notification_key required")

    def _existing():
        return db.query(NotificationRead).filter(
            NotificationRead.user_id == str(user_id),
            NotificationRead.notification_key == notification_key,
        ).first()

    record = _existing()
    if record:
        record.read_at = datetime.utcnow()
        db.commit()
        return record

    record = NotificationRead(user_id=str(user_id), notification_key=notification_key, read_at=datetime.utcnow())
    db.add(record)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        record = _existing()
        record.read_at = datetime.utcnow()
        db.commit()
    return record
