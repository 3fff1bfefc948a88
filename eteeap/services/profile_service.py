# eteeap/services/profile_service.py
import logging
from typing import Optional

from fastapi import HTTPException, status
from sqlalchemy import func
from sqlalchemy.orm import Session

from eteeap.models.user import User
from eteeap.services.account_service import delete_users_cascade
from eteeap.services.activity_logger import log_activity
from eteeap.utils.hash import hash_password

logger = logging.getLogger(__name__)


def update_profile(
    db: Session,
    user: User,
    fullname: Optional[str],
    email: Optional[str],
    password: Optional[str] = None,
    picture_path: Optional[str] = None,
) -> User:
    """Self-service update of the caller's own row; blank password keeps the old one."""
    if not fullname or not fullname.strip() or not email or not email.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Fullname and email required")

    normalized_email = email.strip().lower()
    taken = db.query(User.id).filter(
        func.lower(User.email) == normalized_email,
        User.id != user.id,
    ).first()
    if taken:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email already exists")

    user.fullname = fullname.strip()
    user.email = normalized_email
    if password and password.strip():
        user.password = hash_password(password)
    if picture_path:
        user.profile_picture = picture_path

    db.commit()
    db.refresh(user)

    if user.role == "admin":
        log_activity(db, user.id, "admin", "update_profile", "Admin updated profile settings")
    else:
        log_activity(db, user.id, "user", "update_profile", f"Updated profile info: fullname={user.fullname}, email={user.email}")
    return user


def update_picture(db: Session, user: User, picture_path: str) -> User:
    user.profile_picture = picture_path
    db.commit()
    db.refresh(user)

    log_activity(db, user.id, user.role, "update_profile_picture", "Updated profile picture")
    return user


def delete_account(db: Session, user: User) -> None:
    user_id = user.id
    role = user.role
    try:
        delete_users_cascade(db, [user_id])
        db.commit()
    except Exception:
        db.rollback()
        raise

    # The account's own log rows are gone; attribute the entry to the system actor
    log_activity(db, None, role, "delete_account", f"User {user_id} deleted their account")
