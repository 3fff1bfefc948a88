# eteeap/services/auth_service.py
import logging
from datetime import datetime, timedelta
from typing import Optional

from fastapi import HTTPException, status
from sqlalchemy import func
from sqlalchemy.orm import Session

from eteeap.config import settings
from eteeap.models.password_reset import PasswordReset
from eteeap.models.user import User
from eteeap.schemas.auth import GoogleProfile
from eteeap.services.activity_logger import log_activity
from eteeap.services.email_service import build_reset_link, send_password_reset_email
from eteeap.utils.hash import generate_reset_token, hash_password, random_password, verify_password
from eteeap.utils.jwt_handler import create_access_token

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


def find_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(func.lower(User.email) == normalize_email(email)).first()


def public_user(user: User) -> dict:
    """User fields safe to hand back to a client"""
    return {
        "id": user.id,
        "fullname": user.fullname,
        "email": user.email,
        "role": user.role,
        "profile_picture": user.profile_picture,
    }


def issue_session_token(user: User) -> str:
    return create_access_token(data={"sub": str(user.id), "role": user.role})


def signup(db: Session, fullname: str, email: str, password: str) -> User:
    normalized_email = normalize_email(email)
    logger.info(f"Signup started for: {normalized_email}")

    if find_user_by_email(db, normalized_email):
        logger.warning(f"Email already exists: {normalized_email}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email already exists")

    user = User(
        fullname=fullname.strip(),
        email=normalized_email,
        password=hash_password(password),
        role="user",
    )
    db.add(user)
    db.commit()
    db.refresh(user)

    log_activity(db, user.id, "user", "signup", f"User signed up: {normalized_email}")
    return user


def login(db: Session, email: str, password: str) -> User:
    user = find_user_by_email(db, email)
    if not user or not verify_password(password, user.password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        )

    log_activity(db, user.id, user.role, "login", "User logged in")
    return user


async def request_password_reset(db: Session, email: str) -> PasswordReset:
    """
    Persist a random single-use token and mail the reset link. Unknown
    emails are reported as 404.
    """
    user = find_user_by_email(db, email)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Email not found")

    record = PasswordReset(
        user_id=user.id,
        token=generate_reset_token(),
        expires_at=datetime.utcnow() + timedelta(minutes=settings.RESET_TOKEN_EXPIRE_MINUTES),
    )
    db.add(record)
    db.commit()
    db.refresh(record)

    sent = await send_password_reset_email(
        to_email=user.email,
        name=user.fullname,
        reset_link=build_reset_link(record.token),
    )
    if not sent:
        logger.warning(f"Reset token stored but email delivery failed for user {user.id}")

    log_activity(db, user.id, user.role, "forgot_password_email_sent", "Sent password reset email")
    return record


def consume_password_reset(db: Session, token: str, new_password: str) -> User:
    if not token or not new_password:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Token and new password required")

    record = db.query(PasswordReset).filter(PasswordReset.token == token).first()
    if not record:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid or expired token")

    if record.expires_at < datetime.utcnow():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Token has expired")

    user = db.query(User).filter(User.id == record.user_id).first()
    if not user:
        db.delete(record)
        db.commit()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid or expired token")

    user.password = hash_password(new_password)
    db.delete(record)
    db.commit()

    log_activity(db, user.id, user.role, "reset_password", "User reset password via token")
    return user


def federated_login(db: Session, profile: GoogleProfile, signup_intent: bool = False) -> User:
    """
    Resolve a Google profile to a local account. Known emails log in (and get
    the google id linked); unknown ones are created only when the flow was
    started as a signup.
    """
    if not profile.email:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="No email returned by Google")

    user = find_user_by_email(db, profile.email)
    if user:
        if not user.google_id:
            user.google_id = profile.id
            db.commit()
            db.refresh(user)
        log_activity(db, user.id, user.role, "google_login", "Logged in with Google")
        return user

    if not signup_intent:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Email not registered")

    normalized_email = normalize_email(profile.email)
    user = User(
        fullname=profile.name or normalized_email.split("@")[0],
        email=normalized_email,
        password=hash_password(random_password()),
        role="user",
        google_id=profile.id,
    )
    db.add(user)
    db.commit()
    db.refresh(user)

    log_activity(db, user.id, "user", "google_signup", f"User signed up with Google: {normalized_email}")
    return user


def ensure_builtin_admin(db: Session) -> Optional[User]:
    """Create the built-in administrator when missing. Returns it only if created."""
    if find_user_by_email(db, settings.ADMIN_EMAIL):
        logger.info(f"Admin account already exists: {settings.ADMIN_EMAIL}")
        return None

    admin = User(
        fullname=settings.ADMIN_FULLNAME,
        email=normalize_email(settings.ADMIN_EMAIL),
        password=hash_password(settings.ADMIN_PASSWORD),
        role="admin",
    )
    db.add(admin)
    db.commit()
    db.refresh(admin)
    logger.info(f"Built-in admin account created: {admin.email}")

    log_activity(db, admin.id, "admin", "create_admin", f"Admin account created: {admin.email}")
    return admin
