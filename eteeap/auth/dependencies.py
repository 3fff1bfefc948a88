# eteeap/auth/dependencies.py
from typing import Optional
import logging

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from eteeap.config import settings
from eteeap.database import get_db
from eteeap.models.user import User
from eteeap.utils.jwt_handler import verify_token

logger = logging.getLogger(__name__)

SESSION_COOKIE = "access_token"
USER_ID_HEADER = "x-user-id"

bearer_scheme = HTTPBearer(auto_error=False)


def _user_id_from_token(token: Optional[str]) -> Optional[int]:
    if not token:
        return None
    payload = verify_token(token)
    if not payload or payload.get("type") != "access":
        return None
    try:
        return int(payload.get("sub"))
    except (TypeError, ValueError):
        return None


def resolve_user_id(request: Request, credentials: Optional[HTTPAuthorizationCredentials]) -> Optional[int]:
    """
    Caller identity from, in order: bearer token, session cookie, and the
    legacy x-user-id header when that shim is enabled.
    """
    if credentials is not None and credentials.scheme.lower() == "bearer":
        user_id = _user_id_from_token(credentials.credentials)
        if user_id is not None:
            return user_id

    user_id = _user_id_from_token(request.cookies.get(SESSION_COOKIE))
    if user_id is not None:
        return user_id

    if settings.ALLOW_USER_ID_HEADER:
        raw = request.headers.get(USER_ID_HEADER)
        if raw:
            try:
                return int(raw)
            except ValueError:
                logger.warning(f"Ignoring malformed {USER_ID_HEADER} header: {raw!r}")
    return None


def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db)
) -> User:
    user_id = resolve_user_id(request, credentials)
    if user_id is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")

    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    return user


def get_current_admin(current_user: User = Depends(get_current_user)) -> User:
    if current_user.role != "admin":
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required"
        )
    return current_user
