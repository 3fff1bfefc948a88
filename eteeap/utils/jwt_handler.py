# eteeap/utils/jwt_handler.py
from datetime import datetime, timedelta
from typing import Optional
import logging

from jose import JWTError, jwt

from eteeap.config import settings

logger = logging.getLogger(__name__)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create the signed session token handed out on login
    """
    to_encode = data.copy()

    if expires_delta:
        expire = datetime.utcnow() + expires_delta
    else:
        expire = datetime.utcnow() + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode.update({
        "exp": expire,
        "iat": datetime.utcnow(),
        "type": "access"
    })

    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def verify_token(token: str) -> Optional[dict]:
    """
    Verify a session token, returning its payload or None
    """
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError as e:
        logger.warning(f"JWT verification failed: {str(e)}")
        return None


def create_state_token(data: dict, minutes: int = 10) -> str:
    """Short-lived signed value round-tripped through the OAuth provider."""
    return create_access_token({**data, "purpose": "oauth_state"}, timedelta(minutes=minutes))


def read_state_token(token: Optional[str]) -> dict:
    if not token:
        return {}
    payload = verify_token(token)
    if not payload or payload.get("purpose") != "oauth_state":
        return {}
    return payload
