import json
import logging
from typing import Optional
from urllib.parse import urlparse

from fastapi import APIRouter, Depends, HTTPException, Response, status
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy.orm import Session

from eteeap.auth.dependencies import SESSION_COOKIE, get_current_user
from eteeap.config import settings
from eteeap.database import get_db
from eteeap.models.user import User
from eteeap.schemas.auth import (
    AuthResponse,
    CheckEmailRequest,
    ForgotPasswordRequest,
    LoginRequest,
    ResetPasswordRequest,
    SignupRequest,
    UserOut,
)
from eteeap.services import auth_service, google_oauth
from eteeap.services.activity_logger import log_activity
from eteeap.utils.jwt_handler import read_state_token

router = APIRouter(
    prefix="/auth",
    tags=["Authentication"]
)

logger = logging.getLogger(__name__)

NOT_REGISTERED_MESSAGE = "Email not registered or Google Authentication Failed"


def _set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=SESSION_COOKIE,
        value=token,
        httponly=True,
        samesite="lax",
        secure=not settings.DEBUG and settings.FRONTEND_URL.startswith("https"),
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )


def _frontend_origin() -> str:
    parsed = urlparse(settings.FRONTEND_URL)
    return f"{parsed.scheme}://{parsed.netloc}"


def _script_json(value) -> str:
    # Keeps user-supplied text from closing the surrounding <script> block
    return (
        json.dumps(value, default=str)
        .replace("<", "\\u003c")
        .replace(">", "\\u003e")
        .replace("&", "\\u0026")
    )


def _popup_response(payload: dict, token: Optional[str] = None) -> HTMLResponse:
    """Hand the OAuth result back to the frontend window that opened the popup."""
    response = HTMLResponse(
        "<script>"
        f"window.opener.postMessage({_script_json(payload)}, {_script_json(_frontend_origin())});"
        "window.close();"
        "</script>"
    )
    if token:
        _set_session_cookie(response, token)
    return response


# ------------------ Credentials ------------------

@router.post("/signup", response_model=AuthResponse)
def signup(data: SignupRequest, db: Session = Depends(get_db)):
    user = auth_service.signup(db, data.fullname, data.email, data.password)
    return {"success": True, "message": "Signup successful!", "user": user}


@router.post("/login", response_model=AuthResponse)
def login(data: LoginRequest, response: Response, db: Session = Depends(get_db)):
    user = auth_service.login(db, data.email, data.password)
    token = auth_service.issue_session_token(user)
    _set_session_cookie(response, token)
    return {
        "success": True,
        "message": "Login successful",
        "user": user,
        "access_token": token,
        "token_type": "bearer",
    }


@router.post("/logout")
def logout(response: Response):
    response.delete_cookie(SESSION_COOKIE)
    return {"success": True, "message": "Logged out"}


@router.get("/me", response_model=UserOut)
def me(current_user: User = Depends(get_current_user)):
    return current_user


@router.post("/check-email")
def check_email(data: CheckEmailRequest, db: Session = Depends(get_db)):
    user = auth_service.find_user_by_email(db, data.email)
    if not user:
        return {"exists": False}
    return {"exists": True, "user": auth_service.public_user(user)}


# ------------------ Password reset ------------------

@router.post("/forgot-password")
async def forgot_password(data: ForgotPasswordRequest, db: Session = Depends(get_db)):
    await auth_service.request_password_reset(db, data.email)
    return {"success": True, "message": "Reset link sent to your email."}


@router.post("/reset-password")
def reset_password(data: ResetPasswordRequest, db: Session = Depends(get_db)):
    auth_service.consume_password_reset(db, data.token, data.new_password)
    return {"success": True, "message": "Password successfully updated!"}


# ------------------ Google OAuth ------------------

@router.get("/google")
async def google_login():
    return RedirectResponse(google_oauth.authorization_url(signup=False))


@router.get("/google/signup")
async def google_signup():
    return RedirectResponse(google_oauth.authorization_url(signup=True))


@router.get("/google/callback")
async def google_callback(
    code: Optional[str] = None,
    state: Optional[str] = None,
    error: Optional[str] = None,
    db: Session = Depends(get_db)
):
    if error or not code:
        logger.warning(f"Google callback without code: {error}")
        return _popup_response({"message": NOT_REGISTERED_MESSAGE})

    signup_intent = bool(read_state_token(state).get("signup"))

    try:
        profile = await google_oauth.fetch_profile(code)
        user = auth_service.federated_login(db, profile, signup_intent=signup_intent)
    except HTTPException as e:
        logger.info(f"Google login rejected: {e.detail}")
        if e.status_code == status.HTTP_403_FORBIDDEN:
            return _popup_response({"message": NOT_REGISTERED_MESSAGE})
        return _popup_response({"message": "Login failed. Try again."})

    if signup_intent:
        return _popup_response({"message": "Signup successful. Please login."})

    log_activity(db, user.id, user.role, "google_login_callback", "Google login callback")
    token = auth_service.issue_session_token(user)
    return _popup_response({**auth_service.public_user(user), "access_token": token}, token=token)


@router.get("/failure")
async def google_failure():
    return _popup_response({"message": NOT_REGISTERED_MESSAGE})
