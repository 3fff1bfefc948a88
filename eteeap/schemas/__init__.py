from .auth import (
    SignupRequest,
    LoginRequest,
    CheckEmailRequest,
    ForgotPasswordRequest,
    ResetPasswordRequest,
    UserOut,
    AuthResponse,
    GoogleProfile,
)
from .admin import (
    ApplicationStatusUpdate,
    DocumentStatusUpdate,
    VerifyFileRequest,
    RemarkCreate,
    RemarkOut,
    ActivityLogOut,
    SupportedStatusKeys,
)
from .notification import NotificationOut, MarkReadRequest

__all__ = [
    "SignupRequest",
    "LoginRequest",
    "CheckEmailRequest",
    "ForgotPasswordRequest",
    "ResetPasswordRequest",
    "UserOut",
    "AuthResponse",
    "GoogleProfile",
    "ApplicationStatusUpdate",
    "DocumentStatusUpdate",
    "VerifyFileRequest",
    "RemarkCreate",
    "RemarkOut",
    "ActivityLogOut",
    "SupportedStatusKeys",
    "NotificationOut",
    "MarkReadRequest",
]
