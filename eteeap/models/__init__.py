# eteeap/models/__init__.py

from .user import User
from .application import Application
from .verified_file import VerifiedFile
from .document_remark import DocumentRemark
from .password_reset import PasswordReset
from .activity_log import ActivityLog
from .notification_read import NotificationRead

__all__ = [
    "User",
    "Application",
    "VerifiedFile",
    "DocumentRemark",
    "PasswordReset",
    "ActivityLog",
    "NotificationRead",
]
