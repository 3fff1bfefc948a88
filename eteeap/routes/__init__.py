# Import all routes
from .auth import router as auth_router
from .admin import router as admin_router
from .profile import router as profile_router
from .notifications import router as notifications_router
from .submit_application import router as submit_application_router
from .health import router as health_router

# All routers that should be included in main app
__all__ = [
    "auth_router",
    "admin_router",
    "profile_router",
    "notifications_router",
    "submit_application_router",
    "health_router",
]
