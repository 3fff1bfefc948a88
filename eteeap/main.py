from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import SQLAlchemyError
import os
import logging

from eteeap.config import settings
from eteeap.database import Base, SessionLocal, check_connection, engine
from eteeap import models  # noqa: F401  registers tables on Base.metadata
from eteeap.services.auth_service import ensure_builtin_admin
from eteeap.utils.upload import APPLICATION_SUBDIR, PROFILE_SUBDIR, UPLOAD_URL_PREFIX

# Init app
app = FastAPI(title="ETEEAP Admissions Backend")

# Enable logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# CORS Setup
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    max_age=600
)

# Uploaded files
for subdir in (PROFILE_SUBDIR, APPLICATION_SUBDIR):
    os.makedirs(os.path.join(settings.UPLOAD_DIR, subdir), exist_ok=True)

app.mount(f"/{UPLOAD_URL_PREFIX}", StaticFiles(directory=settings.UPLOAD_DIR), name="uploads")
logger.info(f"Upload directory mounted at /{UPLOAD_URL_PREFIX} from {os.path.abspath(settings.UPLOAD_DIR)}")

# Route Registrations
from eteeap.routes import (  # noqa: E402
    admin_router,
    auth_router,
    health_router,
    notifications_router,
    profile_router,
    submit_application_router,
)

routers = [
    auth_router,
    admin_router,
    profile_router,
    notifications_router,
    submit_application_router,
    health_router,
]

for router in routers:
    app.include_router(router)
    logger.info(f"Included router: {router.prefix}")


# Root endpoint
@app.get("/", include_in_schema=False)
async def root():
    return {
        "status": "ok",
        "message": "ETEEAP Admissions Backend API",
        "version": "1.0.0",
        "docs": "/docs",
        "endpoints": [
            "/auth/* - Signup, login, password reset and Google sign-in",
            "/admin/* - Application review and administration",
            "/profile/* - Applicant profile and own applications",
            "/notifications/* - Remarks and status notifications",
            "/submit_application/* - Submissions and drafts",
            "/health - System health check"
        ]
    }


# Global exception handlers
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = [{"loc": list(e.get("loc", ())), "msg": e.get("msg", "")} for e in exc.errors()]
    message = errors[0]["msg"] if errors else "Invalid request"
    return JSONResponse(status_code=400, content={"detail": message, "errors": errors})


@app.exception_handler(SQLAlchemyError)
async def database_exception_handler(request: Request, exc: SQLAlchemyError):
    logger.exception(f"Database error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"detail": "Server error"})


# Startup event
@app.on_event("startup")
async def startup_event():
    logger.info("ETEEAP Admissions Backend starting up...")
    if not check_connection():
        logger.warning("Database unreachable at startup; requests will fail until it is available")
        return

    if settings.AUTO_CREATE_TABLES:
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables ensured")

    db = SessionLocal()
    try:
        ensure_builtin_admin(db)
    finally:
        db.close()
    logger.info("Server is ready to handle requests")


# Shutdown event
@app.on_event("shutdown")
async def shutdown_event():
    logger.info("ETEEAP Admissions Backend shutting down...")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "eteeap.main:app",
        host="127.0.0.1",
        port=8000,
        reload=True,
        log_level="info"
    )
