from pydantic_settings import BaseSettings
from pydantic import Field
from typing import Optional, List
import os

class Settings(BaseSettings):
    # === DATABASE ===
    DATABASE_URL: str = Field(default=os.environ.get("DATABASE_URL", "mysql+pymysql://root:@localhost/eteeap_db"), description="SQLAlchemy database URL")
    AUTO_CREATE_TABLES: bool = Field(default=True, description="Create missing tables on startup")

    # === JWT AUTH ===
    SECRET_KEY: str = Field(default=os.environ.get("SECRET_KEY", "eteeap-dev-secret"), description="Secret key for JWT token signing")
    ALGORITHM: str = Field(default=os.environ.get("ALGORITHM", "HS256"), description="JWT algorithm")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(default=int(os.environ.get("ACCESS_TOKEN_EXPIRE_MINUTES", 60 * 24)), description="Session token lifetime in minutes")
    RESET_TOKEN_EXPIRE_MINUTES: int = Field(default=60, description="Password reset link lifetime in minutes")
    ALLOW_USER_ID_HEADER: bool = Field(default=False, description="Accept the legacy x-user-id header as caller identity")

    # === EMAIL ===
    EMAIL_HOST: str = Field(default=os.environ.get("EMAIL_HOST", "smtp.gmail.com"), description="SMTP host")
    EMAIL_PORT: int = Field(default=int(os.environ.get("EMAIL_PORT", 587)), description="SMTP port")
    EMAIL_HOST_USER: str = Field(default=os.environ.get("EMAIL_HOST_USER", ""), description="SMTP username")
    EMAIL_HOST_PASSWORD: str = Field(default=os.environ.get("EMAIL_HOST_PASSWORD", ""), description="SMTP password")
    EMAIL_FROM: str = Field(default=os.environ.get("EMAIL_FROM", "no-reply@lccb-eteeap.com"), description="Email sender address")
    MAIL_SUPPRESS_SEND: bool = Field(default=False, description="Build messages without delivering them")
    FRONTEND_URL: str = Field(default="http://localhost:3000", description="Base URL used in emailed links")

    # === GOOGLE OAUTH ===
    GOOGLE_CLIENT_ID: str = Field(default="", description="Google OAuth client id")
    GOOGLE_CLIENT_SECRET: str = Field(default="", description="Google OAuth client secret")
    GOOGLE_CALLBACK_URL: str = Field(default="http://localhost:5000/auth/google/callback", description="OAuth redirect URI")

    # === UPLOADS ===
    UPLOAD_DIR: str = Field(default="uploads", description="Root directory for uploaded files")
    MAX_UPLOAD_SIZE_MB: int = Field(default=50, description="Maximum size of a single upload")

    # === ACTIVITY LOG ===
    SYSTEM_ACTOR_ID: Optional[int] = Field(default=None, description="User id recorded for actions with no caller")

    # === BUILT-IN ADMIN ===
    ADMIN_EMAIL: str = Field(default="admin@eteeap.com", description="Built-in administrator email")
    ADMIN_PASSWORD: str = Field(default="Admin123", description="Built-in administrator initial password")
    ADMIN_FULLNAME: str = Field(default="Administrator", description="Built-in administrator name")

    # === CORS ===
    CORS_ORIGINS: List[str] = Field(default=[
        "http://localhost",
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ])

    # === DEBUG MODE ===
    DEBUG: bool = Field(default=os.environ.get("DEBUG", "False").lower() == "true", description="Debug mode")

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"

# Create settings instance
settings = Settings()
