import os
import logging

from fastapi_mail import FastMail, MessageSchema, ConnectionConfig, MessageType
from jinja2 import Environment, FileSystemLoader, select_autoescape

from eteeap.config import settings

logger = logging.getLogger(__name__)

TEMPLATE_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "templates", "email")
MAIL_FROM_NAME = "LCCB ETEEAP Support"

env = Environment(loader=FileSystemLoader(TEMPLATE_DIR), autoescape=select_autoescape(["html"]))


def _connection_config(port: int, ssl: bool) -> ConnectionConfig:
    return ConnectionConfig(
        MAIL_USERNAME=settings.EMAIL_HOST_USER,
        MAIL_PASSWORD=settings.EMAIL_HOST_PASSWORD,
        MAIL_FROM=settings.EMAIL_FROM,
        MAIL_FROM_NAME=MAIL_FROM_NAME,
        MAIL_PORT=port,
        MAIL_SERVER=settings.EMAIL_HOST,
        MAIL_STARTTLS=not ssl,
        MAIL_SSL_TLS=ssl,
        USE_CREDENTIALS=bool(settings.EMAIL_HOST_USER),
        VALIDATE_CERTS=True,
        SUPPRESS_SEND=1 if settings.MAIL_SUPPRESS_SEND else 0,
    )


# Central retry wrapper
async def send_email_with_retry(message: MessageSchema, subject: str, to_email: str) -> bool:
    """Try sending via TLS first (configured port), then SSL (465) if it fails"""
    try:
        fm = FastMail(_connection_config(settings.EMAIL_PORT, ssl=False))
        await fm.send_message(message)
        logger.info(f"{subject} email sent to {to_email} via port {settings.EMAIL_PORT}")
        return True
    except Exception as e:
        logger.warning(f"Failed to send {subject} via port {settings.EMAIL_PORT}: {str(e)}")
        try:
            fm = FastMail(_connection_config(465, ssl=True))
            await fm.send_message(message)
            logger.info(f"{subject} email sent to {to_email} via port 465")
            return True
        except Exception as e2:
            logger.error(f"Failed to send {subject} email via both ports: {str(e2)}")
            return False


def build_reset_link(token: str) -> str:
    return f"{settings.FRONTEND_URL.rstrip('/')}/reset-password?token={token}"


async def send_password_reset_email(to_email: str, name: str, reset_link: str) -> bool:
    html = env.get_template("reset_password.html").render(
        name=name,
        reset_link=reset_link,
        expires_minutes=settings.RESET_TOKEN_EXPIRE_MINUTES,
    )
    message = MessageSchema(
        subject="Password Reset Request",
        recipients=[to_email],
        body=html,
        subtype=MessageType.html
    )
    return await send_email_with_retry(message, "Password Reset", to_email)
