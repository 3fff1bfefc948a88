# eteeap/utils/hash.py
import secrets
from passlib.context import CryptContext

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    # Federated-only accounts carry no password hash
    if not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        return False


def generate_reset_token() -> str:
    """64 hex characters, single-use."""
    return secrets.token_hex(32)


def random_password() -> str:
    return secrets.token_hex(16)
