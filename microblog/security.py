"""Password hashing and remember-token helpers."""

import secrets

from passlib.context import CryptContext

from microblog.config import get_settings

settings = get_settings()

# Password hashing context
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.bcrypt_rounds,
)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Hash a password."""
    return pwd_context.hash(password)


def generate_remember_token() -> str:
    """Create an opaque, URL-safe token for persistent sign-in."""
    return secrets.token_urlsafe(16)
