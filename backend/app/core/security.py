"""Password hashing and session token helpers."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Dict

from jose import JWTError, jwt
from passlib.context import CryptContext

from app.core.concurrency import run_in_thread_security
from app.core.config import Settings, settings as default_settings

# Password hashing
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Return True if the plain password matches the stored hash."""

    return pwd_context.verify(plain_password, hashed_password)


async def verify_password_async(plain: str, hashed: str) -> bool:
    """Verify the provided password hash in a background thread."""

    return await run_in_thread_security(verify_password, plain, hashed)


def get_password_hash(password: str) -> str:
    """Hash a password using the configured context."""

    return pwd_context.hash(password)


async def get_password_hash_async(plain: str) -> str:
    """Hash a password in a background thread to avoid blocking the loop."""

    return await run_in_thread_security(get_password_hash, plain)


# Session tokens
ALGORITHM = "HS256"


def create_session_token(
    username: str, role: str, *, settings: Settings = default_settings
) -> str:
    now = datetime.now(timezone.utc)
    to_encode: Dict[str, Any] = {
        "sub": username,
        "role": role,
        "type": "session",
        "exp": now + timedelta(minutes=settings.SESSION_EXPIRE_MINUTES),
        "iat": now,
        "nbf": now,
        "iss": settings.JWT_ISSUER,
    }
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=ALGORITHM)


def decode_session_token(
    token: str, *, settings: Settings = default_settings
) -> Dict[str, Any] | None:
    """Return the token claims, or None when the token is invalid or expired."""

    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[ALGORITHM],
            issuer=settings.JWT_ISSUER,
        )
    except JWTError:
        return None
    if payload.get("type") != "session" or not payload.get("sub"):
        return None
    return payload
