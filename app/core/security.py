# app/core/security.py
import secrets
from datetime import datetime, timezone
from typing import Optional

from jose import jwt, JWTError

from app.config import settings


def create_session_token() -> str:
    """Opaque server-side session key."""
    return secrets.token_urlsafe(32)


def encode_session_cookie(session_token: str, user_id: int, expires_at: datetime) -> str:
    payload = {
        "sid": session_token,
        "sub": str(user_id),
        "exp": expires_at.replace(tzinfo=timezone.utc),
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_session_cookie(value: str) -> Optional[dict]:
    """Payload of a valid, unexpired cookie; None when tampered or expired."""
    try:
        return jwt.decode(value, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None
