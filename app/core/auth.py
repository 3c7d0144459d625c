# app/core/auth.py
from datetime import timedelta

from fastapi import Depends, HTTPException, Request, Response, status

from app.config import settings
from app.core.security import create_session_token, decode_session_cookie, encode_session_cookie
from app.models.user import User
from app.storage.base import Storage
from app.storage.sql import get_storage
from app.utils.time import utcnow


async def get_current_user(
    request: Request,
    storage: Storage = Depends(get_storage),
) -> User:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Not authenticated",
    )
    cookie = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if not cookie:
        raise credentials_exception

    payload = decode_session_cookie(cookie)
    if payload is None or not payload.get("sid"):
        raise credentials_exception

    session = await storage.sessions.get(payload["sid"])
    if session is None or str(session.user_id) != payload.get("sub"):
        raise credentials_exception
    if session.expires_at <= utcnow():
        await storage.sessions.delete(session.token)
        raise credentials_exception

    # re-fetch on every request so profile edits are visible immediately
    user = await storage.users.get(session.user_id)
    if user is None:
        raise credentials_exception
    return user


async def open_session(storage: Storage, user: User, response: Response) -> None:
    """Create a server-side session for ``user`` and point the cookie at it."""
    expires_at = utcnow() + timedelta(days=settings.SESSION_EXPIRE_DAYS)
    session = await storage.sessions.create({
        "token": create_session_token(),
        "user_id": user.id,
        "expires_at": expires_at,
    })
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=encode_session_cookie(session.token, user.id, expires_at),
        max_age=settings.SESSION_EXPIRE_DAYS * 24 * 60 * 60,
        httponly=True,
        secure=settings.SESSION_COOKIE_SECURE,
        samesite="lax",
    )


async def close_session(storage: Storage, request: Request, response: Response) -> None:
    cookie = request.cookies.get(settings.SESSION_COOKIE_NAME)
    payload = decode_session_cookie(cookie) if cookie else None
    if payload and payload.get("sid"):
        await storage.sessions.delete(payload["sid"])
    response.delete_cookie(
        key=settings.SESSION_COOKIE_NAME,
        httponly=True,
        secure=settings.SESSION_COOKIE_SECURE,
        samesite="lax",
    )
