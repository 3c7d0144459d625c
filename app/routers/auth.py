# app/routers/auth.py
import logging

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from starlette.concurrency import run_in_threadpool

from app.models.user import User
from app.schemas.user import UserCreate, UserResponse, LoginRequest, UserUpdate
from app.storage.base import ConflictError, Storage
from app.storage.sql import get_storage
from app.utils.password import hash_password, verify_password
from app.core.auth import get_current_user, open_session, close_session

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register(user_in: UserCreate, response: Response, storage: Storage = Depends(get_storage)):
    if await storage.users.get_by_username(user_in.username):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Username already exists")
    if await storage.users.get_by_email(user_in.email):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already exists")
    if user_in.external_id and await storage.users.get_by_external_id(user_in.external_id):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="External account already linked")

    data = user_in.model_dump(exclude={"password"})
    # pbkdf2 is CPU bound
    data["password_hash"] = await run_in_threadpool(hash_password, user_in.password)
    try:
        user = await storage.users.create(data)
    except ConflictError:
        # lost a race with a concurrent registration
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Username or email already exists")
    logger.info("Registered user %s", user.id)

    # Log the new user straight in
    await open_session(storage, user, response)
    return user


@router.post("/login", response_model=UserResponse)
async def login(credentials: LoginRequest, response: Response, storage: Storage = Depends(get_storage)):
    user = await storage.users.get_by_username(credentials.username)

    if not user or not await run_in_threadpool(verify_password, credentials.password, user.password_hash):
        logger.warning("Failed login for username %r", credentials.username)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
        )

    await open_session(storage, user, response)
    return user


@router.post("/logout")
async def logout(request: Request, response: Response, storage: Storage = Depends(get_storage)):
    await close_session(storage, request, response)
    return {"message": "Logged out"}


@router.post("/logout/all")
async def logout_everywhere(
    request: Request,
    response: Response,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(get_current_user),
):
    await close_session(storage, request, response)
    ended = await storage.sessions.delete_for_user(current_user.id)
    logger.info("Ended %d other session(s) for user %s", ended, current_user.id)
    return {"message": "Logged out everywhere"}


@router.get("/user", response_model=UserResponse)
async def read_current_user(current_user: User = Depends(get_current_user)):
    return current_user


@router.patch("/user", response_model=UserResponse)
async def update_profile(
    profile_in: UserUpdate,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(get_current_user),
):
    changes = profile_in.model_dump(exclude_unset=True)
    if not changes:
        return current_user
    return await storage.users.update(current_user.id, changes)
