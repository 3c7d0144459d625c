from pydantic import EmailStr, Field
from typing import Optional
from datetime import datetime

from app.schemas.common import CamelModel, PatchModel, RequestModel

class UserCreate(RequestModel):
    username: str = Field(..., min_length=3, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)
    full_name: Optional[str] = Field(None, max_length=100)
    profile_picture: Optional[str] = None
    external_id: Optional[str] = None

class LoginRequest(RequestModel):
    username: str
    password: str

class UserUpdate(PatchModel):
    nullable_fields = frozenset({"full_name", "profile_picture"})

    full_name: Optional[str] = Field(None, max_length=100)
    profile_picture: Optional[str] = None

class UserResponse(CamelModel):
    id: int
    username: str
    email: str
    full_name: Optional[str]
    profile_picture: Optional[str]
    external_id: Optional[str]
    created_at: datetime
