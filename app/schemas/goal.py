from pydantic import Field
from datetime import datetime
from typing import Optional

from app.schemas.common import CamelModel, PatchModel, RequestModel, Priority, Timeframe, UTCDateTime

class GoalCreate(RequestModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    category: str = Field(..., min_length=1, max_length=100)
    timeframe: Timeframe
    progress: int = Field(0, ge=0, le=100)
    deadline: Optional[UTCDateTime] = None
    priority: Priority = "medium"
    parent_goal_id: Optional[int] = None

class GoalUpdate(PatchModel):
    nullable_fields = frozenset({"description", "deadline", "parent_goal_id"})

    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    category: Optional[str] = Field(None, min_length=1, max_length=100)
    timeframe: Optional[Timeframe] = None
    progress: Optional[int] = Field(None, ge=0, le=100)  # manual override
    deadline: Optional[UTCDateTime] = None
    priority: Optional[Priority] = None
    parent_goal_id: Optional[int] = None

class GoalResponse(CamelModel):
    id: int
    user_id: int
    title: str
    description: Optional[str]
    category: str
    timeframe: str
    progress: int
    deadline: Optional[datetime]
    priority: str
    parent_goal_id: Optional[int]
    completed: bool
    created_at: datetime
