from pydantic import Field
from datetime import datetime
from typing import Optional

from app.schemas.common import CamelModel, PatchModel, RequestModel, Priority, TaskStatus, UTCDateTime

class TaskCreate(RequestModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    estimated_duration: Optional[int] = Field(None, ge=0)
    actual_duration: Optional[int] = Field(None, ge=0)
    status: TaskStatus = "todo"
    completed: Optional[bool] = None  # derived from status when omitted
    goal_id: Optional[int] = None
    priority: Priority = "medium"
    due_date: Optional[UTCDateTime] = None
    source: str = Field("manual", min_length=1)
    external_id: Optional[str] = None

class TaskUpdate(PatchModel):
    nullable_fields = frozenset({"description", "estimated_duration", "actual_duration", "goal_id", "due_date"})

    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    estimated_duration: Optional[int] = Field(None, ge=0)
    actual_duration: Optional[int] = Field(None, ge=0)
    status: Optional[TaskStatus] = None
    completed: Optional[bool] = None
    goal_id: Optional[int] = None
    priority: Optional[Priority] = None
    due_date: Optional[UTCDateTime] = None

class TaskResponse(CamelModel):
    id: int
    user_id: int
    title: str
    description: Optional[str]
    estimated_duration: Optional[int]
    actual_duration: Optional[int]
    status: str
    goal_id: Optional[int]
    priority: str
    completed: bool
    due_date: Optional[datetime]
    source: str
    external_id: Optional[str]
    created_at: datetime
