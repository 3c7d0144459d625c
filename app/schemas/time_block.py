from pydantic import Field, ValidationInfo, field_validator
from datetime import datetime
from typing import Optional

from app.schemas.common import CamelModel, PatchModel, RequestModel, UTCDateTime

class TimeBlockCreate(RequestModel):
    title: str = Field(..., min_length=1, max_length=200)
    task_id: Optional[int] = None
    start_time: UTCDateTime
    end_time: UTCDateTime
    buffer: int = Field(0, ge=0)
    calendar_event_id: Optional[str] = None

    @field_validator("end_time")
    @classmethod
    def end_after_start(cls, end_time: datetime, info: ValidationInfo) -> datetime:
        start_time = info.data.get("start_time")
        if start_time is not None and end_time <= start_time:
            raise ValueError("endTime must be after startTime")
        return end_time

class TimeBlockUpdate(PatchModel):
    nullable_fields = frozenset({"task_id", "calendar_event_id"})

    title: Optional[str] = Field(None, min_length=1, max_length=200)
    task_id: Optional[int] = None
    start_time: Optional[UTCDateTime] = None
    end_time: Optional[UTCDateTime] = None
    buffer: Optional[int] = Field(None, ge=0)
    calendar_event_id: Optional[str] = None

class TimeBlockResponse(CamelModel):
    id: int
    user_id: int
    title: str
    task_id: Optional[int]
    start_time: datetime
    end_time: datetime
    buffer: int
    calendar_event_id: Optional[str]
    created_at: datetime
