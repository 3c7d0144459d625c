from pydantic import Field, NonNegativeInt, ValidationInfo, field_validator
from datetime import date, datetime
from typing import Dict, List, Optional

from app.schemas.common import CamelModel, PatchModel, RequestModel, PlanDay

class DailyPlanCreate(RequestModel):
    date: PlanDay
    notes: Optional[str] = None
    task_ids: List[int] = Field(default_factory=list)
    time_block_ids: List[int] = Field(default_factory=list)

class DailyPlanUpdate(PatchModel):
    nullable_fields = frozenset({"notes"})

    date: Optional[PlanDay] = None
    notes: Optional[str] = None
    task_ids: Optional[List[int]] = None
    time_block_ids: Optional[List[int]] = None

class DailyPlanResponse(CamelModel):
    id: int
    user_id: int
    date: date
    notes: Optional[str]
    task_ids: List[int]
    time_block_ids: List[int]
    created_at: datetime


class WeeklyPlanCreate(RequestModel):
    start_date: PlanDay
    end_date: PlanDay
    goal_ids: List[int] = Field(default_factory=list)
    time_budgets: Dict[str, NonNegativeInt] = Field(default_factory=dict)
    priority_areas: List[str] = Field(default_factory=list)

    @field_validator("end_date")
    @classmethod
    def end_not_before_start(cls, end_date: date, info: ValidationInfo) -> date:
        start_date = info.data.get("start_date")
        if start_date is not None and end_date < start_date:
            raise ValueError("endDate must not be before startDate")
        return end_date

class WeeklyPlanUpdate(PatchModel):
    start_date: Optional[PlanDay] = None
    end_date: Optional[PlanDay] = None
    goal_ids: Optional[List[int]] = None
    time_budgets: Optional[Dict[str, NonNegativeInt]] = None
    priority_areas: Optional[List[str]] = None

class WeeklyPlanResponse(CamelModel):
    id: int
    user_id: int
    start_date: date
    end_date: date
    goal_ids: List[int]
    time_budgets: Dict[str, int]
    priority_areas: List[str]
    created_at: datetime
