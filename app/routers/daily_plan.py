from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Response, status
from pydantic import TypeAdapter, ValidationError

from app.core.auth import get_current_user
from app.core.errors import FieldValidationError
from app.core.ownership import ensure_owned_refs, get_owned
from app.models.user import User
from app.schemas.common import PlanDay
from app.schemas.plan import DailyPlanCreate, DailyPlanUpdate, DailyPlanResponse
from app.storage.base import ConflictError, Storage
from app.storage.sql import get_storage

router = APIRouter(prefix="/dailyplan", tags=["dailyplan"])

plan_day = TypeAdapter(PlanDay)


def parse_day(value: str, field: str = "date") -> date:
    try:
        return plan_day.validate_python(value)
    except ValidationError:
        raise FieldValidationError(field, f"{field} must be a date or datetime")


async def _check_refs(storage: Storage, changes: dict, current_user: User) -> None:
    await ensure_owned_refs(storage.tasks, changes.get("task_ids") or [], current_user, "taskIds")
    await ensure_owned_refs(storage.time_blocks, changes.get("time_block_ids") or [], current_user, "timeBlockIds")


@router.get("/{day}", response_model=DailyPlanResponse)
async def get_daily_plan(
    day: str,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(get_current_user),
):
    plan = await storage.daily_plans.get_for_day(current_user.id, parse_day(day))
    if plan is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Daily plan not found")
    return plan


@router.post("", response_model=DailyPlanResponse, status_code=status.HTTP_201_CREATED)
async def create_daily_plan(
    plan_in: DailyPlanCreate,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(get_current_user),
):
    data = plan_in.model_dump()
    await _check_refs(storage, data, current_user)

    if await storage.daily_plans.get_for_day(current_user.id, plan_in.date):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="A daily plan already exists for this date",
        )

    data["user_id"] = current_user.id
    try:
        return await storage.daily_plans.create(data)
    except ConflictError:
        # another request created the plan after the check above
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="A daily plan already exists for this date",
        )


@router.patch("/{plan_id}", response_model=DailyPlanResponse)
async def update_daily_plan(
    plan_id: int,
    plan_in: DailyPlanUpdate,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(get_current_user),
):
    plan = await get_owned(storage.daily_plans, plan_id, current_user, "Daily plan")
    changes = plan_in.model_dump(exclude_unset=True)
    await _check_refs(storage, changes, current_user)

    if "date" in changes and changes["date"] != plan.date:
        other = await storage.daily_plans.get_for_day(current_user.id, changes["date"])
        if other is not None and other.id != plan.id:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="A daily plan already exists for this date",
            )

    return await storage.daily_plans.update(plan_id, changes)


@router.delete("/{plan_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_daily_plan(
    plan_id: int,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(get_current_user),
):
    await get_owned(storage.daily_plans, plan_id, current_user, "Daily plan")
    await storage.daily_plans.delete(plan_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
