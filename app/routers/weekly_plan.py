from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response, status

from app.core.auth import get_current_user
from app.core.errors import FieldValidationError
from app.core.ownership import ensure_owned_refs, get_owned
from app.models.user import User
from app.routers.daily_plan import parse_day
from app.schemas.plan import WeeklyPlanCreate, WeeklyPlanUpdate, WeeklyPlanResponse
from app.storage.base import Storage
from app.storage.sql import get_storage

router = APIRouter(tags=["weeklyplan"])

DUPLICATE_WEEK = "A weekly plan already starts on this date"


@router.get("/weeklyplans", response_model=List[WeeklyPlanResponse])
async def list_weekly_plans(
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(get_current_user),
):
    return await storage.weekly_plans.list_by_user(current_user.id)


@router.get("/weeklyplan/{day}", response_model=WeeklyPlanResponse)
async def get_weekly_plan(
    day: str,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(get_current_user),
):
    plan = await storage.weekly_plans.get_containing(current_user.id, parse_day(day))
    if plan is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Weekly plan not found")
    return plan


@router.post("/weeklyplan", response_model=WeeklyPlanResponse, status_code=status.HTTP_201_CREATED)
async def create_weekly_plan(
    plan_in: WeeklyPlanCreate,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(get_current_user),
):
    await ensure_owned_refs(storage.goals, plan_in.goal_ids, current_user, "goalIds")
    if await storage.weekly_plans.get_for_start(current_user.id, plan_in.start_date):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=DUPLICATE_WEEK)

    data = plan_in.model_dump()
    data["user_id"] = current_user.id
    return await storage.weekly_plans.create(data)


@router.patch("/weeklyplan/{plan_id}", response_model=WeeklyPlanResponse)
async def update_weekly_plan(
    plan_id: int,
    plan_in: WeeklyPlanUpdate,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(get_current_user),
):
    plan = await get_owned(storage.weekly_plans, plan_id, current_user, "Weekly plan")
    changes = plan_in.model_dump(exclude_unset=True)

    if "goal_ids" in changes:
        await ensure_owned_refs(storage.goals, changes["goal_ids"], current_user, "goalIds")

    start_date = changes.get("start_date", plan.start_date)
    end_date = changes.get("end_date", plan.end_date)
    if end_date < start_date:
        raise FieldValidationError("endDate", "endDate must not be before startDate")

    if start_date != plan.start_date:
        other = await storage.weekly_plans.get_for_start(current_user.id, start_date)
        if other is not None and other.id != plan.id:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=DUPLICATE_WEEK)

    return await storage.weekly_plans.update(plan_id, changes)


@router.delete("/weeklyplan/{plan_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_weekly_plan(
    plan_id: int,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(get_current_user),
):
    await get_owned(storage.weekly_plans, plan_id, current_user, "Weekly plan")
    await storage.weekly_plans.delete(plan_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
