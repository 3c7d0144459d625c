from typing import List

from fastapi import APIRouter, Depends, Response, status

from app.core.auth import get_current_user
from app.core.ownership import ensure_owned_ref, get_owned
from app.models.user import User
from app.schemas.common import Timeframe
from app.schemas.goal import GoalCreate, GoalUpdate, GoalResponse
from app.services.goals import delete_goal, ensure_acyclic_parent
from app.storage.base import Storage
from app.storage.sql import get_storage

router = APIRouter(prefix="/goals", tags=["goals"])


@router.get("", response_model=List[GoalResponse])
async def list_goals(
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(get_current_user),
):
    return await storage.goals.list_by_user(current_user.id)


@router.get("/{goal_id:int}", response_model=GoalResponse)
async def get_goal(
    goal_id: int,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(get_current_user),
):
    return await get_owned(storage.goals, goal_id, current_user, "Goal")


@router.get("/{timeframe}", response_model=List[GoalResponse])
async def list_goals_by_timeframe(
    timeframe: Timeframe,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(get_current_user),
):
    return await storage.goals.list_by_user(current_user.id, timeframe=timeframe)


@router.post("", response_model=GoalResponse, status_code=status.HTTP_201_CREATED)
async def create_goal(
    goal_in: GoalCreate,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(get_current_user),
):
    # a brand-new goal has no descendants, so any owned parent is acyclic
    await ensure_owned_ref(storage.goals, goal_in.parent_goal_id, current_user, "parentGoalId")

    data = goal_in.model_dump()
    data.update(user_id=current_user.id, completed=goal_in.progress == 100)
    return await storage.goals.create(data)


@router.patch("/{goal_id}", response_model=GoalResponse)
async def update_goal(
    goal_id: int,
    goal_in: GoalUpdate,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(get_current_user),
):
    goal = await get_owned(storage.goals, goal_id, current_user, "Goal")
    changes = goal_in.model_dump(exclude_unset=True)

    parent_goal_id = changes.get("parent_goal_id")
    if parent_goal_id is not None:
        await ensure_owned_ref(storage.goals, parent_goal_id, current_user, "parentGoalId")
        await ensure_acyclic_parent(storage, goal.id, parent_goal_id)

    if "progress" in changes:
        changes["completed"] = changes["progress"] == 100

    return await storage.goals.update(goal_id, changes)


@router.delete("/{goal_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_goal(
    goal_id: int,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(get_current_user),
):
    goal = await get_owned(storage.goals, goal_id, current_user, "Goal")
    await delete_goal(storage, goal)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
