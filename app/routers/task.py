from typing import List

from fastapi import APIRouter, Depends, Response, status

from app.core.auth import get_current_user
from app.core.ownership import ensure_owned_ref, get_owned
from app.models.user import User
from app.schemas.common import TaskStatus
from app.schemas.task import TaskCreate, TaskUpdate, TaskResponse
from app.services.goals import recompute_progress
from app.services.tasks import delete_task, resolve_completion
from app.storage.base import Storage
from app.storage.sql import get_storage

router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.get("", response_model=List[TaskResponse])
async def list_tasks(
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(get_current_user),
):
    return await storage.tasks.list_by_user(current_user.id)


@router.get("/{task_id:int}", response_model=TaskResponse)
async def get_task(
    task_id: int,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(get_current_user),
):
    return await get_owned(storage.tasks, task_id, current_user, "Task")


@router.get("/{task_status}", response_model=List[TaskResponse])
async def list_tasks_by_status(
    task_status: TaskStatus,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(get_current_user),
):
    return await storage.tasks.list_by_user(current_user.id, status=task_status)


@router.post("", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
async def create_task(
    task_in: TaskCreate,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(get_current_user),
):
    await ensure_owned_ref(storage.goals, task_in.goal_id, current_user, "goalId")

    sent_status = task_in.status if "status" in task_in.model_fields_set else None
    task_status, completed = resolve_completion(sent_status, task_in.completed, "todo")

    data = task_in.model_dump(exclude={"status", "completed"})
    data.update(user_id=current_user.id, status=task_status, completed=completed)
    task = await storage.tasks.create(data)

    await recompute_progress(storage, current_user.id, task.goal_id)
    return task


@router.patch("/{task_id}", response_model=TaskResponse)
async def update_task(
    task_id: int,
    task_in: TaskUpdate,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(get_current_user),
):
    task = await get_owned(storage.tasks, task_id, current_user, "Task")
    changes = task_in.model_dump(exclude_unset=True)

    if "goal_id" in changes:
        await ensure_owned_ref(storage.goals, changes["goal_id"], current_user, "goalId")

    sent_status = changes.pop("status", None)
    sent_completed = changes.pop("completed", None)
    if sent_status is not None or sent_completed is not None:
        changes["status"], changes["completed"] = resolve_completion(
            sent_status, sent_completed, task.status
        )

    previous_goal_id = task.goal_id
    task = await storage.tasks.update(task_id, changes)

    # progress of both the old and the new goal may have moved
    await recompute_progress(storage, current_user.id, previous_goal_id)
    if task.goal_id != previous_goal_id:
        await recompute_progress(storage, current_user.id, task.goal_id)
    return task


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_task(
    task_id: int,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(get_current_user),
):
    task = await get_owned(storage.tasks, task_id, current_user, "Task")
    await delete_task(storage, task)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
