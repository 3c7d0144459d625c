from collections import Counter
from typing import get_args

from fastapi import APIRouter, Depends

from app.core.auth import get_current_user
from app.models.user import User
from app.schemas.common import TaskStatus, Timeframe
from app.schemas.dashboard import DashboardResponse
from app.schemas.time_block import TimeBlockResponse
from app.storage.base import Storage
from app.storage.sql import get_storage
from app.utils.time import day_bounds, utcnow

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("", response_model=DashboardResponse)
async def get_dashboard(
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(get_current_user),
):
    now = utcnow()
    tasks = await storage.tasks.list_by_user(current_user.id)
    goals = await storage.goals.list_by_user(current_user.id)

    # 1. Kanban column counts
    status_counts = Counter(task.status for task in tasks)
    tasks_by_status = {s: status_counts.get(s, 0) for s in get_args(TaskStatus)}

    # 2. Goal counts per horizon
    timeframe_counts = Counter(goal.timeframe for goal in goals)
    goals_by_timeframe = {t: timeframe_counts.get(t, 0) for t in get_args(Timeframe)}

    # 3. Open tasks past their due date
    overdue = sum(
        1 for task in tasks
        if not task.completed and task.due_date is not None and task.due_date < now
    )

    # 4. Today's calendar
    start, end = day_bounds(now.date())
    todays_blocks = await storage.time_blocks.list_in_range(current_user.id, start, end)

    return DashboardResponse(
        tasks_by_status=tasks_by_status,
        goals_by_timeframe=goals_by_timeframe,
        overdue_tasks=overdue,
        todays_time_blocks=[TimeBlockResponse.model_validate(block) for block in todays_blocks],
    )
