import logging
from typing import Optional

from app.core.errors import FieldValidationError
from app.models.goal import Goal
from app.storage.base import Storage

logger = logging.getLogger(__name__)


async def ensure_acyclic_parent(storage: Storage, goal_id: int, parent_goal_id: Optional[int]) -> None:
    """Reject a parent that is the goal itself or one of its descendants."""
    seen = set()
    current_id = parent_goal_id
    while current_id is not None and current_id not in seen:
        if current_id == goal_id:
            raise FieldValidationError("parentGoalId", "A goal cannot be its own ancestor")
        seen.add(current_id)
        parent = await storage.goals.get(current_id)
        if parent is None:
            break
        current_id = parent.parent_goal_id


async def recompute_progress(storage: Storage, user_id: int, goal_id: Optional[int]) -> None:
    """Set progress to the share of linked tasks that are done.

    A goal without linked tasks keeps its manual progress.
    """
    if goal_id is None:
        return
    tasks = await storage.tasks.list_by_user(user_id, goal_id=goal_id)
    if not tasks:
        return
    done = sum(1 for task in tasks if task.status == "done")
    progress = round(100 * done / len(tasks))
    await storage.goals.update(goal_id, {"progress": progress, "completed": progress == 100})


async def delete_goal(storage: Storage, goal: Goal) -> None:
    """Delete a goal, detaching its children and linked tasks.

    Children become root goals and tasks lose their goal link; nothing is
    cascaded.
    """
    children = await storage.goals.list_by_user(goal.user_id, parent_goal_id=goal.id)
    for child in children:
        await storage.goals.update(child.id, {"parent_goal_id": None})
    tasks = await storage.tasks.list_by_user(goal.user_id, goal_id=goal.id)
    for task in tasks:
        await storage.tasks.update(task.id, {"goal_id": None})
    await storage.goals.delete(goal.id)
    if children or tasks:
        logger.info(
            "Deleted goal %s, detached %d child goal(s) and %d task(s)",
            goal.id, len(children), len(tasks),
        )
