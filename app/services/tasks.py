from typing import Optional, Tuple

from app.core.errors import FieldValidationError
from app.models.task import Task
from app.services.goals import recompute_progress
from app.storage.base import Storage

DONE = "done"


def resolve_completion(
    status: Optional[str],
    completed: Optional[bool],
    current_status: str,
) -> Tuple[str, bool]:
    """Return the (status, completed) pair to store, keeping them in agreement.

    ``status``/``completed`` are None when the client did not send them.
    """
    if status is not None and completed is not None and completed != (status == DONE):
        raise FieldValidationError("completed", "completed must agree with status")
    if status is not None:
        return status, status == DONE
    if completed is not None:
        if completed:
            return DONE, True
        return ("todo" if current_status == DONE else current_status), False
    return current_status, current_status == DONE


async def delete_task(storage: Storage, task: Task) -> None:
    blocks = await storage.time_blocks.list_by_user(task.user_id, task_id=task.id)
    for block in blocks:
        await storage.time_blocks.update(block.id, {"task_id": None})
    goal_id = task.goal_id
    await storage.tasks.delete(task.id)
    await recompute_progress(storage, task.user_id, goal_id)
