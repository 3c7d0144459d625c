from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from app.core.auth import get_current_user
from app.core.errors import FieldValidationError
from app.core.ownership import ensure_owned_ref, get_owned
from app.models.user import User
from app.schemas.time_block import TimeBlockCreate, TimeBlockUpdate, TimeBlockResponse
from app.storage.base import Storage
from app.storage.sql import get_storage
from app.utils.time import to_naive_utc

router = APIRouter(prefix="/timeblocks", tags=["timeblocks"])


@router.get("", response_model=List[TimeBlockResponse])
async def list_time_blocks(
    start_date: Optional[datetime] = Query(None, alias="startDate"),
    end_date: Optional[datetime] = Query(None, alias="endDate"),
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(get_current_user),
):
    if start_date is None or end_date is None:
        raise HTTPException(status_code=400, detail="startDate and endDate are required")

    # only blocks lying entirely inside the range are returned
    return await storage.time_blocks.list_in_range(
        current_user.id, to_naive_utc(start_date), to_naive_utc(end_date)
    )


@router.get("/{block_id}", response_model=TimeBlockResponse)
async def get_time_block(
    block_id: int,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(get_current_user),
):
    return await get_owned(storage.time_blocks, block_id, current_user, "TimeBlock")


@router.post("", response_model=TimeBlockResponse, status_code=status.HTTP_201_CREATED)
async def create_time_block(
    block_in: TimeBlockCreate,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(get_current_user),
):
    await ensure_owned_ref(storage.tasks, block_in.task_id, current_user, "taskId")
    data = block_in.model_dump()
    data["user_id"] = current_user.id
    return await storage.time_blocks.create(data)


@router.patch("/{block_id}", response_model=TimeBlockResponse)
async def update_time_block(
    block_id: int,
    block_in: TimeBlockUpdate,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(get_current_user),
):
    block = await get_owned(storage.time_blocks, block_id, current_user, "TimeBlock")
    changes = block_in.model_dump(exclude_unset=True)

    if "task_id" in changes:
        await ensure_owned_ref(storage.tasks, changes["task_id"], current_user, "taskId")

    start_time = changes.get("start_time", block.start_time)
    end_time = changes.get("end_time", block.end_time)
    if end_time <= start_time:
        raise FieldValidationError("endTime", "endTime must be after startTime")

    return await storage.time_blocks.update(block_id, changes)


@router.delete("/{block_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_time_block(
    block_id: int,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(get_current_user),
):
    await get_owned(storage.time_blocks, block_id, current_user, "TimeBlock")
    await storage.time_blocks.delete(block_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
