# app/core/ownership.py
from typing import Iterable, Optional

from fastapi import HTTPException, status

from app.core.errors import FieldValidationError
from app.models.user import User
from app.storage.base import Repository


async def get_owned(repo: Repository, record_id: int, user: User, label: str):
    """Load a record for ``user``: 404 when missing, 403 when someone else's."""
    record = await repo.get(record_id)
    if record is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{label} not found")
    if record.user_id != user.id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
    return record


async def ensure_owned_ref(repo: Repository, record_id: Optional[int], user: User, field: str):
    """A reference must be null or point at one of the user's own records.

    Missing and foreign records get the same error so existence is not leaked.
    """
    if record_id is None:
        return None
    record = await repo.get(record_id)
    if record is None or record.user_id != user.id:
        raise FieldValidationError(field, f"{field} does not reference one of your records")
    return record


async def ensure_owned_refs(repo: Repository, record_ids: Iterable[int], user: User, field: str) -> None:
    for record_id in record_ids:
        await ensure_owned_ref(repo, record_id, user, field)
