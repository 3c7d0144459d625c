from fastapi import APIRouter, Depends, HTTPException, Response, status

from app.core.auth import get_current_user
from app.core.ownership import get_owned
from app.models.user import User
from app.schemas.common import IntegrationType
from app.schemas.integration import IntegrationCreate, IntegrationUpdate, IntegrationResponse
from app.storage.base import Storage
from app.storage.sql import get_storage

router = APIRouter(prefix="/integrations", tags=["integrations"])


@router.get("/{integration_type}", response_model=IntegrationResponse)
async def get_integration(
    integration_type: IntegrationType,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(get_current_user),
):
    integration = await storage.integrations.get_by_type(current_user.id, integration_type)
    if integration is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Integration not found")
    return integration


@router.post("", response_model=IntegrationResponse, status_code=status.HTTP_201_CREATED)
async def create_integration(
    integration_in: IntegrationCreate,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(get_current_user),
):
    if await storage.integrations.get_by_type(current_user.id, integration_in.type):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"{integration_in.type} integration already exists",
        )
    data = integration_in.model_dump()
    data["user_id"] = current_user.id
    return await storage.integrations.create(data)


@router.patch("/{integration_id}", response_model=IntegrationResponse)
async def update_integration(
    integration_id: int,
    integration_in: IntegrationUpdate,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(get_current_user),
):
    await get_owned(storage.integrations, integration_id, current_user, "Integration")
    changes = integration_in.model_dump(exclude_unset=True)
    return await storage.integrations.update(integration_id, changes)


@router.delete("/{integration_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_integration(
    integration_id: int,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(get_current_user),
):
    await get_owned(storage.integrations, integration_id, current_user, "Integration")
    await storage.integrations.delete(integration_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
