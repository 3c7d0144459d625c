from pydantic import Field
from datetime import datetime
from typing import Any, Dict, Optional

from app.schemas.common import CamelModel, PatchModel, RequestModel, IntegrationType, SyncStatus, UTCDateTime

class IntegrationCreate(RequestModel):
    type: IntegrationType
    credentials: Dict[str, Any] = Field(default_factory=dict)
    sync_status: SyncStatus = "inactive"

class IntegrationUpdate(PatchModel):
    nullable_fields = frozenset({"last_synced"})

    credentials: Optional[Dict[str, Any]] = None
    sync_status: Optional[SyncStatus] = None
    last_synced: Optional[UTCDateTime] = None

class IntegrationResponse(CamelModel):
    # credentials are write-only
    id: int
    user_id: int
    type: str
    sync_status: str
    last_synced: Optional[datetime]
    created_at: datetime
