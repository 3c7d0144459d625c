from typing import Dict, List

from app.schemas.common import CamelModel
from app.schemas.time_block import TimeBlockResponse

class DashboardResponse(CamelModel):
    tasks_by_status: Dict[str, int]
    goals_by_timeframe: Dict[str, int]
    overdue_tasks: int
    todays_time_blocks: List[TimeBlockResponse]
