"""Storage interface shared by every backend.

Routers only talk to a :class:`Storage`; which backend sits behind it is
decided by the ``get_storage`` dependency. Repositories do no validation
beyond existence checks: ownership and the planning invariants are the
caller's job.
"""

from abc import ABC, abstractmethod
from datetime import date, datetime
from typing import Any, Dict, Generic, List, Optional, TypeVar

from app.models.goal import Goal
from app.models.integration import Integration
from app.models.plan import DailyPlan, WeeklyPlan
from app.models.task import Task
from app.models.time_block import TimeBlock
from app.models.user import Session, User

ModelT = TypeVar("ModelT")


class ConflictError(Exception):
    """A write collided with a unique key held by another record."""


class Repository(ABC, Generic[ModelT]):
    """CRUD over one entity type. ``update`` is a shallow merge."""

    @abstractmethod
    async def get(self, id: Any) -> Optional[ModelT]: ...

    @abstractmethod
    async def create(self, data: Dict[str, Any]) -> ModelT: ...

    @abstractmethod
    async def update(self, id: Any, changes: Dict[str, Any]) -> Optional[ModelT]: ...

    @abstractmethod
    async def delete(self, id: Any) -> bool: ...


class OwnedRepository(Repository[ModelT]):
    @abstractmethod
    async def list_by_user(self, user_id: int, **filters: Any) -> List[ModelT]:
        """Records owned by ``user_id`` matching every equality filter, by id."""


class UserRepository(Repository[User]):
    @abstractmethod
    async def get_by_username(self, username: str) -> Optional[User]: ...

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[User]: ...

    @abstractmethod
    async def get_by_external_id(self, external_id: str) -> Optional[User]: ...


class SessionRepository(Repository[Session]):
    @abstractmethod
    async def delete_for_user(self, user_id: int) -> int: ...


class TimeBlockRepository(OwnedRepository[TimeBlock]):
    @abstractmethod
    async def list_in_range(self, user_id: int, start: datetime, end: datetime) -> List[TimeBlock]:
        """Blocks fully contained in the range: start_time >= start and end_time <= end.

        Blocks straddling either boundary are excluded.
        """


class DailyPlanRepository(OwnedRepository[DailyPlan]):
    @abstractmethod
    async def get_for_day(self, user_id: int, day: date) -> Optional[DailyPlan]: ...


class WeeklyPlanRepository(OwnedRepository[WeeklyPlan]):
    @abstractmethod
    async def get_for_start(self, user_id: int, start_date: date) -> Optional[WeeklyPlan]: ...

    @abstractmethod
    async def get_containing(self, user_id: int, day: date) -> Optional[WeeklyPlan]: ...


class IntegrationRepository(OwnedRepository[Integration]):
    @abstractmethod
    async def get_by_type(self, user_id: int, type: str) -> Optional[Integration]: ...


class Storage:
    """Bundle of repositories handed to the API layer."""

    users: UserRepository
    sessions: SessionRepository
    goals: OwnedRepository[Goal]
    tasks: OwnedRepository[Task]
    time_blocks: TimeBlockRepository
    daily_plans: DailyPlanRepository
    weekly_plans: WeeklyPlanRepository
    integrations: IntegrationRepository
