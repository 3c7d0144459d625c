"""SQLAlchemy implementation of the storage interface.

Each write commits on its own, so every create/update/delete is one atomic
single-record change.
"""

from datetime import date, datetime
from typing import Any, Dict, List, Optional

from fastapi import Depends
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.models.goal import Goal
from app.models.integration import Integration
from app.models.plan import DailyPlan, WeeklyPlan
from app.models.task import Task
from app.models.time_block import TimeBlock
from app.models.user import Session, User
from app.storage import base
from app.utils.time import truncate_to_day


class SqlRepository:
    model: Any = None

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, id):
        if id is None:
            return None
        return await self.db.get(self.model, id)

    async def create(self, data: Dict[str, Any]):
        obj = self.model(**data)
        self.db.add(obj)
        await self._commit()
        await self.db.refresh(obj)
        return obj

    async def update(self, id, changes: Dict[str, Any]):
        obj = await self.get(id)
        if obj is None:
            return None
        for key, value in changes.items():
            setattr(obj, key, value)
        await self._commit()
        await self.db.refresh(obj)
        return obj

    async def delete(self, id) -> bool:
        obj = await self.get(id)
        if obj is None:
            return False
        await self.db.delete(obj)
        await self.db.commit()
        return True

    async def _commit(self) -> None:
        try:
            await self.db.commit()
        except IntegrityError as exc:
            await self.db.rollback()
            raise base.ConflictError(f"{self.model.__name__} conflicts with an existing record") from exc

    async def _scalars(self, stmt) -> list:
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def _first(self, stmt):
        result = await self.db.execute(stmt.limit(1))
        return result.scalars().first()


class SqlOwnedRepository(SqlRepository):
    async def list_by_user(self, user_id: int, **filters: Any) -> list:
        stmt = (
            select(self.model)
            .where(self.model.user_id == user_id)
            .filter_by(**filters)
            .order_by(self.model.id)
        )
        return await self._scalars(stmt)


class SqlUserRepository(SqlRepository, base.UserRepository):
    model = User

    async def get_by_username(self, username: str) -> Optional[User]:
        return await self._first(select(User).where(User.username == username))

    async def get_by_email(self, email: str) -> Optional[User]:
        return await self._first(select(User).where(User.email == email))

    async def get_by_external_id(self, external_id: str) -> Optional[User]:
        return await self._first(select(User).where(User.external_id == external_id))


class SqlSessionRepository(SqlRepository, base.SessionRepository):
    model = Session

    async def delete_for_user(self, user_id: int) -> int:
        result = await self.db.execute(delete(Session).where(Session.user_id == user_id))
        await self.db.commit()
        return result.rowcount or 0


class SqlGoalRepository(SqlOwnedRepository, base.OwnedRepository):
    model = Goal


class SqlTaskRepository(SqlOwnedRepository, base.OwnedRepository):
    model = Task


class SqlTimeBlockRepository(SqlOwnedRepository, base.TimeBlockRepository):
    model = TimeBlock

    async def list_in_range(self, user_id: int, start: datetime, end: datetime) -> List[TimeBlock]:
        stmt = (
            select(TimeBlock)
            .where(TimeBlock.user_id == user_id)
            .where(TimeBlock.start_time >= start)
            .where(TimeBlock.end_time <= end)
            .order_by(TimeBlock.start_time, TimeBlock.id)
        )
        return await self._scalars(stmt)


class SqlDailyPlanRepository(SqlOwnedRepository, base.DailyPlanRepository):
    model = DailyPlan

    async def get_for_day(self, user_id: int, day: date) -> Optional[DailyPlan]:
        stmt = (
            select(DailyPlan)
            .where(DailyPlan.user_id == user_id)
            .where(DailyPlan.date == truncate_to_day(day))
        )
        return await self._first(stmt)


class SqlWeeklyPlanRepository(SqlOwnedRepository, base.WeeklyPlanRepository):
    model = WeeklyPlan

    async def get_for_start(self, user_id: int, start_date: date) -> Optional[WeeklyPlan]:
        stmt = (
            select(WeeklyPlan)
            .where(WeeklyPlan.user_id == user_id)
            .where(WeeklyPlan.start_date == start_date)
        )
        return await self._first(stmt)

    async def get_containing(self, user_id: int, day: date) -> Optional[WeeklyPlan]:
        day = truncate_to_day(day)
        stmt = (
            select(WeeklyPlan)
            .where(WeeklyPlan.user_id == user_id)
            .where(WeeklyPlan.start_date <= day)
            .where(WeeklyPlan.end_date >= day)
            .order_by(WeeklyPlan.start_date.desc(), WeeklyPlan.id)
        )
        return await self._first(stmt)


class SqlIntegrationRepository(SqlOwnedRepository, base.IntegrationRepository):
    model = Integration

    async def get_by_type(self, user_id: int, type: str) -> Optional[Integration]:
        stmt = (
            select(Integration)
            .where(Integration.user_id == user_id)
            .where(Integration.type == type)
        )
        return await self._first(stmt)


class SqlStorage(base.Storage):
    def __init__(self, db: AsyncSession):
        self.db = db
        self.users = SqlUserRepository(db)
        self.sessions = SqlSessionRepository(db)
        self.goals = SqlGoalRepository(db)
        self.tasks = SqlTaskRepository(db)
        self.time_blocks = SqlTimeBlockRepository(db)
        self.daily_plans = SqlDailyPlanRepository(db)
        self.weekly_plans = SqlWeeklyPlanRepository(db)
        self.integrations = SqlIntegrationRepository(db)


async def get_storage(db: AsyncSession = Depends(get_db)) -> base.Storage:
    return SqlStorage(db)
