"""
Storage Contract Tests
======================

Both backends must behave the same behind the storage interface.
"""

from collections.abc import AsyncGenerator
from datetime import date, datetime

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import async_sessionmaker

from app.storage.base import ConflictError, Storage
from app.storage.sql import SqlStorage
from memory_storage import MemoryStorage


@pytest_asyncio.fixture(params=["sql", "memory"])
async def storage(request, sql_sessionmaker: async_sessionmaker) -> AsyncGenerator[Storage, None]:
    if request.param == "memory":
        yield MemoryStorage()
        return
    async with sql_sessionmaker() as session:
        yield SqlStorage(session)


@pytest_asyncio.fixture
async def user_id(storage: Storage) -> int:
    user = await storage.users.create({
        "username": "alice", "email": "alice@example.com", "password_hash": "x",
    })
    return user.id


async def test_create_assigns_id_and_defaults(storage: Storage, user_id: int):
    task = await storage.tasks.create({"user_id": user_id, "title": "Write spec"})

    assert isinstance(task.id, int)
    assert isinstance(task.created_at, datetime)
    assert task.status == "todo"
    assert task.completed is False
    assert task.source == "manual"
    assert (await storage.tasks.get(task.id)).id == task.id


async def test_update_is_a_shallow_merge(storage: Storage, user_id: int):
    task = await storage.tasks.create({"user_id": user_id, "title": "a", "description": "keep"})

    updated = await storage.tasks.update(task.id, {"title": "b"})

    assert updated.title == "b"
    assert updated.description == "keep"
    assert await storage.tasks.update(999, {"title": "c"}) is None


async def test_delete(storage: Storage, user_id: int):
    goal = await storage.goals.create({
        "user_id": user_id, "title": "g", "category": "c", "timeframe": "daily",
    })

    assert await storage.goals.delete(goal.id) is True
    assert await storage.goals.get(goal.id) is None
    assert await storage.goals.delete(goal.id) is False


async def test_list_by_user_filters_and_orders_by_id(storage: Storage, user_id: int):
    other = await storage.users.create({
        "username": "bob", "email": "bob@example.com", "password_hash": "x",
    })
    for title, status in [("one", "todo"), ("two", "done"), ("three", "todo")]:
        await storage.tasks.create({"user_id": user_id, "title": title, "status": status})
    await storage.tasks.create({"user_id": other.id, "title": "bob's", "status": "todo"})

    todo = await storage.tasks.list_by_user(user_id, status="todo")

    assert [t.title for t in todo] == ["one", "three"]
    assert len(await storage.tasks.list_by_user(user_id)) == 3


async def test_user_lookups(storage: Storage, user_id: int):
    assert (await storage.users.get_by_username("alice")).id == user_id
    assert (await storage.users.get_by_email("alice@example.com")).id == user_id
    assert await storage.users.get_by_username("nobody") is None
    assert await storage.users.get_by_external_id("ext-1") is None


async def test_sessions_are_keyed_by_token(storage: Storage, user_id: int):
    expires = datetime(2030, 1, 1)
    await storage.sessions.create({"token": "t1", "user_id": user_id, "expires_at": expires})
    await storage.sessions.create({"token": "t2", "user_id": user_id, "expires_at": expires})

    assert (await storage.sessions.get("t1")).user_id == user_id
    assert await storage.sessions.delete_for_user(user_id) == 2
    assert await storage.sessions.get("t2") is None


async def test_time_block_range_is_full_containment(storage: Storage, user_id: int):
    def block(title, start, end):
        return storage.time_blocks.create({
            "user_id": user_id, "title": title,
            "start_time": datetime(2025, 3, 4, *start), "end_time": datetime(2025, 3, 4, *end),
        })

    await block("inside-late", (14, 0), (15, 0))
    await block("inside-early", (9, 0), (10, 0))
    await block("straddles", (7, 30), (9, 30))
    await block("edges", (8, 0), (17, 0))

    found = await storage.time_blocks.list_in_range(
        user_id, datetime(2025, 3, 4, 8, 0), datetime(2025, 3, 4, 17, 0)
    )

    assert [b.title for b in found] == ["edges", "inside-early", "inside-late"]


async def test_daily_plan_lookup_by_day(storage: Storage, user_id: int):
    plan = await storage.daily_plans.create({"user_id": user_id, "date": date(2025, 3, 4)})

    assert (await storage.daily_plans.get_for_day(user_id, date(2025, 3, 4))).id == plan.id
    assert (await storage.daily_plans.get_for_day(user_id, datetime(2025, 3, 4, 22, 0))).id == plan.id
    assert await storage.daily_plans.get_for_day(user_id, date(2025, 3, 5)) is None
    assert plan.task_ids == [] and plan.time_block_ids == []


async def test_weekly_plan_lookups(storage: Storage, user_id: int):
    first = await storage.weekly_plans.create({
        "user_id": user_id, "start_date": date(2025, 3, 3), "end_date": date(2025, 3, 9),
    })
    second = await storage.weekly_plans.create({
        "user_id": user_id, "start_date": date(2025, 3, 10), "end_date": date(2025, 3, 16),
    })

    assert (await storage.weekly_plans.get_for_start(user_id, date(2025, 3, 10))).id == second.id
    assert (await storage.weekly_plans.get_containing(user_id, date(2025, 3, 9))).id == first.id
    assert (await storage.weekly_plans.get_containing(user_id, date(2025, 3, 10))).id == second.id
    assert await storage.weekly_plans.get_containing(user_id, date(2025, 3, 17)) is None
    assert first.time_budgets == {} and first.goal_ids == []


async def test_integration_lookup_by_type(storage: Storage, user_id: int):
    created = await storage.integrations.create({
        "user_id": user_id, "type": "gmail", "credentials": {"token": "x"},
    })

    found = await storage.integrations.get_by_type(user_id, "gmail")

    assert found.id == created.id
    assert found.sync_status == "inactive"
    assert await storage.integrations.get_by_type(user_id, "todoist") is None


@pytest.mark.parametrize("repo", ["goals", "tasks", "time_blocks", "daily_plans", "weekly_plans", "integrations"])
async def test_get_missing_returns_none(storage: Storage, repo):
    assert await getattr(storage, repo).get(12345) is None


async def test_duplicate_daily_plan_raises_conflict(storage: Storage, user_id: int):
    plan = await storage.daily_plans.create({"user_id": user_id, "date": date(2025, 3, 4)})
    plan_id = plan.id

    with pytest.raises(ConflictError):
        await storage.daily_plans.create({"user_id": user_id, "date": date(2025, 3, 4)})

    # the failed write leaves the storage usable
    assert (await storage.daily_plans.get_for_day(user_id, date(2025, 3, 4))).id == plan_id
    assert len(await storage.daily_plans.list_by_user(user_id)) == 1


async def test_duplicate_username_raises_conflict(storage: Storage, user_id: int):
    with pytest.raises(ConflictError):
        await storage.users.create({
            "username": "alice", "email": "other@example.com", "password_hash": "x",
        })

    assert (await storage.users.get_by_email("other@example.com")) is None


async def test_update_onto_a_taken_key_raises_conflict(storage: Storage, user_id: int):
    await storage.weekly_plans.create({
        "user_id": user_id, "start_date": date(2025, 3, 3), "end_date": date(2025, 3, 9),
    })
    later = await storage.weekly_plans.create({
        "user_id": user_id, "start_date": date(2025, 3, 10), "end_date": date(2025, 3, 16),
    })
    later_id = later.id

    with pytest.raises(ConflictError):
        await storage.weekly_plans.update(later_id, {"start_date": date(2025, 3, 3)})

    assert (await storage.weekly_plans.get_for_start(user_id, date(2025, 3, 10))).id == later_id
