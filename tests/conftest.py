"""
Planner API - Test Fixtures
===========================

Every API test runs once per storage backend: the SQL backend on an
in-memory SQLite database, and the in-memory double.
"""

from collections.abc import AsyncGenerator, Generator
from typing import Any

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.database import Base
from app.main import app
from app.storage.sql import SqlStorage, get_storage
from memory_storage import MemoryStorage

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

PASSWORD = "secret123"


# ==========================================================================
# Storage Fixtures
# ==========================================================================

@pytest_asyncio.fixture(scope="function")
async def sql_sessionmaker() -> AsyncGenerator[async_sessionmaker, None]:
    """Fresh in-memory database per test; tables created before, dropped after."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture(params=["sql", "memory"])
def backend(request, sql_sessionmaker: async_sessionmaker) -> Generator[str, None, None]:
    """Route ``get_storage`` to the backend under test."""
    if request.param == "sql":
        async def override_get_storage():
            async with sql_sessionmaker() as session:
                yield SqlStorage(session)
    else:
        memory = MemoryStorage()

        async def override_get_storage():
            return memory

    app.dependency_overrides[get_storage] = override_get_storage
    yield request.param
    app.dependency_overrides.clear()


# ==========================================================================
# Client Fixtures
# ==========================================================================

@pytest_asyncio.fixture
async def client(backend: str) -> AsyncGenerator[AsyncClient, None]:
    """Anonymous client."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def make_user(backend: str):
    """Factory returning a logged-in client for a freshly registered user."""
    clients = []

    async def _make_user(username: str, **profile: Any) -> AsyncClient:
        http = AsyncClient(transport=ASGITransport(app=app), base_url="http://test")
        clients.append(http)
        response = await http.post("/api/register", json={
            "username": username,
            "email": f"{username}@example.com",
            "password": PASSWORD,
            **profile,
        })
        assert response.status_code == 201, response.text
        http.user = response.json()
        return http

    yield _make_user

    for http in clients:
        await http.aclose()


@pytest_asyncio.fixture
async def alice(make_user) -> AsyncClient:
    return await make_user("alice")


@pytest_asyncio.fixture
async def bob(make_user) -> AsyncClient:
    return await make_user("bob")
