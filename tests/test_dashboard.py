"""
Dashboard & Root Endpoint Tests
===============================
"""

from datetime import timedelta

from httpx import AsyncClient

from app.config import settings
from app.utils.time import utcnow


async def test_root(client: AsyncClient):
    response = await client.get("/")
    assert response.status_code == 200
    assert response.json() == {"name": settings.APP_NAME, "version": settings.APP_VERSION}


async def test_empty_dashboard(alice: AsyncClient):
    response = await alice.get("/api/dashboard")

    assert response.status_code == 200
    assert response.json() == {
        "tasksByStatus": {"todo": 0, "in-progress": 0, "done": 0},
        "goalsByTimeframe": {"long-term": 0, "monthly": 0, "weekly": 0, "daily": 0},
        "overdueTasks": 0,
        "todaysTimeBlocks": [],
    }


async def test_dashboard_summary(alice: AsyncClient, bob: AsyncClient):
    now = utcnow()
    yesterday = (now - timedelta(days=1)).isoformat()
    tomorrow = (now + timedelta(days=1)).isoformat()
    today = now.date().isoformat()

    await alice.post("/api/tasks", json={"title": "late", "dueDate": yesterday})
    await alice.post("/api/tasks", json={"title": "late but done", "dueDate": yesterday, "status": "done"})
    await alice.post("/api/tasks", json={"title": "on time", "dueDate": tomorrow, "status": "in-progress"})
    await alice.post("/api/goals", json={"title": "g", "category": "c", "timeframe": "weekly"})
    await alice.post("/api/timeblocks", json={
        "title": "today", "startTime": f"{today}T00:00:00Z", "endTime": f"{today}T00:30:00Z",
    })
    await bob.post("/api/tasks", json={"title": "bob's", "dueDate": yesterday})

    data = (await alice.get("/api/dashboard")).json()

    assert data["tasksByStatus"] == {"todo": 1, "in-progress": 1, "done": 1}
    assert data["goalsByTimeframe"]["weekly"] == 1
    assert data["overdueTasks"] == 1
    assert [b["title"] for b in data["todaysTimeBlocks"]] == ["today"]
