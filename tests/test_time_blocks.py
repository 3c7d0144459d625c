"""
Time Block API Tests
====================
"""

import pytest
from httpx import AsyncClient


async def create_block(http: AsyncClient, start: str, end: str, **fields) -> dict:
    payload = {"title": "Focus", "startTime": start, "endTime": end, **fields}
    response = await http.post("/api/timeblocks", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


class TestCreateTimeBlock:
    async def test_create(self, alice: AsyncClient):
        block = await create_block(alice, "2025-03-04T09:00:00Z", "2025-03-04T10:30:00Z", buffer=10)

        assert block["title"] == "Focus"
        assert block["startTime"] == "2025-03-04T09:00:00"
        assert block["endTime"] == "2025-03-04T10:30:00"
        assert block["buffer"] == 10
        assert block["taskId"] is None

    async def test_offsets_are_normalized_to_utc(self, alice: AsyncClient):
        block = await create_block(alice, "2025-03-04T11:00:00+02:00", "2025-03-04T12:00:00+02:00")
        assert block["startTime"] == "2025-03-04T09:00:00"

    @pytest.mark.parametrize("end", ["2025-03-04T09:00:00Z", "2025-03-04T08:00:00Z"])
    async def test_end_must_follow_start(self, alice: AsyncClient, end):
        response = await alice.post("/api/timeblocks", json={
            "title": "Focus", "startTime": "2025-03-04T09:00:00Z", "endTime": end,
        })
        assert response.status_code == 400
        assert response.json()["field"] == "endTime"

    async def test_linked_task_must_be_own(self, alice: AsyncClient, bob: AsyncClient):
        task = (await bob.post("/api/tasks", json={"title": "bob's"})).json()
        response = await alice.post("/api/timeblocks", json={
            "title": "Focus",
            "taskId": task["id"],
            "startTime": "2025-03-04T09:00:00Z",
            "endTime": "2025-03-04T10:00:00Z",
        })
        assert response.status_code == 400
        assert response.json()["field"] == "taskId"


class TestRangeQuery:
    async def test_only_fully_contained_blocks(self, alice: AsyncClient):
        await create_block(alice, "2025-03-04T07:00:00Z", "2025-03-04T08:30:00Z", title="straddles start")
        await create_block(alice, "2025-03-04T10:00:00Z", "2025-03-04T11:00:00Z", title="late")
        await create_block(alice, "2025-03-04T08:00:00Z", "2025-03-04T09:00:00Z", title="early")
        await create_block(alice, "2025-03-04T16:30:00Z", "2025-03-04T17:30:00Z", title="straddles end")
        await create_block(alice, "2025-03-05T09:00:00Z", "2025-03-05T10:00:00Z", title="next day")

        response = await alice.get("/api/timeblocks", params={
            "startDate": "2025-03-04T08:00:00Z",
            "endDate": "2025-03-04T17:00:00Z",
        })

        assert response.status_code == 200
        assert [b["title"] for b in response.json()] == ["early", "late"]

    async def test_other_users_blocks_are_hidden(self, alice: AsyncClient, bob: AsyncClient):
        await create_block(bob, "2025-03-04T09:00:00Z", "2025-03-04T10:00:00Z")
        response = await alice.get("/api/timeblocks", params={
            "startDate": "2025-03-04T00:00:00Z",
            "endDate": "2025-03-05T00:00:00Z",
        })
        assert response.json() == []

    @pytest.mark.parametrize("params", [
        {},
        {"startDate": "2025-03-04T00:00:00Z"},
        {"endDate": "2025-03-05T00:00:00Z"},
    ])
    async def test_both_bounds_are_required(self, alice: AsyncClient, params):
        response = await alice.get("/api/timeblocks", params=params)
        assert response.status_code == 400

    async def test_unparseable_bound(self, alice: AsyncClient):
        response = await alice.get("/api/timeblocks", params={
            "startDate": "yesterday", "endDate": "2025-03-05T00:00:00Z",
        })
        assert response.status_code == 400
        assert response.json()["field"] == "startDate"


class TestUpdateTimeBlock:
    async def test_move_block(self, alice: AsyncClient):
        block = await create_block(alice, "2025-03-04T09:00:00Z", "2025-03-04T10:00:00Z")

        response = await alice.patch(f"/api/timeblocks/{block['id']}", json={
            "startTime": "2025-03-04T13:00:00Z", "endTime": "2025-03-04T14:00:00Z",
        })

        assert response.status_code == 200
        assert response.json()["startTime"] == "2025-03-04T13:00:00"

    async def test_patch_is_checked_against_stored_times(self, alice: AsyncClient):
        block = await create_block(alice, "2025-03-04T09:00:00Z", "2025-03-04T10:00:00Z")

        response = await alice.patch(f"/api/timeblocks/{block['id']}", json={
            "startTime": "2025-03-04T11:00:00Z",
        })

        assert response.status_code == 400
        assert response.json()["field"] == "endTime"
        stored = (await alice.get(f"/api/timeblocks/{block['id']}")).json()
        assert stored["startTime"] == "2025-03-04T09:00:00"

    async def test_delete(self, alice: AsyncClient):
        block = await create_block(alice, "2025-03-04T09:00:00Z", "2025-03-04T10:00:00Z")
        assert (await alice.delete(f"/api/timeblocks/{block['id']}")).status_code == 204
        assert (await alice.get(f"/api/timeblocks/{block['id']}")).status_code == 404
