"""
Integration API Tests
=====================
"""

from httpx import AsyncClient


class TestIntegrations:
    async def test_create_and_fetch_by_type(self, alice: AsyncClient):
        response = await alice.post("/api/integrations", json={
            "type": "google_calendar",
            "credentials": {"refreshToken": "abc"},
        })

        assert response.status_code == 201
        integration = response.json()
        assert integration["type"] == "google_calendar"
        assert integration["syncStatus"] == "inactive"
        assert integration["lastSynced"] is None
        assert "credentials" not in integration

        fetched = await alice.get("/api/integrations/google_calendar")
        assert fetched.json()["id"] == integration["id"]

    async def test_one_per_type(self, alice: AsyncClient):
        assert (await alice.post("/api/integrations", json={"type": "gmail"})).status_code == 201
        assert (await alice.post("/api/integrations", json={"type": "gmail"})).status_code == 409

    async def test_unknown_type(self, alice: AsyncClient):
        response = await alice.post("/api/integrations", json={"type": "slack"})
        assert response.status_code == 400
        assert response.json()["field"] == "type"

        assert (await alice.get("/api/integrations/slack")).status_code == 400

    async def test_not_connected(self, alice: AsyncClient):
        assert (await alice.get("/api/integrations/todoist")).status_code == 404

    async def test_record_sync(self, alice: AsyncClient):
        integration = (await alice.post("/api/integrations", json={"type": "todoist"})).json()

        response = await alice.patch(f"/api/integrations/{integration['id']}", json={
            "syncStatus": "active",
            "lastSynced": "2025-03-04T09:00:00Z",
        })

        assert response.status_code == 200
        assert response.json()["syncStatus"] == "active"
        assert response.json()["lastSynced"] == "2025-03-04T09:00:00"

    async def test_type_cannot_be_changed(self, alice: AsyncClient):
        integration = (await alice.post("/api/integrations", json={"type": "todoist"})).json()
        response = await alice.patch(f"/api/integrations/{integration['id']}", json={"type": "gmail"})
        assert response.status_code == 400

    async def test_disconnect(self, alice: AsyncClient):
        integration = (await alice.post("/api/integrations", json={"type": "todoist"})).json()
        assert (await alice.delete(f"/api/integrations/{integration['id']}")).status_code == 204
        assert (await alice.get("/api/integrations/todoist")).status_code == 404
