"""Tests for simulator API routes."""
import httpx
import pytest

from rov_draft.main import app

pytestmark = pytest.mark.anyio


@pytest.fixture
async def client(monkeypatch):
    """Async test client with a fresh registry and diagnostics off."""
    monkeypatch.delenv("SCORING_DIAGNOSTICS", raising=False)
    app.state.repository = None
    app.state.reference = None
    app.state.registry = None

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.state.registry = None


class TestRunSimulation:
    """Tests for POST /api/simulator/runs."""

    async def test_full_simulation(self, client, reference_payload):
        response = await client.post("/api/simulator/runs", json={"reference": reference_payload})
        assert response.status_code == 200
        data = response.json()
        assert data["run_id"].startswith("sim_")
        assert len(data["records"]) == 18
        assert data["final_state"]["finished"] is True
        assert len(data["final_state"]["blue_picks"]) == 5
        assert len(data["final_state"]["red_bans"]) == 4

        first = data["records"][0]
        assert first["step_index"] == 0
        assert first["side"] == "BLUE"
        assert first["action"] == "BAN"
        assert first["analysis"]["slot_context"] == "Blue Ban 1 (phase 1)"
        assert first["top_candidates"][0]["hero_id"] == first["hero_id"]

    async def test_simulation_from_partial_actions(self, client, reference_payload):
        payload = {
            "reference": reference_payload,
            "actions": [
                {"side": "BLUE", "action": "BAN", "hero_id": "28"},
                {"side": "RED", "action": "BAN", "hero_id": "5"},
            ],
        }
        data = (await client.post("/api/simulator/runs", json=payload)).json()
        assert len(data["records"]) == 16
        assert data["records"][0]["step_index"] == 2
        assert data["final_state"]["blue_bans"][0] == "28"

    async def test_strategy_core_shapes_the_draft(self, client, reference_payload):
        payload = {
            "reference": reference_payload,
            "blue_team": {"name": "Blue", "strategy": {"id": "s", "name": "Dive", "core": ["50"]}},
        }
        data = (await client.post("/api/simulator/runs", json=payload)).json()
        assert "50" not in data["final_state"]["blue_bans"]
        assert "50" in data["final_state"]["blue_picks"]

    async def test_simulate_rest_of_room_leaves_room_untouched(self, client, reference_payload):
        await client.post("/api/drafts", json={"reference": reference_payload, "room_id": "room-1"})
        await client.post("/api/drafts/room-1/actions", json={"hero_id": "28"})

        data = (await client.post("/api/simulator/runs", json={"room_id": "room-1"})).json()
        assert data["run_id"] == "room-1"
        assert len(data["records"]) == 17

        room = (await client.get("/api/drafts/room-1")).json()
        assert room["state"]["step_index"] == 1

    async def test_unknown_room(self, client):
        response = await client.post("/api/simulator/runs", json={"room_id": "nope"})
        assert response.status_code == 404

    async def test_no_reference_data(self, client):
        response = await client.post("/api/simulator/runs", json={})
        assert response.status_code == 400

    async def test_inconsistent_actions(self, client, reference_payload):
        payload = {
            "reference": reference_payload,
            "actions": [
                {"side": "BLUE", "action": "BAN", "hero_id": "28"},
                {"side": "RED", "action": "BAN", "hero_id": "28"},
            ],
        }
        response = await client.post("/api/simulator/runs", json=payload)
        assert response.status_code == 400
