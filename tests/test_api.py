# tests/test_api.py
import pytest
from fastapi.testclient import TestClient

from apps.api import room_api
from conftest import PUZZLE, fixed_dealer
from rooms.config import load_game_config
from rooms.engine import RoomEngine


@pytest.fixture
def client(monkeypatch):
    monkeypatch.setattr(room_api, "engine", RoomEngine(config=load_game_config(), dealer=fixed_dealer))
    return TestClient(room_api.app)


def _create(client, name="api-room"):
    resp = client.post(
        "/rooms",
        json={"name": name, "difficulty": "medium", "player_nickname": "alice", "player_color": "#EF4444"},
    )
    assert resp.status_code == 200
    body = resp.json()
    return body["room"]["id"], body["player"]["id"]


def test_room_flow(client):
    room_id, player_id = _create(client)
    state = client.get(f"/rooms/{room_id}/state").json()
    assert state["room"]["board"] == PUZZLE

    resp = client.post(
        f"/rooms/{room_id}/moves",
        json={"player_id": player_id, "row": 0, "col": 0, "move_type": "number", "value": 9},
    )
    assert resp.status_code == 200
    assert resp.json()["room"]["errors"] == 1

    resp = client.post(f"/rooms/{room_id}/undo/{player_id}")
    assert resp.status_code == 200
    assert resp.json()["room"]["errors"] == 0

    resp = client.post(f"/rooms/{room_id}/undo/{player_id}")
    assert resp.status_code == 400
    assert resp.json()["message"] == "No moves to undo"


def test_rejections_map_to_status_codes(client):
    room_id, player_id = _create(client)
    locked = client.post(
        f"/rooms/{room_id}/moves",
        json={"player_id": player_id, "row": 0, "col": 1, "move_type": "number", "value": 3},
    )
    assert locked.status_code == 400
    assert locked.json()["message"] == "Cell is locked"
    assert client.get("/rooms/999/state").status_code == 404
    dup = client.post(
        "/rooms",
        json={"name": "api-room", "difficulty": "easy", "player_nickname": "x", "player_color": "#000"},
    )
    assert dup.status_code == 409
    assert client.post(f"/rooms/{room_id}/new-game", json={"difficulty": "nope"}).status_code == 400


def test_players_and_new_game(client):
    room_id, alice = _create(client)
    joined = client.post("/rooms/api-room/join", json={"nickname": "bob", "color": "#3B82F6"})
    assert joined.status_code == 200
    bob = joined.json()["player"]["id"]
    sel = client.put(f"/players/{bob}/selection", json={"row": 2, "col": 3, "highlighted_number": 4}).json()
    assert sel["selected_cell"] == [2, 3]
    assert client.put(f"/players/{bob}/pencil", json={"pencil_mode": True}).json()["pencil_mode"] is True
    assert client.delete(f"/players/{bob}").json() == {"message": "Player removed"}
    assert client.delete(f"/players/{bob}").status_code == 404

    state = client.post(f"/rooms/{room_id}/new-game", json={"difficulty": "hard"}).json()
    assert state["room"]["difficulty"] == "hard"
    assert [p["id"] for p in state["players"]] == [alice]


def test_stateless_tools(client):
    cands = client.post("/compute_candidates", json={"grid": PUZZLE}).json()["candidates"]
    assert cands["r1c1"] == [1, 2, 5]
    report = client.post("/sanity_check", json={"original": PUZZLE, "current": PUZZLE}).json()
    assert report == {"ok": True, "issues": []}
