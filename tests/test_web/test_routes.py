"""Tests for the HTTP and WebSocket game API."""

import pytest
from fastapi.testclient import TestClient
from starlette.websockets import WebSocketDisconnect

from web.api import app

# Long enough that the opponent never acts while a test is looking
SLOW_OPPONENT = {"opponent_delay_ms": 60_000, "skip_delay_ms": 60_000}


@pytest.fixture
def client():
    with TestClient(app) as client:
        yield client


@pytest.fixture
def game(client):
    response = client.post(
        "/api/games", json={"first_side": "player", "seed": 7, **SLOW_OPPONENT}
    )
    assert response.status_code == 200
    data = response.json()
    yield data
    client.delete(f"/api/games/{data['game_id']}")


class TestCreateGame:
    def test_create_deals_game(self, game):
        state = game["state"]
        assert len(state["player_hand"]) == 8
        assert state["opponent_hand_count"] == 8
        assert state["deck_count"] == 35
        assert state["current_side"] == "PLAYER"
        assert state["phase"] == "MAIN"
        assert state["generation"] == 1

    def test_unknown_strategy(self, client):
        response = client.post("/api/games", json={"strategy": "clairvoyant"})
        assert response.status_code == 400
        assert "Unknown strategy" in response.json()["detail"]

    def test_unknown_side(self, client):
        response = client.post("/api/games", json={"first_side": "dealer"})
        assert response.status_code == 400

    def test_list_strategies(self, client):
        response = client.get("/api/strategies")
        names = {s["name"] for s in response.json()}
        assert names == {"first-playable", "random"}

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "healthy"}


class TestGameEndpoints:
    def test_get_game(self, client, game):
        response = client.get(f"/api/games/{game['game_id']}")
        assert response.status_code == 200
        assert response.json()["move_history"] == []
        assert response.json()["state"]["game_id"] == game["game_id"]

    def test_listed(self, client, game):
        ids = [s["id"] for s in client.get("/api/games").json()]
        assert game["game_id"] in ids

    def test_missing_game(self, client):
        assert client.get("/api/games/nope").status_code == 404
        assert client.post("/api/games/nope/draw").status_code == 404
        assert client.delete("/api/games/nope").status_code == 404

    def test_draw_passes_turn(self, client, game):
        response = client.post(f"/api/games/{game['game_id']}/draw")

        assert response.status_code == 200
        state = response.json()["state"]
        assert len(state["player_hand"]) == 9
        assert state["current_side"] == "OPPONENT"
        assert state["message"] == "Player drew 1 card."

        # Opponent's turn now
        response = client.post(f"/api/games/{game['game_id']}/draw")
        assert response.status_code == 400
        assert response.json()["detail"] == "Not your turn"

    def test_play_unknown_card(self, client, game):
        response = client.post(
            f"/api/games/{game['game_id']}/play", json={"card_ids": ["nope"]}
        )
        assert response.status_code == 400
        assert "not in hand" in response.json()["detail"]

    def test_choose_suit_without_eight(self, client, game):
        response = client.post(f"/api/games/{game['game_id']}/suit", json={"suit": "hearts"})
        assert response.status_code == 400
        assert response.json()["detail"] == "No eight is waiting for a suit"

    def test_choose_unknown_suit(self, client, game):
        response = client.post(f"/api/games/{game['game_id']}/suit", json={"suit": "stars"})
        assert response.status_code == 400
        assert "Unknown suit" in response.json()["detail"]

    def test_new_game_bumps_generation(self, client, game):
        client.post(f"/api/games/{game['game_id']}/draw")

        response = client.post(
            f"/api/games/{game['game_id']}/new", json={"first_side": "player"}
        )

        state = response.json()["state"]
        assert state["generation"] == 2
        assert state["current_side"] == "PLAYER"
        assert len(state["player_hand"]) == 8
        assert client.get(f"/api/games/{game['game_id']}").json()["move_history"] == []

    def test_delete(self, client, game):
        assert client.delete(f"/api/games/{game['game_id']}").json() == {"deleted": True}
        assert client.get(f"/api/games/{game['game_id']}").status_code == 404


class TestWebSocket:
    def test_state_and_errors(self, client, game):
        with client.websocket_connect(f"/api/ws/game/{game['game_id']}") as ws:
            first = ws.receive_json()
            assert first["type"] == "game_state"
            assert first["state"]["game_id"] == game["game_id"]

            ws.send_json({"type": "get_state"})
            assert ws.receive_json()["type"] == "game_state"

            ws.send_json({"type": "choose_suit", "suit": "hearts"})
            error = ws.receive_json()
            assert error == {"type": "error", "message": "No eight is waiting for a suit"}

            ws.send_json({"type": "choose_suit", "suit": "stars"})
            assert ws.receive_json()["type"] == "error"

            ws.send_json({"type": "shuffle"})
            assert ws.receive_json()["message"] == "Unknown message type: shuffle"

    def test_moves_are_pushed(self, client, game):
        with client.websocket_connect(f"/api/ws/game/{game['game_id']}") as ws:
            ws.receive_json()

            ws.send_json({"type": "draw"})
            event = ws.receive_json()
            assert event["type"] == "move_made"
            assert event["move"]["side"] == "PLAYER"
            assert event["move"]["move_type"] == "DRAW"
            assert event["state"]["current_side"] == "OPPONENT"

            ws.send_json({"type": "new_game"})
            event = ws.receive_json()
            assert event["type"] == "game_started"
            assert event["state"]["generation"] == 2

    def test_unknown_game_closes(self, client):
        with pytest.raises(WebSocketDisconnect):
            with client.websocket_connect("/api/ws/game/nope") as ws:
                ws.receive_json()
