from __future__ import annotations

import chess
import pytest

from opponent.config import Config
from web import create_app


@pytest.fixture
def client(timer_factory):
    app = create_app(Config(), timer_factory=timer_factory)
    return app.test_client()


def test_new_game(client, timers):
    r = client.post("/api/new", json={})
    assert r.status_code == 200
    data = r.get_json()
    assert data["fen"] == chess.STARTING_FEN
    assert len(data["legal_moves"]) == 20
    assert data["thinking"] is False
    assert timers == []


def test_move_then_ai_replies(client, timers):
    client.post("/api/new", json={"level": 4})
    r = client.post("/api/move", json={"move": "e2e4"})
    assert r.status_code == 200
    assert r.get_json()["thinking"] is True
    assert len(timers) == 1

    timers[0].fire()
    data = client.get("/api/state").get_json()
    assert data["thinking"] is False
    assert data["turn"] == "white"
    assert data["last_move"] is not None
    assert data["last_move"] != "e2e4"


def test_human_plays_black(client, timers):
    r = client.post("/api/new", json={"color": "black", "level": 1})
    data = r.get_json()
    assert data["ai_color"] == "white"
    assert data["thinking"] is True

    timers[0].fire()
    assert client.get("/api/state").get_json()["turn"] == "black"


def test_new_game_cancels_pending_move(client, timers):
    client.post("/api/new", json={})
    client.post("/api/move", json={"move": "e2e4"})
    r = client.post("/api/new", json={})
    assert r.get_json()["thinking"] is False

    timers[0].fire()
    data = client.get("/api/state").get_json()
    assert data["fen"] == chess.STARTING_FEN
    assert data["last_move"] is None


@pytest.mark.parametrize("payload", [{"fen": "garbage"}, {"level": 9}, {"mode": "online"}])
def test_rejected_new_game_keeps_ai_thinking(client, timers, payload):
    client.post("/api/new", json={"level": 1})
    client.post("/api/move", json={"move": "e2e4"})

    r = client.post("/api/new", json=payload)
    assert r.status_code == 400
    data = client.get("/api/state").get_json()
    assert data["turn"] == "black"
    assert data["thinking"] is True

    # The first timer was cancelled; the re-armed one plays the reply
    assert timers[0].fire() is None
    timers[-1].fire()
    data = client.get("/api/state").get_json()
    assert data["turn"] == "white"
    assert client.post("/api/move", json={"move": "d2d4"}).status_code == 200


def test_move_rejected_while_thinking(client, timers):
    client.post("/api/new", json={})
    client.post("/api/move", json={"move": "e2e4"})
    r = client.post("/api/move", json={"move": "e7e5"})
    assert r.status_code == 409


@pytest.mark.parametrize(
    "path,payload",
    [
        ("/api/move", {}),
        ("/api/move", {"move": "e2e5"}),
        ("/api/new", {"level": 9}),
        ("/api/new", {"color": "green"}),
        ("/api/new", {"fen": "garbage"}),
        ("/api/level", {}),
        ("/api/level", {"level": 0}),
        ("/api/promotion", {"piece": "q"}),
    ],
)
def test_bad_requests(client, path, payload):
    client.post("/api/new", json={})
    r = client.post(path, json=payload)
    assert r.status_code == 400
    assert "error" in r.get_json()


def test_change_level(client):
    client.post("/api/new", json={})
    r = client.post("/api/level", json={"level": 5})
    assert r.get_json()["level"] == 5


def test_undo_returns_to_human_turn(client, timers):
    client.post("/api/new", json={"level": 1})
    client.post("/api/move", json={"move": "e2e4"})
    timers[0].fire()

    data = client.post("/api/undo").get_json()
    assert data["fen"] == chess.STARTING_FEN
    assert data["thinking"] is False


def test_undo_while_thinking_cancels(client, timers):
    client.post("/api/new", json={"level": 1})
    client.post("/api/move", json={"move": "e2e4"})

    data = client.post("/api/undo").get_json()
    assert data["fen"] == chess.STARTING_FEN
    assert data["thinking"] is False
    assert timers[0].fire() is None


def test_promotion_flow(client, timers):
    client.post("/api/new", json={"fen": "8/P6k/8/8/8/8/8/K7 w - - 0 1", "level": 2})
    data = client.post("/api/move", json={"move": "a7a8"}).get_json()
    assert data["pending_promotion"] == "a7a8"
    assert data["thinking"] is False

    data = client.post("/api/promotion", json={"piece": "r"}).get_json()
    assert data["pending_promotion"] is None
    assert data["thinking"] is True
    assert chess.Board(data["fen"]).piece_at(chess.A8) == chess.Piece(chess.ROOK, chess.WHITE)
