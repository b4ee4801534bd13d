from __future__ import annotations

import fakeredis
from fastapi.testclient import TestClient

from playdate.arcade import Arcade
from playdate.players import CHARACTER_KEY_PREFIX
from playdate.session_store import SESSION_KEY
from playdate.surfaces import encode_data_url


def test_healthcheck(client: TestClient) -> None:
    assert client.get("/healthcheck").json() == {"status": "ok"}


def test_catalog_lists_three_games(client: TestClient) -> None:
    games = client.get("/games").json()["games"]
    assert [g["id"] for g in games] == ["memory_match", "word_guess", "draw_together"]
    assert [g["difficulty"] for g in games] == ["Easy", "Medium", "Hard"]


def test_no_live_game_is_404(client: TestClient) -> None:
    assert client.get("/game").status_code == 404
    assert client.post("/game/actions/flip", json={"card_id": 0}).status_code == 404


def test_unknown_game_is_422(client: TestClient) -> None:
    assert client.post("/games/chess").status_code == 422


def test_select_memory_match(client: TestClient) -> None:
    resp = client.post("/games/memory_match")
    assert resp.status_code == 201
    view = resp.json()

    assert view["game_type"] == "memory_match"
    assert len(view["state"]["cards"]) == 16
    assert view["state"]["phase"] == "playing"
    assert [c["id"] for c in view["characters"]] == ["player1", "player2"]
    assert view["dialogue"][0]["text"] == "Ready to test your memory?"


def test_memory_match_flow_through_api(client: TestClient, arcade: Arcade, scheduler) -> None:  # type: ignore[no-untyped-def]
    cards = client.post("/games/memory_match").json()["state"]["cards"]
    first = cards[0]
    partner = next(c for c in cards[1:] if c["symbol"] == first["symbol"])

    client.post("/game/actions/flip", json={"card_id": first["id"]})
    view = client.post("/game/actions/flip", json={"card_id": partner["id"]}).json()
    assert view["timer_pending"] is True

    scheduler.advance(1.0)

    view = client.get("/game").json()
    assert view["state"]["matched_pairs"] == 1
    assert client.get("/session").json()["score"] == {"player1": 2, "player2": 0}
    assert arcade.session.state.score.player1 == 2


def test_bad_action_payloads_are_422(client: TestClient) -> None:
    client.post("/games/memory_match")

    assert client.post("/game/actions/flip", json={}).status_code == 422
    assert client.post("/game/actions/flip", json={"card_id": "zero"}).status_code == 422
    assert client.post("/game/actions/submit_clue", json={"text": "hi"}).status_code == 422


def test_word_guess_round_through_api(client: TestClient) -> None:
    client.post("/games/word_guess")

    view = client.post("/game/actions/start_round").json()
    word = view["state"]["word"]
    assert view["state"]["phase"] == "clue"

    client.post("/game/actions/submit_clue", json={"text": "you know it"})
    view = client.post("/game/actions/submit_guess", json={"text": word.upper()}).json()

    assert view["state"]["outcome"] == "correct"
    assert view["state"]["score"] == {"player1": 0, "player2": 5}
    assert client.get("/session").json()["score"]["player2"] == 5


def test_canvas_upload_save_and_download(client: TestClient) -> None:
    client.post("/games/draw_together")
    image = b"\x89PNG\r\n\x1a\nfake"

    resp = client.put("/game/surface", json={"data_url": encode_data_url(image)})
    assert resp.status_code == 204
    assert client.get("/game").json()["state"]["surface"] == encode_data_url(image)

    download = client.get("/game/surface/download")
    assert download.status_code == 200
    assert download.content == image
    assert 'filename="couples-drawing.png"' in download.headers["content-disposition"]

    view = client.post("/game/actions/save").json()
    assert view["state"]["gallery_size"] == 1
    assert view["state"]["current_player"] == "player2"
    assert view["state"]["surface"] is None
    assert "gallery" not in view["state"]


def test_canvas_rejects_bad_upload_and_direction(client: TestClient) -> None:
    client.post("/games/draw_together")

    assert client.put("/game/surface", json={"data_url": "not a data url"}).status_code == 422
    assert client.post("/game/actions/navigate", json={"direction": "up"}).status_code == 422


def test_surface_upload_needs_canvas(client: TestClient) -> None:
    client.post("/games/memory_match")
    resp = client.put("/game/surface", json={"data_url": encode_data_url(b"x")})
    assert resp.status_code == 422


def test_leave_game(client: TestClient) -> None:
    client.post("/games/word_guess")
    client.post("/game/actions/start_round")

    assert client.delete("/game").status_code == 204
    assert client.get("/game").status_code == 404


def test_switching_games_cancels_pending_timer(client: TestClient, scheduler) -> None:  # type: ignore[no-untyped-def]
    client.post("/games/word_guess")
    client.post("/game/actions/start_round")
    assert len(scheduler.pending) == 1

    client.post("/games/draw_together")

    assert scheduler.pending == []


def test_character_update_and_randomize(client: TestClient, r: fakeredis.FakeRedis) -> None:
    resp = client.put("/characters/player1", json={"name": "Robin", "hair_color": "#112233"})
    assert resp.status_code == 200
    assert resp.json()["name"] == "Robin"
    assert r.exists(f"{CHARACTER_KEY_PREFIX}player1")

    assert client.put("/characters/player1", json={"name": ""}).status_code == 422
    assert client.put("/characters/player3", json={"name": "X"}).status_code == 422

    rolled = client.post("/characters/player2/randomize").json()
    assert rolled["id"] == "player2"
    assert rolled["name"] == "Player 2"

    names = [c["name"] for c in client.get("/characters").json()]
    assert names == ["Robin", "Player 2"]


def test_new_game_uses_current_characters(client: TestClient) -> None:
    client.put("/characters/player2", json={"name": "Jules"})
    view = client.post("/games/draw_together").json()
    assert view["characters"][1]["name"] == "Jules"


def test_session_is_persisted(client: TestClient, r: fakeredis.FakeRedis) -> None:
    client.post("/games/draw_together")
    client.post("/game/actions/save")

    assert '"player1":3' in r.get(SESSION_KEY).replace(" ", "")
