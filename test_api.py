"""HTTP surface: routes, status codes and the error envelope."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from conftest import FakeRuntime, make_settings
from game_console.main import create_app


@pytest.fixture
def runtime() -> FakeRuntime:
    return FakeRuntime()


@pytest.fixture
def client(runtime: FakeRuntime):
    app = create_app(make_settings(SEED_BUILTIN_GAMES=True), runtime=runtime)
    with TestClient(app) as c:
        yield c


def _error_code(resp) -> str:
    return resp.json()["error"]["code"]


class TestSystem:
    def test_health(self, client: TestClient) -> None:
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json()["status"] == "ok"
        assert resp.json()["scheduler"] == "stopped"
        assert "x-process-time" in resp.headers

    def test_root(self, client: TestClient) -> None:
        assert client.get("/").json()["docs"] == "/docs"

    def test_error_envelope_in_openapi(self, client: TestClient) -> None:
        schema = client.get("/openapi.json").json()
        assert "ErrorResponse" in schema["components"]["schemas"]
        responses = schema["paths"]["/v1/runtime/start"]["post"]["responses"]
        assert responses["409"]["content"]["application/json"]["schema"]["$ref"].endswith("/ErrorResponse")


class TestGames:
    def test_builtins_are_seeded(self, client: TestClient) -> None:
        data = client.get("/v1/games").json()
        assert data["total"] == 5
        assert {g["id"] for g in data["items"]} == {
            "builtin-trivia", "builtin-word", "builtin-guess", "builtin-story", "builtin-puzzle",
        }
        assert all(g["source"] == "builtin" for g in data["items"])

    def test_pagination(self, client: TestClient) -> None:
        first = client.get("/v1/games", params={"limit": 2}).json()
        rest = client.get("/v1/games", params={"limit": 10, "offset": 2}).json()
        assert len(first["items"]) == 2
        assert len(rest["items"]) == 3
        assert not {g["id"] for g in first["items"]} & {g["id"] for g in rest["items"]}

    def test_create_get_update(self, client: TestClient) -> None:
        resp = client.post("/v1/games", json={"type": "trivia", "name": "Space Quiz"})
        assert resp.status_code == 201
        game = resp.json()
        assert game["id"].startswith("game_")
        assert game["source"] == "ai-generated"

        resp = client.patch(f"/v1/games/{game['id']}", json={"name": "Space Quiz II"})
        assert resp.json()["name"] == "Space Quiz II"
        assert resp.json()["updatedAt"] is not None
        assert client.get(f"/v1/games/{game['id']}").json()["name"] == "Space Quiz II"

    def test_duplicate_id_conflicts(self, client: TestClient) -> None:
        resp = client.post("/v1/games", json={"id": "builtin-guess", "type": "guess", "name": "Dup"})
        assert resp.status_code == 409
        assert _error_code(resp) == "GAME_EXISTS"

    def test_unknown_game(self, client: TestClient) -> None:
        resp = client.get("/v1/games/nope")
        assert resp.status_code == 404
        assert _error_code(resp) == "GAME_NOT_FOUND"

    def test_delete_cascades(self, client: TestClient, runtime: FakeRuntime) -> None:
        client.put("/v1/games/builtin-guess/config", json={"autoStart": {"enabled": True, "intervalMinutes": 5}})
        client.post("/v1/runtime/start", json={"gameId": "builtin-guess"})

        assert client.delete("/v1/games/builtin-guess").status_code == 204

        assert client.get("/v1/games/builtin-guess").status_code == 404
        assert client.get("/v1/runtime/status").json()["isActive"] is False
        assert runtime.stop_calls == 1
        assert client.get("/v1/scheduler").json()["entries"] == []
        assert client.app.state.engine.configs.get("builtin-guess") is None


class TestConfig:
    def test_unconfigured_game_shows_defaults(self, client: TestClient) -> None:
        data = client.get("/v1/games/builtin-guess/config").json()
        assert data["configured"] is False
        assert data["gameType"] == "guess"
        assert data["typeFields"] == {"minNumber": 1, "maxNumber": 100, "maxGuesses": 10, "hintFrequency": 3}
        assert data["autoStart"] == {"enabled": False, "intervalMinutes": None, "randomizeSelection": False}

    def test_interval_below_minimum_is_rejected(self, client: TestClient) -> None:
        resp = client.put("/v1/games/builtin-guess/config", json={
            "typeFields": {"minNumber": 1, "maxNumber": 100},
            "autoStart": {"enabled": True, "intervalMinutes": 2},
        })

        assert resp.status_code == 400
        assert _error_code(resp) == "INVALID_INTERVAL"
        assert resp.json()["error"]["details"]["errors"][0]["field"] == "autoStart.intervalMinutes"
        assert client.get("/v1/games/builtin-guess/config").json()["configured"] is False

    def test_type_field_errors(self, client: TestClient) -> None:
        resp = client.put("/v1/games/builtin-word/config", json={"typeFields": {"minWordLength": 20}})
        assert resp.status_code == 400
        assert _error_code(resp) == "VALIDATION_ERROR"

    def test_valid_update_is_stored_and_scheduled(self, client: TestClient) -> None:
        resp = client.put("/v1/games/builtin-trivia/config", json={
            "typeFields": {"pointsPerQuestion": 20},
            "autoStart": {"enabled": True, "intervalMinutes": 30, "randomizeSelection": True},
        })

        assert resp.status_code == 200
        data = resp.json()
        assert data["configured"] is True
        assert data["typeFields"]["pointsPerQuestion"] == 20
        assert data["typeFields"]["timePerQuestionSec"] == 30

        entries = client.get("/v1/scheduler").json()["entries"]
        assert [(e["gameId"], e["state"], e["intervalMinutes"]) for e in entries] == [
            ("builtin-trivia", "waiting", 30)
        ]

    def test_disabling_clears_interval(self, client: TestClient) -> None:
        client.put("/v1/games/builtin-story/config", json={"autoStart": {"enabled": True, "intervalMinutes": 10}})
        resp = client.put("/v1/games/builtin-story/config", json={"autoStart": {"enabled": False}})
        assert resp.json()["autoStart"]["intervalMinutes"] is None
        assert client.get("/v1/scheduler").json()["entries"] == []

    def test_puzzle_accepts_free_form_fields(self, client: TestClient) -> None:
        resp = client.put("/v1/games/builtin-puzzle/config", json={"typeFields": {"grid": [[1, 2], [3, 4]]}})
        assert resp.status_code == 200


class TestRuntime:
    def test_start_stop_cycle(self, client: TestClient, runtime: FakeRuntime) -> None:
        resp = client.post("/v1/runtime/start", json={"gameId": "builtin-guess", "options": {"maxGuesses": 5}})
        assert resp.status_code == 200
        assert resp.json()["isActive"] is True
        assert resp.json()["startedBy"] == "manual"
        assert runtime.start_calls[0][1]["maxGuesses"] == 5

        resp = client.post("/v1/runtime/start", json={"gameId": "builtin-word"})
        assert resp.status_code == 409
        assert _error_code(resp) == "ALREADY_ACTIVE"
        assert resp.json()["error"]["details"]["activeGameId"] == "builtin-guess"

        assert client.post("/v1/runtime/stop").json()["isActive"] is False
        resp = client.post("/v1/runtime/stop")
        assert resp.status_code == 409
        assert _error_code(resp) == "NOT_ACTIVE"

    def test_start_records_last_played(self, client: TestClient) -> None:
        assert client.get("/v1/games/builtin-word").json()["lastPlayed"] is None

        started_at = client.post("/v1/runtime/start", json={"gameId": "builtin-word"}).json()["startedAt"]

        assert client.get("/v1/games/builtin-word").json()["lastPlayed"] == started_at
        assert client.get("/v1/games/builtin-guess").json()["lastPlayed"] is None

    def test_start_unknown_game(self, client: TestClient) -> None:
        resp = client.post("/v1/runtime/start", json={"gameId": "nope"})
        assert resp.status_code == 404
        assert _error_code(resp) == "GAME_NOT_FOUND"

    def test_invalid_options_are_rejected(self, client: TestClient, runtime: FakeRuntime) -> None:
        resp = client.post("/v1/runtime/start", json={"gameId": "builtin-guess", "options": {"maxNumber": 5000}})
        assert resp.status_code == 400
        assert runtime.start_calls == []

    def test_runtime_failure_is_502(self, client: TestClient, runtime: FakeRuntime) -> None:
        runtime.fail_start = True
        resp = client.post("/v1/runtime/start", json={"gameId": "builtin-guess"})
        assert resp.status_code == 502
        assert _error_code(resp) == "RUNTIME_ERROR"
        assert client.get("/v1/runtime/status").json()["isActive"] is False

    def test_manual_stop_disables_auto_start(self, client: TestClient) -> None:
        client.put("/v1/games/builtin-guess/config", json={"autoStart": {"enabled": True, "intervalMinutes": 5}})
        client.post("/v1/runtime/start", json={"gameId": "builtin-guess"})
        client.post("/v1/runtime/stop")

        auto_start = client.get("/v1/games/builtin-guess/config").json()["autoStart"]
        assert auto_start["enabled"] is False
        assert auto_start["intervalMinutes"] is None

    def test_stopped_event(self, client: TestClient) -> None:
        client.post("/v1/runtime/start", json={"gameId": "builtin-trivia"})

        resp = client.post("/v1/runtime/events/stopped", json={"gameId": "builtin-word", "reason": "auto"})
        assert resp.json() == {"accepted": False}
        resp = client.post("/v1/runtime/events/stopped", json={"gameId": "builtin-trivia", "reason": "crash"})
        assert resp.json() == {"accepted": True}
        assert client.get("/v1/runtime/status").json()["activeGameId"] is None
