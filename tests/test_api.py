"""HTTP tests for the ledger API."""

from __future__ import annotations

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session, sessionmaker

from api import app as api_module
from api import create_app
from domain.errors import PersistenceError


@pytest.fixture
def client(session_factory: sessionmaker[Session]) -> Iterator[TestClient]:
    with TestClient(create_app(session_factory)) as test_client:
        yield test_client


def _save_single(client: TestClient, winner: str, loser: str) -> dict:
    response = client.post("/saveSingle", json={"winner": winner, "loser": loser})
    assert response.status_code == 200
    return response.json()


def test_health(client: TestClient) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_save_single_returns_rating_changes(client: TestClient) -> None:
    body = _save_single(client, "Alice", "Bob")

    assert body["success"] is True
    assert body["ratings"]["winner"] == {
        "name": "Alice",
        "oldRating": 1200,
        "newRating": 1220,
        "change": 20,
    }
    assert body["ratings"]["loser"]["change"] == -20


def test_save_response_carries_the_recorded_date(client: TestClient) -> None:
    body = _save_single(client, "Alice", "Bob")

    recent = client.get("/recentGames").json()
    assert body["date"] == recent[0]["date"]
    assert body["id"] == recent[0]["id"]


def test_save_team_returns_four_entries(client: TestClient) -> None:
    response = client.post(
        "/saveTeam",
        json={
            "winnerAttack": "Alice",
            "winnerDefense": "Carol",
            "loserAttack": "Bob",
            "loserDefense": "Dave",
        },
    )
    assert response.status_code == 200
    ratings = response.json()["ratings"]
    assert set(ratings) == {"winnerAttack", "winnerDefense", "loserAttack", "loserDefense"}
    assert ratings["winnerDefense"]["change"] == 15
    assert ratings["loserDefense"]["newRating"] == 1185


@pytest.mark.parametrize(
    "payload",
    [{"winner": "Alice"}, {"winner": "", "loser": "Bob"}, {}, {"winner": "Alice", "loser": "ALICE"}],
)
def test_save_single_rejects_bad_names(client: TestClient, payload: dict) -> None:
    response = client.post("/saveSingle", json=payload)
    assert response.status_code == 400
    assert "error" in response.json()
    assert client.get("/stats").json() == []


def test_save_team_rejects_missing_name(client: TestClient) -> None:
    response = client.post(
        "/saveTeam",
        json={"winnerAttack": "Alice", "winnerDefense": "Carol", "loserAttack": "Bob"},
    )
    assert response.status_code == 400


def test_malformed_body_is_a_bad_request(client: TestClient) -> None:
    response = client.post(
        "/saveSingle",
        content="not json",
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 400


def test_stats_shape(client: TestClient) -> None:
    _save_single(client, "Alice", "Bob")
    _save_single(client, "alice", "Carol")

    stats = client.get("/stats").json()
    assert [row["name"] for row in stats][0] == "Alice"
    alice = stats[0]
    assert alice == {
        "name": "Alice",
        "rating": alice["rating"],
        "gamesPlayed": 2,
        "singleWins": 2,
        "teamWins": 0,
        "totalWins": 2,
        "singleLosses": 0,
        "teamLosses": 0,
        "totalLosses": 0,
        "ratingHistory": alice["ratingHistory"],
    }
    assert alice["ratingHistory"][-1] == 20
    assert len(alice["ratingHistory"]) == 2


def test_players_are_ranked(client: TestClient) -> None:
    _save_single(client, "Alice", "Bob")
    _save_single(client, "Carol", "Dave")

    players = client.get("/players").json()
    assert players == [
        {"name": "Alice", "rating": 1220, "rank": 1},
        {"name": "Carol", "rating": 1220, "rank": 1},
        {"name": "Bob", "rating": 1180, "rank": 3},
        {"name": "Dave", "rating": 1180, "rank": 3},
    ]


def test_recent_games(client: TestClient) -> None:
    _save_single(client, "Alice", "Bob")
    _save_single(client, "Carol", "Dave")

    games = client.get("/recentGames", params={"limit": 1}).json()
    assert len(games) == 1
    game = games[0]
    assert game["type"] == "single"
    assert game["participants"][0] == {
        "name": "Carol",
        "role": None,
        "result": "win",
        "ratingBefore": 1200,
        "ratingAfter": 1220,
        "change": 20,
    }
    assert game["participants"][1]["result"] == "loss"


def test_recent_games_limit_is_validated(client: TestClient) -> None:
    assert client.get("/recentGames", params={"limit": 0}).status_code == 400
    assert client.get("/recentGames", params={"limit": 101}).status_code == 400


def test_delete_game_reverts_and_returns_record(client: TestClient) -> None:
    saved = _save_single(client, "Alice", "Bob")

    response = client.delete(f"/deleteGame/single/{saved['id']}")
    assert response.status_code == 200
    body = response.json()
    assert body["game"]["id"] == saved["id"]
    assert body["game"]["participants"][0]["change"] == 20
    assert "message" in body

    assert client.get("/stats").json() == []
    again = client.delete(f"/deleteGame/single/{saved['id']}")
    assert again.status_code == 404


def test_delete_game_with_unknown_type(client: TestClient) -> None:
    assert client.delete("/deleteGame/triple/1").status_code == 400
    assert client.delete("/deleteGame/single/abc").status_code == 400


def test_persistence_failure_is_a_server_error(
    client: TestClient,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    def broken(*args: object, **kwargs: object) -> None:
        raise PersistenceError("Failed to save to database")

    monkeypatch.setattr(api_module, "record_single_game", broken)

    response = client.post("/saveSingle", json={"winner": "Alice", "loser": "Bob"})
    assert response.status_code == 500
    assert response.json() == {"error": "Failed to access database"}
