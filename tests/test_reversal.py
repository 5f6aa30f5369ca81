"""Tests for deleting games and reverting their rating effect."""

from __future__ import annotations

from datetime import datetime, timedelta

import pytest
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from domain.common import GameMode
from domain.errors import NotFoundError, ValidationError
from models import Player, SingleGameResult, TeamGameResult
from repositories.ledger import delete_game, record_single_game, record_team_game
from repositories.players import find_player

START = datetime(2026, 1, 1, 12, 0, 0)


def _state(session: Session, name: str) -> tuple[int, int]:
    player = find_player(session, name)
    assert player is not None
    return player.rating, player.games_played


def test_delete_single_game_restores_both_players(session: Session) -> None:
    record_single_game(session, "Alice", "Bob", date=START)
    before = {name: _state(session, name) for name in ("Alice", "Bob")}

    recorded = record_single_game(session, "Alice", "Bob", date=START + timedelta(minutes=1))
    assert _state(session, "Alice") != before["Alice"]

    deleted = delete_game(session, GameMode.SINGLE, recorded.id)

    assert deleted.id == recorded.id
    assert deleted.mode is GameMode.SINGLE
    assert {name: _state(session, name) for name in ("Alice", "Bob")} == before
    assert session.get(SingleGameResult, recorded.id) is None


def test_delete_only_game_returns_players_to_initial_state(session: Session) -> None:
    recorded = record_single_game(session, "Alice", "Bob", date=START)
    delete_game(session, "single", recorded.id)

    assert _state(session, "Alice") == (1200, 0)
    assert _state(session, "Bob") == (1200, 0)


def test_delete_returns_the_snapshot(session: Session) -> None:
    recorded = record_team_game(session, "Alice", "Carol", "Bob", "Dave", date=START)
    deleted = delete_game(session, "TEAM", recorded.id)

    assert deleted.mode is GameMode.TEAM
    assert deleted.date == START
    assert [(p.slot, p.name, p.won, p.role) for p in deleted.participants] == [
        ("winner_attack", "Alice", True, "attack"),
        ("winner_defense", "Carol", True, "defense"),
        ("loser_attack", "Bob", False, "attack"),
        ("loser_defense", "Dave", False, "defense"),
    ]
    assert [p.change for p in deleted.participants] == [15, 15, -15, -15]
    assert session.get(TeamGameResult, recorded.id) is None
    for name in ("Alice", "Carol", "Bob", "Dave"):
        assert _state(session, name) == (1200, 0)


def test_delete_missing_game_raises_not_found(session: Session) -> None:
    with pytest.raises(NotFoundError):
        delete_game(session, GameMode.SINGLE, 999)


def test_delete_with_unknown_type_is_rejected(session: Session) -> None:
    recorded = record_single_game(session, "Alice", "Bob", date=START)
    with pytest.raises(ValidationError):
        delete_game(session, "triple", recorded.id)
    assert session.get(SingleGameResult, recorded.id) is not None


def test_deleting_single_id_does_not_touch_team_game_with_same_id(session: Session) -> None:
    single = record_single_game(session, "Alice", "Bob", date=START)
    team = record_team_game(session, "Carol", "Dave", "Erin", "Frank", date=START)
    assert single.id == team.id

    delete_game(session, GameMode.SINGLE, single.id)

    assert session.get(TeamGameResult, team.id) is not None
    assert _state(session, "Carol") == (1215, 1)


def test_slots_without_snapshot_leave_players_untouched(session: Session) -> None:
    session.add(Player(name="Alice", rating=1300, games_played=7))
    legacy = SingleGameResult(date=START, winner="Alice", loser="Ghost")
    session.add(legacy)
    session.commit()

    delete_game(session, GameMode.SINGLE, legacy.id)

    assert _state(session, "Alice") == (1300, 7)
    assert find_player(session, "Ghost") is None


def test_games_played_never_drops_below_zero(session: Session) -> None:
    session.add(Player(name="Alice", rating=1220, games_played=0))
    session.add(Player(name="Bob", rating=1180, games_played=0))
    row = SingleGameResult(
        date=START,
        winner="Alice",
        loser="Bob",
        winner_rating_before=1200,
        winner_rating_after=1220,
        loser_rating_before=1200,
        loser_rating_after=1180,
    )
    session.add(row)
    session.commit()

    delete_game(session, GameMode.SINGLE, row.id)

    assert _state(session, "Alice") == (1200, 0)
    assert _state(session, "Bob") == (1200, 0)


def test_deleting_an_older_game_is_a_local_inverse(session: Session) -> None:
    first = record_single_game(session, "Alice", "Bob", date=START)
    second = record_single_game(session, "Alice", "Bob", date=START + timedelta(minutes=1))
    alice_now, _ = _state(session, "Alice")

    delete_game(session, GameMode.SINGLE, first.id)

    # Later games are not recomputed; only the first delta is subtracted.
    assert _state(session, "Alice") == (alice_now - first.ratings["winner"].change, 1)
    remaining = session.get(SingleGameResult, second.id)
    assert remaining is not None
    assert remaining.winner_rating_before == 1220


def test_players_are_never_deleted(session: Session) -> None:
    recorded = record_single_game(session, "Alice", "Bob", date=START)
    delete_game(session, GameMode.SINGLE, recorded.id)
    assert int(session.scalar(select(func.count()).select_from(Player)) or 0) == 2
