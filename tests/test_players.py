"""Tests for case-insensitive player resolution."""

from __future__ import annotations

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from db import session_scope
from models import Player
from repositories import players
from repositories.players import find_player, resolve_player


def _player_count(session: Session) -> int:
    return int(session.scalar(select(func.count()).select_from(Player)) or 0)


def test_resolve_creates_player_with_default_rating(session: Session) -> None:
    player = resolve_player(session, "Alice")
    session.commit()

    assert player.id is not None
    assert player.name == "Alice"
    assert player.rating == 1200
    assert player.games_played == 0


def test_resolve_uses_configured_initial_rating(session: Session) -> None:
    player = resolve_player(session, "Alice", initial_rating=1500)
    assert player.rating == 1500


def test_resolve_is_case_insensitive_and_keeps_first_casing(session: Session) -> None:
    first = resolve_player(session, "Alice")
    second = resolve_player(session, "ALICE")
    third = resolve_player(session, "alice")
    session.commit()

    assert first.id == second.id == third.id
    assert third.name == "Alice"
    assert _player_count(session) == 1


def test_find_player_returns_none_for_unknown_name(session: Session) -> None:
    assert find_player(session, "Nobody") is None


def test_unique_index_rejects_case_variants(session: Session) -> None:
    session.add(Player(name="Alice", rating=1200, games_played=0))
    session.commit()

    session.add(Player(name="aLiCe", rating=1200, games_played=0))
    with pytest.raises(IntegrityError):
        session.commit()
    session.rollback()


def test_resolve_reselects_after_losing_create_race(
    session: Session,
    session_factory: sessionmaker[Session],
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    with session_scope(session_factory) as other:
        with other.begin():
            other.add(Player(name="Alice", rating=1250, games_played=3))

    real_find_player = players.find_player
    lookups: list[str] = []

    def stale_first_lookup(session: Session, name: str, *, for_update: bool = False) -> Player | None:
        lookups.append(name)
        if len(lookups) == 1:
            return None
        return real_find_player(session, name, for_update=for_update)

    monkeypatch.setattr(players, "find_player", stale_first_lookup)

    player = players.resolve_player(session, "ALICE")
    session.commit()

    assert len(lookups) == 2
    assert player.name == "Alice"
    assert player.rating == 1250
    assert player.games_played == 3
    assert _player_count(session) == 1
