"""Record and reverse rated games.

Every mutation of a player's ``rating`` and ``games_played`` goes through
this module. A recorded game stores the before/after rating of each
participant, and deleting it subtracts exactly that delta again. The
reversal is local: games recorded later are not recomputed.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass, fields
from datetime import UTC, datetime

from sqlalchemy import case, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from domain.common import GameMode, MatchRecord, parse_game_mode, require_player_names
from domain.errors import NotFoundError, PersistenceError
from elo.rating import (
    DEFAULT_PARAMETERS,
    EloParameters,
    RatingChange,
    RatingSnapshot,
    SingleGameRatings,
    TeamGameRatings,
    rate_single_game,
    rate_team_game,
)
from models import Player, SingleGameResult, TeamGameResult
from repositories.players import find_player, resolve_player
from repositories.records import GAME_MODELS, to_match_record

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecordedGame:
    """Result of recording one game: its id and each slot's rating change."""

    id: int
    mode: GameMode
    date: datetime
    ratings: dict[str, RatingChange]


def utc_now() -> datetime:
    return datetime.now(UTC).replace(tzinfo=None)


@contextmanager
def ledger_transaction(session: Session) -> Iterator[None]:
    """All-or-nothing scope for one ledger mutation.

    Runs in a savepoint when the caller already holds a transaction, in
    which case committing the outer transaction is left to the caller.
    """
    try:
        if session.in_transaction():
            with session.begin_nested():
                yield
        else:
            with session.begin():
                yield
    except SQLAlchemyError as exc:
        logger.error("Ledger transaction rolled back: %s", exc)
        raise PersistenceError("Failed to save to database") from exc


def _resolve_participants(
    session: Session,
    names: Mapping[str, str],
    params: EloParameters,
) -> dict[str, RatingSnapshot]:
    # Lock rows in a stable order so concurrent games cannot deadlock.
    players: dict[str, Player] = {}
    for slot, name in sorted(names.items(), key=lambda item: item[1].lower()):
        players[slot] = resolve_player(
            session,
            name,
            initial_rating=params.initial_rating,
            for_update=True,
        )

    # Every snapshot is taken before any rating is written.
    return {
        slot: RatingSnapshot(
            name=names[slot],
            rating=players[slot].rating,
            games_played=players[slot].games_played,
        )
        for slot in names
    }


def _apply_rating_change(session: Session, change: RatingChange) -> None:
    player = find_player(session, change.name, for_update=True)
    if player is None:
        raise PersistenceError(f"Player {change.name!r} disappeared during the game update")
    player.rating = change.new_rating
    player.games_played = Player.games_played + 1
    player.updated_at = func.now()
    session.flush()


def _ratings_by_slot(ratings: SingleGameRatings | TeamGameRatings) -> dict[str, RatingChange]:
    return {field.name: getattr(ratings, field.name) for field in fields(ratings)}


def record_single_game(
    session: Session,
    winner: str | None,
    loser: str | None,
    *,
    date: datetime | None = None,
    params: EloParameters = DEFAULT_PARAMETERS,
) -> RecordedGame:
    """Rate and store a 1v1 game, then move both players to their new ratings."""
    names = require_player_names(winner=winner, loser=loser)
    event_time = date or utc_now()

    with ledger_transaction(session):
        snapshots = _resolve_participants(session, names, params)
        ratings = rate_single_game(snapshots["winner"], snapshots["loser"], params)

        row = SingleGameResult(
            date=event_time,
            winner=names["winner"],
            loser=names["loser"],
            winner_rating_before=ratings.winner.old_rating,
            winner_rating_after=ratings.winner.new_rating,
            loser_rating_before=ratings.loser.old_rating,
            loser_rating_after=ratings.loser.new_rating,
        )
        session.add(row)
        session.flush()

        by_slot = _ratings_by_slot(ratings)
        for change in by_slot.values():
            _apply_rating_change(session, change)

    logger.info(
        "Recorded single game id=%d %s %+d / %s %+d",
        row.id,
        ratings.winner.name,
        ratings.winner.change,
        ratings.loser.name,
        ratings.loser.change,
    )
    return RecordedGame(id=row.id, mode=GameMode.SINGLE, date=event_time, ratings=by_slot)


def record_team_game(
    session: Session,
    winner_attack: str | None,
    winner_defense: str | None,
    loser_attack: str | None,
    loser_defense: str | None,
    *,
    date: datetime | None = None,
    params: EloParameters = DEFAULT_PARAMETERS,
) -> RecordedGame:
    """Rate and store a 2v2 game, then move all four players to their new ratings."""
    names = require_player_names(
        winner_attack=winner_attack,
        winner_defense=winner_defense,
        loser_attack=loser_attack,
        loser_defense=loser_defense,
    )
    event_time = date or utc_now()

    with ledger_transaction(session):
        snapshots = _resolve_participants(session, names, params)
        ratings = rate_team_game(
            snapshots["winner_attack"],
            snapshots["winner_defense"],
            snapshots["loser_attack"],
            snapshots["loser_defense"],
            params,
        )

        row = TeamGameResult(
            date=event_time,
            winner_attack=names["winner_attack"],
            winner_defense=names["winner_defense"],
            loser_attack=names["loser_attack"],
            loser_defense=names["loser_defense"],
            winner_attack_rating_before=ratings.winner_attack.old_rating,
            winner_attack_rating_after=ratings.winner_attack.new_rating,
            winner_defense_rating_before=ratings.winner_defense.old_rating,
            winner_defense_rating_after=ratings.winner_defense.new_rating,
            loser_attack_rating_before=ratings.loser_attack.old_rating,
            loser_attack_rating_after=ratings.loser_attack.new_rating,
            loser_defense_rating_before=ratings.loser_defense.old_rating,
            loser_defense_rating_after=ratings.loser_defense.new_rating,
        )
        session.add(row)
        session.flush()

        by_slot = _ratings_by_slot(ratings)
        for change in by_slot.values():
            _apply_rating_change(session, change)

    logger.info(
        "Recorded team game id=%d deltas=%s",
        row.id,
        {change.name: change.change for change in by_slot.values()},
    )
    return RecordedGame(id=row.id, mode=GameMode.TEAM, date=event_time, ratings=by_slot)


def delete_game(session: Session, mode: GameMode | str, game_id: int) -> MatchRecord:
    """Hard-delete one game and subtract its recorded deltas from its players.

    Slots without a stored before/after pair are removed without touching
    the player. ``games_played`` never drops below zero.
    """
    game_mode = mode if isinstance(mode, GameMode) else parse_game_mode(mode)
    model = GAME_MODELS[game_mode]

    with ledger_transaction(session):
        row = session.get(model, game_id, with_for_update=True)
        if row is None:
            raise NotFoundError(f"{game_mode.value} game {game_id} not found")

        record = to_match_record(row)
        session.delete(row)
        session.flush()

        participants = sorted(record.participants, key=lambda participant: participant.name.lower())
        for participant in participants:
            delta = participant.change
            if delta is None:
                continue
            player = find_player(session, participant.name, for_update=True)
            if player is None:
                logger.warning(
                    "No player row for %r while reverting %s game %d",
                    participant.name,
                    game_mode.value,
                    game_id,
                )
                continue
            player.rating = Player.rating - delta
            player.games_played = case(
                (Player.games_played > 0, Player.games_played - 1),
                else_=0,
            )
            player.updated_at = func.now()
            session.flush()

    logger.info("Deleted %s game id=%d", game_mode.value, game_id)
    return record


__all__ = [
    "RecordedGame",
    "delete_game",
    "ledger_transaction",
    "record_single_game",
    "record_team_game",
    "utc_now",
]
