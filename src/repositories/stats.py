"""Leaderboard and history reads folded from the game ledger."""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence

from sqlalchemy import func, select, union_all
from sqlalchemy.orm import InstrumentedAttribute, Session

from domain.common import MatchRecord, PlayerSummary, RankedPlayer, display_name
from domain.errors import ValidationError
from elo.rating import DEFAULT_PARAMETERS, EloParameters
from models import Player, SingleGameResult, TeamGameResult
from repositories.records import GAME_MODELS, GAME_SLOTS, to_match_record

RATING_HISTORY_LIMIT = 5
DEFAULT_RECENT_GAMES_LIMIT = 20
MAX_RECENT_GAMES_LIMIT = 100


def _count_by_name(session: Session, columns: Sequence[InstrumentedAttribute[str]]) -> Counter[str]:
    counts: Counter[str] = Counter()
    for column in columns:
        name_key = func.lower(column)
        statement = select(name_key, func.count()).group_by(name_key).order_by(name_key)
        for key, count in session.execute(statement):
            counts[key] += int(count)
    return counts


def rating_history(session: Session, name: str, *, limit: int = RATING_HISTORY_LIMIT) -> list[int]:
    """Most recent rating deltas for one player across both game shapes."""
    name_key = func.lower(name.strip())
    selects = []
    for mode, slots in GAME_SLOTS.items():
        model = GAME_MODELS[mode]
        for slot in slots:
            before = getattr(model, f"{slot.column}_rating_before")
            after = getattr(model, f"{slot.column}_rating_after")
            selects.append(
                select(
                    model.date.label("date"),
                    model.id.label("game_id"),
                    (after - before).label("rating_change"),
                ).where(
                    func.lower(getattr(model, slot.column)) == name_key,
                    before.is_not(None),
                    after.is_not(None),
                )
            )

    history = union_all(*selects).subquery("all_games")
    statement = (
        select(history.c.rating_change)
        .order_by(history.c.date.desc(), history.c.game_id.desc())
        .limit(limit)
    )
    return [int(change) for change in session.scalars(statement)]


def leaderboard(
    session: Session,
    *,
    include_history: bool = True,
    params: EloParameters = DEFAULT_PARAMETERS,
) -> list[PlayerSummary]:
    """Win/loss counts per player joined with live ratings, best rating first."""
    single_wins = _count_by_name(session, [SingleGameResult.winner])
    single_losses = _count_by_name(session, [SingleGameResult.loser])
    team_wins = _count_by_name(session, [TeamGameResult.winner_attack, TeamGameResult.winner_defense])
    team_losses = _count_by_name(session, [TeamGameResult.loser_attack, TeamGameResult.loser_defense])

    name_keys = list(dict.fromkeys([*single_wins, *single_losses, *team_wins, *team_losses]))

    ratings = {
        name_key: (rating, games_played)
        for name_key, rating, games_played in session.execute(
            select(func.lower(Player.name), Player.rating, Player.games_played)
        )
    }

    summaries: list[PlayerSummary] = []
    for name_key in name_keys:
        rating, games_played = ratings.get(name_key, (params.initial_rating, 0))
        summaries.append(
            PlayerSummary(
                name=display_name(name_key),
                rating=rating,
                games_played=games_played,
                single_wins=single_wins[name_key],
                team_wins=team_wins[name_key],
                single_losses=single_losses[name_key],
                team_losses=team_losses[name_key],
                rating_history=rating_history(session, name_key) if include_history else [],
            )
        )

    summaries.sort(key=lambda summary: (-summary.rating, summary.name.lower()))
    return summaries


def rank_players(session: Session, *, params: EloParameters = DEFAULT_PARAMETERS) -> list[RankedPlayer]:
    """Standard competition ranking: equal ratings share a rank, the next one skips."""
    summaries = leaderboard(session, include_history=False, params=params)
    ranked: list[RankedPlayer] = []
    for position, summary in enumerate(summaries, start=1):
        if ranked and ranked[-1].rating == summary.rating:
            rank = ranked[-1].rank
        else:
            rank = position
        ranked.append(RankedPlayer(name=summary.name, rating=summary.rating, rank=rank))
    return ranked


def fetch_recent_games(session: Session, *, limit: int = DEFAULT_RECENT_GAMES_LIMIT) -> list[MatchRecord]:
    """Most recent games of both shapes, newest first.

    Single and team ids come from separate sequences, so games sharing a
    timestamp are ordered team before single, then by descending id.
    """
    if limit < 1 or limit > MAX_RECENT_GAMES_LIMIT:
        raise ValidationError(f"limit must be between 1 and {MAX_RECENT_GAMES_LIMIT}")

    records: list[MatchRecord] = []
    for model in GAME_MODELS.values():
        statement = select(model).order_by(model.date.desc(), model.id.desc()).limit(limit)
        records.extend(to_match_record(row) for row in session.scalars(statement))

    records.sort(key=lambda record: (record.date, record.mode.value, record.id), reverse=True)
    return records[:limit]


__all__ = [
    "DEFAULT_RECENT_GAMES_LIMIT",
    "MAX_RECENT_GAMES_LIMIT",
    "RATING_HISTORY_LIMIT",
    "fetch_recent_games",
    "leaderboard",
    "rank_players",
    "rating_history",
]
