"""Database repository helpers."""

from repositories.ledger import (
    RecordedGame,
    delete_game,
    record_single_game,
    record_team_game,
)
from repositories.players import find_player, resolve_player
from repositories.schema import ensure_schema, run_migrations
from repositories.stats import (
    fetch_recent_games,
    leaderboard,
    rank_players,
    rating_history,
)

__all__ = [
    "RecordedGame",
    "delete_game",
    "ensure_schema",
    "fetch_recent_games",
    "find_player",
    "leaderboard",
    "rank_players",
    "rating_history",
    "record_single_game",
    "record_team_game",
    "resolve_player",
    "run_migrations",
]
