"""Shared types for the match ledger."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from domain.errors import ValidationError


class GameMode(str, Enum):
    """Shape of a recorded match."""

    SINGLE = "single"
    TEAM = "team"


@dataclass(frozen=True)
class ParticipantSnapshot:
    """One participant slot of a stored match record."""

    slot: str
    name: str
    won: bool
    rating_before: int | None
    rating_after: int | None
    role: str | None = None

    @property
    def change(self) -> int | None:
        if self.rating_before is None or self.rating_after is None:
            return None
        return self.rating_after - self.rating_before


@dataclass(frozen=True)
class MatchRecord:
    """Immutable view of a stored single or team match."""

    id: int
    mode: GameMode
    date: datetime
    participants: tuple[ParticipantSnapshot, ...]


@dataclass
class PlayerSummary:
    """Leaderboard row folded from the ledger and the players table."""

    name: str
    rating: int
    games_played: int
    single_wins: int = 0
    team_wins: int = 0
    single_losses: int = 0
    team_losses: int = 0
    rating_history: list[int] = field(default_factory=list)

    @property
    def total_wins(self) -> int:
        return self.single_wins + self.team_wins

    @property
    def total_losses(self) -> int:
        return self.single_losses + self.team_losses


@dataclass(frozen=True)
class RankedPlayer:
    name: str
    rating: int
    rank: int


def display_name(name_key: str) -> str:
    """Capitalize the first letter of a lower-cased name key."""
    return name_key[:1].upper() + name_key[1:]


def parse_game_mode(value: str) -> GameMode:
    try:
        return GameMode(str(value).strip().lower())
    except ValueError as exc:
        raise ValidationError(f"Unknown game type: {value!r}") from exc


def require_player_names(**names: str | None) -> dict[str, str]:
    """Strip every slot and reject missing, empty, or repeated players."""
    cleaned: dict[str, str] = {}
    for slot, value in names.items():
        stripped = value.strip() if isinstance(value, str) else ""
        if not stripped:
            raise ValidationError("A name is required in all fields of a game")
        cleaned[slot] = stripped

    keys = [value.lower() for value in cleaned.values()]
    if len(keys) != len(set(keys)):
        raise ValidationError("A player cannot appear more than once in the same game")
    return cleaned


__all__ = [
    "GameMode",
    "MatchRecord",
    "ParticipantSnapshot",
    "PlayerSummary",
    "RankedPlayer",
    "display_name",
    "parse_game_mode",
    "require_player_names",
]
