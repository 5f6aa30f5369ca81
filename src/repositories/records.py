"""Mapping between game result rows and ledger match records."""

from __future__ import annotations

from typing import NamedTuple

from domain.common import GameMode, MatchRecord, ParticipantSnapshot
from models import SingleGameResult, TeamGameResult


class Slot(NamedTuple):
    column: str
    won: bool
    role: str | None


SINGLE_SLOTS = (
    Slot("winner", True, None),
    Slot("loser", False, None),
)
TEAM_SLOTS = (
    Slot("winner_attack", True, "attack"),
    Slot("winner_defense", True, "defense"),
    Slot("loser_attack", False, "attack"),
    Slot("loser_defense", False, "defense"),
)

GAME_MODELS: dict[GameMode, type[SingleGameResult] | type[TeamGameResult]] = {
    GameMode.SINGLE: SingleGameResult,
    GameMode.TEAM: TeamGameResult,
}
GAME_SLOTS: dict[GameMode, tuple[Slot, ...]] = {
    GameMode.SINGLE: SINGLE_SLOTS,
    GameMode.TEAM: TEAM_SLOTS,
}


def game_mode_of(row: SingleGameResult | TeamGameResult) -> GameMode:
    if isinstance(row, SingleGameResult):
        return GameMode.SINGLE
    if isinstance(row, TeamGameResult):
        return GameMode.TEAM
    raise TypeError(f"Unsupported game result type: {type(row)!r}")


def to_match_record(row: SingleGameResult | TeamGameResult) -> MatchRecord:
    """Snapshot a stored row, including rows recorded without ratings."""
    mode = game_mode_of(row)
    participants = tuple(
        ParticipantSnapshot(
            slot=slot.column,
            name=getattr(row, slot.column),
            won=slot.won,
            rating_before=getattr(row, f"{slot.column}_rating_before"),
            rating_after=getattr(row, f"{slot.column}_rating_after"),
            role=slot.role,
        )
        for slot in GAME_SLOTS[mode]
    )
    return MatchRecord(id=row.id, mode=mode, date=row.date, participants=participants)


__all__ = [
    "GAME_MODELS",
    "GAME_SLOTS",
    "SINGLE_SLOTS",
    "Slot",
    "TEAM_SLOTS",
    "game_mode_of",
    "to_match_record",
]
