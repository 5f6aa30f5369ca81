"""Ledger domain types and errors."""

from domain.common import (
    GameMode,
    MatchRecord,
    ParticipantSnapshot,
    PlayerSummary,
    RankedPlayer,
)
from domain.errors import LedgerError, NotFoundError, PersistenceError, ValidationError

__all__ = [
    "GameMode",
    "LedgerError",
    "MatchRecord",
    "NotFoundError",
    "ParticipantSnapshot",
    "PersistenceError",
    "PlayerSummary",
    "RankedPlayer",
    "ValidationError",
]
