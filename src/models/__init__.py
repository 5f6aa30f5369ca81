"""ORM models."""

from models.base import Base
from models.game_result import SingleGameResult, TeamGameResult
from models.player import Player
from models.schema_migration import SchemaMigration

__all__ = [
    "Base",
    "Player",
    "SchemaMigration",
    "SingleGameResult",
    "TeamGameResult",
]
