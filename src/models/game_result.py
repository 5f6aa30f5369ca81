"""single_game_results and team_game_results table models."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base


class SingleGameResult(Base):
    """One recorded 1v1 game with the rating snapshot of both players."""

    __tablename__ = "single_game_results"
    __table_args__ = (Index("idx_single_game_results_date", "date"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    date: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False)
    winner: Mapped[str] = mapped_column(String(128), nullable=False)
    loser: Mapped[str] = mapped_column(String(128), nullable=False)
    winner_rating_before: Mapped[int | None] = mapped_column(Integer, nullable=True)
    winner_rating_after: Mapped[int | None] = mapped_column(Integer, nullable=True)
    loser_rating_before: Mapped[int | None] = mapped_column(Integer, nullable=True)
    loser_rating_after: Mapped[int | None] = mapped_column(Integer, nullable=True)


class TeamGameResult(Base):
    """One recorded 2v2 game with the rating snapshot of all four players."""

    __tablename__ = "team_game_results"
    __table_args__ = (Index("idx_team_game_results_date", "date"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    date: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False)
    winner_attack: Mapped[str] = mapped_column(String(128), nullable=False)
    winner_defense: Mapped[str] = mapped_column(String(128), nullable=False)
    loser_attack: Mapped[str] = mapped_column(String(128), nullable=False)
    loser_defense: Mapped[str] = mapped_column(String(128), nullable=False)
    winner_attack_rating_before: Mapped[int | None] = mapped_column(Integer, nullable=True)
    winner_attack_rating_after: Mapped[int | None] = mapped_column(Integer, nullable=True)
    winner_defense_rating_before: Mapped[int | None] = mapped_column(Integer, nullable=True)
    winner_defense_rating_after: Mapped[int | None] = mapped_column(Integer, nullable=True)
    loser_attack_rating_before: Mapped[int | None] = mapped_column(Integer, nullable=True)
    loser_attack_rating_after: Mapped[int | None] = mapped_column(Integer, nullable=True)
    loser_defense_rating_before: Mapped[int | None] = mapped_column(Integer, nullable=True)
    loser_defense_rating_after: Mapped[int | None] = mapped_column(Integer, nullable=True)
