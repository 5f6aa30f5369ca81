"""Request and response bodies for the HTTP API."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from domain.common import MatchRecord, ParticipantSnapshot, PlayerSummary, RankedPlayer
from elo.rating import RatingChange


class CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


# Name fields are optional here so that a missing name is reported as a
# ledger validation error (400) rather than a schema error.
class SingleGameIn(CamelModel):
    winner: str | None = None
    loser: str | None = None


class TeamGameIn(CamelModel):
    winner_attack: str | None = Field(default=None, alias="winnerAttack")
    winner_defense: str | None = Field(default=None, alias="winnerDefense")
    loser_attack: str | None = Field(default=None, alias="loserAttack")
    loser_defense: str | None = Field(default=None, alias="loserDefense")


class RatingChangeOut(CamelModel):
    name: str
    old_rating: int = Field(serialization_alias="oldRating")
    new_rating: int = Field(serialization_alias="newRating")
    change: int

    @classmethod
    def from_change(cls, change: RatingChange) -> RatingChangeOut:
        return cls(
            name=change.name,
            old_rating=change.old_rating,
            new_rating=change.new_rating,
            change=change.change,
        )


class SaveGameOut(CamelModel):
    success: bool = True
    message: str = "Saved successfully!"
    id: int
    date: datetime
    ratings: dict[str, RatingChangeOut]


class RankedPlayerOut(CamelModel):
    name: str
    rating: int
    rank: int

    @classmethod
    def from_ranked(cls, player: RankedPlayer) -> RankedPlayerOut:
        return cls(name=player.name, rating=player.rating, rank=player.rank)


class PlayerStatsOut(CamelModel):
    name: str
    rating: int
    games_played: int = Field(serialization_alias="gamesPlayed")
    single_wins: int = Field(serialization_alias="singleWins")
    team_wins: int = Field(serialization_alias="teamWins")
    total_wins: int = Field(serialization_alias="totalWins")
    single_losses: int = Field(serialization_alias="singleLosses")
    team_losses: int = Field(serialization_alias="teamLosses")
    total_losses: int = Field(serialization_alias="totalLosses")
    rating_history: list[int] = Field(serialization_alias="ratingHistory")

    @classmethod
    def from_summary(cls, summary: PlayerSummary) -> PlayerStatsOut:
        return cls(
            name=summary.name,
            rating=summary.rating,
            games_played=summary.games_played,
            single_wins=summary.single_wins,
            team_wins=summary.team_wins,
            total_wins=summary.total_wins,
            single_losses=summary.single_losses,
            team_losses=summary.team_losses,
            total_losses=summary.total_losses,
            rating_history=summary.rating_history,
        )


class ParticipantOut(CamelModel):
    name: str
    role: str | None = None
    result: str
    rating_before: int | None = Field(serialization_alias="ratingBefore")
    rating_after: int | None = Field(serialization_alias="ratingAfter")
    change: int | None

    @classmethod
    def from_snapshot(cls, participant: ParticipantSnapshot) -> ParticipantOut:
        return cls(
            name=participant.name,
            role=participant.role,
            result="win" if participant.won else "loss",
            rating_before=participant.rating_before,
            rating_after=participant.rating_after,
            change=participant.change,
        )


class GameOut(CamelModel):
    id: int
    type: str
    date: datetime
    participants: list[ParticipantOut]

    @classmethod
    def from_record(cls, record: MatchRecord) -> GameOut:
        return cls(
            id=record.id,
            type=record.mode.value,
            date=record.date,
            participants=[ParticipantOut.from_snapshot(p) for p in record.participants],
        )


class DeleteGameOut(CamelModel):
    message: str
    game: GameOut
