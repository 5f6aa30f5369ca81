"""Player-level Elo logic for single (1v1) and team (2v2) games."""

from __future__ import annotations

from dataclasses import dataclass
from math import floor


@dataclass(frozen=True)
class EloParameters:
    initial_rating: int = 1200
    provisional_k_factor: float = 40.0
    established_k_factor: float = 20.0
    provisional_games: int = 20
    team_k_multiplier: float = 0.75
    scale_factor: float = 400.0


DEFAULT_PARAMETERS = EloParameters()


@dataclass(frozen=True)
class RatingSnapshot:
    """Pre-match state of one participant."""

    name: str
    rating: int
    games_played: int


@dataclass(frozen=True)
class RatingChange:
    name: str
    old_rating: int
    new_rating: int

    @property
    def change(self) -> int:
        return self.new_rating - self.old_rating


@dataclass(frozen=True)
class SingleGameRatings:
    winner: RatingChange
    loser: RatingChange


@dataclass(frozen=True)
class TeamGameRatings:
    winner_attack: RatingChange
    winner_defense: RatingChange
    loser_attack: RatingChange
    loser_defense: RatingChange


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves towards positive infinity."""
    return int(floor(value + 0.5))


def calculate_expected_score(
    rating: float,
    opponent_rating: float,
    scale_factor: float = DEFAULT_PARAMETERS.scale_factor,
) -> float:
    """Compute the Elo expected score for one side."""
    return 1.0 / (1.0 + 10.0 ** ((opponent_rating - rating) / scale_factor))


def calculate_k_factor(
    games_played: int,
    is_team_game: bool,
    params: EloParameters = DEFAULT_PARAMETERS,
) -> float:
    """Higher K for provisional players, damped for team games."""
    if games_played < params.provisional_games:
        k_factor = params.provisional_k_factor
    else:
        k_factor = params.established_k_factor
    if is_team_game:
        k_factor *= params.team_k_multiplier
    return k_factor


def calculate_new_rating(
    current_rating: int,
    opponent_rating: int,
    actual_score: float,
    games_played: int,
    is_team_game: bool = False,
    params: EloParameters = DEFAULT_PARAMETERS,
) -> int:
    """Return the rounded post-game rating. No floor or ceiling is applied."""
    expected_score = calculate_expected_score(
        current_rating,
        opponent_rating,
        params.scale_factor,
    )
    k_factor = calculate_k_factor(games_played, is_team_game, params)
    return round_half_up(current_rating + k_factor * (actual_score - expected_score))


def team_average_rating(first: int, second: int) -> int:
    return round_half_up((first + second) / 2)


def _rating_change(
    snapshot: RatingSnapshot,
    *,
    opponent_rating: int,
    actual_score: float,
    is_team_game: bool,
    params: EloParameters,
) -> RatingChange:
    new_rating = calculate_new_rating(
        snapshot.rating,
        opponent_rating,
        actual_score,
        snapshot.games_played,
        is_team_game,
        params,
    )
    return RatingChange(name=snapshot.name, old_rating=snapshot.rating, new_rating=new_rating)


def rate_single_game(
    winner: RatingSnapshot,
    loser: RatingSnapshot,
    params: EloParameters = DEFAULT_PARAMETERS,
) -> SingleGameRatings:
    """Rate a 1v1 game from both players' pre-game snapshots."""
    return SingleGameRatings(
        winner=_rating_change(
            winner,
            opponent_rating=loser.rating,
            actual_score=1.0,
            is_team_game=False,
            params=params,
        ),
        loser=_rating_change(
            loser,
            opponent_rating=winner.rating,
            actual_score=0.0,
            is_team_game=False,
            params=params,
        ),
    )


def rate_team_game(
    winner_attack: RatingSnapshot,
    winner_defense: RatingSnapshot,
    loser_attack: RatingSnapshot,
    loser_defense: RatingSnapshot,
    params: EloParameters = DEFAULT_PARAMETERS,
) -> TeamGameRatings:
    """Rate a 2v2 game; each player faces the opposing team's rounded average."""
    winning_average = team_average_rating(winner_attack.rating, winner_defense.rating)
    losing_average = team_average_rating(loser_attack.rating, loser_defense.rating)

    def winner_change(snapshot: RatingSnapshot) -> RatingChange:
        return _rating_change(
            snapshot,
            opponent_rating=losing_average,
            actual_score=1.0,
            is_team_game=True,
            params=params,
        )

    def loser_change(snapshot: RatingSnapshot) -> RatingChange:
        return _rating_change(
            snapshot,
            opponent_rating=winning_average,
            actual_score=0.0,
            is_team_game=True,
            params=params,
        )

    return TeamGameRatings(
        winner_attack=winner_change(winner_attack),
        winner_defense=winner_change(winner_defense),
        loser_attack=loser_change(loser_attack),
        loser_defense=loser_change(loser_defense),
    )
