"""Elo calculation modules."""

from elo.rating import (
    DEFAULT_PARAMETERS,
    EloParameters,
    RatingChange,
    RatingSnapshot,
    SingleGameRatings,
    TeamGameRatings,
    calculate_expected_score,
    calculate_k_factor,
    calculate_new_rating,
    rate_single_game,
    rate_team_game,
    round_half_up,
    team_average_rating,
)

__all__ = [
    "DEFAULT_PARAMETERS",
    "EloParameters",
    "RatingChange",
    "RatingSnapshot",
    "SingleGameRatings",
    "TeamGameRatings",
    "calculate_expected_score",
    "calculate_k_factor",
    "calculate_new_rating",
    "rate_single_game",
    "rate_team_game",
    "round_half_up",
    "team_average_rating",
]
