"""Case-insensitive player identity resolution."""

from __future__ import annotations

import logging

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from domain.errors import PersistenceError
from elo.rating import DEFAULT_PARAMETERS
from models import Player

logger = logging.getLogger(__name__)

_MAX_CREATE_ATTEMPTS = 3


def find_player(session: Session, name: str, *, for_update: bool = False) -> Player | None:
    """Look up a player by case-insensitive name."""
    statement = select(Player).where(func.lower(Player.name) == func.lower(name))
    if for_update:
        statement = statement.with_for_update()
    return session.execute(statement).scalar_one_or_none()


def resolve_player(
    session: Session,
    name: str,
    *,
    initial_rating: int = DEFAULT_PARAMETERS.initial_rating,
    for_update: bool = False,
) -> Player:
    """Return the player named `name`, creating it on first sight.

    The stored casing of an existing player always wins over the caller's.
    A concurrent insert of the same name trips the unique index on
    ``lower(name)``; the insert is rolled back to its savepoint and the
    winner's row is selected instead.
    """
    for attempt in range(1, _MAX_CREATE_ATTEMPTS + 1):
        player = find_player(session, name, for_update=for_update)
        if player is not None:
            return player

        candidate = Player(name=name, rating=initial_rating, games_played=0)
        try:
            with session.begin_nested():
                session.add(candidate)
        except IntegrityError:
            logger.warning(
                "Player name conflict for %r on attempt %d; reselecting",
                name,
                attempt,
            )
            continue

        logger.info("Created player %r with rating %d", name, initial_rating)
        return candidate

    raise PersistenceError(
        f"Could not resolve player {name!r} after {_MAX_CREATE_ATTEMPTS} attempts"
    )


__all__ = ["find_player", "resolve_player"]
