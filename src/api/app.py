"""FastAPI application exposing the match ledger."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence

from fastapi import Depends, FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.orm import Session, sessionmaker

from api.schemas import (
    DeleteGameOut,
    GameOut,
    PlayerStatsOut,
    RankedPlayerOut,
    RatingChangeOut,
    SaveGameOut,
    SingleGameIn,
    TeamGameIn,
)
from db import session_scope
from domain.errors import NotFoundError, PersistenceError, ValidationError
from elo.rating import DEFAULT_PARAMETERS, EloParameters
from repositories import (
    RecordedGame,
    delete_game,
    fetch_recent_games,
    leaderboard,
    rank_players,
    record_single_game,
    record_team_game,
)
from repositories.stats import DEFAULT_RECENT_GAMES_LIMIT, MAX_RECENT_GAMES_LIMIT

logger = logging.getLogger(__name__)


def get_session(request: Request) -> Iterator[Session]:
    """One session per request, closed when the response is sent."""
    with session_scope(request.app.state.session_factory) as session:
        yield session


def get_elo_parameters(request: Request) -> EloParameters:
    return request.app.state.elo_parameters


def _camel(slot: str) -> str:
    head, *rest = slot.split("_")
    return head + "".join(part.capitalize() for part in rest)


def _save_response(recorded: RecordedGame) -> SaveGameOut:
    return SaveGameOut(
        id=recorded.id,
        date=recorded.date,
        ratings={
            _camel(slot): RatingChangeOut.from_change(change)
            for slot, change in recorded.ratings.items()
        },
    )


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(ValidationError)
    async def _validation_error(request: Request, exc: ValidationError) -> JSONResponse:
        return _error(400, str(exc))

    @app.exception_handler(RequestValidationError)
    async def _request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        return _error(400, "Invalid request")

    @app.exception_handler(NotFoundError)
    async def _not_found(request: Request, exc: NotFoundError) -> JSONResponse:
        return _error(404, str(exc))

    @app.exception_handler(PersistenceError)
    async def _persistence_error(request: Request, exc: PersistenceError) -> JSONResponse:
        logger.error(
            "Database failure on %s %s", request.method, request.url.path, exc_info=exc
        )
        return _error(500, "Failed to access database")

    @app.exception_handler(Exception)
    async def _unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            "Unhandled error on %s %s", request.method, request.url.path, exc_info=exc
        )
        return _error(500, "Internal server error")


def create_app(
    session_factory: sessionmaker[Session],
    *,
    elo_parameters: EloParameters = DEFAULT_PARAMETERS,
    cors_origins: Sequence[str] = ("*",),
) -> FastAPI:
    """Build the API around an injected session factory."""
    app = FastAPI(
        title="Match Ledger",
        description="Elo ratings for single and team games.",
        version="0.1.0",
    )
    app.state.session_factory = session_factory
    app.state.elo_parameters = elo_parameters

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(cors_origins),
        allow_methods=["*"],
        allow_headers=["*"],
    )
    _register_error_handlers(app)

    @app.get("/health")
    def health(session: Session = Depends(get_session)) -> dict[str, str]:
        session.execute(text("SELECT 1"))
        return {"status": "ok"}

    @app.post("/saveSingle", response_model=SaveGameOut)
    def save_single(
        body: SingleGameIn,
        session: Session = Depends(get_session),
        params: EloParameters = Depends(get_elo_parameters),
    ) -> SaveGameOut:
        recorded = record_single_game(session, body.winner, body.loser, params=params)
        return _save_response(recorded)

    @app.post("/saveTeam", response_model=SaveGameOut)
    def save_team(
        body: TeamGameIn,
        session: Session = Depends(get_session),
        params: EloParameters = Depends(get_elo_parameters),
    ) -> SaveGameOut:
        recorded = record_team_game(
            session,
            body.winner_attack,
            body.winner_defense,
            body.loser_attack,
            body.loser_defense,
            params=params,
        )
        return _save_response(recorded)

    @app.get("/players", response_model=list[RankedPlayerOut])
    def list_players(
        session: Session = Depends(get_session),
        params: EloParameters = Depends(get_elo_parameters),
    ) -> list[RankedPlayerOut]:
        return [RankedPlayerOut.from_ranked(player) for player in rank_players(session, params=params)]

    @app.get("/stats", response_model=list[PlayerStatsOut])
    def player_stats(
        session: Session = Depends(get_session),
        params: EloParameters = Depends(get_elo_parameters),
    ) -> list[PlayerStatsOut]:
        return [PlayerStatsOut.from_summary(summary) for summary in leaderboard(session, params=params)]

    @app.get("/recentGames", response_model=list[GameOut])
    def recent_games(
        limit: int = Query(DEFAULT_RECENT_GAMES_LIMIT, ge=1, le=MAX_RECENT_GAMES_LIMIT),
        session: Session = Depends(get_session),
    ) -> list[GameOut]:
        return [GameOut.from_record(record) for record in fetch_recent_games(session, limit=limit)]

    @app.delete("/deleteGame/{game_type}/{game_id}", response_model=DeleteGameOut)
    def remove_game(
        game_type: str,
        game_id: int,
        session: Session = Depends(get_session),
    ) -> DeleteGameOut:
        record = delete_game(session, game_type, game_id)
        return DeleteGameOut(
            message=f"Deleted {record.mode.value} game {record.id}",
            game=GameOut.from_record(record),
        )

    return app


__all__ = ["create_app", "get_session"]
