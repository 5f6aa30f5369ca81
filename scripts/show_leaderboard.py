#!/usr/bin/env python3
"""Print the current leaderboard with recent rating changes."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Annotated

import typer

ROOT_DIR = Path(__file__).resolve().parents[1]
SRC_DIR = ROOT_DIR / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from config import load_app_config
from db import create_db_engine, create_session_factory, session_scope
from repositories import leaderboard

app = typer.Typer(
    add_completion=False,
    help="Query the leaderboard.",
)


@app.command()
def show_leaderboard(
    top_n: Annotated[
        int,
        typer.Option("--top-n", help="Number of players to print. Use 0 for all."),
    ] = 20,
    config_path: Annotated[
        Path | None,
        typer.Option("--config", help="TOML config file. Defaults to configs/default.toml."),
    ] = None,
    db_url: Annotated[
        str | None,
        typer.Option("--db-url", help="Database URL. Overrides the config file."),
    ] = None,
) -> None:
    """Print players by current rating, highest first."""
    if top_n < 0:
        raise typer.BadParameter("--top-n must be >= 0")

    config = load_app_config(config_path)
    engine = create_db_engine(db_url or config.database_url)
    session_factory = create_session_factory(engine)

    with session_scope(session_factory) as session:
        summaries = leaderboard(session, params=config.elo)

    if top_n:
        summaries = summaries[:top_n]
    if not summaries:
        typer.echo("No games recorded yet.")
        return

    for index, summary in enumerate(summaries, start=1):
        history = " ".join(f"{change:+d}" for change in summary.rating_history) or "-"
        typer.echo(
            f"{index:2d}. {summary.name:<20} "
            f"rating={summary.rating:5d} games={summary.games_played:4d} "
            f"wins={summary.total_wins:3d} losses={summary.total_losses:3d} "
            f"recent={history}"
        )


if __name__ == "__main__":
    app()
