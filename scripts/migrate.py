#!/usr/bin/env python3
"""Create ledger tables and apply pending SQL migrations."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Annotated

import typer

ROOT_DIR = Path(__file__).resolve().parents[1]
SRC_DIR = ROOT_DIR / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from config import load_app_config
from db import create_db_engine
from repositories import ensure_schema, run_migrations

app = typer.Typer(
    add_completion=False,
    help="Database schema jobs.",
)


@app.command()
def migrate(
    config_path: Annotated[
        Path | None,
        typer.Option("--config", help="TOML config file. Defaults to configs/default.toml."),
    ] = None,
    db_url: Annotated[
        str | None,
        typer.Option("--db-url", help="Database URL. Overrides the config file."),
    ] = None,
    migrations_dir: Annotated[
        Path | None,
        typer.Option("--migrations-dir", help="Directory of *.sql migration files."),
    ] = None,
) -> None:
    """Create missing tables, then apply SQL migrations in name order."""
    config = load_app_config(config_path)
    logging.basicConfig(
        level=getattr(logging, config.server.log_level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    engine = create_db_engine(db_url or config.database_url)
    ensure_schema(engine)
    applied = run_migrations(engine, migrations_dir or config.migrations_dir)

    if not applied:
        typer.echo("no pending migrations")
        return
    for name in applied:
        typer.echo(f"applied {name}")
    typer.echo(f"completed applied_migrations={len(applied)}")


if __name__ == "__main__":
    app()
