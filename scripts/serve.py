#!/usr/bin/env python3
"""Run the match ledger HTTP API."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Annotated

import typer
import uvicorn

ROOT_DIR = Path(__file__).resolve().parents[1]
SRC_DIR = ROOT_DIR / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from api import create_app
from config import load_app_config
from db import create_db_engine, create_session_factory
from repositories import ensure_schema, run_migrations

app = typer.Typer(
    add_completion=False,
    help="Serve the match ledger API.",
)


@app.command()
def serve(
    config_path: Annotated[
        Path | None,
        typer.Option("--config", help="TOML config file. Defaults to configs/default.toml."),
    ] = None,
    host: Annotated[str | None, typer.Option("--host")] = None,
    port: Annotated[int | None, typer.Option("--port")] = None,
    skip_migrations: Annotated[
        bool,
        typer.Option("--skip-migrations", help="Do not create tables or apply SQL migrations."),
    ] = False,
) -> None:
    """Prepare the schema, then serve the API with uvicorn."""
    config = load_app_config(config_path)
    logging.basicConfig(
        level=getattr(logging, config.server.log_level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    engine = create_db_engine(config.database_url)
    if not skip_migrations:
        ensure_schema(engine)
        applied = run_migrations(engine, config.migrations_dir)
        typer.echo(f"schema_ready applied_migrations={len(applied)}")

    api = create_app(
        create_session_factory(engine),
        elo_parameters=config.elo,
        cors_origins=config.server.cors_origins,
    )
    uvicorn.run(
        api,
        host=host or config.server.host,
        port=port or config.server.port,
        log_level=config.server.log_level.lower(),
    )


if __name__ == "__main__":
    app()
