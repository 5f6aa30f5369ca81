"""Schema creation and SQL-file migrations."""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path

from sqlalchemy import insert, select
from sqlalchemy.engine import Connection, Engine

from models import Base, Player, SchemaMigration, SingleGameResult, TeamGameResult

logger = logging.getLogger(__name__)

LEDGER_TABLES = (
    Player.__table__,
    SingleGameResult.__table__,
    TeamGameResult.__table__,
    SchemaMigration.__table__,
)


def ensure_schema(engine: Engine) -> None:
    """Create ledger tables and their indexes if they do not exist."""
    Base.metadata.create_all(bind=engine, tables=list(LEDGER_TABLES))


def _sqlite_statements(sql: str) -> list[str]:
    # pysqlite runs one statement per call; only split where sqlite agrees a statement ends.
    statements = []
    buffer = ""
    for piece in sql.split(";"):
        buffer += piece + ";"
        if sqlite3.complete_statement(buffer):
            statements.append(buffer)
            buffer = ""
    statements.append(buffer[:-1])
    return [statement for statement in statements if _has_sql(statement)]


def _has_sql(statement: str) -> bool:
    lines = [line for line in statement.splitlines() if not line.strip().startswith("--")]
    return bool("".join(lines).strip(" \t\r\n;"))


def _apply_migration(connection: Connection, file_path: Path) -> None:
    sql = file_path.read_text(encoding="utf-8")
    if connection.dialect.name == "sqlite":
        for statement in _sqlite_statements(sql):
            connection.exec_driver_sql(statement)
    elif _has_sql(sql):
        connection.exec_driver_sql(sql, execution_options={"no_parameters": True})
    connection.execute(insert(SchemaMigration).values(migration_name=file_path.name))


def run_migrations(engine: Engine, migrations_dir: Path) -> list[str]:
    """Apply pending ``*.sql`` files in name order; each file is one transaction."""
    SchemaMigration.__table__.create(bind=engine, checkfirst=True)

    if not migrations_dir.exists():
        migrations_dir.mkdir(parents=True)
        logger.info("Created migrations directory %s", migrations_dir)
        return []
    if not migrations_dir.is_dir():
        raise NotADirectoryError(f"Migrations path is not a directory: {migrations_dir}")

    with engine.connect() as connection:
        applied = set(connection.scalars(select(SchemaMigration.migration_name)))

    pending = [path for path in sorted(migrations_dir.glob("*.sql")) if path.name not in applied]
    if not pending:
        logger.info("All migrations already applied")
        return []

    applied_now: list[str] = []
    for file_path in pending:
        logger.info("Running migration %s", file_path.name)
        with engine.begin() as connection:
            _apply_migration(connection, file_path)
        applied_now.append(file_path.name)

    logger.info("Applied %d migration(s)", len(applied_now))
    return applied_now


__all__ = ["LEDGER_TABLES", "ensure_schema", "run_migrations"]
