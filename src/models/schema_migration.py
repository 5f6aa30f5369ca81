"""schema_migrations table model."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, String, func
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base


class SchemaMigration(Base):
    """Bookkeeping row for one applied SQL migration file."""

    __tablename__ = "schema_migrations"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    migration_name: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    applied_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False),
        nullable=False,
        server_default=func.now(),
    )
