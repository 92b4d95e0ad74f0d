"""SQLAlchemy mapping metadata for tracked identities."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from functools import cache
from typing import TYPE_CHECKING

from sqlalchemy import (
    Column,
    DateTime,
    Dialect,
    Index,
    Integer,
    String,
    Table,
    TypeDecorator,
    UniqueConstraint,
    orm,
)

from accesswatch.common.time import ensure_utc
from accesswatch.domain.model import TrackedIdentity

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)

ALIAS_MAX_LENGTH = 100


class UTCDateTime(TypeDecorator[datetime]):
    """Store instants in UTC and hand them back timezone-aware, microseconds included."""

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return ensure_utc(value)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_N_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "pk": "pk_%(table_name)s",
}

tracked_identity_table = Table(
    "tracked_identity",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("chat_id", String, nullable=False),
    Column("external_id", Integer, nullable=False),
    Column("natural_key", String, nullable=False),
    Column("display_name", String, nullable=False),
    Column("alias", String(ALIAS_MAX_LENGTH), nullable=True),
    Column("last_entry_at", UTCDateTime(), nullable=True),
    Column("last_exit_at", UTCDateTime(), nullable=True),
    Column("created_at", UTCDateTime(), nullable=False, default=lambda: datetime.now(UTC)),
    Column("updated_at", UTCDateTime(), nullable=False, default=lambda: datetime.now(UTC)),
    UniqueConstraint("chat_id", "natural_key"),
    Index("ix_tracked_identity_external_id", "external_id"),
)


@cache
def start_mappers() -> orm.registry:
    """Map :class:`TrackedIdentity` onto its table (idempotent)."""

    log.info("Starting SQLAlchemy mappers")
    mapper_registry.map_imperatively(
        TrackedIdentity,
        tracked_identity_table,
        exclude_properties=["created_at", "updated_at"],
    )
    return mapper_registry


def create_all_tables(engine: Engine) -> None:
    """Create database tables for the mapped metadata."""

    log.info("Creating all tables")
    mapper_registry.metadata.create_all(engine)
