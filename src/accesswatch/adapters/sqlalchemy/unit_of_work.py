"""Process-wide database handle and the per-operation unit of work.

``startup`` binds one engine for the whole process (the API threadpool and the
scheduler share it) and migrates the schema to head. Every store operation then
opens a :class:`SqlAlchemyUnitOfWork`, i.e. one session and one transaction.
"""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Literal

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from accesswatch.adapters.sqlalchemy.mappings import start_mappers
from accesswatch.adapters.sqlalchemy.migrations import upgrade_head
from accesswatch.config.storage import get_database_config

if TYPE_CHECKING:
    from types import TracebackType

    from sqlalchemy.engine import Engine

log = getLogger(__name__)


class StartupError(RuntimeError):
    """Raised when the database is used before ``startup`` or configured twice."""


@dataclass(frozen=True, slots=True)
class _Database:
    engine: Engine
    sessions: sessionmaker[Session]


_database: _Database | None = None


def startup(
    *,
    engine: Engine | None = None,
    database_uri: str | None = None,
    force: bool = False,
) -> None:
    """Bind ``engine`` (or one built from ``database_uri``) and upgrade the schema."""

    global _database  # noqa: PLW0603
    if _database is not None and not force:
        raise StartupError("Database already initialised. Pass force=True to reconfigure.")

    resolved = engine or create_engine(database_uri or get_database_config().uri, future=True)
    start_mappers()
    upgrade_head(engine=resolved)
    _database = _Database(
        engine=resolved,
        sessions=sessionmaker(bind=resolved, expire_on_commit=False),
    )
    log.info(f"Database ready at {resolved.url.render_as_string(hide_password=True)}")


def configured_engine() -> Engine | None:
    return _database.engine if _database is not None else None


def is_started() -> bool:
    return _database is not None


def shutdown() -> None:
    """Dispose the engine and forget it; ``startup`` may be called again afterwards."""

    global _database  # noqa: PLW0603
    if _database is not None:
        _database.engine.dispose()
    _database = None


class SqlAlchemyUnitOfWork:
    """One session, one transaction: rolled back on error, closed on exit."""

    def __init__(self) -> None:
        if _database is None:
            raise StartupError(
                "Database not initialised. Call accesswatch.adapters.sqlalchemy."
                "unit_of_work.startup() before opening a unit of work."
            )
        self._sessions = _database.sessions
        self._session: Session | None = None

    def __enter__(self) -> SqlAlchemyUnitOfWork:
        if self._session is not None:
            raise StartupError("Unit of work is already open")
        self._session = self._sessions()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        session = self.session
        try:
            if exc_type is not None:
                session.rollback()
        finally:
            session.close()
            self._session = None
        return False

    @property
    def session(self) -> Session:
        if self._session is None:
            raise StartupError("Unit of work is not open")
        return self._session

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()
