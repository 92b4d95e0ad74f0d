"""Tracked-identity store backed by SQLAlchemy sessions."""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING

from sqlalchemy import delete, select, update
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError

from accesswatch.adapters.sqlalchemy.mappings import tracked_identity_table
from accesswatch.adapters.sqlalchemy.unit_of_work import SqlAlchemyUnitOfWork
from accesswatch.common.errors import PersistenceError
from accesswatch.domain.model import TrackedIdentity

if TYPE_CHECKING:
    from collections.abc import Sequence

    from accesswatch.domain.model import AccessRecord
    from accesswatch.domain.ports import TrackedIdentityStore

log = getLogger(__name__)

COMPONENT = "TrackedIdentityStore"

UnitOfWorkFactory = Callable[[], SqlAlchemyUnitOfWork]

_table = tracked_identity_table.c


class SqlAlchemyTrackedIdentityStore:
    """Every public method runs in its own transaction.

    SQLAlchemy failures surface as ``PersistenceError``; the unit of work rolls
    back first, so a failed batch update leaves no row touched.
    """

    def __init__(self, unit_of_work_factory: UnitOfWorkFactory = SqlAlchemyUnitOfWork) -> None:
        self._uow_factory = unit_of_work_factory

    def get_all(self) -> list[TrackedIdentity]:
        stmt = select(TrackedIdentity).order_by(_table.id)
        try:
            with self._uow_factory() as uow:
                return list(uow.session.scalars(stmt))
        except SQLAlchemyError as exc:
            raise self._error("Loading tracked identities failed", exc) from exc

    def get_by_chat(self, chat_id: str) -> list[TrackedIdentity]:
        stmt = select(TrackedIdentity).where(_table.chat_id == chat_id).order_by(_table.id)
        try:
            with self._uow_factory() as uow:
                return list(uow.session.scalars(stmt))
        except SQLAlchemyError as exc:
            raise self._error(f"Loading tracked identities for chat {chat_id} failed", exc) from exc

    def update_entry_at(self, accesses: Sequence[AccessRecord]) -> None:
        self._update_timestamps(
            "last_entry_at",
            [(access.external_id, access.entry_at) for access in accesses],
        )

    def update_exit_at(self, accesses: Sequence[AccessRecord]) -> None:
        self._update_timestamps(
            "last_exit_at",
            [(access.external_id, access.exit_at) for access in accesses],
        )

    def create(self, identity: TrackedIdentity) -> None:
        now = datetime.now(UTC)
        stmt = (
            sqlite_insert(tracked_identity_table)
            .values(
                chat_id=identity.chat_id,
                external_id=identity.external_id,
                natural_key=identity.natural_key,
                display_name=identity.display_name,
                alias=identity.alias,
                last_entry_at=identity.last_entry_at,
                last_exit_at=identity.last_exit_at,
                created_at=now,
                updated_at=now,
            )
            .on_conflict_do_nothing(index_elements=["chat_id", "natural_key"])
        )
        try:
            with self._uow_factory() as uow:
                result = uow.session.execute(stmt)
                uow.commit()
        except SQLAlchemyError as exc:
            raise self._error(
                f"Creating tracked identity {identity.chat_id}/{identity.natural_key} failed", exc
            ) from exc

        if result.rowcount:
            identity.id = result.inserted_primary_key[0] if result.inserted_primary_key else None
        else:
            log.debug(f"Tracked identity {identity.chat_id}/{identity.natural_key} already exists")

    def delete(self, chat_id: str, natural_key: str) -> None:
        stmt = delete(tracked_identity_table).where(
            _table.chat_id == chat_id,
            _table.natural_key == natural_key,
        )
        try:
            with self._uow_factory() as uow:
                uow.session.execute(stmt)
                uow.commit()
        except SQLAlchemyError as exc:
            raise self._error(
                f"Deleting tracked identity {chat_id}/{natural_key} failed", exc
            ) from exc

    def _update_timestamps(
        self,
        column: str,
        values: Sequence[tuple[int, datetime | None]],
    ) -> None:
        if not values:
            return
        now = datetime.now(UTC)
        try:
            with self._uow_factory() as uow:
                for external_id, timestamp in values:
                    uow.session.execute(
                        update(tracked_identity_table)
                        .where(_table.external_id == external_id)
                        .values({column: timestamp, "updated_at": now})
                    )
                uow.commit()
        except SQLAlchemyError as exc:
            raise self._error(f"Updating {column} for {len(values)} identities failed", exc) from exc
        log.debug(f"Updated {column} for {len(values)} external ids")

    @staticmethod
    def _error(message: str, exc: SQLAlchemyError) -> PersistenceError:
        return PersistenceError(f"{message}: {exc}", component=COMPONENT)


if TYPE_CHECKING:
    _store_check: TrackedIdentityStore = SqlAlchemyTrackedIdentityStore()
