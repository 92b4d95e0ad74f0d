from __future__ import annotations

from datetime import UTC, datetime, timedelta, timezone
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import select, text

from accesswatch.adapters.sqlalchemy.mappings import tracked_identity_table
from accesswatch.adapters.sqlalchemy.store import SqlAlchemyTrackedIdentityStore
from accesswatch.common.errors import PersistenceError
from accesswatch.domain.model import NotificationKind
from accesswatch.domain.reconciliation import ReconciliationEngine
from tests.helpers.tracking import RecordingDispatcher, at, make_access, make_identity

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine


def test_create_assigns_id_and_get_all_orders_by_insertion(
    sqlite_store: SqlAlchemyTrackedIdentityStore,
) -> None:
    first = make_identity(chat_id="chat-1")
    second = make_identity(chat_id="chat-2", alias="Mom")

    sqlite_store.create(first)
    sqlite_store.create(second)

    assert first.id is not None
    assert second.id is not None
    assert second.id > first.id
    loaded = sqlite_store.get_all()
    assert [(i.chat_id, i.alias) for i in loaded] == [("chat-1", None), ("chat-2", "Mom")]


def test_duplicate_create_is_noop(sqlite_store: SqlAlchemyTrackedIdentityStore) -> None:
    sqlite_store.create(make_identity(display_name="First"))
    duplicate = make_identity(display_name="Second")

    sqlite_store.create(duplicate)

    loaded = sqlite_store.get_all()
    assert len(loaded) == 1
    assert loaded[0].display_name == "First"
    assert duplicate.id is None


def test_get_by_chat_filters(sqlite_store: SqlAlchemyTrackedIdentityStore) -> None:
    sqlite_store.create(make_identity(chat_id="chat-1"))
    sqlite_store.create(make_identity(chat_id="chat-2"))
    sqlite_store.create(make_identity(chat_id="chat-1", natural_key="2-7", external_id=2))

    assert [i.natural_key for i in sqlite_store.get_by_chat("chat-1")] == ["11111111-1", "2-7"]
    assert sqlite_store.get_by_chat("chat-3") == []


def test_create_persists_seed_timestamps(sqlite_store: SqlAlchemyTrackedIdentityStore) -> None:
    sqlite_store.create(make_identity(last_entry_at=at(1), last_exit_at=at(2)))

    (loaded,) = sqlite_store.get_all()

    assert loaded.last_entry_at == at(1)
    assert loaded.last_exit_at == at(2)


def test_update_entry_at_touches_every_row_with_external_id(
    sqlite_store: SqlAlchemyTrackedIdentityStore,
) -> None:
    sqlite_store.create(make_identity(chat_id="chat-1", external_id=100))
    sqlite_store.create(make_identity(chat_id="chat-2", external_id=100))
    sqlite_store.create(make_identity(chat_id="chat-3", external_id=200, natural_key="2-7"))

    sqlite_store.update_entry_at([make_access(external_id=100, entry_at=at(30))])

    entries = {i.chat_id: i.last_entry_at for i in sqlite_store.get_all()}
    assert entries == {"chat-1": at(30), "chat-2": at(30), "chat-3": None}


def test_update_exit_at_writes_exit_only(sqlite_store: SqlAlchemyTrackedIdentityStore) -> None:
    sqlite_store.create(make_identity(last_entry_at=at(0)))

    sqlite_store.update_exit_at([make_access(entry_at=at(5), exit_at=at(9))])

    (loaded,) = sqlite_store.get_all()
    assert loaded.last_entry_at == at(0)
    assert loaded.last_exit_at == at(9)


def test_update_stamps_updated_at(
    sqlite_store: SqlAlchemyTrackedIdentityStore,
    sqlite_engine: Engine,
) -> None:
    sqlite_store.create(make_identity())
    before = datetime.now(UTC)

    sqlite_store.update_entry_at([make_access(entry_at=at(1))])

    with sqlite_engine.connect() as connection:
        updated_at = connection.execute(select(tracked_identity_table.c.updated_at)).scalar_one()
    assert updated_at >= before


def test_failed_batch_update_leaves_no_row_touched(
    sqlite_store: SqlAlchemyTrackedIdentityStore,
    sqlite_engine: Engine,
) -> None:
    sqlite_store.create(make_identity(chat_id="chat-1", external_id=1, natural_key="1-9"))
    sqlite_store.create(make_identity(chat_id="chat-1", external_id=2, natural_key="2-7"))
    with sqlite_engine.begin() as connection:
        connection.execute(
            text(
                "CREATE TRIGGER reject_second BEFORE UPDATE ON tracked_identity "
                "WHEN NEW.external_id = 2 BEGIN SELECT RAISE(ABORT, 'rejected'); END"
            )
        )

    with pytest.raises(PersistenceError) as excinfo:
        sqlite_store.update_entry_at(
            [
                make_access(external_id=1, natural_key="1-9", entry_at=at(1)),
                make_access(external_id=2, natural_key="2-7", entry_at=at(2)),
            ]
        )

    assert excinfo.value.component == "TrackedIdentityStore"
    assert [i.last_entry_at for i in sqlite_store.get_all()] == [None, None]


def test_update_with_empty_batch_is_noop(sqlite_store: SqlAlchemyTrackedIdentityStore) -> None:
    sqlite_store.update_entry_at([])
    sqlite_store.update_exit_at([])

    assert sqlite_store.get_all() == []


def test_delete_is_idempotent(sqlite_store: SqlAlchemyTrackedIdentityStore) -> None:
    sqlite_store.create(make_identity(chat_id="chat-1"))
    sqlite_store.create(make_identity(chat_id="chat-2"))

    sqlite_store.delete("chat-1", "11111111-1")
    sqlite_store.delete("chat-1", "11111111-1")
    sqlite_store.delete("chat-9", "nobody")

    assert [i.chat_id for i in sqlite_store.get_all()] == ["chat-2"]


def test_database_failure_is_persistence_error(
    sqlite_store: SqlAlchemyTrackedIdentityStore,
    sqlite_engine: Engine,
) -> None:
    with sqlite_engine.begin() as connection:
        connection.execute(text("DROP TABLE tracked_identity"))

    with pytest.raises(PersistenceError) as excinfo:
        sqlite_store.get_all()

    assert str(excinfo.value).startswith("| TrackedIdentityStore | ")


def test_reconcile_twice_against_store_notifies_once(
    sqlite_store: SqlAlchemyTrackedIdentityStore,
) -> None:
    santiago = timezone(timedelta(hours=-3))
    access = make_access(
        entry_at=datetime(2025, 3, 1, 5, 15, 30, 123456, tzinfo=santiago),
        exit_at=datetime(2025, 3, 1, 7, 45, 1, 654321, tzinfo=santiago),
    )
    sqlite_store.create(make_identity())
    dispatcher = RecordingDispatcher()
    engine = ReconciliationEngine(store=sqlite_store, dispatcher=dispatcher)

    first = engine.reconcile([access])
    second = engine.reconcile([access])

    assert [event.kind for event in first.events] == [NotificationKind.ENTRY, NotificationKind.EXIT]
    assert second.events == ()
    assert len(dispatcher.batches) == 1
    (stored,) = sqlite_store.get_all()
    assert stored.last_entry_at == access.entry_at
    assert stored.last_exit_at == access.exit_at
    assert stored.last_entry_at is not None
    assert stored.last_entry_at.microsecond == 123456
