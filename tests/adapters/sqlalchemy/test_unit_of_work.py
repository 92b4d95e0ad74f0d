from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine, func, inspect, select

from accesswatch.adapters.sqlalchemy.mappings import tracked_identity_table
from accesswatch.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyUnitOfWork,
    StartupError,
    configured_engine,
    is_started,
    shutdown,
    startup,
)

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sqlalchemy.engine import Engine


@pytest.fixture(autouse=True)
def reset_unit_of_work_state() -> Iterator[None]:
    shutdown()
    yield
    shutdown()


def test_sqlalchemy_unit_of_work_requires_startup() -> None:
    with pytest.raises(StartupError):
        SqlAlchemyUnitOfWork()


def test_startup_requires_force_for_reconfiguration() -> None:
    engine_a = create_engine("sqlite+pysqlite:///:memory:", future=True)
    engine_b = create_engine("sqlite+pysqlite:///:memory:", future=True)

    startup(engine=engine_a, force=True)

    with pytest.raises(StartupError):
        startup(engine=engine_b)

    startup(engine=engine_b, force=True)
    assert configured_engine() is engine_b
    assert is_started()


def test_startup_migrates_schema(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)

    inspector = inspect(sqlite_engine)
    assert "tracked_identity" in inspector.get_table_names()
    unique_names = {uq["name"] for uq in inspector.get_unique_constraints("tracked_identity")}
    assert "uq_tracked_identity_chat_id_natural_key" in unique_names


def test_unit_of_work_rolls_back_on_error(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)

    with pytest.raises(RuntimeError), SqlAlchemyUnitOfWork() as uow:
        uow.session.execute(
            tracked_identity_table.insert().values(
                chat_id="chat-1",
                external_id=1,
                natural_key="1-9",
                display_name="Rolled Back",
            )
        )
        raise RuntimeError("boom")

    with SqlAlchemyUnitOfWork() as uow:
        count = uow.session.execute(
            select(func.count()).select_from(tracked_identity_table)
        ).scalar_one()
    assert count == 0


def test_session_is_released_after_exit(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)
    uow = SqlAlchemyUnitOfWork()

    with uow:
        assert uow.session is not None

    with pytest.raises(StartupError):
        _ = uow.session


def test_shutdown_resets_state(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)

    shutdown()

    assert configured_engine() is None
    assert not is_started()


def test_unit_of_work_cannot_be_entered_twice(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)
    uow = SqlAlchemyUnitOfWork()

    with uow, pytest.raises(StartupError), uow:
        pass

    with uow:
        assert uow.session is not None
