from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from accesswatch.domain.reconciliation import diff_accesses, entry_changed, exit_changed
from tests.helpers.tracking import at, make_access, make_identity


@pytest.mark.parametrize(
    ("stored", "reported", "expected"),
    [
        (None, at(0), True),
        (at(0), at(0), False),
        (at(0), at(5), True),
        (at(5), at(0), True),
    ],
)
def test_entry_changed(stored: datetime | None, reported: datetime, expected: bool) -> None:
    identity = make_identity(last_entry_at=stored)
    access = make_access(entry_at=reported)

    assert entry_changed(identity, access) is expected


@pytest.mark.parametrize(
    ("stored", "reported", "expected"),
    [
        (None, None, False),
        (at(0), None, False),
        (None, at(10), True),
        (at(10), at(10), False),
        (at(10), at(20), True),
    ],
)
def test_exit_changed(
    stored: datetime | None, reported: datetime | None, expected: bool
) -> None:
    identity = make_identity(last_exit_at=stored)
    access = make_access(exit_at=reported)

    assert exit_changed(identity, access) is expected


def test_entry_comparison_uses_full_precision() -> None:
    identity = make_identity(last_entry_at=at(0))
    access = make_access(entry_at=at(0) + timedelta(microseconds=1))

    assert entry_changed(identity, access)


def test_diff_ignores_identities_absent_from_batch() -> None:
    tracked = make_identity(external_id=1, last_entry_at=None)
    other = make_access(external_id=2, natural_key="22222222-2")

    changes = diff_accesses([other], [tracked])

    assert changes.is_empty
    assert changes.entry_updates == {}
    assert changes.exit_updates == {}


def test_diff_fans_out_per_subscription_and_dedups_updates() -> None:
    first = make_identity(chat_id="chat-1", last_entry_at=at(0))
    second = make_identity(chat_id="chat-2", last_entry_at=at(0))
    access = make_access(entry_at=at(30))

    changes = diff_accesses([access], [first, second])

    assert [change.identity.chat_id for change in changes.entry_changes] == ["chat-1", "chat-2"]
    assert changes.entry_updates == {access.external_id: access}
    assert changes.exit_changes == []


def test_diff_keeps_first_triggering_access_per_external_id() -> None:
    identity = make_identity(last_entry_at=None)
    earlier = make_access(entry_at=at(1))
    later = make_access(entry_at=at(2))

    changes = diff_accesses([earlier, later], [identity])

    assert len(changes.entry_changes) == 1
    assert changes.entry_changes[0].access is earlier
    assert changes.entry_updates[identity.external_id] is earlier


def test_diff_reports_entry_and_exit_independently() -> None:
    identity = make_identity(last_entry_at=at(0), last_exit_at=None)
    access = make_access(entry_at=at(0), exit_at=at(45))

    changes = diff_accesses([access], [identity])

    assert changes.entry_changes == []
    assert [change.access for change in changes.exit_changes] == [access]
    assert changes.exit_updates == {identity.external_id: access}


@pytest.mark.parametrize(("with_accesses", "with_identities"), [(False, True), (True, False)])
def test_diff_with_empty_side_is_empty(with_accesses: bool, with_identities: bool) -> None:
    accesses = [make_access()] if with_accesses else []
    identities = [make_identity()] if with_identities else []

    assert diff_accesses(accesses, identities).is_empty
