from __future__ import annotations

import pytest

from accesswatch.common.errors import IdentityNotFoundError
from accesswatch.domain.tracking import (
    MESSAGE_ADDED,
    MESSAGE_NOT_FOUND,
    MESSAGE_REMOVED,
    TrackingService,
)
from tests.helpers.tracking import (
    FakeIdentityLookup,
    FakeTrackedIdentityStore,
    RecordingNotifier,
    StaticAccessFetcher,
    at,
    make_access,
    make_identity,
    make_profile,
)


def _service(
    *,
    store: FakeTrackedIdentityStore | None = None,
    fetcher: StaticAccessFetcher | None = None,
    lookup: FakeIdentityLookup | None = None,
) -> tuple[TrackingService, FakeTrackedIdentityStore, RecordingNotifier]:
    store = store or FakeTrackedIdentityStore()
    notifier = RecordingNotifier()
    service = TrackingService(
        store=store,
        fetcher=fetcher or StaticAccessFetcher(),
        lookup=lookup or FakeIdentityLookup([make_profile()]),
        notifier=notifier,
    )
    return service, store, notifier


def test_subscribe_creates_identity_and_confirms() -> None:
    service, store, notifier = _service()

    identity = service.subscribe("chat-1", "11111111-1", alias="Ada")

    assert identity.id == 1
    assert identity.display_name == "Ada Lovelace"
    assert identity.external_id == 100
    assert identity.last_entry_at is None
    assert [i.natural_key for i in store.identities] == ["11111111-1"]
    assert notifier.messages == [("chat-1", MESSAGE_ADDED)]


def test_subscribe_seeds_timestamps_from_latest_access() -> None:
    fetcher = StaticAccessFetcher(
        [
            make_access(external_id=7, natural_key="7-7", entry_at=at(50)),
            make_access(entry_at=at(40), exit_at=at(45)),
            make_access(entry_at=at(10)),
        ]
    )
    service, store, _ = _service(fetcher=fetcher)

    service.subscribe("chat-1", "11111111-1")

    stored = store.identities[0]
    assert stored.last_entry_at == at(40)
    assert stored.last_exit_at == at(45)


def test_subscribe_unknown_identity_notifies_and_raises() -> None:
    service, store, notifier = _service(lookup=FakeIdentityLookup())

    with pytest.raises(IdentityNotFoundError) as excinfo:
        service.subscribe("chat-1", "99999999-9")

    assert excinfo.value.natural_key == "99999999-9"
    assert store.identities == []
    assert notifier.messages == [("chat-1", MESSAGE_NOT_FOUND)]


def test_subscribe_twice_keeps_single_record() -> None:
    service, store, _ = _service()

    service.subscribe("chat-1", "11111111-1")
    service.subscribe("chat-1", "11111111-1")

    assert len(store.identities) == 1


def test_unsubscribe_deletes_and_confirms() -> None:
    store = FakeTrackedIdentityStore([make_identity()])
    service, _, notifier = _service(store=store)

    service.unsubscribe("chat-1", "11111111-1")
    service.unsubscribe("chat-1", "11111111-1")

    assert store.identities == []
    assert notifier.messages == [("chat-1", MESSAGE_REMOVED), ("chat-1", MESSAGE_REMOVED)]


def test_list_and_send_are_scoped_to_chat() -> None:
    store = FakeTrackedIdentityStore(
        [
            make_identity(chat_id="chat-1"),
            make_identity(chat_id="chat-2", alias="Boss"),
        ]
    )
    service, _, notifier = _service(store=store)

    listed = service.list_for_chat("chat-2")
    service.send_list("chat-2")

    assert [identity.alias for identity in listed] == ["Boss"]
    assert [(chat, [i.alias for i in items]) for chat, items in notifier.lists] == [
        ("chat-2", ["Boss"])
    ]
