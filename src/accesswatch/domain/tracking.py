"""Subscription workflow: follow, unfollow and list identities per chat."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from accesswatch.common.errors import IdentityNotFoundError
from accesswatch.domain.model import TrackedIdentity

if TYPE_CHECKING:
    from accesswatch.domain.ports import (
        AccessFetcher,
        ChatNotifier,
        IdentityLookup,
        TrackedIdentityStore,
    )

log = getLogger(__name__)

COMPONENT = "TrackingService"

MESSAGE_NOT_FOUND = "Usuario no existente"
MESSAGE_ADDED = "✅ Agregado"
MESSAGE_REMOVED = "✅ Eliminado"


@dataclass(slots=True)
class TrackingService:
    store: TrackedIdentityStore
    fetcher: AccessFetcher
    lookup: IdentityLookup
    notifier: ChatNotifier

    def subscribe(
        self,
        chat_id: str,
        natural_key: str,
        *,
        alias: str | None = None,
    ) -> TrackedIdentity:
        """Start tracking ``natural_key`` for ``chat_id``.

        The new record is seeded with the identity's most recent access so the
        next cycle does not report an event the chat never asked about. Creating
        an existing subscription is a silent no-op.
        """

        profile = self.lookup.lookup(natural_key)
        if profile is None:
            log.info(f"Identity {natural_key} not found for chat {chat_id}")
            self.notifier.send_message(chat_id, MESSAGE_NOT_FOUND)
            raise IdentityNotFoundError(natural_key, component=COMPONENT)

        identity = TrackedIdentity(
            chat_id=chat_id,
            external_id=profile.external_id,
            natural_key=natural_key,
            display_name=profile.full_name,
            alias=alias,
        )
        for access in self.fetcher():
            if access.external_id == profile.external_id:
                identity.last_entry_at = access.entry_at
                identity.last_exit_at = access.exit_at
                break

        self.store.create(identity)
        log.info(f"Chat {chat_id} now tracks {natural_key} (external id {profile.external_id})")
        self.notifier.send_message(chat_id, MESSAGE_ADDED)
        return identity

    def unsubscribe(self, chat_id: str, natural_key: str) -> None:
        self.store.delete(chat_id, natural_key)
        log.info(f"Chat {chat_id} stopped tracking {natural_key}")
        self.notifier.send_message(chat_id, MESSAGE_REMOVED)

    def list_for_chat(self, chat_id: str) -> list[TrackedIdentity]:
        return self.store.get_by_chat(chat_id)

    def send_list(self, chat_id: str) -> None:
        self.notifier.send_tracked_list(chat_id, self.store.get_by_chat(chat_id))
