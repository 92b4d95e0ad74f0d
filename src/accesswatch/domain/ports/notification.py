"""Ports for outbound notifications."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from accesswatch.domain.model import NotificationEvent, TrackedIdentity


@runtime_checkable
class NotificationDispatcher(Protocol):
    """Deliver a batch of notification events, raising ``DispatchError`` on failure."""

    def dispatch(self, events: Sequence[NotificationEvent]) -> None: ...


@runtime_checkable
class ChatNotifier(Protocol):
    """Free-form chat messages used by the subscription workflow."""

    def send_message(self, chat_id: str, message: str) -> None: ...

    def send_tracked_list(self, chat_id: str, identities: Sequence[TrackedIdentity]) -> None: ...


__all__ = ["ChatNotifier", "NotificationDispatcher"]
