"""Webhook payloads and chat message texts."""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

from accesswatch.domain.model import NotificationKind

if TYPE_CHECKING:
    from collections.abc import Sequence

    from accesswatch.domain.model import NotificationEvent, TrackedIdentity

MESSAGE_PATH: Final[str] = "webhook/whatsapp"
TEMPLATE_PATHS: Final[dict[NotificationKind, str]] = {
    NotificationKind.ENTRY: "webhook/whatsapp/notify-entry",
    NotificationKind.EXIT: "webhook/whatsapp/notify-exit",
}

EMPTY_LIST_MESSAGE: Final[str] = "No tienes seguimientos."
LIST_HEADER: Final[str] = "📋 Listado:"


def template_path(event: NotificationEvent) -> str:
    return TEMPLATE_PATHS[event.kind]


def template_body(event: NotificationEvent) -> dict[str, str]:
    return {
        "chatId": event.chat_id,
        "fullName": event.display_name,
        "location": event.location_name,
    }


def message_body(chat_id: str, message: str) -> dict[str, str]:
    return {"chatId": chat_id, "message": message}


def format_tracked_list(identities: Sequence[TrackedIdentity]) -> str:
    if not identities:
        return EMPTY_LIST_MESSAGE
    lines = [f"- {identity.natural_key} {identity.label}" for identity in identities]
    return "\n".join([LIST_HEADER, *lines])
