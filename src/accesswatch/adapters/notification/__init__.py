"""Public interface for the notification adapters."""

from __future__ import annotations

from .messages import format_tracked_list
from .queued import NotificationConsumer, QueuedEvent, QueuedNotificationDispatcher
from .webhook import WebhookNotificationDispatcher

__all__ = [
    "NotificationConsumer",
    "QueuedEvent",
    "QueuedNotificationDispatcher",
    "WebhookNotificationDispatcher",
    "format_tracked_list",
]
