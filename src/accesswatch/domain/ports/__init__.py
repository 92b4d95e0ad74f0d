"""Domain port definitions for adapters."""

from __future__ import annotations

from .fetching import AccessFetcher, IdentityLookup
from .notification import ChatNotifier, NotificationDispatcher
from .persistence import TrackedIdentityStore

__all__ = [
    "AccessFetcher",
    "ChatNotifier",
    "IdentityLookup",
    "NotificationDispatcher",
    "TrackedIdentityStore",
]
