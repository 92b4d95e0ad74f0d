"""Domain layer: entities, ports and services independent of any adapter."""

from __future__ import annotations

from .model import (
    LOCATION_NAMES,
    AccessRecord,
    IdentityProfile,
    NotificationEvent,
    NotificationKind,
    TrackedIdentity,
    location_name,
)

__all__ = [
    "LOCATION_NAMES",
    "AccessRecord",
    "IdentityProfile",
    "NotificationEvent",
    "NotificationKind",
    "TrackedIdentity",
    "location_name",
]
