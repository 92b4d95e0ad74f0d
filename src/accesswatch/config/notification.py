"""Notification webhook configuration values."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Literal

from .env import env_int, require_env_vars
from .errors import ConfigurationError
from .http_resilience import (
    DEFAULT_TIMEOUT_SECONDS,
    NO_RETRY,
    RateLimit,
    ResilienceConfig,
)

type NotificationMode = Literal["direct", "queue"]

DEFAULT_MAX_DELIVERY_ATTEMPTS = 3


@dataclass(frozen=True, slots=True)
class NotificationConfig:
    """Webhook relay settings.

    ``mode`` selects between posting inside the reconciliation cycle (``direct``)
    and handing events to the in-process consumer (``queue``).
    """

    resilience: ResilienceConfig
    mode: NotificationMode = "direct"
    max_delivery_attempts: int = DEFAULT_MAX_DELIVERY_ATTEMPTS


def _resolve_mode(raw: str | None) -> NotificationMode:
    value = (raw or "direct").strip().lower()
    if value == "direct":
        return "direct"
    if value == "queue":
        return "queue"
    raise ConfigurationError(f"NOTIFICATION_MODE must be 'direct' or 'queue', got {raw!r}")


def get_notification_config(
    *,
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
) -> NotificationConfig:
    values = require_env_vars(
        ("NOTIFICATION_BASE_URL", "NOTIFICATION_USERNAME", "NOTIFICATION_PASSWORD")
    )
    base_url = values["NOTIFICATION_BASE_URL"]
    if not base_url.endswith("/"):
        base_url += "/"
    return NotificationConfig(
        resilience=ResilienceConfig(
            name="notification",
            base_url=base_url,
            timeout_seconds=timeout_seconds,
            # POSTs are not idempotent on the relay side
            retry=NO_RETRY,
            ratelimit=RateLimit(max_calls=10, per_seconds=1.0),
            cache=None,
            auth=(values["NOTIFICATION_USERNAME"], values["NOTIFICATION_PASSWORD"]),
        ),
        mode=_resolve_mode(os.getenv("NOTIFICATION_MODE")),
        max_delivery_attempts=env_int(
            "NOTIFICATION_MAX_ATTEMPTS", DEFAULT_MAX_DELIVERY_ATTEMPTS
        ),
    )
