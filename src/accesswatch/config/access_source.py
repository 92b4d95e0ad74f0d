"""Upstream access-feed configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import require_env_vars
from .http_resilience import DEFAULT_TIMEOUT_SECONDS, NO_RETRY, ResilienceConfig

RECENT_ACCESS_PATH = "/api/access/recently"


@dataclass(frozen=True, slots=True)
class AccessSourceConfig:
    """Holds the access service endpoint and its auth token."""

    auth_token: str
    resilience: ResilienceConfig


def get_access_source_config(
    *,
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
) -> AccessSourceConfig:
    values = require_env_vars(("ACCESS_SERVICE_BASE_URL", "ACCESS_SERVICE_AUTH_TOKEN"))
    return AccessSourceConfig(
        auth_token=values["ACCESS_SERVICE_AUTH_TOKEN"],
        # a failed fetch is retried by the next scheduler tick, never within a cycle
        resilience=ResilienceConfig(
            name="access-source",
            base_url=values["ACCESS_SERVICE_BASE_URL"].rstrip("/"),
            timeout_seconds=timeout_seconds,
            retry=NO_RETRY,
            cache=None,
            default_headers={"X-Auth-Token": values["ACCESS_SERVICE_AUTH_TOKEN"]},
        ),
    )
