"""Identity lookup (source service) configuration values."""

from __future__ import annotations

from dataclasses import dataclass
from typing import cast

from .env import require_env_vars
from .http_resilience import (
    DEFAULT_TIMEOUT_SECONDS,
    CacheConfig,
    RateLimit,
    ResilienceConfig,
    RetryPolicy,
)

IDENTITY_CACHE_TTL_SECONDS = 300.0


def _is_known_identity(payload: object) -> bool:
    """Cache only answers that name an identity; "not found" is never cached."""

    if not isinstance(payload, dict):
        return False
    return bool(cast("dict[str, object]", payload).get("externalId"))


@dataclass(frozen=True, slots=True)
class IdentityLookupConfig:
    resilience: ResilienceConfig


def get_identity_lookup_config(
    *,
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
) -> IdentityLookupConfig:
    values = require_env_vars(("SOURCE_BASE_URL", "SOURCE_AUTH_STRING"))
    return IdentityLookupConfig(
        resilience=ResilienceConfig(
            name="identity-lookup",
            base_url=values["SOURCE_BASE_URL"].rstrip("/"),
            timeout_seconds=timeout_seconds,
            retry=RetryPolicy(total=2),
            ratelimit=RateLimit(max_calls=5, per_seconds=1.0),
            cache=CacheConfig(
                backend="sqlite",
                default_ttl_seconds=IDENTITY_CACHE_TTL_SECONDS,
                should_cache=_is_known_identity,
            ),
            default_headers={"X-Auth-String": values["SOURCE_AUTH_STRING"]},
        ),
    )
