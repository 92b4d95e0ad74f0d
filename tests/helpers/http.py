"""Mock-transport client factories for adapter tests."""

from __future__ import annotations

from collections.abc import Callable  # noqa: TC003

import httpx
from hishel.httpx import AsyncCacheClient

from accesswatch.adapters.http_resilience import (
    ResilienceConfig,
    ResilientClient,
    _build_cache_components,  # type: ignore[reportPrivateUsage]
)

Handler = Callable[[httpx.Request], httpx.Response]


def make_client_factory(handler: Handler) -> Callable[[ResilienceConfig], ResilientClient]:
    """Return a factory whose clients answer every request through ``handler``.

    The replacement client keeps the base URL, headers and auth of the config so
    tests can assert on what would go over the wire.
    """

    async def async_handler(request: httpx.Request) -> httpx.Response:
        return handler(request)

    def factory(resilience: ResilienceConfig) -> ResilientClient:
        client = ResilientClient(resilience)
        client._client = httpx.AsyncClient(  # noqa: SLF001  # type: ignore[reportPrivateUsage]
            base_url=resilience.base_url or "",
            headers=dict(resilience.default_headers or {}),
            auth=httpx.BasicAuth(*resilience.auth) if resilience.auth else None,
            transport=httpx.MockTransport(async_handler),
        )
        return client

    return factory


def make_caching_client_factory(
    handler: Handler,
) -> Callable[[ResilienceConfig], ResilientClient]:
    """Like ``make_client_factory``, with the config's hishel cache kept in front."""

    async def async_handler(request: httpx.Request) -> httpx.Response:
        return handler(request)

    def factory(resilience: ResilienceConfig) -> ResilientClient:
        client = ResilientClient(resilience)
        storage, policy = _build_cache_components(resilience.cache)
        client._client = AsyncCacheClient(  # noqa: SLF001  # type: ignore[reportPrivateUsage]
            base_url=resilience.base_url or "",
            headers=dict(resilience.default_headers or {}),
            transport=httpx.MockTransport(async_handler),
            storage=storage,
            policy=policy,
        )
        return client

    return factory
