"""HTTP fetcher for the upstream access feed."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, cast

import httpx
from pydantic import ValidationError

from accesswatch.adapters.http_resilience import ResilientClient, default_client_factory
from accesswatch.common.errors import ParseError, TransportError
from accesswatch.config.access_source import RECENT_ACCESS_PATH

from .schema import RecentAccessResponse
from .translator import parse_access_record

if TYPE_CHECKING:
    from collections.abc import Callable

    from accesswatch.config.access_source import AccessSourceConfig
    from accesswatch.config.http_resilience import ResilienceConfig
    from accesswatch.domain.model import AccessRecord
    from accesswatch.domain.ports import AccessFetcher

log = getLogger(__name__)

COMPONENT = "AccessSource"


@dataclass(slots=True)
class HttpAccessFetcher:
    """Fetch the current access batch; any malformed record rejects the whole batch."""

    config: AccessSourceConfig
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=default_client_factory
    )

    def __call__(self) -> list[AccessRecord]:
        return asyncio.run(self.fetch_async())

    async def fetch_async(self) -> list[AccessRecord]:
        async with self.client_factory(self.config.resilience) as client:
            payload = await self._request(client)

        try:
            response = RecentAccessResponse.model_validate(payload)
            records = [parse_access_record(item) for item in response.data]
        except (ValidationError, ValueError) as exc:
            raise ParseError(f"Malformed access payload: {exc}", component=COMPONENT) from exc

        log.debug(f"Fetched {len(records)} access records")
        return records

    async def _request(self, client: ResilientClient) -> object:
        try:
            response = await client.get(RECENT_ACCESS_PATH)
        except httpx.HTTPError as exc:
            raise TransportError(
                f"Access service unreachable: {exc!r}", component=COMPONENT
            ) from exc

        if response.status_code != httpx.codes.OK:
            raise TransportError(
                f"Error fetching recent accesses: {response.status_code} {response.reason_phrase}",
                component=COMPONENT,
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as exc:
            raise ParseError(
                f"Access service returned invalid JSON: {exc}", component=COMPONENT
            ) from exc


if TYPE_CHECKING:
    _fetcher_check: AccessFetcher = HttpAccessFetcher(cast("AccessSourceConfig", object()))
