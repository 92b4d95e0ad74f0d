"""HTTP client for the upstream identity lookup (source service)."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, cast
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from accesswatch.adapters.http_resilience import ResilientClient, default_client_factory
from accesswatch.common.errors import ParseError, TransportError
from accesswatch.domain.model import IdentityProfile

from .schema import IdentityPayload

if TYPE_CHECKING:
    from collections.abc import Callable

    from accesswatch.config.http_resilience import ResilienceConfig
    from accesswatch.config.identity import IdentityLookupConfig
    from accesswatch.domain.ports import IdentityLookup

log = getLogger(__name__)

COMPONENT = "IdentityLookup"


@dataclass(slots=True)
class HttpIdentityLookup:
    config: IdentityLookupConfig
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=default_client_factory
    )

    def lookup(self, natural_key: str) -> IdentityProfile | None:
        return asyncio.run(self.lookup_async(natural_key))

    async def lookup_async(self, natural_key: str) -> IdentityProfile | None:
        """Return the identity for ``natural_key``; an empty answer means not found."""

        path = f"/user/abm/{quote(natural_key, safe='')}"
        async with self.client_factory(self.config.resilience) as client:
            try:
                response = await client.get(path)
            except httpx.HTTPError as exc:
                raise TransportError(
                    f"Identity lookup unreachable: {exc!r}", component=COMPONENT
                ) from exc

        if response.status_code == httpx.codes.NOT_FOUND:
            return None
        if not response.is_success:
            raise TransportError(
                f"Identity lookup failed: {response.status_code} {response.reason_phrase}",
                component=COMPONENT,
                status_code=response.status_code,
            )
        if not response.content.strip():
            return None

        try:
            raw = response.json()
            if raw is None:
                return None
            payload = IdentityPayload.model_validate(raw)
        except (ValueError, ValidationError) as exc:
            raise ParseError(f"Malformed identity payload: {exc}", component=COMPONENT) from exc

        if payload.is_empty:
            log.debug(f"Identity lookup returned no record for {natural_key}")
            return None

        return IdentityProfile(
            external_id=payload.external_id,
            natural_key=payload.run or natural_key,
            first_name=payload.first_name,
            last_name=payload.last_name,
        )


if TYPE_CHECKING:
    _lookup_check: IdentityLookup = HttpIdentityLookup(cast("IdentityLookupConfig", object()))
