"""Ports for reading from upstream services."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from accesswatch.domain.model import AccessRecord, IdentityProfile


@runtime_checkable
class AccessFetcher(Protocol):
    """Callable port returning the current batch of access records.

    Implementations raise ``TransportError`` or ``ParseError``; a single malformed
    record rejects the whole batch.
    """

    def __call__(self) -> Sequence[AccessRecord]: ...


@runtime_checkable
class IdentityLookup(Protocol):
    """Resolve a natural key to the upstream identity, ``None`` when unknown."""

    def lookup(self, natural_key: str) -> IdentityProfile | None: ...


__all__ = ["AccessFetcher", "IdentityLookup"]
