"""Public interface for the access feed adapter."""

from __future__ import annotations

from .client import HttpAccessFetcher
from .schema import AccessPayload, RecentAccessResponse
from .translator import parse_access_record

__all__ = [
    "AccessPayload",
    "HttpAccessFetcher",
    "RecentAccessResponse",
    "parse_access_record",
]
