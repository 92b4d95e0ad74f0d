from __future__ import annotations

from .errors import (
    AccessWatchError,
    DispatchError,
    IdentityNotFoundError,
    ParseError,
    PersistenceError,
    TransportError,
)
from .logging import configure_logging
from .time import ensure_utc, parse_rfc3339

__all__ = [
    "AccessWatchError",
    "DispatchError",
    "IdentityNotFoundError",
    "ParseError",
    "PersistenceError",
    "TransportError",
    "configure_logging",
    "ensure_utc",
    "parse_rfc3339",
]
