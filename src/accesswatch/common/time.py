"""Timestamp parsing helpers."""

from __future__ import annotations

import re
from datetime import UTC, datetime

_RFC3339 = re.compile(
    r"(?P<date>\d{4}-\d{2}-\d{2})T(?P<time>\d{2}:\d{2}:\d{2})(?:\.(?P<fraction>\d+))?"
    r"(?P<offset>Z|[+-]\d{2}:\d{2})",
    re.ASCII,
)


def parse_rfc3339(value: str) -> datetime:
    """Parse a strict RFC 3339 timestamp, keeping its offset and up to microsecond precision.

    Date, full time and an explicit offset (``Z`` or ``±hh:mm``) are all required.
    Fractions beyond microseconds are truncated.
    """

    match = _RFC3339.fullmatch(value)
    if match is None:
        raise ValueError(f"Invalid RFC 3339 timestamp: {value!r}")

    fraction = (match["fraction"] or "")[:6].ljust(6, "0")
    offset = "+00:00" if match["offset"] == "Z" else match["offset"]
    try:
        return datetime.fromisoformat(f"{match['date']}T{match['time']}.{fraction}{offset}")
    except ValueError as exc:
        raise ValueError(f"Invalid RFC 3339 timestamp: {value!r}") from exc


def ensure_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)
