"""Translate access service payloads into domain access records."""

from __future__ import annotations

import re

from accesswatch.common.time import parse_rfc3339
from accesswatch.domain.model import AccessRecord

from .schema import AccessPayload

_INTEGER = re.compile(r"[+-]?\d+", re.ASCII)

EXTERNAL_ID_BITS = 32
LOCATION_BITS = 8


def _parse_int(field_name: str, value: str | int, *, bits: int) -> int:
    """Parse a signed decimal integer that must fit in ``bits`` bits."""

    if isinstance(value, bool):
        raise ValueError(f"{field_name} is not an integer: {value!r}")
    if isinstance(value, str):
        if _INTEGER.fullmatch(value) is None:
            raise ValueError(f"{field_name} is not an integer: {value!r}")
        value = int(value)

    limit = 1 << (bits - 1)
    if not -limit <= value < limit:
        raise ValueError(f"{field_name} is out of range for a {bits}-bit integer: {value}")
    return value


def parse_access_record(payload: AccessPayload) -> AccessRecord:
    """Build an :class:`AccessRecord`, raising ``ValueError`` on any malformed field."""

    return AccessRecord(
        external_id=_parse_int("externalId", payload.external_id, bits=EXTERNAL_ID_BITS),
        natural_key=payload.run,
        display_name=payload.full_name,
        location_code=_parse_int("location", payload.location, bits=LOCATION_BITS),
        entry_at=parse_rfc3339(payload.entry_at),
        exit_at=parse_rfc3339(payload.exit_at) if payload.exit_at is not None else None,
    )
