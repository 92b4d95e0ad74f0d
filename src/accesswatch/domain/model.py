"""Domain entities for tracked identities, access facts and notifications."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from datetime import datetime

UNKNOWN_LOCATION: Final[str] = "Unknown Location"

LOCATION_NAMES: Final[dict[int, str]] = {
    102: "Espacio Urbano",
    104: "Calama",
    105: "Pacífico",
    106: "Arauco",
    107: "Iquique",
    108: "Angamos",
}


def location_name(code: int) -> str:
    return LOCATION_NAMES.get(code, UNKNOWN_LOCATION)


class NotificationKind(StrEnum):
    ENTRY = "ENTRY"
    EXIT = "EXIT"


@dataclass(eq=False, kw_only=True)
class TrackedIdentity:
    """A chat's subscription to one external identity.

    ``last_entry_at``/``last_exit_at`` hold the last access already persisted for
    this identity. Only the reconciliation engine moves them after creation.
    """

    chat_id: str
    external_id: int
    natural_key: str
    display_name: str
    alias: str | None = None
    last_entry_at: datetime | None = None
    last_exit_at: datetime | None = None
    id: int | None = None

    @property
    def label(self) -> str:
        return self.alias or self.display_name


@dataclass(frozen=True, slots=True, kw_only=True)
class AccessRecord:
    """One entry (and optional exit) reported by the upstream access feed."""

    external_id: int
    natural_key: str
    display_name: str
    location_code: int
    entry_at: datetime
    exit_at: datetime | None = None

    @property
    def location_name(self) -> str:
        return location_name(self.location_code)


@dataclass(frozen=True, slots=True, kw_only=True)
class NotificationEvent:
    kind: NotificationKind
    occurred_at: datetime
    chat_id: str
    natural_key: str
    display_name: str
    location_code: int
    alias: str | None = None

    @property
    def location_name(self) -> str:
        return location_name(self.location_code)

    @property
    def label(self) -> str:
        return self.alias or self.display_name


@dataclass(frozen=True, slots=True, kw_only=True)
class IdentityProfile:
    """Identity fields returned by the upstream lookup for a natural key."""

    external_id: int
    natural_key: str
    first_name: str
    last_name: str

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()
