"""Request and response bodies of the subscription API."""

from __future__ import annotations

from datetime import datetime  # noqa: TC003
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

from accesswatch.adapters.sqlalchemy.mappings import ALIAS_MAX_LENGTH

if TYPE_CHECKING:
    from accesswatch.domain.model import TrackedIdentity


class ApiModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class UntrackRequest(ApiModel):
    chat_id: str = Field(alias="chatId", min_length=1)
    run: str = Field(min_length=1)


class TrackRequest(UntrackRequest):
    alias: str | None = Field(default=None, min_length=1, max_length=ALIAS_MAX_LENGTH)


class TrackedIdentityOut(ApiModel):
    id: int | None
    chat_id: str = Field(serialization_alias="chatId")
    external_id: int = Field(serialization_alias="externalId")
    run: str
    full_name: str = Field(serialization_alias="fullName")
    alias: str | None
    last_entry: datetime | None = Field(serialization_alias="lastEntry")
    last_exit: datetime | None = Field(serialization_alias="lastExit")

    @classmethod
    def from_identity(cls, identity: TrackedIdentity) -> TrackedIdentityOut:
        return cls(
            id=identity.id,
            chat_id=identity.chat_id,
            external_id=identity.external_id,
            run=identity.natural_key,
            full_name=identity.display_name,
            alias=identity.alias,
            last_entry=identity.last_entry_at,
            last_exit=identity.last_exit_at,
        )


class TrackedIdentityList(ApiModel):
    data: list[TrackedIdentityOut]
