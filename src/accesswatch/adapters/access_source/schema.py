"""Pydantic models describing the access service payloads."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class AccessServiceBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class AccessPayload(AccessServiceBaseModel):
    """One access row; numeric and timestamp fields arrive as strings."""

    external_id: str | int = Field(alias="externalId")
    run: str
    full_name: str = Field(alias="fullName")
    location: str | int
    entry_at: str = Field(alias="entryAt")
    exit_at: str | None = Field(default=None, alias="exitAt")


class RecentAccessResponse(AccessServiceBaseModel):
    data: list[AccessPayload]
