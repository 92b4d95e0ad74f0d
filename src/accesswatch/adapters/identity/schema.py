"""Pydantic models describing the identity lookup payloads."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class IdentityPayload(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    external_id: int = Field(default=0, alias="externalId")
    run: str = ""
    first_name: str = Field(default="", alias="firstName")
    last_name: str = Field(default="", alias="lastName")

    @property
    def is_empty(self) -> bool:
        return self.external_id == 0
