"""Public interface for the identity lookup adapter."""

from __future__ import annotations

from .client import HttpIdentityLookup
from .schema import IdentityPayload

__all__ = ["HttpIdentityLookup", "IdentityPayload"]
