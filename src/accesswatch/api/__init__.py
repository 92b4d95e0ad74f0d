"""HTTP subscription API."""

from __future__ import annotations

from .server import create_app, run_server

__all__ = ["create_app", "run_server"]
