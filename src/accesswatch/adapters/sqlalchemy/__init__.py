"""SQLAlchemy adapter package for accesswatch."""

from __future__ import annotations

from .mappings import create_all_tables, mapper_registry, start_mappers, tracked_identity_table

__all__ = [
    "create_all_tables",
    "mapper_registry",
    "start_mappers",
    "tracked_identity_table",
]
