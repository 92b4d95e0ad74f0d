"""Reconciliation of upstream access batches against tracked identities."""

from __future__ import annotations

from .diff import Change, ChangeSet, diff_accesses, entry_changed, exit_changed
from .engine import ReconciliationEngine, ReconciliationResult, build_notification_events

__all__ = [
    "Change",
    "ChangeSet",
    "ReconciliationEngine",
    "ReconciliationResult",
    "build_notification_events",
    "diff_accesses",
    "entry_changed",
    "exit_changed",
]
