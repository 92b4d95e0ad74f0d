"""Reconciliation of upstream access records against tracked identities.

One call to :meth:`ReconciliationEngine.reconcile` is one poll cycle:

1. load every tracked identity,
2. diff the batch against them (see :mod:`.diff`),
3. persist the new entry and exit timestamps as two independent transactions,
4. build one notification per changed subscription and hand them to the
   dispatcher in a single call.

State transitions are authoritative once committed: a failed dispatch is
reported but never rolls them back. A failed update rejects the whole cycle
before anything is emitted.
"""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from accesswatch.common.errors import AccessWatchError, DispatchError
from accesswatch.domain.model import NotificationEvent, NotificationKind

from .diff import Change, ChangeSet, diff_accesses

if TYPE_CHECKING:
    from collections.abc import Sequence
    from datetime import datetime

    from accesswatch.domain.model import AccessRecord
    from accesswatch.domain.ports import NotificationDispatcher, TrackedIdentityStore

log = getLogger(__name__)


@dataclass(slots=True, frozen=True)
class ReconciliationResult:
    """Summary of one reconciliation cycle."""

    entry_updates: int = 0
    exit_updates: int = 0
    events: tuple[NotificationEvent, ...] = ()
    dispatch_error: DispatchError | None = None

    @property
    def dispatched(self) -> bool:
        return bool(self.events) and self.dispatch_error is None


@dataclass(slots=True)
class ReconciliationEngine:
    store: TrackedIdentityStore
    dispatcher: NotificationDispatcher

    def reconcile(self, accesses: Sequence[AccessRecord]) -> ReconciliationResult:
        """Run one cycle for ``accesses``.

        Raises the store's own error when either timestamp update fails; no
        notification is emitted in that case.
        """

        if not accesses:
            log.debug("Empty access batch, nothing to reconcile")
            return ReconciliationResult()

        identities = self.store.get_all()
        changes = diff_accesses(accesses, identities)
        if changes.is_empty:
            log.debug(
                f"No changes across {len(accesses)} accesses and {len(identities)} identities"
            )
            return ReconciliationResult()

        self._persist(changes)

        events = build_notification_events(changes)
        log.info(
            f"Reconciled {len(accesses)} accesses: entry_updates={len(changes.entry_updates)}, "
            f"exit_updates={len(changes.exit_updates)}, events={len(events)}"
        )

        dispatch_error: DispatchError | None = None
        if events:
            try:
                self.dispatcher.dispatch(events)
            except DispatchError as exc:
                log.error(f"Notification dispatch failed, state stays committed: {exc}")
                dispatch_error = exc

        return ReconciliationResult(
            entry_updates=len(changes.entry_updates),
            exit_updates=len(changes.exit_updates),
            events=tuple(events),
            dispatch_error=dispatch_error,
        )

    def _persist(self, changes: ChangeSet) -> None:
        # both updates are attempted; the first failure rejects the cycle
        failures: list[AccessWatchError] = []

        if changes.entry_updates:
            try:
                self.store.update_entry_at(list(changes.entry_updates.values()))
            except AccessWatchError as exc:
                log.error(f"Entry update failed: {exc}")
                failures.append(exc)

        if changes.exit_updates:
            try:
                self.store.update_exit_at(list(changes.exit_updates.values()))
            except AccessWatchError as exc:
                log.error(f"Exit update failed: {exc}")
                failures.append(exc)

        if failures:
            raise failures[0]


def _event(kind: NotificationKind, change: Change, occurred_at: datetime) -> NotificationEvent:
    identity = change.identity
    return NotificationEvent(
        kind=kind,
        occurred_at=occurred_at,
        chat_id=identity.chat_id,
        natural_key=identity.natural_key,
        display_name=identity.display_name,
        alias=identity.alias,
        location_code=change.access.location_code,
    )


def build_notification_events(changes: ChangeSet) -> list[NotificationEvent]:
    """One ENTRY per entry change then one EXIT per exit change, in discovery order."""

    events = [
        _event(NotificationKind.ENTRY, change, change.access.entry_at)
        for change in changes.entry_changes
    ]
    for change in changes.exit_changes:
        exit_at = change.access.exit_at
        if exit_at is None:  # pragma: no cover - excluded by exit_changed
            continue
        events.append(_event(NotificationKind.EXIT, change, exit_at))
    return events
