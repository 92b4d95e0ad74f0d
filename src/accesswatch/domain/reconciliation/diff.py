"""Change detection between tracked identities and a batch of access records."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from accesswatch.domain.model import AccessRecord, TrackedIdentity


def entry_changed(identity: TrackedIdentity, access: AccessRecord) -> bool:
    """Entry changed when nothing is stored yet or the stored instant differs."""

    return identity.last_entry_at is None or identity.last_entry_at != access.entry_at


def exit_changed(identity: TrackedIdentity, access: AccessRecord) -> bool:
    """Exit changed when the access reports an exit the identity has not seen.

    Two missing exits never count as a change, and neither does a stored exit
    paired with an access that has none.
    """

    if access.exit_at is None:
        return False
    return identity.last_exit_at is None or identity.last_exit_at != access.exit_at


@dataclass(slots=True, frozen=True)
class Change:
    identity: TrackedIdentity
    access: AccessRecord


@dataclass(slots=True)
class ChangeSet:
    """Outcome of diffing one access batch against the stored identities.

    ``entry_updates``/``exit_updates`` hold one representative access per external
    id (the first one that triggered a change); ``entry_changes``/``exit_changes``
    hold one entry per changed subscription.
    """

    entry_changes: list[Change] = field(default_factory=list["Change"])
    exit_changes: list[Change] = field(default_factory=list["Change"])
    entry_updates: dict[int, AccessRecord] = field(default_factory=dict["int", "AccessRecord"])
    exit_updates: dict[int, AccessRecord] = field(default_factory=dict["int", "AccessRecord"])

    @property
    def is_empty(self) -> bool:
        return not self.entry_changes and not self.exit_changes


def _index_by_external_id(
    identities: Iterable[TrackedIdentity],
) -> dict[int, list[tuple[int, TrackedIdentity]]]:
    indexed: defaultdict[int, list[tuple[int, TrackedIdentity]]] = defaultdict(list)
    for position, identity in enumerate(identities):
        indexed[identity.external_id].append((position, identity))
    return indexed


def diff_accesses(
    accesses: Sequence[AccessRecord],
    identities: Sequence[TrackedIdentity],
) -> ChangeSet:
    """Compare every access against every identity sharing its external id.

    Identities that no access references are never reported. A subscription is
    reported at most once per change kind even if the batch repeats its
    external id.
    """

    changes = ChangeSet()
    if not accesses or not identities:
        return changes

    by_external_id = _index_by_external_id(identities)
    seen_entry: set[int] = set()
    seen_exit: set[int] = set()

    for access in accesses:
        for position, identity in by_external_id.get(access.external_id, ()):
            if position not in seen_entry and entry_changed(identity, access):
                seen_entry.add(position)
                changes.entry_changes.append(Change(identity=identity, access=access))
                changes.entry_updates.setdefault(access.external_id, access)

            if position not in seen_exit and exit_changed(identity, access):
                seen_exit.add(position)
                changes.exit_changes.append(Change(identity=identity, access=access))
                changes.exit_updates.setdefault(access.external_id, access)

    return changes
