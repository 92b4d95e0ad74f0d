"""Ports for persisting tracked identities."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from accesswatch.domain.model import AccessRecord, TrackedIdentity


@runtime_checkable
class TrackedIdentityStore(Protocol):
    """Persistence contract for per-chat tracking records.

    Mutations are individually transactional; failures surface as
    ``PersistenceError`` and leave no partial write behind.
    """

    def get_all(self) -> list[TrackedIdentity]: ...

    def get_by_chat(self, chat_id: str) -> list[TrackedIdentity]: ...

    def update_entry_at(self, accesses: Sequence[AccessRecord]) -> None:
        """Set ``last_entry_at`` for every row sharing each access's external id."""
        ...

    def update_exit_at(self, accesses: Sequence[AccessRecord]) -> None:
        """Set ``last_exit_at`` for every row sharing each access's external id."""
        ...

    def create(self, identity: TrackedIdentity) -> None:
        """Insert unless ``(chat_id, natural_key)`` already exists."""
        ...

    def delete(self, chat_id: str, natural_key: str) -> None: ...


__all__ = ["TrackedIdentityStore"]
