"""In-process notification queue drained by a background consumer.

``QueuedNotificationDispatcher.dispatch`` only enqueues, so a reconciliation
cycle never waits on the relay. The consumer retries a failed delivery a bounded
number of times and then drops it: there is no durable log behind the queue.
"""

from __future__ import annotations

import queue
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, Protocol

from accesswatch.common.errors import DispatchError
from accesswatch.config.notification import DEFAULT_MAX_DELIVERY_ATTEMPTS

if TYPE_CHECKING:
    import threading
    from collections.abc import Sequence

    from accesswatch.domain.model import NotificationEvent
    from accesswatch.domain.ports import NotificationDispatcher

log = getLogger(__name__)

COMPONENT = "NotificationQueue"

_POLL_SECONDS = 0.5


class EventDeliverer(Protocol):
    def deliver(self, event: NotificationEvent) -> None: ...


@dataclass(slots=True)
class QueuedEvent:
    event: NotificationEvent
    attempts: int = 0


type NotificationQueue = queue.Queue[QueuedEvent]


@dataclass(slots=True)
class QueuedNotificationDispatcher:
    queue: NotificationQueue = field(default_factory=queue.Queue["QueuedEvent"])

    def dispatch(self, events: Sequence[NotificationEvent]) -> None:
        for event in events:
            try:
                self.queue.put_nowait(QueuedEvent(event=event))
            except queue.Full as exc:
                raise DispatchError("Notification queue is full", component=COMPONENT) from exc
        log.debug(f"Queued {len(events)} notifications")


@dataclass(slots=True)
class NotificationConsumer:
    """Deliver queued events one at a time until ``stop`` is set."""

    queue: NotificationQueue
    deliverer: EventDeliverer
    max_attempts: int = DEFAULT_MAX_DELIVERY_ATTEMPTS
    retry_delay_seconds: float = 1.0

    def run(self, stop: threading.Event) -> None:
        log.info("Notification consumer started")
        while not stop.is_set():
            self.process_next(stop, timeout=_POLL_SECONDS)
        log.info("Notification consumer stopped")

    def process_next(self, stop: threading.Event, *, timeout: float | None = None) -> bool:
        """Handle at most one queued event; return whether one was taken."""

        try:
            item = self.queue.get(timeout=timeout)
        except queue.Empty:
            return False

        try:
            self._handle(item, stop)
        finally:
            self.queue.task_done()
        return True

    def _handle(self, item: QueuedEvent, stop: threading.Event) -> None:
        event = item.event
        item.attempts += 1
        try:
            self.deliverer.deliver(event)
        except DispatchError as exc:
            if item.attempts >= self.max_attempts:
                log.error(
                    f"Dropping {event.kind} notification for chat {event.chat_id} "
                    f"after {item.attempts} attempts: {exc}"
                )
                return
            log.warning(
                f"Retrying {event.kind} notification for chat {event.chat_id} "
                f"(attempt {item.attempts}/{self.max_attempts}): {exc}"
            )
            stop.wait(self.retry_delay_seconds * item.attempts)
            self.queue.put(item)
            return
        log.debug(f"Delivered {event.kind} notification for chat {event.chat_id}")


if TYPE_CHECKING:
    _dispatcher_check: NotificationDispatcher = QueuedNotificationDispatcher()
