"""Application wiring: adapters, engine, scheduler and workers from one config."""

from __future__ import annotations

import queue
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from accesswatch.adapters.access_source import HttpAccessFetcher
from accesswatch.adapters.identity import HttpIdentityLookup
from accesswatch.adapters.notification import (
    NotificationConsumer,
    QueuedNotificationDispatcher,
    WebhookNotificationDispatcher,
)
from accesswatch.adapters.sqlalchemy.store import SqlAlchemyTrackedIdentityStore
from accesswatch.adapters.sqlalchemy.unit_of_work import is_started, startup
from accesswatch.domain.reconciliation import ReconciliationEngine, ReconciliationResult
from accesswatch.domain.tracking import TrackingService
from accesswatch.scheduler import ReconciliationScheduler, SupervisedWorker

if TYPE_CHECKING:
    from accesswatch.config import AppConfig
    from accesswatch.domain.ports import (
        AccessFetcher,
        ChatNotifier,
        IdentityLookup,
        NotificationDispatcher,
        TrackedIdentityStore,
    )

log = getLogger(__name__)


def run_cycle(fetcher: AccessFetcher, engine: ReconciliationEngine) -> ReconciliationResult:
    """Fetch one access batch and reconcile it."""

    accesses = fetcher()
    if not accesses:
        log.debug("Access service returned no records")
        return ReconciliationResult()
    return engine.reconcile(accesses)


@dataclass(slots=True)
class Application:
    """Everything the API and the background tasks share."""

    store: TrackedIdentityStore
    fetcher: AccessFetcher
    lookup: IdentityLookup
    notifier: ChatNotifier
    dispatcher: NotificationDispatcher
    interval_seconds: float = 5.0
    workers: list[SupervisedWorker] = field(default_factory=list)
    engine: ReconciliationEngine = field(init=False)
    tracking: TrackingService = field(init=False)
    scheduler: ReconciliationScheduler = field(init=False)

    def __post_init__(self) -> None:
        self.engine = ReconciliationEngine(store=self.store, dispatcher=self.dispatcher)
        self.tracking = TrackingService(
            store=self.store,
            fetcher=self.fetcher,
            lookup=self.lookup,
            notifier=self.notifier,
        )
        self.scheduler = ReconciliationScheduler(
            self.reconcile_once, interval_seconds=self.interval_seconds
        )

    def reconcile_once(self) -> ReconciliationResult:
        return run_cycle(self.fetcher, self.engine)

    def start(self) -> None:
        for worker in self.workers:
            worker.start()
        self.scheduler.start()

    def stop(self) -> None:
        self.scheduler.stop()
        for worker in self.workers:
            worker.stop()


def build_application(config: AppConfig) -> Application:
    """Initialise the database and build the production adapters for ``config``."""

    if not is_started():
        startup(database_uri=config.database.uri)

    webhook = WebhookNotificationDispatcher(config.notification)
    workers: list[SupervisedWorker] = []
    dispatcher: NotificationDispatcher = webhook
    if config.notification.mode == "queue":
        queued = QueuedNotificationDispatcher(queue.Queue())
        consumer = NotificationConsumer(
            queue=queued.queue,
            deliverer=webhook,
            max_attempts=config.notification.max_delivery_attempts,
        )
        workers.append(SupervisedWorker("notification-consumer", consumer.run))
        dispatcher = queued
    log.info(f"Notification mode: {config.notification.mode}")

    return Application(
        store=SqlAlchemyTrackedIdentityStore(),
        fetcher=HttpAccessFetcher(config.access_source),
        lookup=HttpIdentityLookup(config.identity_lookup),
        notifier=webhook,
        dispatcher=dispatcher,
        interval_seconds=config.scheduler.interval_seconds,
        workers=workers,
    )
