"""WhatsApp relay client: template notifications and free-form chat messages."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, cast

import httpx

from accesswatch.adapters.http_resilience import ResilientClient, default_client_factory
from accesswatch.common.errors import DispatchError

from .messages import (
    MESSAGE_PATH,
    format_tracked_list,
    message_body,
    template_body,
    template_path,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from accesswatch.config.http_resilience import ResilienceConfig
    from accesswatch.config.notification import NotificationConfig
    from accesswatch.domain.model import NotificationEvent, TrackedIdentity
    from accesswatch.domain.ports import ChatNotifier, NotificationDispatcher

log = getLogger(__name__)

COMPONENT = "NotificationService"


async def _post(client: ResilientClient, path: str, body: dict[str, str]) -> None:
    try:
        response = await client.post(path, json=body)
    except httpx.HTTPError as exc:
        raise DispatchError(f"Relay unreachable: {exc!r}", component=COMPONENT) from exc
    if response.status_code != httpx.codes.OK:
        raise DispatchError(
            f"Relay answered {response.status_code} {response.reason_phrase} for {path}",
            component=COMPONENT,
        )


def _as_dispatch_error(exc: Exception) -> DispatchError:
    if isinstance(exc, DispatchError):
        return exc
    error = DispatchError(f"Unexpected delivery failure: {exc!r}", component=COMPONENT)
    error.__cause__ = exc
    return error


@dataclass(slots=True)
class WebhookNotificationDispatcher:
    """Post each event to its template endpoint.

    Delivery is best-effort for the whole batch: every event is attempted and a
    single ``DispatchError`` summarising the failures is raised afterwards.
    """

    config: NotificationConfig
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=default_client_factory
    )

    def dispatch(self, events: Sequence[NotificationEvent]) -> None:
        if not events:
            return
        asyncio.run(self.dispatch_async(events))

    async def dispatch_async(self, events: Sequence[NotificationEvent]) -> None:
        async with self.client_factory(self.config.resilience) as client:
            outcomes = await asyncio.gather(
                *(_post(client, template_path(event), template_body(event)) for event in events),
                return_exceptions=True,
            )

        failures: list[DispatchError] = []
        for event, outcome in zip(events, outcomes, strict=True):
            if isinstance(outcome, Exception):
                failure = _as_dispatch_error(outcome)
                log.warning(f"{event.kind} notification for chat {event.chat_id} failed: {failure}")
                failures.append(failure)
            elif isinstance(outcome, BaseException):
                raise outcome

        delivered = len(events) - len(failures)
        log.info(f"Notifications delivered={delivered}, failed={len(failures)}")
        if failures:
            raise DispatchError(
                f"{len(failures)} of {len(events)} notifications failed; "
                f"first: {failures[0].message}",
                component=COMPONENT,
                failures=len(failures),
            ) from failures[0]

    def deliver(self, event: NotificationEvent) -> None:
        """Deliver a single event, raising ``DispatchError`` on failure."""

        async def _run() -> None:
            async with self.client_factory(self.config.resilience) as client:
                await _post(client, template_path(event), template_body(event))

        asyncio.run(_run())

    def send_message(self, chat_id: str, message: str) -> None:
        async def _run() -> None:
            async with self.client_factory(self.config.resilience) as client:
                await _post(client, MESSAGE_PATH, message_body(chat_id, message))

        asyncio.run(_run())

    def send_tracked_list(self, chat_id: str, identities: Sequence[TrackedIdentity]) -> None:
        self.send_message(chat_id, format_tracked_list(identities))


if TYPE_CHECKING:
    _config_stub = cast("NotificationConfig", object())
    _dispatcher_check: NotificationDispatcher = WebhookNotificationDispatcher(_config_stub)
    _notifier_check: ChatNotifier = WebhookNotificationDispatcher(_config_stub)
