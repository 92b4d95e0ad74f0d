"""Builders for fully populated application configs."""

from __future__ import annotations

from accesswatch.config import (
    AccessSourceConfig,
    AppConfig,
    DatabaseConfig,
    IdentityLookupConfig,
    NotificationConfig,
    ResilienceConfig,
    SchedulerConfig,
    ServerConfig,
)
from accesswatch.config.notification import NotificationMode  # noqa: TC001


def make_app_config(mode: NotificationMode = "direct") -> AppConfig:
    return AppConfig(
        server=ServerConfig(auth_string="secret"),
        scheduler=SchedulerConfig(interval_seconds=2.5),
        database=DatabaseConfig(uri="sqlite+pysqlite:///:memory:"),
        access_source=AccessSourceConfig(
            auth_token="token",
            resilience=ResilienceConfig(name="access-source", base_url="http://access.test"),
        ),
        identity_lookup=IdentityLookupConfig(
            resilience=ResilienceConfig(name="identity-lookup", base_url="http://source.test"),
        ),
        notification=NotificationConfig(
            resilience=ResilienceConfig(name="notification", base_url="http://relay.test/"),
            mode=mode,
        ),
    )
