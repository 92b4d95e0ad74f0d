"""Process-wide configuration, built once at startup and passed explicitly."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from .access_source import AccessSourceConfig, get_access_source_config
from .env import env_float, env_flag, env_int, require_env_var
from .http_resilience import DEFAULT_TIMEOUT_SECONDS
from .identity import IdentityLookupConfig, get_identity_lookup_config
from .notification import NotificationConfig, get_notification_config
from .storage import DatabaseConfig, get_database_config

DEFAULT_PORT = 4001
DEFAULT_HOST = "0.0.0.0"  # noqa: S104
DEFAULT_POLL_INTERVAL_SECONDS = 5.0


@dataclass(frozen=True, slots=True)
class ServerConfig:
    auth_string: str
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT


@dataclass(frozen=True, slots=True)
class SchedulerConfig:
    interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS


@dataclass(frozen=True, slots=True)
class AppConfig:
    server: ServerConfig
    scheduler: SchedulerConfig
    database: DatabaseConfig
    access_source: AccessSourceConfig
    identity_lookup: IdentityLookupConfig
    notification: NotificationConfig
    debug: bool = False

    @property
    def log_level(self) -> int:
        return logging.DEBUG if self.debug else logging.INFO


def get_app_config() -> AppConfig:
    """Read every setting from the environment; raises on the first invalid group."""

    timeout = env_float("HTTP_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS)
    return AppConfig(
        server=ServerConfig(
            auth_string=require_env_var("AUTH_STRING"),
            host=os.getenv("HOST") or DEFAULT_HOST,
            port=env_int("PORT", DEFAULT_PORT),
        ),
        scheduler=SchedulerConfig(
            interval_seconds=env_float("POLL_INTERVAL_SECONDS", DEFAULT_POLL_INTERVAL_SECONDS),
        ),
        database=get_database_config(),
        access_source=get_access_source_config(timeout_seconds=timeout),
        identity_lookup=get_identity_lookup_config(timeout_seconds=timeout),
        notification=get_notification_config(timeout_seconds=timeout),
        debug=env_flag("DEBUG_MODE"),
    )
