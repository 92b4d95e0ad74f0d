"""Application configuration helpers."""

from __future__ import annotations

from .access_source import AccessSourceConfig, get_access_source_config
from .app import AppConfig, SchedulerConfig, ServerConfig, get_app_config
from .env import require_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy
from .identity import IdentityLookupConfig, get_identity_lookup_config
from .notification import NotificationConfig, get_notification_config
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config

__all__ = [
    "AccessSourceConfig",
    "AppConfig",
    "CacheConfig",
    "ConfigurationError",
    "DatabaseConfig",
    "IdentityLookupConfig",
    "MissingConfigurationError",
    "NotificationConfig",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "SchedulerConfig",
    "ServerConfig",
    "StorageConfig",
    "get_access_source_config",
    "get_app_config",
    "get_database_config",
    "get_identity_lookup_config",
    "get_notification_config",
    "get_storage_config",
    "require_env_var",
    "require_env_vars",
]
