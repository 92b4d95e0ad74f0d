"""Startup configuration errors.

These are the only failures allowed to stop the process: everything raised at
runtime derives from ``accesswatch.common.errors.AccessWatchError`` instead.
"""

from __future__ import annotations


class ConfigurationError(RuntimeError):
    """Raised when configuration values are invalid."""


class MissingConfigurationError(ConfigurationError):
    """Raised when required environment variables are absent or blank."""

    def __init__(self, names: tuple[str, ...]) -> None:
        super().__init__(f"Missing configuration for: {', '.join(names)}")
        self.names = names
