"""Error taxonomy shared by adapters, domain services and the scheduler.

Every error carries the name of the component that raised it so log lines can be
traced back to the adapter or service that failed.
"""

from __future__ import annotations


class AccessWatchError(RuntimeError):
    """Base class for recoverable runtime failures."""

    def __init__(self, message: str, *, component: str) -> None:
        super().__init__(message)
        self.component = component
        self.message = message

    def __str__(self) -> str:
        return f"| {self.component} | {self.message}"


class TransportError(AccessWatchError):
    """Raised when an upstream service is unreachable or answers with an error status."""

    def __init__(
        self,
        message: str,
        *,
        component: str,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message, component=component)
        self.status_code = status_code


class ParseError(AccessWatchError):
    """Raised when an upstream payload contains a malformed field."""


class PersistenceError(AccessWatchError):
    """Raised when a store transaction fails."""


class DispatchError(AccessWatchError):
    """Raised when one or more notifications could not be delivered."""

    def __init__(self, message: str, *, component: str, failures: int = 1) -> None:
        super().__init__(message, component=component)
        self.failures = failures


class IdentityNotFoundError(AccessWatchError):
    """Raised when the identity lookup has no record for a natural key."""

    def __init__(self, natural_key: str, *, component: str) -> None:
        super().__init__(f"No identity found for {natural_key}", component=component)
        self.natural_key = natural_key
