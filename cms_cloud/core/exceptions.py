"""
Exception hierarchy for the cloud capability layer.

Provides layered exception structure for configuration, construction and
remote-call failures. All exceptions include context for observability.

Dependencies: None (pure domain layer)
System role: Centralized error taxonomy shared by adapters and orchestrator
"""

from typing import Any


class IntegrationException(Exception):
    """Base exception for all capability integration errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ConfigInvalidError(IntegrationException):
    """Raised when an enabled capability is missing mandatory settings."""

    def __init__(
        self,
        capability: str,
        missing: list[str],
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize config error.

        Args:
            capability: Capability name (storage, mail, identity)
            missing: Setting names that are empty but required
            details: Additional context
        """
        details = details or {}
        details["capability"] = capability
        details["missing"] = list(missing)
        self.capability = capability
        self.missing = list(missing)
        super().__init__(
            f"{capability} capability is enabled but missing: {', '.join(missing)}",
            details,
        )


class ConstructionFailedError(IntegrationException):
    """Raised when a vendor client cannot be constructed."""

    def __init__(
        self,
        capability: str,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        details["capability"] = capability
        self.capability = capability
        super().__init__(message, details)


class RemoteCallFailedError(IntegrationException):
    """Raised when a call against the remote service fails."""

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize remote call error.

        Args:
            message: Error message
            operation: Adapter operation that failed (put, send, authenticate...)
            error_code: Vendor error code when the service returned one
            details: Additional context
        """
        details = details or {}
        if operation:
            details["operation"] = operation
        if error_code:
            details["error_code"] = error_code
        self.operation = operation
        self.error_code = error_code
        super().__init__(message, details)


class ObjectNotFoundError(RemoteCallFailedError):
    """Raised when reading an object that does not exist."""

    def __init__(self, key: str, details: dict[str, Any] | None = None) -> None:
        details = details or {}
        details["key"] = key
        self.key = key
        super().__init__(
            f"Object not found: {key}",
            operation="get",
            error_code="NoSuchKey",
            details=details,
        )


class PartialProvisioningError(RemoteCallFailedError):
    """
    Raised when a remote user was created but its password could not be set.

    The remote user is left in place; callers must reconcile it manually.
    """

    def __init__(
        self,
        username: str,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        details["username"] = username
        details["remote_user_created"] = True
        self.username = username
        super().__init__(
            message,
            operation="create_user",
            error_code=error_code,
            details=details,
        )


class CapabilityUnavailableError(IntegrationException):
    """Raised when a caller asks an absent capability to do work."""

    def __init__(self, capability: str) -> None:
        self.capability = capability
        super().__init__(
            f"{capability} capability is not active",
            {"capability": capability},
        )
