"""Custom exceptions for the Vault to SSM migration.

Discovery and walk errors are fatal for the run. Write errors are raised by
the publisher for a single parameter and recovered there.
"""

from typing import Optional


class MigrationError(Exception):
    """Base exception for migration errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        """Initialize migration error.

        Args:
            message: Error message
            details: Additional error details
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return error string representation."""
        if self.details:
            return f"{self.message} (details: {self.details})"
        return self.message


class ConfigurationError(MigrationError):
    """Raised for an unknown protocol variant or an invalid setting."""


class AccessError(MigrationError):
    """Raised when Vault denies access or exposes no usable mounts."""

    def __init__(
        self,
        message: str = "No mounts found or your token has no access",
        path: Optional[str] = None,
        details: Optional[dict] = None,
    ):
        super().__init__(message, details)
        self.path = path


class NotFoundError(MigrationError):
    """Raised when a listed or read path does not exist."""

    def __init__(
        self,
        path: str,
        message: Optional[str] = None,
        details: Optional[dict] = None,
    ):
        full_message = message or f"Path not found: {path}"
        super().__init__(full_message, details)
        self.path = path


class TransportError(MigrationError):
    """Raised when a Vault request fails for any other reason."""

    def __init__(
        self,
        path: str,
        message: Optional[str] = None,
        details: Optional[dict] = None,
    ):
        full_message = message or f"Request to Vault failed for path: {path}"
        super().__init__(full_message, details)
        self.path = path


class WalkDepthError(MigrationError):
    """Raised when a mount tree is nested deeper than allowed."""

    def __init__(self, path: str, max_depth: int):
        super().__init__(
            f"Maximum walk depth {max_depth} exceeded at path: {path}",
            {"path": path, "max_depth": max_depth},
        )
        self.path = path
        self.max_depth = max_depth


class WriteError(MigrationError):
    """Raised when a parameter cannot be written to Parameter Store."""

    def __init__(
        self,
        name: str,
        message: Optional[str] = None,
        details: Optional[dict] = None,
    ):
        full_message = message or f"Failed to write parameter: {name}"
        super().__init__(full_message, details)
        self.name = name


class MigrationAbortedError(MigrationError):
    """Raised when a mount walk fails and the run must stop."""

    def __init__(self, mount: str, cause: Exception):
        super().__init__(f"Walk of mount '{mount}' failed: {cause}")
        self.mount = mount
        self.cause = cause
