"""Exception hierarchy for the order invalidator."""

from __future__ import annotations


class InvalidatorError(Exception):
    """Base class for all order invalidator errors."""


class InputError(InvalidatorError, ValueError):
    """User input rejected before a session is created."""


class ConfigurationError(InvalidatorError, ValueError):
    """Run configuration violates an invariant (batch size, pacing)."""


class CredentialError(InvalidatorError):
    """Credential exchange failed. Fatal to the run."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class BatchApiError(InvalidatorError):
    """Remote service answered a batch with a non-success status."""

    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code


class BatchTransportError(InvalidatorError):
    """A batch request never completed at the transport level."""


class SessionStateError(InvalidatorError, RuntimeError):
    """Illegal session lifecycle transition or run-control call."""
