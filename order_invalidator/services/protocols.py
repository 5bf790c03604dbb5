"""Service protocols defining interfaces for dependency injection."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Sequence

    from order_invalidator.models.batch_outcome import BatchOutcome
    from order_invalidator.models.progress_update import ProgressUpdate


class CredentialProviderProtocol(Protocol):
    """Protocol for exchanging app credentials for a bearer token."""

    def acquire_token(self, app_key: str, secret_key: str) -> str: ...


class BatchExecutorProtocol(Protocol):
    """Protocol for submitting one batch of identifiers for invalidation."""

    def invalidate_batch(
        self,
        credential: str,
        app_key: str,
        batch: Sequence[str],
    ) -> BatchOutcome: ...


class ProgressSinkProtocol(Protocol):
    """Protocol for anything that renders per-batch progress."""

    def __call__(self, update: ProgressUpdate) -> None: ...
