"""Run summary model reported when a session reaches a terminal state."""

from __future__ import annotations

from pydantic import BaseModel

from order_invalidator.models.session import SessionState


class RunSummary(BaseModel):
    """Final statistics of one invalidation run, whatever its terminal state."""

    state: SessionState
    total: int
    processed: int
    succeeded: int
    failed: int
    batches_processed: int
    batches_total: int
    elapsed_seconds: float
    error: str | None = None
    failed_identifiers: list[str] = []

    @property
    def batches_remaining(self) -> int:
        return self.batches_total - self.batches_processed

    @property
    def remaining(self) -> int:
        return self.total - self.processed

    def stats(self) -> dict[str, int | float | str | list[str] | None]:
        """Flat dict for printing or JSON output."""
        return {
            "state": self.state.value,
            "total": self.total,
            "processed": self.processed,
            "succeeded": self.succeeded,
            "failed": self.failed,
            "batches_processed": self.batches_processed,
            "batches_total": self.batches_total,
            "batches_remaining": self.batches_remaining,
            "duration_seconds": round(self.elapsed_seconds, 2),
            "error": self.error,
            "failed_identifiers": self.failed_identifiers,
        }
