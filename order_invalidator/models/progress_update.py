"""Progress update model published to the progress sink after each batch."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class ProgressUpdate(BaseModel):
    """Snapshot of run progress after one batch completed."""

    model_config = ConfigDict(frozen=True)

    batch_number: int
    batch_count: int
    processed: int
    total: int
    percentage: int
    eta: str
    batch_succeeded: int
    batch_failed: int
    message: str | None = None

    def render(self) -> str:
        """One-line human readable rendering."""
        status = "FAILED" if self.batch_failed else "SUCCESS"
        line = (
            f"[{status}] Batch {self.batch_number}/{self.batch_count}: "
            f"{self.processed}/{self.total} ({self.percentage}%) | "
            f"Est. time remaining: {self.eta}"
        )
        if self.message:
            line += f" | {self.message}"
        return line
