"""Pydantic data models and run state for the order invalidator."""

from order_invalidator.models.batch_outcome import BatchOutcome, OutcomeStatus
from order_invalidator.models.config import Config
from order_invalidator.models.progress_update import ProgressUpdate
from order_invalidator.models.run_summary import RunSummary
from order_invalidator.models.session import InvalidationSession, SessionState

__all__ = [
    "BatchOutcome",
    "Config",
    "InvalidationSession",
    "OutcomeStatus",
    "ProgressUpdate",
    "RunSummary",
    "SessionState",
]
