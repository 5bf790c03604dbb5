"""Mutable state of one invalidation run."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

from order_invalidator.exceptions import SessionStateError

if TYPE_CHECKING:
    from collections.abc import Callable

    from order_invalidator.models.batch_outcome import BatchOutcome


class SessionState(StrEnum):
    """Lifecycle states of an invalidation session."""

    IDLE = "idle"
    ACQUIRING_CREDENTIAL = "acquiring_credential"
    RUNNING = "running"
    ABORTED = "aborted"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


TERMINAL_STATES = frozenset({SessionState.ABORTED, SessionState.CANCELLED, SessionState.COMPLETED})

_ALLOWED_TRANSITIONS: dict[SessionState, frozenset[SessionState]] = {
    SessionState.IDLE: frozenset({SessionState.ACQUIRING_CREDENTIAL}),
    SessionState.ACQUIRING_CREDENTIAL: frozenset({SessionState.ABORTED, SessionState.RUNNING}),
    SessionState.RUNNING: frozenset(
        {SessionState.CANCELLED, SessionState.COMPLETED, SessionState.ABORTED}
    ),
    SessionState.ABORTED: frozenset(),
    SessionState.CANCELLED: frozenset(),
    SessionState.COMPLETED: frozenset(),
}


@dataclass
class InvalidationSession:
    """Counters, failure set and cancellation flag for a single run.

    Owned by one driver for the whole run and discarded afterwards.
    """

    total: int
    clock: Callable[[], float] = time.monotonic
    state: SessionState = SessionState.IDLE
    processed: int = 0
    succeeded: int = 0
    failed: int = 0
    batches_processed: int = 0
    batch_count: int = 0
    error: str | None = None
    # dict keys keep first-seen order of distinct failed identifiers
    failed_identifiers: dict[str, None] = field(default_factory=dict)
    _cancel_event: threading.Event = field(default_factory=threading.Event, repr=False)
    started_at: float = field(init=False, default=0.0)

    def __post_init__(self) -> None:
        self.started_at = self.clock()

    def transition(self, new_state: SessionState) -> None:
        """Move to new_state, rejecting transitions the lifecycle does not allow."""
        if new_state not in _ALLOWED_TRANSITIONS[self.state]:
            msg = f"illegal session transition {self.state.value} -> {new_state.value}"
            raise SessionStateError(msg)
        self.state = new_state

    @property
    def is_terminal(self) -> bool:
        return self.state in TERMINAL_STATES

    def request_cancel(self) -> None:
        """Set the cancellation flag. Once set it is never cleared."""
        self._cancel_event.set()

    @property
    def cancel_requested(self) -> bool:
        return self._cancel_event.is_set()

    def record_outcome(self, outcome: BatchOutcome) -> None:
        """Accumulate one batch outcome into the run counters."""
        self.batches_processed += 1
        self.processed += outcome.count
        if outcome.is_success:
            self.succeeded += outcome.count
        else:
            self.failed += outcome.count
            for identifier in outcome.failed_identifiers:
                self.failed_identifiers.setdefault(identifier, None)

    @property
    def elapsed_seconds(self) -> float:
        """Time elapsed since the session was created."""
        return self.clock() - self.started_at
