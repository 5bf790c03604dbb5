"""Invalidation run driver: credential, partition, paced batch loop, summary."""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

import structlog

from order_invalidator.core.identifiers import find_blank_identifiers
from order_invalidator.core.partition import partition_identifiers, validate_batch_size
from order_invalidator.core.progress import estimate_progress, format_eta
from order_invalidator.exceptions import (
    ConfigurationError,
    CredentialError,
    InputError,
    SessionStateError,
)
from order_invalidator.models.progress_update import ProgressUpdate
from order_invalidator.models.run_summary import RunSummary
from order_invalidator.models.session import InvalidationSession, SessionState

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from order_invalidator.core.partition import BatchPartition
    from order_invalidator.models.batch_outcome import BatchOutcome
    from order_invalidator.services.protocols import (
        BatchExecutorProtocol,
        CredentialProviderProtocol,
        ProgressSinkProtocol,
    )

logger = structlog.get_logger(__name__)


def validate_run_inputs(identifiers: Sequence[str], app_key: str, secret_key: str) -> None:
    """Reject a run before any session exists.

    Raises:
        InputError: empty identifier list, blank identifiers, or blank
            app key / secret key.
    """
    if not identifiers:
        msg = "Please provide at least one order ID."
        raise InputError(msg)
    blanks = find_blank_identifiers(identifiers)
    if blanks:
        msg = f"Order IDs must not be blank (positions: {blanks[:10]})."
        raise InputError(msg)
    if not app_key or not app_key.strip() or not secret_key or not secret_key.strip():
        msg = "Please provide both an app key and a secret key."
        raise InputError(msg)


class InvalidationRunner:
    """Drives one invalidation run at a time.

    Batches are dispatched strictly one after another. Cancellation is
    cooperative: cancel() sets a flag that is checked before each batch,
    so a batch already sent always finishes. A fresh InvalidationSession
    is created for every start().
    """

    def __init__(
        self,
        credential_provider: CredentialProviderProtocol,
        batch_executor: BatchExecutorProtocol,
        batch_size: int = 5000,
        pacing_delay_seconds: float = 0.5,
        progress_sink: ProgressSinkProtocol | None = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if pacing_delay_seconds < 0:
            msg = "pacing_delay_seconds must not be negative"
            raise ConfigurationError(msg)
        self.credential_provider = credential_provider
        self.batch_executor = batch_executor
        self.batch_size = validate_batch_size(batch_size)
        self.pacing_delay_seconds = pacing_delay_seconds
        self.progress_sink = progress_sink
        self._sleep = sleep
        self._clock = clock
        self._session: InvalidationSession | None = None

    @property
    def session(self) -> InvalidationSession | None:
        return self._session

    @property
    def state(self) -> SessionState:
        if self._session is None:
            return SessionState.IDLE
        return self._session.state

    def start(self, identifiers: Sequence[str], app_key: str, secret_key: str) -> RunSummary:
        """Run a full invalidation and return its summary.

        Input errors raise InputError before a session is created. A
        credential failure ends the run in the aborted state with the
        cause in RunSummary.error; batch failures are counted and the
        run continues.
        """
        if self._session is not None and not self._session.is_terminal:
            msg = "An invalidation run is already in progress."
            raise SessionStateError(msg)
        validate_run_inputs(identifiers, app_key, secret_key)

        session = InvalidationSession(total=len(identifiers), clock=self._clock)
        self._session = session
        logger.info(
            "invalidation_started",
            orders=session.total,
            batch_size=self.batch_size,
            pacing_delay_seconds=self.pacing_delay_seconds,
        )

        session.transition(SessionState.ACQUIRING_CREDENTIAL)
        try:
            credential = self.credential_provider.acquire_token(app_key, secret_key)
        except CredentialError as exc:
            session.error = str(exc)
            session.transition(SessionState.ABORTED)
            logger.error("invalidation_aborted", error=session.error)
            return self._finish(session)

        session.transition(SessionState.RUNNING)
        partition = partition_identifiers(identifiers, self.batch_size)
        session.batch_count = len(partition)
        try:
            self._run_batches(session, credential, app_key, partition)
        except BaseException as exc:
            # also covers KeyboardInterrupt from a second Ctrl-C
            session.error = f"Unexpected error: {exc!r}"
            session.transition(SessionState.ABORTED)
            logger.exception("invalidation_crashed", error=repr(exc))
            raise
        return self._finish(session)

    def cancel(self) -> None:
        """Request cancellation of the active run. No-op when nothing is running."""
        session = self._session
        if session is None or session.is_terminal:
            return
        if not session.cancel_requested:
            logger.warning("cancellation_requested", processed=session.processed, total=session.total)
        session.request_cancel()

    def reset(self) -> None:
        """Discard the finished session and return to idle."""
        if self._session is not None and not self._session.is_terminal:
            msg = "Cannot reset while an invalidation run is in progress."
            raise SessionStateError(msg)
        self._session = None

    def _run_batches(
        self,
        session: InvalidationSession,
        credential: str,
        app_key: str,
        batches: BatchPartition,
    ) -> None:
        batch_count = session.batch_count
        for index, batch in enumerate(batches, start=1):
            if session.cancel_requested:
                session.transition(SessionState.CANCELLED)
                logger.warning(
                    "invalidation_cancelled",
                    batches_processed=session.batches_processed,
                    batch_count=batch_count,
                )
                return

            logger.info("batch_started", batch_number=index, batch_count=batch_count, orders=len(batch))
            outcome = self.batch_executor.invalidate_batch(credential, app_key, batch)
            session.record_outcome(outcome)
            self._publish_progress(session, index, outcome)

            if index < batch_count:
                self._sleep(self.pacing_delay_seconds)

        session.transition(SessionState.COMPLETED)

    def _publish_progress(
        self,
        session: InvalidationSession,
        batch_number: int,
        outcome: BatchOutcome,
    ) -> None:
        estimate = estimate_progress(session.processed, session.total, session.elapsed_seconds)
        update = ProgressUpdate(
            batch_number=batch_number,
            batch_count=session.batch_count,
            processed=session.processed,
            total=session.total,
            percentage=estimate.display_percentage,
            eta=format_eta(estimate.eta_seconds),
            batch_succeeded=outcome.count if outcome.is_success else 0,
            batch_failed=0 if outcome.is_success else outcome.count,
            message=outcome.reason,
        )
        logger.info(
            "batch_progress",
            batch_number=batch_number,
            batch_count=session.batch_count,
            processed=session.processed,
            total=session.total,
            succeeded=session.succeeded,
            failed=session.failed,
            percentage=f"{estimate.percentage:.1f}%",
            eta=update.eta,
        )
        if self.progress_sink is not None:
            self.progress_sink(update)

    def _finish(self, session: InvalidationSession) -> RunSummary:
        summary = RunSummary(
            state=session.state,
            total=session.total,
            processed=session.processed,
            succeeded=session.succeeded,
            failed=session.failed,
            batches_processed=session.batches_processed,
            batches_total=session.batch_count,
            elapsed_seconds=session.elapsed_seconds,
            error=session.error,
            failed_identifiers=list(session.failed_identifiers),
        )
        logger.info(
            "invalidation_finished",
            state=summary.state.value,
            succeeded=summary.succeeded,
            failed=summary.failed,
            batches_processed=summary.batches_processed,
            batches_total=summary.batches_total,
            duration_seconds=round(summary.elapsed_seconds, 2),
        )
        return summary
