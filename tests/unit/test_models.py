"""Unit tests for pydantic models and session state.

Exercise real validation paths and lifecycle transitions, no mocking.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from pydantic import ValidationError

from order_invalidator.exceptions import SessionStateError
from order_invalidator.models.batch_outcome import BatchOutcome, OutcomeStatus
from order_invalidator.models.config import Config
from order_invalidator.models.progress_update import ProgressUpdate
from order_invalidator.models.run_summary import RunSummary
from order_invalidator.models.session import InvalidationSession, SessionState

if TYPE_CHECKING:
    from conftest import FakeClock


def _config(**overrides: object) -> Config:
    """Build a Config that ignores any local .env file."""
    return Config(_env_file=None, **overrides)  # type: ignore[call-arg]


# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------


@pytest.mark.usefixtures("invalidator_env")
class TestConfig:
    """Tests for Config validation."""

    def test_defaults(self) -> None:
        config = _config()
        assert config.api_base_url == "https://api.yotpo.com"
        assert config.batch_size == 5000
        assert config.pacing_delay_seconds == 0.5
        assert config.request_timeout_seconds is None
        assert config.batch_retry_attempts == 1
        assert config.log_level == "INFO"
        assert config.app_key is None

    def test_reads_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("BATCH_SIZE", "2500")
        monkeypatch.setenv("APP_KEY", "my-app")
        config = _config()
        assert config.batch_size == 2500
        assert config.app_key == "my-app"

    def test_base_url_trailing_slash_dropped(self) -> None:
        assert _config(api_base_url="https://api.example.com/").api_base_url == (
            "https://api.example.com"
        )

    def test_base_url_requires_scheme(self) -> None:
        with pytest.raises(ValidationError, match="api_base_url"):
            _config(api_base_url="api.example.com")

    @pytest.mark.parametrize("batch_size", [0, -1, 10001])
    def test_batch_size_bounds(self, batch_size: int) -> None:
        with pytest.raises(ValidationError, match="batch_size"):
            _config(batch_size=batch_size)

    def test_negative_pacing_rejected(self) -> None:
        with pytest.raises(ValidationError, match="pacing_delay_seconds"):
            _config(pacing_delay_seconds=-0.1)

    def test_zero_pacing_allowed(self) -> None:
        assert _config(pacing_delay_seconds=0).pacing_delay_seconds == 0

    def test_non_positive_timeout_rejected(self) -> None:
        with pytest.raises(ValidationError, match="request_timeout_seconds"):
            _config(request_timeout_seconds=0)

    @pytest.mark.parametrize("attempts", [0, 6])
    def test_retry_attempts_bounds(self, attempts: int) -> None:
        with pytest.raises(ValidationError, match="batch_retry_attempts"):
            _config(batch_retry_attempts=attempts)

    def test_log_level_normalized(self) -> None:
        assert _config(log_level="debug").log_level == "DEBUG"

    def test_invalid_log_level(self) -> None:
        with pytest.raises(ValidationError, match="log_level"):
            _config(log_level="verbose")


# ---------------------------------------------------------------------------
# BatchOutcome
# ---------------------------------------------------------------------------


class TestBatchOutcome:
    """Tests for BatchOutcome constructors."""

    def test_succeeded(self) -> None:
        outcome = BatchOutcome.succeeded(5, status_code=204)
        assert outcome.status is OutcomeStatus.SUCCEEDED
        assert outcome.is_success is True
        assert outcome.count == 5
        assert outcome.reason is None
        assert outcome.failed_identifiers == ()

    def test_failed(self) -> None:
        outcome = BatchOutcome.failed(
            3,
            "rate limited",
            error_type="BatchApiError",
            status_code=500,
            failed_identifiers=("A", "B"),
        )
        assert outcome.status is OutcomeStatus.FAILED
        assert outcome.is_success is False
        assert outcome.reason == "rate limited"
        assert outcome.failed_identifiers == ("A", "B")

    def test_negative_count_rejected(self) -> None:
        with pytest.raises(ValidationError, match="count"):
            BatchOutcome.succeeded(-1)

    def test_frozen(self) -> None:
        outcome = BatchOutcome.succeeded(1)
        with pytest.raises(ValidationError):
            outcome.count = 2  # type: ignore[misc]


# ---------------------------------------------------------------------------
# ProgressUpdate / RunSummary
# ---------------------------------------------------------------------------


class TestProgressUpdate:
    """Tests for ProgressUpdate rendering."""

    def test_render_success(self) -> None:
        update = ProgressUpdate(
            batch_number=1,
            batch_count=3,
            processed=5,
            total=12,
            percentage=42,
            eta="7s",
            batch_succeeded=5,
            batch_failed=0,
        )
        assert update.render() == (
            "[SUCCESS] Batch 1/3: 5/12 (42%) | Est. time remaining: 7s"
        )

    def test_render_failure_includes_message(self) -> None:
        update = ProgressUpdate(
            batch_number=2,
            batch_count=3,
            processed=10,
            total=12,
            percentage=83,
            eta="N/A",
            batch_succeeded=0,
            batch_failed=5,
            message="rate limited",
        )
        rendered = update.render()
        assert rendered.startswith("[FAILED] Batch 2/3")
        assert rendered.endswith("| rate limited")


class TestRunSummary:
    """Tests for RunSummary derived fields."""

    def test_remaining_counts(self) -> None:
        summary = RunSummary(
            state=SessionState.CANCELLED,
            total=12,
            processed=5,
            succeeded=5,
            failed=0,
            batches_processed=1,
            batches_total=3,
            elapsed_seconds=1.234,
        )
        assert summary.batches_remaining == 2
        assert summary.remaining == 7

    def test_stats(self) -> None:
        summary = RunSummary(
            state=SessionState.COMPLETED,
            total=2,
            processed=2,
            succeeded=1,
            failed=1,
            batches_processed=2,
            batches_total=2,
            elapsed_seconds=0.567,
            failed_identifiers=["B"],
        )
        stats = summary.stats()
        assert stats["state"] == "completed"
        assert stats["batches_remaining"] == 0
        assert stats["duration_seconds"] == 0.57
        assert stats["failed_identifiers"] == ["B"]


# ---------------------------------------------------------------------------
# InvalidationSession
# ---------------------------------------------------------------------------


class TestInvalidationSession:
    """Tests for session counters and lifecycle."""

    def test_starts_idle(self) -> None:
        session = InvalidationSession(total=3)
        assert session.state is SessionState.IDLE
        assert session.is_terminal is False
        assert session.cancel_requested is False

    def test_happy_path_transitions(self) -> None:
        session = InvalidationSession(total=3)
        session.transition(SessionState.ACQUIRING_CREDENTIAL)
        session.transition(SessionState.RUNNING)
        session.transition(SessionState.COMPLETED)
        assert session.is_terminal is True

    def test_credential_failure_transition(self) -> None:
        session = InvalidationSession(total=3)
        session.transition(SessionState.ACQUIRING_CREDENTIAL)
        session.transition(SessionState.ABORTED)
        assert session.is_terminal is True

    @pytest.mark.parametrize(
        ("path", "illegal"),
        [
            ([], SessionState.RUNNING),
            ([SessionState.ACQUIRING_CREDENTIAL], SessionState.COMPLETED),
            (
                [SessionState.ACQUIRING_CREDENTIAL, SessionState.RUNNING, SessionState.COMPLETED],
                SessionState.RUNNING,
            ),
            ([SessionState.ACQUIRING_CREDENTIAL, SessionState.ABORTED], SessionState.RUNNING),
        ],
    )
    def test_illegal_transitions(self, path: list[SessionState], illegal: SessionState) -> None:
        session = InvalidationSession(total=1)
        for state in path:
            session.transition(state)
        with pytest.raises(SessionStateError, match="illegal session transition"):
            session.transition(illegal)

    def test_cancel_flag_is_sticky(self) -> None:
        session = InvalidationSession(total=1)
        session.request_cancel()
        session.request_cancel()
        assert session.cancel_requested is True

    def test_record_outcomes(self) -> None:
        session = InvalidationSession(total=7)
        session.record_outcome(BatchOutcome.succeeded(5))
        session.record_outcome(
            BatchOutcome.failed(2, "boom", failed_identifiers=("X", "Y"))
        )
        assert session.processed == 7
        assert session.succeeded == 5
        assert session.failed == 2
        assert session.batches_processed == 2
        assert list(session.failed_identifiers) == ["X", "Y"]

    def test_failed_identifiers_distinct_in_first_seen_order(self) -> None:
        session = InvalidationSession(total=6)
        session.record_outcome(BatchOutcome.failed(3, "a", failed_identifiers=("B", "A")))
        session.record_outcome(BatchOutcome.failed(3, "b", failed_identifiers=("A", "C")))
        assert list(session.failed_identifiers) == ["B", "A", "C"]
        assert session.failed == 6

    def test_elapsed_uses_clock(self, fake_clock: FakeClock) -> None:
        session = InvalidationSession(total=1, clock=fake_clock)
        fake_clock.advance(2.5)
        assert session.elapsed_seconds == pytest.approx(2.5)
