"""Batch outcome model for a single remote invalidation call."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, field_validator


class OutcomeStatus(StrEnum):
    """Whole-batch result reported by the remote service."""

    SUCCEEDED = "succeeded"
    FAILED = "failed"


class BatchOutcome(BaseModel):
    """Result of one batch call. The remote service reports per batch, never per order."""

    model_config = ConfigDict(frozen=True)

    status: OutcomeStatus
    count: int
    reason: str | None = None
    error_type: str | None = None
    status_code: int | None = None
    failed_identifiers: tuple[str, ...] = ()

    @field_validator("count")
    @classmethod
    def validate_count(cls, value: int) -> int:
        """Count must be non-negative."""
        if value < 0:
            msg = "count must not be negative"
            raise ValueError(msg)
        return value

    @classmethod
    def succeeded(cls, count: int, status_code: int | None = None) -> BatchOutcome:
        return cls(status=OutcomeStatus.SUCCEEDED, count=count, status_code=status_code)

    @classmethod
    def failed(
        cls,
        count: int,
        reason: str,
        *,
        error_type: str | None = None,
        status_code: int | None = None,
        failed_identifiers: tuple[str, ...] = (),
    ) -> BatchOutcome:
        return cls(
            status=OutcomeStatus.FAILED,
            count=count,
            reason=reason,
            error_type=error_type,
            status_code=status_code,
            failed_identifiers=failed_identifiers,
        )

    @property
    def is_success(self) -> bool:
        return self.status is OutcomeStatus.SUCCEEDED
