"""Progress percentage and ETA estimation pure functions."""

from __future__ import annotations

import math
from typing import NamedTuple

UNAVAILABLE = "N/A"


class ProgressEstimate(NamedTuple):
    """Percentage complete and linear-extrapolated seconds remaining."""

    percentage: float
    eta_seconds: float | None

    @property
    def display_percentage(self) -> int:
        return round(self.percentage)


def estimate_progress(processed: int, total: int, elapsed_seconds: float) -> ProgressEstimate:
    """Estimate progress by linear extrapolation of observed throughput.

    remaining = (total - processed) * (elapsed / processed)

    ETA is None when nothing has been processed yet or the result is not
    a finite, non-negative number.
    """
    percentage = 100.0 if total <= 0 else (processed / total) * 100.0
    if processed <= 0 or total <= 0:
        return ProgressEstimate(percentage, None)

    eta = (total - processed) * (elapsed_seconds / processed)
    if not math.isfinite(eta) or eta < 0:
        return ProgressEstimate(percentage, None)
    return ProgressEstimate(percentage, eta)


def format_eta(eta_seconds: float | None) -> str:
    """Render seconds as '1m 5s' / '42s', or 'N/A' when unavailable."""
    if eta_seconds is None or not math.isfinite(eta_seconds) or eta_seconds < 0:
        return UNAVAILABLE
    seconds = round(eta_seconds)
    minutes, seconds = divmod(seconds, 60)
    if minutes > 0:
        return f"{minutes}m {seconds}s"
    return f"{seconds}s"
