"""Batch partitioning of an identifier list."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from order_invalidator.exceptions import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

Batch = tuple[str, ...]


def validate_batch_size(batch_size: int) -> int:
    """Batch size must be a positive integer."""
    if isinstance(batch_size, bool) or not isinstance(batch_size, int) or batch_size <= 0:
        msg = f"batch_size must be a positive integer, got {batch_size!r}"
        raise ConfigurationError(msg)
    return batch_size


class BatchPartition:
    """Lazy, restartable split of identifiers into contiguous fixed-size batches.

    Every batch holds exactly batch_size identifiers except the last, which
    holds the remainder. Iterating twice yields identical batches.
    """

    def __init__(self, identifiers: Sequence[str], batch_size: int) -> None:
        self.batch_size = validate_batch_size(batch_size)
        self._identifiers = tuple(identifiers)

    def __iter__(self) -> Iterator[Batch]:
        for start in range(0, len(self._identifiers), self.batch_size):
            yield self._identifiers[start : start + self.batch_size]

    def __len__(self) -> int:
        return math.ceil(len(self._identifiers) / self.batch_size)

    @property
    def total(self) -> int:
        return len(self._identifiers)

    def sizes(self) -> list[int]:
        """Length of each batch, in order."""
        return [len(batch) for batch in self]


def partition_identifiers(identifiers: Sequence[str], batch_size: int) -> BatchPartition:
    """Partition identifiers into batches of batch_size."""
    return BatchPartition(identifiers, batch_size)
