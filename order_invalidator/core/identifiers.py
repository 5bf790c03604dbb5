"""Identifier list normalization pure functions."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence


def normalize_identifiers(values: Iterable[str]) -> list[str]:
    """Trim each value and drop blanks, preserving order and duplicates."""
    return [value.strip() for value in values if value and value.strip()]


def parse_identifier_text(text: str) -> list[str]:
    """Split pasted text on newlines into a normalized identifier list."""
    return normalize_identifiers(text.splitlines())


def parse_identifier_csv_arg(value: str) -> list[str]:
    """Split a comma separated command-line value into identifiers."""
    return normalize_identifiers(value.split(","))


def identifiers_from_csv_rows(
    rows: Iterable[Sequence[str]],
    has_header: bool = True,
) -> list[str]:
    """Take the first column of each row as an identifier.

    The header row is skipped when has_header is set. Empty rows and
    blank first cells are ignored.
    """
    first_column: list[str] = []
    for index, row in enumerate(rows):
        if index == 0 and has_header:
            continue
        if not row:
            continue
        first_column.append(row[0])
    return normalize_identifiers(first_column)


def find_blank_identifiers(identifiers: Sequence[str]) -> list[int]:
    """Return positions of identifiers that are empty after trimming."""
    return [index for index, value in enumerate(identifiers) if not value or not value.strip()]
