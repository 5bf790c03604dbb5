"""Load order identifiers from CSV or plain-text files."""

from __future__ import annotations

import csv
from typing import TYPE_CHECKING

import structlog

from order_invalidator.core.identifiers import identifiers_from_csv_rows, parse_identifier_text

if TYPE_CHECKING:
    from pathlib import Path

logger = structlog.get_logger(__name__)


def load_identifiers(path: Path, has_header: bool = True) -> list[str]:
    """Read identifiers from a file.

    .csv files contribute the first column of every row, header skipped.
    Any other file is read as one identifier per line.
    """
    if path.suffix.lower() == ".csv":
        with path.open(newline="", encoding="utf-8-sig") as handle:
            identifiers = identifiers_from_csv_rows(csv.reader(handle), has_header=has_header)
    else:
        identifiers = parse_identifier_text(path.read_text(encoding="utf-8-sig"))

    logger.info("identifiers_loaded", path=str(path), count=len(identifiers))
    return identifiers
