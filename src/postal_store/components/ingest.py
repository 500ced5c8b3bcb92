"""CSV ingestion.

Reads postal code rows from a delimited text file into records.
"""

from __future__ import annotations

import csv
import logging
from collections.abc import Iterator
from pathlib import Path

from ..core.errors import RecordDecodeError, RecordEncodeError
from ..core.types import Record
from .codec import DelimitedRecordCodec
from .framing import open_file

logger = logging.getLogger(__name__)


def iter_csv_records(
    path: str | Path, codec: DelimitedRecordCodec | None = None
) -> Iterator[Record]:
    """Yield records from a CSV file, skipping its header row.

    Empty coordinates read as 0.0 here and nowhere else. Rows with
    non-numeric coordinates, missing columns, or text the store cannot
    frame are logged and skipped.
    """
    codec = codec or DelimitedRecordCodec()
    skipped = 0
    with open_file(path, "r", encoding=codec.encoding, newline="") as f:
        rows = csv.reader(f, delimiter=codec.delimiter)
        next(rows, None)  # header
        for row in rows:
            if not row:
                continue
            try:
                record = codec.from_fields(row, empty_coordinate_as_zero=True)
                codec.check(record)
            except (RecordDecodeError, RecordEncodeError) as e:
                skipped += 1
                logger.warning(f"Skipping CSV line {rows.line_num}: {e}")
                continue
            yield record

    if skipped:
        logger.info(f"Skipped {skipped} rows from {path}")


def load_csv(path: str | Path, codec: DelimitedRecordCodec | None = None) -> list[Record]:
    """Read every valid record from a CSV file."""
    records = list(iter_csv_records(path, codec))
    logger.info(f"Loaded {len(records)} records from {path}")
    return records
