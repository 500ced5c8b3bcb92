"""Protocol definitions for the framed store."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import Protocol

from ..core.types import Key, Record, StoreHeader


class StoreWriter(Protocol):
    """Writes a complete store file in one pass."""

    def write(self, records: Iterable[Record], output_path: str | Path) -> int:
        """Replace output_path with a store holding records; return frame count."""
        ...


class StoreReader(Protocol):
    """Reads a complete store file."""

    def read_header(self, input_path: str | Path) -> StoreHeader:
        """Parse and validate the store header."""
        ...

    def read_all(self, input_path: str | Path) -> tuple[StoreHeader, list[Record]]:
        """Return the header and all decodable records."""
        ...

    def iter_records(self, input_path: str | Path) -> Iterator[Record]:
        """Stream decodable records in frame order."""
        ...


class RecordStore(Protocol):
    """Public API for the postal code store."""

    def build(self, records: Iterable[Record]) -> int:
        """Write the store and rebuild its index; return record count."""
        ...

    def load_all(self) -> list[Record]:
        """Return every decodable record in frame order."""
        ...

    def lookup(self, key: Key) -> Record | None:
        """Return the record for key or None if not present."""
        ...

    def header(self) -> StoreHeader:
        """Return the parsed store header."""
        ...
