"""Protocol definition for the record codec."""

from __future__ import annotations
from typing import Protocol
from ..core.types import Key, Record


class RecordCodec(Protocol):
    """Converts one record to and from a frame payload."""

    encoding: str

    def encode(self, record: Record) -> bytes:
        """Render a record as payload bytes (no terminator)."""
        ...

    def decode(self, payload: bytes, empty_coordinate_as_zero: bool = False) -> Record:
        """Parse payload bytes; raise RecordDecodeError if malformed."""
        ...

    def decode_key(self, payload: bytes) -> Key:
        """Return only the key token of a payload."""
        ...
