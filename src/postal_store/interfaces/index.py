"""Protocol definition for the primary key index."""

from __future__ import annotations
from typing import Protocol
from ..core.types import Key, Offset


class KeyIndex(Protocol):
    """Maps a key to the offset of its earliest frame."""

    def find_offset(self, key: Key) -> Offset | None:
        """Return the frame offset for key, or None if absent."""
        ...

    def load_to_memory(self) -> None:
        """Materialize index structures in memory for faster lookups."""
        ...
