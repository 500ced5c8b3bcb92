"""Common type definitions for the postal code store.

Defines fundamental types used across all components.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

# Core primitive types
Key = str
Offset = int
IndexEntry = tuple[Key, Offset]


@dataclass(frozen=True)
class Record:
    """One postal code row."""

    key: Key
    place_label: str
    region: str
    subregion: str
    latitude: float
    longitude: float


@dataclass(frozen=True)
class StoreHeader:
    """Fixed preamble of a store file.

    Attributes:
        type_tag: Identifying string, written NUL terminated
        version: Format version (u16)
        header_length: Size of the preamble in bytes (u32, informational)
        record_count: Number of frames that follow (u32)
    """

    type_tag: str
    version: int
    header_length: int
    record_count: int


class DecodePolicy(Enum):
    """What to do with a frame whose payload fails to decode."""

    DROP = "drop"
    RAISE = "raise"
