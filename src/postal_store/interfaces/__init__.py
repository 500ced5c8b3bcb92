"""Protocol definitions for store components."""

from .codec import RecordCodec
from .index import KeyIndex
from .store import RecordStore, StoreReader, StoreWriter

__all__ = ["RecordCodec", "KeyIndex", "RecordStore", "StoreReader", "StoreWriter"]
