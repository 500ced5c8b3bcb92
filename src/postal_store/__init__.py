"""Postal Store - length-framed record file with a primary key index."""

from .core.config import StoreConfig, load_config
from .core.errors import (
    PostalStoreError,
    StoreIOError,
    StoreCorruptionError,
    TruncatedStoreError,
    IndexCorruptionError,
    RecordDecodeError,
    RecordEncodeError,
    ConfigError,
)
from .core.store import PostalCodeStore
from .core.types import DecodePolicy, IndexEntry, Key, Offset, Record, StoreHeader

__all__ = [
    "StoreConfig",
    "load_config",
    "PostalStoreError",
    "StoreIOError",
    "StoreCorruptionError",
    "TruncatedStoreError",
    "IndexCorruptionError",
    "RecordDecodeError",
    "RecordEncodeError",
    "ConfigError",
    "PostalCodeStore",
    "DecodePolicy",
    "IndexEntry",
    "Key",
    "Offset",
    "Record",
    "StoreHeader",
]
