"""Exception hierarchy for the postal code store.

Defines all custom exceptions used throughout the implementation.
"""

from __future__ import annotations


class PostalStoreError(Exception):
    """Base exception for all postal store errors."""
    pass


class StoreIOError(PostalStoreError, OSError):
    """Raised when a store or index file cannot be opened, read or written."""
    pass


class StoreCorruptionError(PostalStoreError):
    """Raised when a store file does not match its own header."""
    pass


class TruncatedStoreError(StoreCorruptionError):
    """Raised when a store ends before its declared frames do."""
    pass


class IndexCorruptionError(PostalStoreError):
    """Raised when an index line cannot be parsed."""
    pass


class RecordDecodeError(PostalStoreError, ValueError):
    """Raised when a frame payload is not a valid record."""
    pass


class RecordEncodeError(PostalStoreError, ValueError):
    """Raised when a record cannot be encoded unambiguously."""
    pass


class ConfigError(PostalStoreError, ValueError):
    """Raised when store configuration is invalid."""
    pass
