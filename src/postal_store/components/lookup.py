"""Indexed lookup.

Resolves a key through the primary key index, then reads one frame directly.
"""

from __future__ import annotations

import logging
from pathlib import Path

from ..core.errors import RecordDecodeError
from ..core.types import DecodePolicy, Key, Offset, Record
from ..interfaces.index import KeyIndex
from ..interfaces.codec import RecordCodec
from .codec import DelimitedRecordCodec
from .framing import open_file, read_frame, seek_to
from .index import LinearScanIndex

logger = logging.getLogger(__name__)


class IndexedLookup:
    """Point lookups against a built store and index.

    Args:
        codec: Record codec used for frame payloads
        decode_policy: RAISE surfaces a bad frame, DROP reports it as not found

    Invariants:
        - Duplicate keys resolve to the earliest written frame
        - A missing key returns None rather than raising
        - Each call opens and releases its own file handles
    """

    def __init__(
        self,
        codec: RecordCodec | None = None,
        decode_policy: DecodePolicy = DecodePolicy.RAISE,
    ):
        self.codec = codec or DelimitedRecordCodec()
        self.decode_policy = decode_policy

    def lookup(self, index_path: str | Path, store_path: str | Path, key: Key) -> Record | None:
        """Return the record for key, or None if the index has no entry."""
        return self.lookup_with(LinearScanIndex(index_path, self.codec.encoding), store_path, key)

    def lookup_with(self, index: KeyIndex, store_path: str | Path, key: Key) -> Record | None:
        """Same as lookup, against an already constructed index."""
        offset = index.find_offset(key)
        if offset is None:
            logger.debug(f"Key {key!r} not in index")
            return None

        try:
            return self.read_record_at(store_path, offset)
        except RecordDecodeError:
            # Single-record lookups surface bad frames unless configured otherwise
            if self.decode_policy is DecodePolicy.RAISE:
                raise
            logger.warning(f"Dropping undecodable frame for key {key!r} at offset {offset}")
            return None

    def read_record_at(self, store_path: str | Path, offset: Offset) -> Record:
        """Seek to a frame offset and decode the record there."""
        with open_file(store_path, "rb") as f:
            seek_to(f, offset)
            payload = read_frame(f)
        try:
            return self.codec.decode(payload)
        except RecordDecodeError as e:
            raise RecordDecodeError(f"Frame at offset {offset}: {e}") from e


def find_offset(index_path: str | Path, key: Key, encoding: str = "utf-8") -> Offset | None:
    """Return the offset of the first index entry for key, or None."""
    return LinearScanIndex(index_path, encoding).find_offset(key)
