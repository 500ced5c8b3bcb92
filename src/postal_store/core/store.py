"""Postal code store - main public API.

Orchestrates the codec, framed store writer/reader, index builder and lookup.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from pathlib import Path

from .config import StoreConfig
from .types import Key, Record, StoreHeader
from ..components.codec import DelimitedRecordCodec
from ..components.index import LinearScanIndex, PrimaryKeyIndexBuilder, SortedKeyIndex
from ..components.lookup import IndexedLookup
from ..components.reader import FramedStoreReader
from ..components.writer import FramedStoreWriter
from ..interfaces.index import KeyIndex
from ..interfaces.store import StoreReader, StoreWriter

logger = logging.getLogger(__name__)


class PostalCodeStore:
    """Write-once postal code store with a primary key index.

    Args:
        config: Store configuration

    Public API:
        - build(records): Write the store file and rebuild its index
        - load_all(): Read every decodable record
        - lookup(key): Fetch one record through the index
        - header(): Parse the store header

    Invariants:
        - The index is rebuilt wholesale on every build
        - No file handle outlives the call that opened it
        - Lookups never scan the store, only the index
    """

    def __init__(self, config: StoreConfig | None = None):
        self.config = config or StoreConfig()
        self.data_dir = Path(self.config.data_dir)
        self.store_path = self.config.store_path
        self.index_path = self.config.index_path

        self.codec = DelimitedRecordCodec(self.config.delimiter, self.config.encoding)
        self._writer: StoreWriter = FramedStoreWriter(self.codec, self.config.type_tag, self.config.version)
        self._reader: StoreReader = FramedStoreReader(
            self.codec,
            self.config.type_tag,
            self.config.version,
            decode_policy=self.config.bulk_decode_policy,
        )
        self._builder = PrimaryKeyIndexBuilder(self.codec, self.config.type_tag, self.config.version)
        self._lookup = IndexedLookup(self.codec, decode_policy=self.config.lookup_decode_policy)
        self._index: KeyIndex | None = None

    def build(self, records: Iterable[Record]) -> int:
        """Write records to the store file, then rebuild the index."""
        count = self._writer.write(records, self.store_path)
        entries = self.rebuild_index()
        if entries != count:
            logger.error(f"Index has {entries} entries for {count} records")
        logger.info(f"Built store at {self.data_dir} ({count} records)")
        return count

    def rebuild_index(self) -> int:
        """Regenerate the index file from the current store file."""
        self._index = None
        return self._builder.build(self.store_path, self.index_path)

    def header(self) -> StoreHeader:
        """Parse and validate the store header."""
        return self._reader.read_header(self.store_path)

    def load_all(self) -> list[Record]:
        """Return all decodable records in frame order."""
        _header, records = self._reader.read_all(self.store_path)
        return records

    def iter_records(self) -> Iterator[Record]:
        """Stream decodable records in frame order."""
        return self._reader.iter_records(self.store_path)

    def lookup(self, key: Key) -> Record | None:
        """Return the record for key, or None if it is not indexed."""
        return self._lookup.lookup_with(self._get_index(), self.store_path, key)

    def _get_index(self) -> KeyIndex:
        if self.config.index_mode == "scan":
            return LinearScanIndex(self.index_path, self.config.encoding)
        if self._index is None:
            index = SortedKeyIndex(self.index_path, self.config.encoding)
            index.load_to_memory()
            self._index = index
        return self._index
