"""Primary key index implementation.

Builds the key -> frame offset file and answers offset lookups from it.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from pathlib import Path

from sortedcontainers import SortedDict

from ..core.errors import IndexCorruptionError, StoreIOError
from ..core.types import IndexEntry, Key, Offset
from ..interfaces.codec import RecordCodec
from .codec import DelimitedRecordCodec
from .framing import iter_frames, open_file, read_header, validate_header

logger = logging.getLogger(__name__)

# Index line format: "<key> <offset>\n"


class PrimaryKeyIndexBuilder:
    """Scan a framed store and write one index line per frame.

    Args:
        codec: Codec used to pull the key token out of each payload
        type_tag: Expected header type tag
        version: Expected store format version

    Invariants:
        - One line per frame present, whether or not the full record decodes
        - Offsets point at the frame length field, not the payload
        - Lines follow frame order
    """

    def __init__(
        self,
        codec: RecordCodec | None = None,
        type_tag: str = "ZipCodeLengthIndicated",
        version: int = 1,
    ):
        self.codec = codec or DelimitedRecordCodec()
        self.type_tag = type_tag
        self.version = version

    def build(self, store_path: str | Path, index_path: str | Path) -> int:
        """Write the index file for store_path and return its line count.

        The index is written to a temp file and renamed over index_path, so
        a failed build leaves the previous index untouched.
        """
        index_path = Path(index_path)
        temp_path = index_path.with_suffix(".tmp")
        count = 0
        try:
            with open_file(store_path, "rb") as store, \
                    open_file(temp_path, "w", encoding=self.codec.encoding, newline="\n") as out:
                header = read_header(store, self.codec.encoding)
                validate_header(header, self.type_tag, self.version, self.codec.encoding)

                for offset, payload in iter_frames(store, header):
                    key = self.codec.decode_key(payload)
                    if not key or any(ch.isspace() for ch in key):
                        logger.warning(f"Frame at offset {offset} has unindexable key {key!r}")
                    try:
                        out.write(f"{key} {offset}\n")
                    except OSError as e:
                        raise StoreIOError(e.errno, f"Failed writing {temp_path}: {e}") from e
                    count += 1

                out.flush()
                os.fsync(out.fileno())

            # Atomic rename
            try:
                os.replace(temp_path, index_path)
            except OSError as e:
                raise StoreIOError(e.errno, f"Unable to replace {index_path}: {e}") from e
        except BaseException:
            temp_path.unlink(missing_ok=True)
            raise

        logger.info(f"Built index {index_path}: {count} entries")
        return count


def parse_index_line(line: str, line_no: int) -> IndexEntry | None:
    """Split one index line; blank lines yield None.

    The offset is the last space-separated token and the key is everything
    before it, so a frame with an empty or spaced key still parses.
    """
    text = line.rstrip("\r\n")
    if not text.strip():
        return None
    key, sep, offset_text = text.rpartition(" ")
    if not sep:
        raise IndexCorruptionError(f"Line {line_no}: expected '<key> <offset>', got {line!r}")
    try:
        offset = int(offset_text)
    except ValueError as e:
        raise IndexCorruptionError(f"Line {line_no}: invalid offset {offset_text!r}") from e
    if offset < 0:
        raise IndexCorruptionError(f"Line {line_no}: negative offset {offset}")
    return key, offset


def iter_index(index_path: str | Path, encoding: str = "utf-8") -> Iterator[IndexEntry]:
    """Yield (key, offset) entries in file order."""
    with open_file(index_path, "r", encoding=encoding) as f:
        for line_no, line in enumerate(f, start=1):
            entry = parse_index_line(line, line_no)
            if entry is not None:
                yield entry


class LinearScanIndex:
    """Index answered by reading the index file top to bottom per lookup.

    Args:
        index_path: Path to the index file
        encoding: Text encoding of the index file
    """

    def __init__(self, index_path: str | Path, encoding: str = "utf-8"):
        self.index_path = Path(index_path)
        self.encoding = encoding

    def find_offset(self, key: Key) -> Offset | None:
        """Return the offset of the first entry for key, or None."""
        for entry_key, offset in iter_index(self.index_path, self.encoding):
            if entry_key == key:
                return offset
        return None

    def load_to_memory(self) -> None:
        """Nothing to materialize; every lookup reads the file."""
        pass

    def __len__(self) -> int:
        return sum(1 for _ in iter_index(self.index_path, self.encoding))


class SortedKeyIndex:
    """Index held in a SortedDict for O(log n) lookups.

    Only the first offset seen for a key is kept, so duplicate keys resolve
    the same way as a linear scan.

    Args:
        index_path: Path to the index file
        encoding: Text encoding of the index file
    """

    def __init__(self, index_path: str | Path, encoding: str = "utf-8"):
        self.index_path = Path(index_path)
        self.encoding = encoding
        self._entries: SortedDict | None = None
        self._line_count = 0

    def load_to_memory(self) -> None:
        """Read the index file into the sorted map."""
        entries = SortedDict()
        count = 0
        for key, offset in iter_index(self.index_path, self.encoding):
            entries.setdefault(key, offset)
            count += 1
        self._entries = entries
        self._line_count = count
        logger.debug(f"Loaded {len(entries)} distinct keys from {self.index_path}")

    def find_offset(self, key: Key) -> Offset | None:
        """Return the offset of the earliest entry for key, or None."""
        if self._entries is None:
            self.load_to_memory()
        return self._entries.get(key)

    def keys_between(self, start: Key | None, end: Key | None) -> Iterator[Key]:
        """Iterate distinct keys in [start, end) in sorted order."""
        if self._entries is None:
            self.load_to_memory()
        yield from self._entries.irange(start, end, inclusive=(True, False))

    def __len__(self) -> int:
        if self._entries is None:
            self.load_to_memory()
        return self._line_count
