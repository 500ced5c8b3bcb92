"""Framed store reader.

Parses the store header and replays every length-prefixed record.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

from ..core.errors import RecordDecodeError
from ..core.types import DecodePolicy, Record, StoreHeader
from .codec import DelimitedRecordCodec
from .framing import iter_frames, open_file, read_header, validate_header

logger = logging.getLogger(__name__)


class FramedStoreReader:
    """Read a whole framed store back into memory.

    Args:
        codec: Record codec used for frame payloads
        type_tag: Expected header type tag
        version: Expected store format version
        decode_policy: DROP skips undecodable frames, RAISE propagates

    Invariants:
        - Exactly record_count frames are consumed, decodable or not
        - Fewer frames than declared raises TruncatedStoreError
        - Bytes after the last declared frame raise StoreCorruptionError
    """

    def __init__(
        self,
        codec: DelimitedRecordCodec | None = None,
        type_tag: str = "ZipCodeLengthIndicated",
        version: int = 1,
        decode_policy: DecodePolicy = DecodePolicy.DROP,
    ):
        self.codec = codec or DelimitedRecordCodec()
        self.type_tag = type_tag
        self.version = version
        self.decode_policy = decode_policy

    def read_header(self, input_path: str | Path) -> StoreHeader:
        """Parse and validate only the store header."""
        with open_file(input_path, "rb") as f:
            header = read_header(f, self.codec.encoding)
        validate_header(header, self.type_tag, self.version, self.codec.encoding)
        return header

    def read_all(self, input_path: str | Path) -> tuple[StoreHeader, list[Record]]:
        """Return the header and every record that decodes."""
        with open_file(input_path, "rb") as f:
            header = read_header(f, self.codec.encoding)
            validate_header(header, self.type_tag, self.version, self.codec.encoding)
            records = list(self._decode_frames(f, header))

        dropped = header.record_count - len(records)
        logger.info(
            f"Loaded {len(records)} of {header.record_count} records from {input_path}"
            + (f" ({dropped} dropped)" if dropped else "")
        )
        return header, records

    def iter_records(self, input_path: str | Path) -> Iterator[Record]:
        """Stream records in frame order."""
        with open_file(input_path, "rb") as f:
            header = read_header(f, self.codec.encoding)
            validate_header(header, self.type_tag, self.version, self.codec.encoding)
            yield from self._decode_frames(f, header)

    def _decode_frames(self, f, header: StoreHeader) -> Iterator[Record]:
        for offset, payload in iter_frames(f, header):
            try:
                yield self.codec.decode(payload)
            except RecordDecodeError as e:
                # Bulk loads drop bad frames unless configured to surface them
                if self.decode_policy is DecodePolicy.RAISE:
                    raise RecordDecodeError(f"Frame at offset {offset}: {e}") from e
                logger.warning(f"Dropping frame at offset {offset}: {e}")
