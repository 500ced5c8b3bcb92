"""Framed store writer.

Serializes a header plus length-prefixed encoded records into one binary file.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from ..core.errors import StoreIOError
from ..core.types import Record
from .codec import DelimitedRecordCodec
from .framing import FRAME_LENGTH, open_file, pack_header

logger = logging.getLogger(__name__)

MAX_RECORD_COUNT = 0xFFFFFFFF


class FramedStoreWriter:
    """Write records to a new framed store file.

    Args:
        codec: Record codec used for frame payloads
        type_tag: Identifying string for the header
        version: Store format version

    Invariants:
        - Frames are written strictly in input order
        - The header record count equals the number of frames written
        - The output file is replaced, never appended to
    """

    def __init__(
        self,
        codec: DelimitedRecordCodec | None = None,
        type_tag: str = "ZipCodeLengthIndicated",
        version: int = 1,
    ):
        self.codec = codec or DelimitedRecordCodec()
        self.type_tag = type_tag
        self.version = version

    def write(self, records: Iterable[Record], output_path: str | Path) -> int:
        """Write all records and return the number of frames."""
        output_path = Path(output_path)
        # Encode up front so an unencodable record leaves no partial file behind
        payloads = [self.codec.encode(record) for record in records]
        if len(payloads) > MAX_RECORD_COUNT:
            raise ValueError(f"Too many records for one store: {len(payloads)}")

        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StoreIOError(e.errno, f"Unable to create {output_path.parent}: {e}") from e

        header = pack_header(self.type_tag, self.version, len(payloads), self.codec.encoding)
        with open_file(output_path, "wb") as f:
            try:
                f.write(header)
                for payload in payloads:
                    f.write(FRAME_LENGTH.pack(len(payload)))
                    f.write(payload)
            except OSError as e:
                raise StoreIOError(e.errno, f"Failed writing {output_path}: {e}") from e

        logger.info(f"Wrote store {output_path}: {len(payloads)} records")
        return len(payloads)
