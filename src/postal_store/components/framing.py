"""Store framing primitives.

Header layout and exact-length frame reads shared by the writer, reader,
index builder and lookup.
"""

from __future__ import annotations

import logging
import os
import struct
from collections.abc import Iterator
from pathlib import Path
from typing import BinaryIO, TextIO

from ..core.errors import StoreCorruptionError, StoreIOError, TruncatedStoreError
from ..core.types import Offset, StoreHeader

logger = logging.getLogger(__name__)

# Store format:
# [type_tag][NUL] [version (2B)] [header_length (4B)] [record_count (4B)]
# then record_count x [length (4B)][payload]
HEADER_FIELDS = struct.Struct("<HII")
FRAME_LENGTH = struct.Struct("<I")
MAX_TAG_BYTES = 255


def open_file(path: str | Path, mode: str, **kwargs) -> BinaryIO | TextIO:
    """Open a file, converting OS failures into StoreIOError."""
    try:
        return open(path, mode, **kwargs)
    except OSError as e:
        raise StoreIOError(e.errno, f"Unable to open {path}: {e.strerror or e}") from e


def header_length_for(type_tag: bytes) -> int:
    """Size of the preamble for a given encoded tag."""
    return len(type_tag) + 1 + HEADER_FIELDS.size


def pack_header(type_tag: str, version: int, record_count: int, encoding: str = "utf-8") -> bytes:
    """Build the store preamble."""
    tag = type_tag.encode(encoding)
    header_length = header_length_for(tag)
    return tag + b"\0" + HEADER_FIELDS.pack(version, header_length, record_count)


def read_bytes(fd: BinaryIO, size: int, what: str) -> bytes:
    """Read up to size bytes, converting OS failures into StoreIOError."""
    try:
        return fd.read(size)
    except OSError as e:
        raise StoreIOError(e.errno, f"Failed reading {what}: {e}") from e


def seek_to(fd: BinaryIO, offset: int, whence: int = os.SEEK_SET) -> int:
    """Seek and return the new position, converting OS failures into StoreIOError."""
    try:
        return fd.seek(offset, whence)
    except OSError as e:
        raise StoreIOError(e.errno, f"Failed seeking to offset {offset}: {e}") from e


def read_exact(fd: BinaryIO, size: int, what: str) -> bytes:
    """Read exactly size bytes or raise TruncatedStoreError."""
    data = read_bytes(fd, size, what)
    if len(data) < size:
        raise TruncatedStoreError(
            f"Truncated {what}: expected {size} bytes, got {len(data)}"
        )
    return data


def read_header(fd: BinaryIO, encoding: str = "utf-8") -> StoreHeader:
    """Parse the preamble from the current position (normally 0)."""
    tag = bytearray()
    while True:
        byte = read_bytes(fd, 1, "type tag")
        if not byte:
            raise TruncatedStoreError("Truncated header: type tag is not terminated")
        if byte == b"\0":
            break
        tag += byte
        if len(tag) > MAX_TAG_BYTES:
            raise StoreCorruptionError(f"Type tag longer than {MAX_TAG_BYTES} bytes")

    version, header_length, record_count = HEADER_FIELDS.unpack(
        read_exact(fd, HEADER_FIELDS.size, "header")
    )
    try:
        type_tag = tag.decode(encoding)
    except UnicodeDecodeError as e:
        raise StoreCorruptionError(f"Type tag is not valid {encoding}") from e

    return StoreHeader(type_tag, version, header_length, record_count)


def validate_header(
    header: StoreHeader, type_tag: str, version: int, encoding: str = "utf-8"
) -> None:
    """Check a parsed header against the expected format.

    The stored header length is metadata: it is compared with the real
    preamble size but never used to locate the first frame.
    """
    if header.type_tag != type_tag:
        raise StoreCorruptionError(f"Invalid type tag: {header.type_tag!r}")
    if header.version != version:
        raise StoreCorruptionError(f"Unsupported store version: {header.version}")
    expected = header_length_for(header.type_tag.encode(encoding))
    if header.header_length != expected:
        raise StoreCorruptionError(
            f"Header length mismatch: stored {header.header_length}, actual {expected}"
        )


def read_frame(fd: BinaryIO) -> bytes:
    """Read one frame at the current position and return its payload."""
    (length,) = FRAME_LENGTH.unpack(read_exact(fd, FRAME_LENGTH.size, "frame length"))
    return read_exact(fd, length, "frame payload")


def iter_frames(fd: BinaryIO, header: StoreHeader) -> Iterator[tuple[Offset, bytes]]:
    """Yield (offset, payload) for each declared frame.

    The offset is the position of the frame's length field. After the last
    declared frame the file must be exhausted.
    """
    for i in range(header.record_count):
        offset = fd.tell()
        try:
            payload = read_frame(fd)
        except TruncatedStoreError as e:
            raise TruncatedStoreError(
                f"Store declares {header.record_count} frames, frame {i} at offset {offset}: {e}"
            ) from e
        yield offset, payload

    end = fd.tell()
    size = seek_to(fd, 0, os.SEEK_END)
    if size != end:
        raise StoreCorruptionError(
            f"{size - end} trailing bytes after {header.record_count} declared frames"
        )
