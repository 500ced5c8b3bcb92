"""Record codec.

Converts one record to and from a delimited text line stored as a frame payload.
"""

from __future__ import annotations

from ..core.errors import RecordDecodeError, RecordEncodeError
from ..core.types import Key, Record

# Payload format: key,place_label,region,subregion,latitude,longitude
FIELD_LAYOUT = (
    ("key", "String"),
    ("place_label", "String"),
    ("region", "String"),
    ("subregion", "String"),
    ("latitude", "Double"),
    ("longitude", "Double"),
)
FIELD_COUNT = len(FIELD_LAYOUT)


class DelimitedRecordCodec:
    """Positional delimiter-separated codec for postal records.

    Args:
        delimiter: Field separator (no escaping is performed)
        encoding: Text encoding of the payload bytes

    Invariants:
        - Encoded payloads carry no trailing terminator
        - Tokens beyond the sixth are ignored on decode
        - Text fields never contain the delimiter
    """

    def __init__(self, delimiter: str = ",", encoding: str = "utf-8"):
        self.delimiter = delimiter
        self.encoding = encoding

    def encode(self, record: Record) -> bytes:
        """Render the record as one delimited line."""
        self.check(record)
        line = self.delimiter.join(
            (
                record.key,
                record.place_label,
                record.region,
                record.subregion,
                repr(float(record.latitude)),
                repr(float(record.longitude)),
            )
        )
        return line.encode(self.encoding)

    def check(self, record: Record) -> None:
        """Raise RecordEncodeError if the record cannot be framed unambiguously."""
        if not record.key or any(ch.isspace() for ch in record.key):
            raise RecordEncodeError(f"Key must be non-empty without whitespace: {record.key!r}")
        for name in ("key", "place_label", "region", "subregion"):
            if self.delimiter in getattr(record, name):
                raise RecordEncodeError(
                    f"Field {name} of record {record.key!r} contains delimiter {self.delimiter!r}"
                )

    def decode(self, payload: bytes, empty_coordinate_as_zero: bool = False) -> Record:
        """Parse a payload back into a record.

        Args:
            payload: Frame payload bytes
            empty_coordinate_as_zero: Treat an empty coordinate as 0.0. Only the
                bulk CSV ingest sets this; every other path rejects it.
        """
        try:
            text = payload.decode(self.encoding)
        except UnicodeDecodeError as e:
            raise RecordDecodeError(f"Payload is not valid {self.encoding}: {e}") from e
        return self.from_fields(text.split(self.delimiter), empty_coordinate_as_zero)

    def from_fields(self, tokens: list[str], empty_coordinate_as_zero: bool = False) -> Record:
        """Build a record from already split tokens."""
        if len(tokens) < FIELD_COUNT:
            raise RecordDecodeError(f"Expected {FIELD_COUNT} fields, got {len(tokens)}")
        key, place_label, region, subregion, lat_text, lng_text = tokens[:FIELD_COUNT]
        return Record(
            key=key,
            place_label=place_label,
            region=region,
            subregion=subregion,
            latitude=_parse_coordinate("latitude", lat_text, empty_coordinate_as_zero),
            longitude=_parse_coordinate("longitude", lng_text, empty_coordinate_as_zero),
        )

    def decode_key(self, payload: bytes) -> Key:
        """Return only the first token of a payload."""
        head = payload.split(self.delimiter.encode(self.encoding), 1)[0]
        try:
            return head.decode(self.encoding)
        except UnicodeDecodeError as e:
            raise RecordDecodeError(f"Key is not valid {self.encoding}: {e}") from e


def _parse_coordinate(name: str, text: str, empty_as_zero: bool) -> float:
    if empty_as_zero and not text.strip():
        return 0.0
    try:
        return float(text)
    except ValueError as e:
        raise RecordDecodeError(f"Invalid {name} value: {text!r}") from e
