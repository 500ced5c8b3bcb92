"""Unit tests for indexed lookup."""

import shutil
import struct
import tempfile
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from postal_store.components.index import PrimaryKeyIndexBuilder, SortedKeyIndex
from postal_store.components.lookup import IndexedLookup, find_offset
from postal_store.components.writer import FramedStoreWriter
from postal_store.core.errors import RecordDecodeError, StoreIOError, TruncatedStoreError
from postal_store.core.types import DecodePolicy, Record

TAG = b"ZipCodeLengthIndicated"


@pytest.fixture
def temp_dir():
    """Create temporary directory for tests."""
    tmpdir = tempfile.mkdtemp()
    yield tmpdir
    shutil.rmtree(tmpdir, ignore_errors=True)


@pytest.fixture
def built(temp_dir):
    """Write the three-record example store and its index."""
    store_path = Path(temp_dir) / "store.dat"
    index_path = Path(temp_dir) / "index.dat"
    records = [
        Record("00001", "A", "NY", "X", 1.0, 2.0),
        Record("00002", "B", "CA", "Y", 3.0, 4.0),
        Record("00003", "C", "NY", "Z", 5.0, 6.0),
    ]
    FramedStoreWriter().write(records, store_path)
    PrimaryKeyIndexBuilder().build(store_path, index_path)
    return store_path, index_path, records


def write_raw(store_path, payloads):
    with open(store_path, "wb") as f:
        f.write(TAG + b"\0" + struct.pack("<HII", 1, len(TAG) + 11, len(payloads)))
        for payload in payloads:
            f.write(struct.pack("<I", len(payload)) + payload)


def test_lookup_example(built):
    """Test lookup of an indexed key returns its record."""
    store_path, index_path, records = built

    record = IndexedLookup().lookup(index_path, store_path, "00002")

    assert record == records[1]
    assert record.region == "CA"


def test_lookup_not_found(built):
    """Test an absent key is a None result, not an error."""
    store_path, index_path, _ = built

    assert IndexedLookup().lookup(index_path, store_path, "99999") is None


def test_duplicate_key_returns_earliest(temp_dir):
    """Test the lowest-offset frame wins for a duplicated key."""
    store_path = Path(temp_dir) / "store.dat"
    index_path = Path(temp_dir) / "index.dat"
    first = Record("00001", "First", "NY", "X", 1.0, 2.0)
    later = Record("00001", "Later", "CA", "Y", 3.0, 4.0)
    FramedStoreWriter().write([first, later], store_path)
    PrimaryKeyIndexBuilder().build(store_path, index_path)

    assert IndexedLookup().lookup(index_path, store_path, "00001") == first


def test_read_record_at_every_offset(built):
    """Test offset correctness for every index entry."""
    store_path, index_path, records = built
    lookup = IndexedLookup()

    for record in records:
        offset = find_offset(index_path, record.key)
        assert lookup.read_record_at(store_path, offset) == record


def test_lookup_surfaces_decode_error(temp_dir):
    """Test a bad frame found by key raises instead of being dropped."""
    store_path = Path(temp_dir) / "store.dat"
    index_path = Path(temp_dir) / "index.dat"
    write_raw(store_path, [b"00001,A,NY,X,1.0,2.0", b"00002,B,CA,Y,oops,4.0"])
    PrimaryKeyIndexBuilder().build(store_path, index_path)

    with pytest.raises(RecordDecodeError, match="Invalid latitude"):
        IndexedLookup().lookup(index_path, store_path, "00002")


def test_lookup_drop_policy(temp_dir):
    """Test DROP policy reports a bad frame as not found."""
    store_path = Path(temp_dir) / "store.dat"
    index_path = Path(temp_dir) / "index.dat"
    write_raw(store_path, [b"00002,B,CA,Y,oops,4.0"])
    PrimaryKeyIndexBuilder().build(store_path, index_path)

    lookup = IndexedLookup(decode_policy=DecodePolicy.DROP)
    assert lookup.lookup(index_path, store_path, "00002") is None


def test_offset_past_end_of_store(built):
    """Test a stale offset is reported as truncation."""
    store_path, _, _ = built
    size = store_path.stat().st_size

    with pytest.raises(TruncatedStoreError, match="frame length"):
        IndexedLookup().read_record_at(store_path, size + 100)


def test_truncated_frame_at_offset(built):
    """Test a frame cut short after its length field."""
    store_path, index_path, _ = built
    offset = find_offset(index_path, "00003")
    store_path.write_bytes(store_path.read_bytes()[:offset + 6])

    with pytest.raises(TruncatedStoreError, match="frame payload"):
        IndexedLookup().lookup(index_path, store_path, "00003")


def test_missing_index_file(built, temp_dir):
    """Test an absent index raises StoreIOError."""
    store_path, _, _ = built

    with pytest.raises(StoreIOError):
        IndexedLookup().lookup(Path(temp_dir) / "nope.dat", store_path, "00001")


def test_lookup_with_sorted_index(built):
    """Test lookups through the in-memory sorted index."""
    store_path, index_path, records = built
    index = SortedKeyIndex(index_path)
    lookup = IndexedLookup()

    assert lookup.lookup_with(index, store_path, "00003") == records[2]
    assert lookup.lookup_with(index, store_path, "00004") is None


def test_lookup_after_empty_payload_frame(temp_dir):
    """Test an empty frame does not stop later keys from resolving."""
    store_path = Path(temp_dir) / "store.dat"
    index_path = Path(temp_dir) / "index.dat"
    write_raw(store_path, [b"00001,A,NY,X,1.0,2.0", b"", b"00003,C,NY,Z,5.0,6.0"])

    assert PrimaryKeyIndexBuilder().build(store_path, index_path) == 3

    expected = Record("00003", "C", "NY", "Z", 5.0, 6.0)
    lookup = IndexedLookup()
    assert lookup.lookup(index_path, store_path, "00003") == expected
    assert lookup.lookup_with(SortedKeyIndex(index_path), store_path, "00003") == expected


@patch("postal_store.components.lookup.open_file")
def test_seek_failure_raises_store_io_error(mock_open):
    """Test an OS error while seeking to a frame is wrapped."""
    handle = MagicMock()
    handle.seek.side_effect = OSError(5, "Input/output error")
    mock_open.return_value.__enter__.return_value = handle

    with pytest.raises(StoreIOError, match="offset 33") as excinfo:
        IndexedLookup().read_record_at("store.dat", 33)
    assert excinfo.value.errno == 5
