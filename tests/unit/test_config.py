"""Unit tests for store configuration."""

import shutil
import tempfile
from pathlib import Path

import pytest

from postal_store.core.config import StoreConfig, load_config
from postal_store.core.errors import ConfigError
from postal_store.core.types import DecodePolicy


@pytest.fixture
def temp_dir():
    """Create temporary directory for tests."""
    tmpdir = tempfile.mkdtemp()
    yield tmpdir
    shutil.rmtree(tmpdir, ignore_errors=True)


def test_defaults():
    """Test defaults match the original file names and policies."""
    config = StoreConfig()

    assert config.store_path == Path(".") / "us_postal_codes.dat"
    assert config.index_path == Path(".") / "primary_key_index.dat"
    assert config.type_tag == "ZipCodeLengthIndicated"
    assert config.version == 1
    assert config.bulk_decode_policy is DecodePolicy.DROP
    assert config.lookup_decode_policy is DecodePolicy.RAISE
    assert config.index_mode == "scan"


def test_policies_accept_strings():
    """Test policy names are converted to DecodePolicy."""
    config = StoreConfig(bulk_decode_policy="raise", lookup_decode_policy="drop")

    assert config.bulk_decode_policy is DecodePolicy.RAISE
    assert config.lookup_decode_policy is DecodePolicy.DROP


@pytest.mark.parametrize(
    "kwargs",
    [
        {"bulk_decode_policy": "ignore"},
        {"type_tag": ""},
        {"type_tag": "bad\0tag"},
        {"version": 70000},
        {"delimiter": ",,"},
        {"delimiter": " "},
        {"index_mode": "hash"},
    ],
)
def test_invalid_config(kwargs):
    """Test invalid values raise ConfigError."""
    with pytest.raises(ConfigError):
        StoreConfig(**kwargs)


def test_load_config_from_toml(temp_dir):
    """Test loading a [store] table with overrides."""
    path = Path(temp_dir) / "store.toml"
    path.write_text(
        '[store]\n'
        'data_dir = "/tmp/elsewhere"\n'
        'index_mode = "sorted"\n'
        'lookup_decode_policy = "drop"\n'
    )

    config = load_config(path, data_dir=temp_dir, index_mode=None)

    assert config.data_dir == temp_dir
    assert config.index_mode == "sorted"
    assert config.lookup_decode_policy is DecodePolicy.DROP


def test_load_config_top_level_keys(temp_dir):
    """Test keys may also sit at the top level."""
    path = Path(temp_dir) / "store.toml"
    path.write_text('store_filename = "zips.dat"\n')

    assert load_config(path).store_filename == "zips.dat"


def test_load_config_unknown_key(temp_dir):
    """Test unknown keys are rejected."""
    path = Path(temp_dir) / "store.toml"
    path.write_text('cache_size = 10\n')

    with pytest.raises(ConfigError, match="cache_size"):
        load_config(path)


def test_load_config_missing_file(temp_dir):
    """Test a missing config file raises FileNotFoundError."""
    with pytest.raises(FileNotFoundError):
        load_config(Path(temp_dir) / "absent.toml")
