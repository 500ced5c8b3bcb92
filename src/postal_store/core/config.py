"""Configuration for the postal code store.

Defines all tunable parameters for the store files and their codecs.
"""

from __future__ import annotations

import tomllib  # Python 3.11+
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

from .errors import ConfigError
from .types import DecodePolicy

INDEX_MODES = ("scan", "sorted")


@dataclass
class StoreConfig:
    """Configuration parameters for the framed record store.

    Attributes:
        data_dir: Directory holding the store and index files
        store_filename: Name of the framed binary store file
        index_filename: Name of the primary key index file
        type_tag: Identifying string written at the start of the store
        version: Store format version
        delimiter: Field separator inside a frame payload
        encoding: Text encoding of payloads and index lines
        bulk_decode_policy: Policy for undecodable frames when reading a whole store
        lookup_decode_policy: Policy for an undecodable frame found by key lookup
        index_mode: "scan" walks the index file per lookup, "sorted" loads it once
    """

    data_dir: str = "."
    store_filename: str = "us_postal_codes.dat"
    index_filename: str = "primary_key_index.dat"
    type_tag: str = "ZipCodeLengthIndicated"
    version: int = 1
    delimiter: str = ","
    encoding: str = "utf-8"
    bulk_decode_policy: DecodePolicy = DecodePolicy.DROP
    lookup_decode_policy: DecodePolicy = DecodePolicy.RAISE
    index_mode: str = "scan"

    def __post_init__(self):
        # Accept plain strings for policies (TOML, CLI)
        try:
            self.bulk_decode_policy = DecodePolicy(self.bulk_decode_policy)
            self.lookup_decode_policy = DecodePolicy(self.lookup_decode_policy)
        except ValueError as e:
            raise ConfigError(str(e)) from e

        if not self.type_tag or "\0" in self.type_tag:
            raise ConfigError(f"Invalid type tag: {self.type_tag!r}")
        if not 0 <= self.version <= 0xFFFF:
            raise ConfigError(f"Version must fit in 16 bits: {self.version}")
        if len(self.delimiter) != 1 or self.delimiter.isspace():
            raise ConfigError(f"Delimiter must be one non-space character: {self.delimiter!r}")
        if self.index_mode not in INDEX_MODES:
            raise ConfigError(f"Unknown index mode: {self.index_mode!r}")

    @property
    def store_path(self) -> Path:
        return Path(self.data_dir) / self.store_filename

    @property
    def index_path(self) -> Path:
        return Path(self.data_dir) / self.index_filename


def load_config(path: str | Path, **overrides: Any) -> StoreConfig:
    """Build a StoreConfig from a TOML file.

    Keys may sit at the top level or under a ``[store]`` table. Keyword
    overrides win over file values.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    data = tomllib.loads(path.read_text(encoding="utf-8"))
    data = data.get("store", data)

    known = {f.name for f in fields(StoreConfig)}
    unknown = set(data) - known
    if unknown:
        raise ConfigError(f"Unknown config keys: {', '.join(sorted(unknown))}")

    data.update({k: v for k, v in overrides.items() if v is not None})
    return StoreConfig(**data)
