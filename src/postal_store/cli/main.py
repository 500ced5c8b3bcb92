# Minimal CLI using argparse that builds, queries and reports on a postal code store.
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from postal_store.components.codec import FIELD_LAYOUT
from postal_store.components.ingest import load_csv
from postal_store.components.report import format_report, region_extremes, write_report
from postal_store.core.config import StoreConfig, load_config
from postal_store.core.errors import PostalStoreError
from postal_store.core.store import PostalCodeStore
from postal_store.core.types import Record


def setup_logging(verbose: bool) -> None:
    """Setup logging to console."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s | %(levelname)s | %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="postal-store", description="Length-framed postal code store with a primary key index"
    )
    p.add_argument("--data-dir", type=str, help="Directory holding the store and index files")
    p.add_argument("--config", type=Path, help="TOML config file")
    p.add_argument(
        "--index-mode", choices=["scan", "sorted"], help="Index lookup strategy (default: scan)"
    )
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    sub = p.add_subparsers(dest="command", required=True)

    b = sub.add_parser("build", help="Ingest a CSV file, write the store and its index")
    b.add_argument("csv", type=Path, help="Input CSV file (first line is a header)")

    lk = sub.add_parser("lookup", help="Fetch records by key through the index")
    lk.add_argument("keys", nargs="+", help="Keys to look up")

    sub.add_parser("header", help="Print the store header")

    r = sub.add_parser("report", help="Per-region boundary records")
    r.add_argument("csv", type=Path, nargs="?", help="Read a CSV instead of the store")
    r.add_argument("--out", type=Path, help="Also write the report to this file")
    return p


def make_config(args: argparse.Namespace) -> StoreConfig:
    overrides = {"data_dir": args.data_dir, "index_mode": args.index_mode}
    if args.config is not None:
        return load_config(args.config, **overrides)
    return StoreConfig(**{k: v for k, v in overrides.items() if v is not None})


def format_record(record: Record) -> str:
    return (
        f"Key: {record.key}, Place: {record.place_label}, Region: {record.region}, "
        f"Subregion: {record.subregion}, Lat: {record.latitude}, Long: {record.longitude}"
    )


def main(argv: list[str] | None = None) -> int:
    argv = argv if argv is not None else sys.argv[1:]
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    try:
        store = PostalCodeStore(make_config(args))

        if args.command == "build":
            records = load_csv(args.csv, store.codec)
            count = store.build(records)
            print(f"Wrote {count} records to {store.store_path}")
            print(f"Wrote index to {store.index_path}")
            return 0

        if args.command == "lookup":
            missing = 0
            for key in args.keys:
                record = store.lookup(key)
                if record is None:
                    print(f"Key {key} not found.")
                    missing += 1
                else:
                    print(format_record(record))
            return 1 if missing else 0

        if args.command == "header":
            header = store.header()
            print(f"File Type: {header.type_tag}")
            print(f"Version: {header.version}")
            print(f"Header Size: {header.header_length} bytes")
            print(f"Record Count: {header.record_count}")
            print("Size Format Type: binary")
            print(f"Field Count: {len(FIELD_LAYOUT)}")
            print("Field Information:")
            for i, (name, kind) in enumerate(FIELD_LAYOUT, start=1):
                print(f"  {i}. {name.replace('_', ' ').title()} ({kind})")
            print(f"Primary Key Index File Name: {store.index_path.name}")
            return 0

        if args.command == "report":
            records = load_csv(args.csv, store.codec) if args.csv else store.load_all()
            extremes = region_extremes(records)
            for line in format_report(extremes):
                print(line)
            if args.out:
                write_report(extremes, args.out)
            return 0
    except (PostalStoreError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    parser.error(f"Unknown command: {args.command}")
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
