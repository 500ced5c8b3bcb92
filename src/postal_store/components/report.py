"""Region boundary report.

Groups records by region and picks the extreme record in each compass direction.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from ..core.errors import StoreIOError
from ..core.types import Record
from .framing import open_file

logger = logging.getLogger(__name__)

REPORT_HEADER = "Region | Easternmost | Westernmost | Northernmost | Southernmost"
REPORT_RULE = "-" * 74


@dataclass(frozen=True)
class RegionExtremes:
    """Boundary records of one region.

    Longitude grows eastward, latitude grows northward. Ties keep the record
    seen first.
    """

    region: str
    easternmost: Record
    westernmost: Record
    northernmost: Record
    southernmost: Record
    count: int


def region_extremes(records: Iterable[Record]) -> dict[str, RegionExtremes]:
    """Return boundary records per region, ordered by region code."""
    by_region: dict[str, list[Record]] = {}
    for record in records:
        by_region.setdefault(record.region, []).append(record)

    result = {}
    for region in sorted(by_region):
        group = by_region[region]
        # max/min return the first extreme on ties
        result[region] = RegionExtremes(
            region=region,
            easternmost=max(group, key=lambda r: r.longitude),
            westernmost=min(group, key=lambda r: r.longitude),
            northernmost=max(group, key=lambda r: r.latitude),
            southernmost=min(group, key=lambda r: r.latitude),
            count=len(group),
        )
    return result


def _cell(record: Record) -> str:
    return f"{record.key} ({record.place_label})"


def format_report(extremes: dict[str, RegionExtremes]) -> list[str]:
    """Render the report as text lines (no newlines)."""
    lines = [REPORT_HEADER, REPORT_RULE]
    for region, ext in extremes.items():
        lines.append(
            " | ".join(
                (
                    region,
                    _cell(ext.easternmost),
                    _cell(ext.westernmost),
                    _cell(ext.northernmost),
                    _cell(ext.southernmost),
                )
            )
        )
    return lines


def write_report(extremes: dict[str, RegionExtremes], path: str | Path) -> None:
    """Write the rendered report to a text file."""
    with open_file(path, "w", encoding="utf-8") as f:
        try:
            for line in format_report(extremes):
                f.write(line + "\n")
        except OSError as e:
            raise StoreIOError(e.errno, f"Failed writing {path}: {e}") from e
    logger.info(f"Wrote report for {len(extremes)} regions to {path}")
