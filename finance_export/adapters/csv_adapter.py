"""
CSV source adapter.

Uses csv.DictReader. Configurable: delimiter, encoding, quoting, skip_rows.
Handles BOM via utf-8-sig when encoding is utf-8. Streams rows.

Short rows yield None for the missing columns; cells beyond the header are
collected under ``_extra`` so callers can reject them.
"""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Any, Iterator

from finance_export.adapters.base import EXTRA_CELLS_KEY, SOURCE_ROW_KEY, SourceProbe


_QUOTING = {
    "minimal": csv.QUOTE_MINIMAL,
    "all": csv.QUOTE_ALL,
    "nonnumeric": csv.QUOTE_NONNUMERIC,
    "none": csv.QUOTE_NONE,
}


def _get_encoding(options: dict[str, Any]) -> str:
    enc = options.get("encoding", "utf-8")
    if enc.lower() == "utf-8":
        return "utf-8-sig"  # Strip BOM if present
    return enc


def _get_quoting(options: dict[str, Any]) -> int:
    q = options.get("quoting", "minimal")
    if isinstance(q, int):
        return q
    return _QUOTING.get(str(q).lower(), csv.QUOTE_MINIMAL)


class CsvSourceAdapter:
    """Read CSV files as one dict per row. Streams; does not load entire file."""

    def read(self, source_path: Path, options: dict[str, Any]) -> Iterator[dict[str, Any]]:
        encoding = _get_encoding(options)
        delimiter = options.get("delimiter", ",")
        skip_rows = int(options.get("skip_rows", 0))
        quoting = _get_quoting(options)

        with source_path.open("r", encoding=encoding, newline="") as f:
            for _ in range(skip_rows):
                next(f, None)
            reader = csv.DictReader(
                f, delimiter=delimiter, quoting=quoting, restkey=EXTRA_CELLS_KEY
            )
            for row in reader:
                row[SOURCE_ROW_KEY] = reader.line_num + skip_rows
                yield row

    def probe(self, source_path: Path, options: dict[str, Any]) -> SourceProbe:
        encoding = _get_encoding(options)
        delimiter = options.get("delimiter", ",")
        skip_rows = int(options.get("skip_rows", 0))
        quoting = _get_quoting(options)
        sample_size = 5

        with source_path.open("r", encoding=encoding, newline="") as f:
            for _ in range(skip_rows):
                next(f, None)
            reader = csv.DictReader(f, delimiter=delimiter, quoting=quoting)
            columns = tuple(reader.fieldnames or ())
            sample: list[dict[str, Any]] = []
            count = 0
            for row in reader:
                count += 1
                if len(sample) < sample_size:
                    sample.append(dict(row))

        return SourceProbe(
            row_count=count,
            columns=columns,
            sample_rows=tuple(sample),
            encoding=encoding,
        )
