"""
Source adapter protocol and probe DTO.

Contract:
    SourceAdapter.read() yields one dict per source record (streaming). Every
    dict carries ``_source_row``: the 1-based physical row (or record index)
    it came from, for error reporting.
    SourceAdapter.probe() returns a quick snapshot: row count, columns, sample rows.

Architecture: finance_export/adapters. File I/O only, no DB or domain imports.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterator, Protocol, runtime_checkable

SOURCE_ROW_KEY = "_source_row"
EXTRA_CELLS_KEY = "_extra"


@runtime_checkable
class SourceAdapter(Protocol):
    """Protocol for reading structured source files into record dicts."""

    def read(self, source_path: Path, options: dict[str, Any]) -> Iterator[dict[str, Any]]:
        """Yield one dict per source record. Streams; does not load entire file."""
        ...

    def probe(self, source_path: Path, options: dict[str, Any]) -> "SourceProbe":
        """Quick probe: row count, detected columns, sample rows."""
        ...


@dataclass(frozen=True)
class SourceProbe:
    """Result of probing a source file (row count, columns, first N rows)."""

    row_count: int
    columns: tuple[str, ...]
    sample_rows: tuple[dict[str, Any], ...]  # First 5 rows; do not mutate
    encoding: str | None = None
