"""Source adapters for alias tables and source files (file I/O only, no DB)."""

from pathlib import Path

from finance_export.adapters.base import SourceAdapter, SourceProbe
from finance_export.adapters.csv_adapter import CsvSourceAdapter
from finance_export.adapters.json_adapter import JsonSourceAdapter
from finance_export.adapters.xlsx_adapter import XlsxSourceAdapter

__all__ = [
    "SourceAdapter",
    "SourceProbe",
    "CsvSourceAdapter",
    "JsonSourceAdapter",
    "XlsxSourceAdapter",
    "adapter_for_path",
]

_BY_SUFFIX = {
    ".csv": CsvSourceAdapter,
    ".txt": CsvSourceAdapter,
    ".xlsx": XlsxSourceAdapter,
    ".json": JsonSourceAdapter,
    ".jsonl": JsonSourceAdapter,
}


def adapter_for_path(path: Path) -> SourceAdapter:
    """Pick an adapter from the file suffix. Raises ValueError for unknown suffixes."""
    cls = _BY_SUFFIX.get(path.suffix.lower())
    if cls is None:
        raise ValueError(f"No adapter for file type {path.suffix!r}: {path}")
    return cls()
