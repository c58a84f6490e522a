"""
JSON source adapter for voucher and account exports.

Handles JSON array (file is [{...}, {...}, ...]) and JSON Lines (one object
per line). Configurable: json_path for nested arrays (e.g. "data.records"),
format "array" | "jsonl" (default: by suffix, .jsonl -> jsonl).

Floats are parsed as Decimal so amounts keep their written precision.
Keys are normalized (lower case, underscores dropped) so ``voucherType`` and
``voucher_type`` both arrive as ``vouchertype``. Nested objects are
normalized too. Non-object items are skipped.
"""

from __future__ import annotations

import json
from decimal import Decimal
from pathlib import Path
from typing import Any, Iterator

from finance_export.adapters.base import SOURCE_ROW_KEY, SourceProbe


def _get_nested(data: Any, path: str) -> Any:
    """Follow dot-separated path into dict/list. Returns None if key missing."""
    if not path.strip():
        return data
    for key in path.split("."):
        key = key.strip()
        if not key:
            continue
        if isinstance(data, list):
            try:
                data = data[int(key)]
            except (ValueError, IndexError):
                return None
        elif isinstance(data, dict) and key in data:
            data = data[key]
        else:
            return None
    return data


def normalize_key(key: str) -> str:
    return key.strip().lower().replace("_", "")


def _normalize(value: Any) -> Any:
    if isinstance(value, dict):
        return {normalize_key(k): _normalize(v) for k, v in value.items() if isinstance(k, str)}
    if isinstance(value, list):
        return [_normalize(v) for v in value]
    return value


def _all_keys(rows: list[dict[str, Any]]) -> tuple[str, ...]:
    """Union of keys from sample rows for column list."""
    seen: set[str] = set()
    for row in rows:
        seen.update(k for k in row if k != SOURCE_ROW_KEY)
    return tuple(sorted(seen))


def _format(source_path: Path, options: dict[str, Any]) -> str:
    default = "jsonl" if source_path.suffix.lower() == ".jsonl" else "array"
    return options.get("format", default)


class JsonSourceAdapter:
    """Read JSON array or JSON Lines files as one dict per record."""

    def _items(self, source_path: Path, options: dict[str, Any]) -> Iterator[tuple[int, Any]]:
        encoding = options.get("encoding", "utf-8")
        if _format(source_path, options) == "jsonl":
            with source_path.open("r", encoding=encoding) as f:
                for line_no, line in enumerate(f, start=1):
                    line = line.strip()
                    if not line:
                        continue
                    yield line_no, json.loads(line, parse_float=Decimal)
            return

        with source_path.open("r", encoding=encoding) as f:
            data = json.load(f, parse_float=Decimal)
        json_path = options.get("json_path")
        root = _get_nested(data, json_path) if json_path else data
        if not isinstance(root, list):
            return
        yield from enumerate(root, start=1)

    def read(self, source_path: Path, options: dict[str, Any]) -> Iterator[dict[str, Any]]:
        for index, item in self._items(source_path, options):
            if not isinstance(item, dict):
                continue
            row = _normalize(item)
            row[SOURCE_ROW_KEY] = index
            yield row

    def probe(self, source_path: Path, options: dict[str, Any]) -> SourceProbe:
        sample: list[dict[str, Any]] = []
        count = 0
        for row in self.read(source_path, options):
            count += 1
            if len(sample) < 5:
                sample.append(row)
        return SourceProbe(
            row_count=count,
            columns=_all_keys(sample),
            sample_rows=tuple(sample),
            encoding=options.get("encoding", "utf-8"),
        )
