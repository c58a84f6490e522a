"""
XLSX source adapter for alias tables kept in spreadsheets.

Reads one sheet (by index or name, default the active sheet). The first row
after skip_rows is the header. Cell values are normalized (strip, blank ->
empty string, integral floats -> int). Fully blank rows are skipped.
Non-empty cells to the right of the header are collected under ``_extra``.

probe() reports the header cells as written, so callers can reject blank or
duplicate names; read() keys such columns as ``Column_N`` or ``name_N``.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Iterator

import openpyxl

from finance_export.adapters.base import EXTRA_CELLS_KEY, SOURCE_ROW_KEY, SourceProbe


def _normalize_header_cell(value: Any) -> str:
    """Normalize a header cell for use as a dict key."""
    if value is None:
        return ""
    return re.sub(r"\s+", " ", str(value)).strip()


def _cell_value(value: Any) -> Any:
    if value is None:
        return ""
    if isinstance(value, float) and value == int(value):
        return int(value)
    if isinstance(value, str):
        return value.strip()
    return value


def _header_cells(values: tuple[Any, ...]) -> list[str]:
    """Header cells as written, up to the last non-empty cell."""
    cells = [_normalize_header_cell(v) for v in values]
    while cells and not cells[-1]:
        cells.pop()
    return cells


def _header(values: tuple[Any, ...]) -> list[str]:
    """Row dict keys: blank cells get a positional name, duplicates a suffix."""
    cells = _header_cells(values)
    headers: list[str] = []
    for c, cell in enumerate(cells):
        key = cell or f"Column_{c + 1}"
        base = key
        cnt = 0
        while key in headers:
            cnt += 1
            key = f"{base}_{cnt}"
        headers.append(key)
    return headers


class XlsxSourceAdapter:
    """
    Read .xlsx files as one dict per row.

    source_options:
      sheet: 0-based sheet index (int) or sheet name (str). Default: active sheet.
      skip_rows: number of rows to skip at top of sheet before the header. Default: 0.
    """

    def _rows(self, source_path: Path, options: dict[str, Any]) -> Iterator[tuple[int, tuple[Any, ...]]]:
        wb = openpyxl.load_workbook(source_path, read_only=True, data_only=True)
        try:
            sheet = self._get_sheet(wb, options)
            skip_rows = int(options.get("skip_rows", 0))
            for row_number, values in enumerate(
                sheet.iter_rows(min_row=1 + skip_rows, values_only=True), start=1 + skip_rows
            ):
                yield row_number, tuple(values)
        finally:
            wb.close()

    def read(self, source_path: Path, options: dict[str, Any]) -> Iterator[dict[str, Any]]:
        headers: list[str] | None = None
        for row_number, values in self._rows(source_path, options):
            if headers is None:
                headers = _header(values)
                continue
            cells = [_cell_value(v) for v in values]
            if not any(v != "" for v in cells):
                continue
            padded = cells + [""] * (len(headers) - len(cells))
            row: dict[str, Any] = dict(zip(headers, padded))
            extra = [v for v in cells[len(headers):] if v != ""]
            if extra:
                row[EXTRA_CELLS_KEY] = extra
            row[SOURCE_ROW_KEY] = row_number
            yield row

    def _get_sheet(self, wb: Any, options: dict[str, Any]) -> Any:
        sheet_ref = options.get("sheet")
        if sheet_ref is None:
            return wb.active
        if isinstance(sheet_ref, int):
            return wb.worksheets[sheet_ref]
        return wb[sheet_ref]

    def probe(self, source_path: Path, options: dict[str, Any]) -> SourceProbe:
        columns: tuple[str, ...] | None = None
        keys: list[str] = []
        sample: list[dict[str, Any]] = []
        count = 0
        for _, values in self._rows(source_path, options):
            if columns is None:
                columns = tuple(_header_cells(values))
                keys = _header(values)
                continue
            cells = [_cell_value(v) for v in values]
            if not any(v != "" for v in cells):
                continue
            count += 1
            if len(sample) < 5:
                sample.append(dict(zip(keys, cells)))
        return SourceProbe(
            row_count=count,
            columns=columns or (),
            sample_rows=tuple(sample),
        )
