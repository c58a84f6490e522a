"""
Alias table: source-system name -> destination-system name.

Loaded once per run from a two-column tabular file (CSV or XLSX) and then
shared read-only. resolve() returns the target of the first row whose source
matches exactly, else the name unchanged. There is no chained rewriting:
the result of resolve() is never looked up again.

A bad header or row raises MalformedAliasTableError at load time.
"""

from __future__ import annotations

import csv
import zipfile
from collections.abc import Iterable, Mapping
from pathlib import Path
from types import MappingProxyType
from typing import Any

from openpyxl.utils.exceptions import InvalidFileException

from finance_export.adapters import adapter_for_path
from finance_export.adapters.base import EXTRA_CELLS_KEY, SOURCE_ROW_KEY
from finance_export.domain.types import AliasEntry
from finance_export.exceptions import MalformedAliasTableError


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


class AliasTable:
    """Immutable ordered set of alias entries with first-match-wins lookup."""

    def __init__(self, entries: Iterable[AliasEntry] = (), source: str = "<memory>"):
        self._entries = tuple(entries)
        self._source = source
        lookup: dict[str, str] = {}
        for entry in self._entries:
            lookup.setdefault(entry.source_name, entry.target_name)
        self._lookup: Mapping[str, str] = MappingProxyType(lookup)

    @classmethod
    def empty(cls) -> "AliasTable":
        return cls()

    @classmethod
    def from_pairs(cls, pairs: Iterable[tuple[str, str]], source: str = "<memory>") -> "AliasTable":
        return cls((AliasEntry(s, t) for s, t in pairs), source=source)

    @classmethod
    def from_rows(
        cls,
        rows: Iterable[Mapping[str, Any]],
        columns: tuple[str, ...],
        source: str = "<memory>",
    ) -> "AliasTable":
        """
        Build from adapter rows. Columns are positional: (source, target).

        Raises:
            MalformedAliasTableError: header is not exactly two columns, or a row
                has a missing, empty or extra cell.
        """
        if len(set(columns)) != 2 or len(columns) != 2 or any(_is_blank(c) for c in columns):
            raise MalformedAliasTableError(
                source, 1, f"expected a two-column header, got {list(columns)!r}"
            )
        source_col, target_col = columns
        entries: list[AliasEntry] = []
        for index, row in enumerate(rows, start=2):
            row_number = int(row.get(SOURCE_ROW_KEY, index))
            extra = [v for v in row.get(EXTRA_CELLS_KEY) or () if not _is_blank(v)]
            if extra:
                raise MalformedAliasTableError(source, row_number, f"unexpected extra cells {extra!r}")
            source_name = row.get(source_col)
            target_name = row.get(target_col)
            if source_name is None or target_name is None:
                raise MalformedAliasTableError(source, row_number, "row has fewer than two cells")
            source_name = str(source_name).strip()
            target_name = str(target_name).strip()
            if not source_name:
                raise MalformedAliasTableError(source, row_number, "empty source name")
            if not target_name:
                raise MalformedAliasTableError(source, row_number, "empty target name")
            entries.append(AliasEntry(source_name=source_name, target_name=target_name))
        return cls(entries, source=source)

    @classmethod
    def load(cls, path: Path, options: dict[str, Any] | None = None) -> "AliasTable":
        """
        Load an alias table from a .csv or .xlsx file.

        Raises:
            MalformedAliasTableError: the file cannot be decoded, or a header or
                row is malformed.
            ValueError: the file type has no adapter.
        """
        options = options or {}
        adapter = adapter_for_path(path)
        try:
            columns = adapter.probe(path, options).columns
            return cls.from_rows(adapter.read(path, options), columns, source=str(path))
        except (UnicodeDecodeError, csv.Error, zipfile.BadZipFile, InvalidFileException) as e:
            raise MalformedAliasTableError(str(path), 1, f"unreadable file: {e}") from e

    @property
    def source(self) -> str:
        return self._source

    @property
    def entries(self) -> tuple[AliasEntry, ...]:
        return self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, name: object) -> bool:
        return name in self._lookup

    def resolve(self, name: str) -> str:
        return self._lookup.get(name, name)
