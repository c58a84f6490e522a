"""
Export profile loader (``finance_export.config``).

Responsibility
--------------
Loads an optional YAML export profile into a frozen ``ExportProfile``:
which alias tables to apply, how to render dates, how many workers to use
and which company the import document targets.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Document is not a mapping, has unknown keys or bad values -> ``ValueError``.

Relative alias table paths are resolved against the profile's directory.
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

import yaml

from finance_export.selectors.voucher_selector import (
    DEFAULT_DATE_FORMAT,
    DEFAULT_REFERENCE_DATE_FORMAT,
)

_PATH_KEYS = ("account_aliases", "voucher_type_aliases", "account_type_aliases")


@dataclass(frozen=True)
class ExportProfile:
    """Settings for one export run. Every field has a usable default."""

    account_aliases: Path | None = None
    voucher_type_aliases: Path | None = None
    account_type_aliases: Path | None = None
    date_format: str = DEFAULT_DATE_FORMAT
    reference_date_format: str = DEFAULT_REFERENCE_DATE_FORMAT
    workers: int = 1
    company_name: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.workers, int) or isinstance(self.workers, bool) or self.workers < 1:
            raise ValueError(f"workers must be a positive integer, got {self.workers!r}")

    def with_overrides(self, **overrides: Any) -> "ExportProfile":
        """Copy with the non-None overrides applied (command-line flags)."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes) if changes else self


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
        ValueError: if the document is not a mapping.
    """
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Export profile {path} must be a mapping, got {type(data).__name__}")
    return data


def parse_export_profile(data: dict[str, Any], base_dir: Path | None = None) -> ExportProfile:
    """Build an ExportProfile from a parsed dict."""
    known = {f.name for f in fields(ExportProfile)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"Unknown export profile keys: {unknown}")

    values: dict[str, Any] = {k: v for k, v in data.items() if v is not None}
    for key in _PATH_KEYS:
        if key not in values:
            continue
        path = Path(str(values[key])).expanduser()
        if not path.is_absolute() and base_dir is not None:
            path = base_dir / path
        values[key] = path
    for key in ("date_format", "reference_date_format", "company_name"):
        if key in values:
            values[key] = str(values[key])
    return ExportProfile(**values)


def load_export_profile(path: Path) -> ExportProfile:
    """Load and parse an export profile YAML file."""
    return parse_export_profile(load_yaml_file(path), base_dir=path.parent)
