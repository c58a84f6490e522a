"""
Structured JSON logging for the voucher export pipeline.

Every record is one JSON line: ts, level, logger, message, the fields bound
in LogContext for the current run or voucher, any ``extra`` fields, and for
exceptions the type, message, ``code`` and structured attributes.

Run and voucher fields live in a ContextVar, so they follow the work into
thread pool tasks submitted through ``contextvars.copy_context().run``.
"""

__all__ = [
    "StructuredFormatter",
    "LogContext",
    "get_logger",
    "configure_logging",
    "reset_logging",
]

import json
import logging
import sys
import threading
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import UTC, date, datetime
from decimal import Decimal
from pathlib import Path
from types import MappingProxyType
from typing import Any
from uuid import UUID

# ---------------------------------------------------------------------------
# Context propagation
# ---------------------------------------------------------------------------

_EMPTY: Mapping[str, str] = MappingProxyType({})

_context_fields: ContextVar[Mapping[str, str]] = ContextVar(
    "export_log_context", default=_EMPTY
)


class LogContext:
    """Run- and voucher-scoped fields added to every log line."""

    FIELDS = frozenset({"correlation_id", "producer", "voucher_no", "voucher_date"})

    @classmethod
    def current(cls) -> dict[str, str]:
        """Fields bound in the current context."""
        return dict(_context_fields.get())

    @classmethod
    @contextmanager
    def bind(cls, **fields: str | None) -> Iterator[None]:
        """
        Layer fields over the current context for the duration of a block.

        None values are ignored, so optional voucher fields can be passed as-is.
        Raises TypeError for a field name outside FIELDS.
        """
        unknown = sorted(set(fields) - cls.FIELDS)
        if unknown:
            raise TypeError(f"Unknown log context fields: {unknown}")
        merged = dict(_context_fields.get())
        merged.update((k, v) for k, v in fields.items() if v is not None)
        token = _context_fields.set(MappingProxyType(merged))
        try:
            yield
        finally:
            _context_fields.reset(token)


# ---------------------------------------------------------------------------
# JSON Formatter
# ---------------------------------------------------------------------------

_STDLIB_KEYS: frozenset[str] = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", (), None)).keys()
) | {"message", "taskName"}


class _JSONEncoder(json.JSONEncoder):
    """Handle UUID, dates, Decimal and paths in log payloads."""

    def default(self, obj: Any) -> Any:
        if isinstance(obj, (UUID, Decimal, Path)):
            return str(obj)
        if isinstance(obj, (datetime, date)):
            return obj.isoformat()
        return super().default(obj)


def _exception_fields(exc: BaseException) -> dict[str, Any]:
    fields: dict[str, Any] = {
        "exc_type": type(exc).__name__,
        "exc_message": str(exc),
    }
    code = getattr(exc, "code", None)
    if code is not None:
        fields["exc_code"] = code
    # Structured attributes of FinanceExportError subclasses (row_number, account_id, ...)
    for key, value in vars(exc).items():
        if not key.startswith("_") and key != "code":
            fields[f"exc_{key}"] = value
    return fields


class StructuredFormatter(logging.Formatter):
    """Formats each log record as a single JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(_context_fields.get())

        for key, val in vars(record).items():
            if key not in _STDLIB_KEYS and key not in payload:
                payload[key] = val

        if record.exc_info and record.exc_info[1] is not None:
            payload.update(_exception_fields(record.exc_info[1]))
            payload["traceback"] = self.formatException(record.exc_info)

        return json.dumps(payload, cls=_JSONEncoder, default=str)


# ---------------------------------------------------------------------------
# Logger factory
# ---------------------------------------------------------------------------

_LOGGER_PREFIX = "finance_export"


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the finance_export namespace."""
    return logging.getLogger(f"{_LOGGER_PREFIX}.{name}")


# ---------------------------------------------------------------------------
# Initialization
# ---------------------------------------------------------------------------

_configured = False
_lock = threading.Lock()


def configure_logging(
    *,
    level: int = logging.INFO,
    handler: logging.Handler | None = None,
) -> None:
    """Send finance_export logs as JSON lines to handler (default stderr). Idempotent."""
    global _configured
    with _lock:
        if _configured:
            return
        _configured = True

    h = handler if handler is not None else logging.StreamHandler(sys.stderr)
    h.setFormatter(StructuredFormatter())
    root_logger = logging.getLogger(_LOGGER_PREFIX)
    root_logger.setLevel(level)
    root_logger.propagate = False
    root_logger.addHandler(h)


def reset_logging() -> None:
    """Reset logging configuration. FOR TESTING ONLY."""
    global _configured
    with _lock:
        _configured = False
    logger = logging.getLogger(_LOGGER_PREFIX)
    logger.handlers.clear()
    logger.setLevel(logging.WARNING)
    logger.propagate = True
