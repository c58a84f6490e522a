"""Tests for the structured JSON logging of export runs."""

import contextvars
import json
import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import date
from decimal import Decimal
from io import StringIO
from pathlib import Path
from uuid import uuid4

import pytest

from finance_export.exceptions import MalformedAliasTableError, UnknownAccountError
from finance_export.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    get_logger,
    reset_logging,
)


@pytest.fixture
def log_stream():
    """Fresh logging configuration writing JSON lines to a StringIO."""
    reset_logging()
    stream = StringIO()
    configure_logging(level=logging.DEBUG, handler=logging.StreamHandler(stream))

    def _records() -> list[dict]:
        return [json.loads(line) for line in stream.getvalue().splitlines() if line]

    yield _records
    reset_logging()


# ---------------------------------------------------------------------------
# StructuredFormatter
# ---------------------------------------------------------------------------


class TestStructuredFormatter:

    def test_one_json_object_per_line(self, log_stream):
        logger = get_logger("export.service")
        logger.info("export_run_started", extra={"vouchers": 3, "workers": 2})
        logger.warning("voucher_failed", extra={"index": 1, "error_code": "UNKNOWN_ACCOUNT"})

        started, failed = log_stream()
        assert started["message"] == "export_run_started"
        assert started["level"] == "INFO"
        assert started["logger"] == "finance_export.export.service"
        assert started["vouchers"] == 3
        assert "ts" in started
        assert failed["level"] == "WARNING"
        assert failed["error_code"] == "UNKNOWN_ACCOUNT"

    def test_bound_fields_are_included(self, log_stream):
        with LogContext.bind(correlation_id="run-1", producer="export"):
            with LogContext.bind(voucher_no="S-1", voucher_date="2024-04-01"):
                get_logger("test").info("voucher_transformed")

        record = log_stream()[0]
        assert record["correlation_id"] == "run-1"
        assert record["producer"] == "export"
        assert record["voucher_no"] == "S-1"
        assert record["voucher_date"] == "2024-04-01"

    def test_no_context_fields_outside_bind(self, log_stream):
        get_logger("test").info("bare_message")
        record = log_stream()[0]
        assert "correlation_id" not in record
        assert "voucher_no" not in record

    def test_export_error_attributes(self, log_stream):
        try:
            raise MalformedAliasTableError("names.csv", 3, "empty target name")
        except MalformedAliasTableError:
            get_logger("test").error("alias_table_malformed", exc_info=True)

        record = log_stream()[0]
        assert record["exc_type"] == "MalformedAliasTableError"
        assert record["exc_code"] == "MALFORMED_ALIAS_TABLE"
        assert record["exc_source"] == "names.csv"
        assert record["exc_row_number"] == 3
        assert record["exc_reason"] == "empty target name"
        assert "traceback" in record

    def test_plain_exception_has_no_code(self, log_stream):
        try:
            raise ValueError("boom")
        except ValueError:
            get_logger("test").error("failed", exc_info=True)

        record = log_stream()[0]
        assert record["exc_type"] == "ValueError"
        assert record["exc_message"] == "boom"
        assert "exc_code" not in record

    def test_non_json_values_are_rendered(self, log_stream):
        run_id = uuid4()
        get_logger("test").warning(
            "voucher_unbalanced",
            extra={
                "run": run_id,
                "leg_total": Decimal("0.10"),
                "path": Path("maps/names.csv"),
                "day": date(2024, 4, 1),
            },
        )
        record = log_stream()[0]
        assert record["run"] == str(run_id)
        assert record["leg_total"] == "0.10"
        assert record["path"] == str(Path("maps/names.csv"))
        assert record["day"] == "2024-04-01"

    def test_formatter_output_parses(self):
        formatter = StructuredFormatter()
        record = logging.LogRecord("finance_export.test", logging.INFO, __file__, 1, "ledger_skipped", (), None)
        assert json.loads(formatter.format(record))["message"] == "ledger_skipped"


# ---------------------------------------------------------------------------
# LogContext
# ---------------------------------------------------------------------------


class TestLogContext:

    def test_bind_restores_outer_fields(self):
        with LogContext.bind(correlation_id="outer"):
            with LogContext.bind(correlation_id="inner", voucher_no="J-1"):
                assert LogContext.current() == {"correlation_id": "inner", "voucher_no": "J-1"}
            assert LogContext.current() == {"correlation_id": "outer"}
        assert LogContext.current() == {}

    def test_bind_restores_after_error(self):
        with pytest.raises(UnknownAccountError):
            with LogContext.bind(voucher_no="P-1"):
                raise UnknownAccountError("Nowhere")
        assert LogContext.current() == {}

    def test_none_values_are_ignored(self):
        with LogContext.bind(voucher_no=None, voucher_date="2024-04-01"):
            assert LogContext.current() == {"voucher_date": "2024-04-01"}

    def test_unknown_field(self):
        with pytest.raises(TypeError, match="Unknown log context fields"):
            with LogContext.bind(tenant="acme"):
                pass

    def test_fields_follow_copied_context_into_threads(self):
        def read_fields():
            return LogContext.current()

        with LogContext.bind(correlation_id="run-7", producer="export"):
            with ThreadPoolExecutor(max_workers=2) as executor:
                seen = executor.submit(contextvars.copy_context().run, read_fields).result()
        assert seen == {"correlation_id": "run-7", "producer": "export"}


# ---------------------------------------------------------------------------
# configure_logging
# ---------------------------------------------------------------------------


class TestConfigureLogging:

    def test_idempotent(self, log_stream):
        configure_logging(handler=logging.StreamHandler(StringIO()))
        assert len(logging.getLogger("finance_export").handlers) == 1

    def test_level_filters_records(self):
        reset_logging()
        stream = StringIO()
        try:
            configure_logging(level=logging.WARNING, handler=logging.StreamHandler(stream))
            get_logger("export.service").info("voucher_transformed")
            get_logger("export.service").warning("voucher_failed")
            messages = [json.loads(line)["message"] for line in stream.getvalue().splitlines()]
            assert messages == ["voucher_failed"]
        finally:
            reset_logging()

    def test_get_logger_namespace(self):
        assert get_logger("db").name == "finance_export.db"
