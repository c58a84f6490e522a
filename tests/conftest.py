"""
Pytest fixtures for the voucher export test suite.

Provides:
- Structured logging setup and log capture
- A small account directory and voucher builders
- In-memory SQLite sessions for the store selectors
- Helpers for writing alias table files
"""

import csv
import json
import logging
from decimal import Decimal
from io import StringIO
from pathlib import Path

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from finance_export.domain import (
    Account,
    AccountDirectory,
    RawVoucher,
    Transaction,
    VoucherPipeline,
)
from finance_export.logging_config import (
    StructuredFormatter,
    configure_logging,
    reset_logging,
)
from finance_export.models import Base


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture
def captured_logs():
    """
    Capture finance_export logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs, service):
            service.export_vouchers(...)
            logs = captured_logs()
            assert any(r["message"] == "export_run_completed" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("finance_export")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Reference data
# =============================================================================


@pytest.fixture
def accounts() -> list[Account]:
    """Account directory used by most tests; ids equal names for readability."""
    return [
        Account(id="Cash", name="Cash", account_type_code="CASH"),
        Account(id="Bank", name="Bank", account_type_code="BANK_ACCOUNT"),
        Account(id="Sales Income", name="Sales Income", account_type_code="DIRECT_INCOME"),
        Account(id="Supplier", name="Supplier", account_type_code="TRADE_PAYABLE"),
        Account(id="Customer", name="Customer", account_type_code="TRADE_RECEIVABLE"),
        Account(id="Purchases", name="Purchases", account_type_code="PURCHASE"),
        Account(id="Output GST", name="Output GST", account_type_code="GST_PAYABLE"),
        Account(id="A", name="A", account_type_code="CURRENT_ASSET"),
        Account(id="B", name="B", account_type_code="CURRENT_LIABILITY"),
    ]


@pytest.fixture
def directory(accounts) -> AccountDirectory:
    return AccountDirectory(accounts)


@pytest.fixture
def pipeline(directory) -> VoucherPipeline:
    return VoucherPipeline(directory)


def leg(account_id: str, amount, account_type: str) -> Transaction:
    return Transaction(account_id=account_id, amount=Decimal(str(amount)), account_type_code=account_type)


def voucher(voucher_type: str, *legs: Transaction, date: str = "2024-04-01", **kwargs) -> RawVoucher:
    return RawVoucher(date=date, voucher_type_code=voucher_type, legs=tuple(legs), **kwargs)


@pytest.fixture
def make_leg():
    """Build a Transaction: make_leg("Cash", 118, "CASH")."""
    return leg


@pytest.fixture
def make_voucher():
    """Build a RawVoucher: make_voucher("SALE", leg1, leg2, voucher_no="S-1")."""
    return voucher


# =============================================================================
# Store (SQLite in memory)
# =============================================================================


@pytest.fixture
def store_session() -> Session:
    """Fresh in-memory store with the export's tables created."""
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)
    factory = sessionmaker(bind=engine, expire_on_commit=False)
    session = factory()
    yield session
    session.close()
    engine.dispose()


# =============================================================================
# Files
# =============================================================================


@pytest.fixture
def write_csv(tmp_path):
    """Write rows to a CSV file under tmp_path and return its path."""

    def _write(name: str, rows: list[list[str]]) -> Path:
        path = tmp_path / name
        with path.open("w", encoding="utf-8", newline="") as f:
            csv.writer(f).writerows(rows)
        return path

    return _write


@pytest.fixture
def write_json(tmp_path):
    """Write a JSON document (or JSON Lines for .jsonl) under tmp_path."""

    def _write(name: str, records: list[dict]) -> Path:
        path = tmp_path / name
        if path.suffix == ".jsonl":
            path.write_text("".join(json.dumps(r) + "\n" for r in records), encoding="utf-8")
        else:
            path.write_text(json.dumps(records), encoding="utf-8")
        return path

    return _write
