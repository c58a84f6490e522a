"""Ledger entry construction. Pure."""

from __future__ import annotations

from decimal import Decimal

from finance_export.domain.types import LedgerEntry


def build_ledger_entry(ledger_name: str, amount: Decimal) -> LedgerEntry:
    """Build a ledger entry; debits (negative amounts) are deemed positive."""
    return LedgerEntry(
        ledger_name=ledger_name,
        is_deemed_positive=amount < 0,
        amount=amount,
    )
