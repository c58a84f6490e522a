"""
Voucher and document assembly.

assemble_voucher() resolves the party on legs in source order, then sorts
the ledger entries by amount descending for display (Journal vouchers keep
source order). assemble_document() wraps the ordered records without
touching their content, after checking each voucher's invariants.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from finance_export.domain.codes import JOURNAL
from finance_export.domain.party import resolve_party_ledger
from finance_export.domain.types import (
    ClassifiedLeg,
    ExportDocument,
    LedgerEntry,
    LedgerMaster,
    RawVoucher,
    Voucher,
)
from finance_export.exceptions import ConsistencyViolationError


def sort_ledger_entries(
    voucher_type_name: str,
    entries: Sequence[LedgerEntry],
) -> tuple[LedgerEntry, ...]:
    """Amount descending (stable); Journal entries keep their order."""
    if voucher_type_name == JOURNAL:
        return tuple(entries)
    return tuple(sorted(entries, key=lambda e: e.amount, reverse=True))


def assemble_voucher(
    raw: RawVoucher,
    voucher_type_name: str,
    legs: Sequence[ClassifiedLeg],
) -> Voucher:
    """Build the output voucher from a raw voucher and its classified legs."""
    party_ledger_name = resolve_party_ledger(voucher_type_name, legs)
    entries = sort_ledger_entries(voucher_type_name, [leg.entry for leg in legs])
    return Voucher(
        date=raw.date,
        voucher_type_name=voucher_type_name,
        party_ledger_name=party_ledger_name,
        ledger_entries=entries,
        reference_no=raw.reference_no,
        reference_date=raw.reference_date,
        voucher_no=raw.voucher_no,
    )


def check_voucher(voucher: Voucher) -> None:
    """Raise ConsistencyViolationError if the voucher breaks an output invariant."""
    names = voucher.ledger_names
    if voucher.party_ledger_name and voucher.party_ledger_name not in names:
        raise ConsistencyViolationError(
            f"party ledger {voucher.party_ledger_name!r} is not among the ledger entries",
            voucher_no=voucher.voucher_no,
        )
    for entry in voucher.ledger_entries:
        if entry.is_deemed_positive != (entry.amount < 0):
            raise ConsistencyViolationError(
                f"deemed-positive flag of {entry.ledger_name!r} contradicts amount {entry.amount}",
                voucher_no=voucher.voucher_no,
            )
    if voucher.voucher_type_name != JOURNAL:
        amounts = [e.amount for e in voucher.ledger_entries]
        if any(a < b for a, b in zip(amounts, amounts[1:])):
            raise ConsistencyViolationError(
                "ledger entries are not sorted by amount descending",
                voucher_no=voucher.voucher_no,
            )


def assemble_document(items: Iterable[Voucher | LedgerMaster]) -> ExportDocument:
    """Wrap records into the envelope/body nesting, preserving order."""
    records = tuple(items)
    for item in records:
        if isinstance(item, Voucher):
            check_voucher(item)
    return ExportDocument(items=records)


def assemble_ledger_master(account_name: str, group_name: str) -> LedgerMaster:
    return LedgerMaster(name=account_name, parent=group_name)
