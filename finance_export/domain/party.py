"""
Party ledger selection.

Picks the single ledger entry that stands for the counterparty of a voucher.
Rules, in the order they are applied (a later rule overwrites an earlier
selection):

    1. Contra / Receipt  -- last leg with a strictly positive amount.
    2. Payment           -- last leg with a strictly negative amount.
    3. Journal           -- first leg, whatever its amount or type.
    4. Sales / Purchase / Credit Note / Debit Note
                         -- among legs whose account type is receivable,
                            payable, cash, bank or EFT, the one with the
                            largest absolute amount; ties keep leg order.
                            No such leg -> NoPartyCandidateError.
    5. Anything else     -- no party (empty name).

Rules 1 and 2 are a single fold over the legs in source order, so the last
qualifying leg wins. The selection always runs on legs in source order,
before any display sort.
"""

from __future__ import annotations

from collections.abc import Sequence
from decimal import Decimal

from finance_export.domain.codes import (
    CONTRA,
    JOURNAL,
    PARTY_ACCOUNT_TYPES,
    PAYMENT,
    RECEIPT,
    SALES_PURCHASE_TYPES,
)
from finance_export.domain.types import ClassifiedLeg
from finance_export.exceptions import NoPartyCandidateError

_CREDIT_PARTY_TYPES = frozenset({CONTRA, RECEIPT})
_DEBIT_PARTY_TYPES = frozenset({PAYMENT})


def party_candidates(legs: Sequence[ClassifiedLeg]) -> list[tuple[Decimal, str]]:
    """(absolute amount, ledger name) of party-like legs, largest first, stable."""
    candidates = [
        (abs(leg.entry.amount), leg.entry.ledger_name)
        for leg in legs
        if leg.account_type in PARTY_ACCOUNT_TYPES
    ]
    return sorted(candidates, key=lambda c: c[0], reverse=True)


def resolve_party_ledger(voucher_type_name: str, legs: Sequence[ClassifiedLeg]) -> str:
    """Return the party ledger name for a voucher, or "" when no rule applies."""
    party = ""
    for leg in legs:
        amount = leg.entry.amount
        if voucher_type_name in _CREDIT_PARTY_TYPES and amount > 0:
            party = leg.entry.ledger_name
        if voucher_type_name in _DEBIT_PARTY_TYPES and amount < 0:
            party = leg.entry.ledger_name

    if voucher_type_name == JOURNAL and legs:
        party = legs[0].entry.ledger_name

    if voucher_type_name in SALES_PURCHASE_TYPES:
        candidates = party_candidates(legs)
        if not candidates:
            raise NoPartyCandidateError(voucher_type_name)
        party = candidates[0][1]

    return party
