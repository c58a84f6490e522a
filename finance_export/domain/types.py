"""
finance_export.domain.types -- Pure frozen dataclasses for the export pipeline.

ZERO I/O. Input values (Account, Transaction, RawVoucher) are created fresh
per export run from source records; output values (LedgerEntry, Voucher,
LedgerMaster, ExportDocument) are handed to the serialization layer.

Amount sign convention on input legs: positive = credit, negative = debit
(net of credit - debit).
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from decimal import Decimal
from types import MappingProxyType
from typing import Any

from finance_export.domain.codes import AccountTypeCode
from finance_export.exceptions import UnknownAccountError


# =============================================================================
# Reference data
# =============================================================================


@dataclass(frozen=True)
class AliasEntry:
    """One alias row: source-system name -> destination-system name."""

    source_name: str
    target_name: str


@dataclass(frozen=True)
class Account:
    """Account directory entry. account_type_code is only needed for ledger masters."""

    id: str
    name: str
    account_type_code: str | None = None


class AccountDirectory:
    """Read-only id -> Account map shared by every voucher of one run."""

    def __init__(self, accounts: Iterable[Account]):
        by_id: dict[str, Account] = {}
        for account in accounts:
            by_id.setdefault(account.id, account)
        self._by_id: Mapping[str, Account] = MappingProxyType(by_id)

    def __len__(self) -> int:
        return len(self._by_id)

    def __iter__(self):
        return iter(self._by_id.values())

    def __contains__(self, account_id: object) -> bool:
        return account_id in self._by_id

    def get(self, account_id: str) -> Account:
        try:
            return self._by_id[account_id]
        except KeyError:
            raise UnknownAccountError(account_id) from None

    def name_of(self, account_id: str) -> str:
        return self.get(account_id).name


# =============================================================================
# Input records
# =============================================================================


@dataclass(frozen=True)
class Transaction:
    """One debit/credit leg of a source voucher."""

    account_id: str
    amount: Decimal
    account_type_code: str


@dataclass(frozen=True)
class RawVoucher:
    """Source voucher: the unit of work. One RawVoucher yields one Voucher."""

    date: str
    voucher_type_code: str
    legs: tuple[Transaction, ...] = ()
    reference_no: str | None = None
    reference_date: str | None = None
    voucher_no: str | None = None

    @property
    def leg_total(self) -> Decimal:
        """Sum of leg amounts; zero for a balanced double-entry voucher."""
        return sum((leg.amount for leg in self.legs), Decimal("0"))


# =============================================================================
# Output records
# =============================================================================


@dataclass(frozen=True)
class LedgerEntry:
    """A ledger line as written to the import format."""

    ledger_name: str
    is_deemed_positive: bool
    amount: Decimal

    def to_dict(self) -> dict[str, Any]:
        return {
            "ledger_name": self.ledger_name,
            "is_deemed_positive": "Yes" if self.is_deemed_positive else "No",
            "amount": self.amount,
        }


@dataclass(frozen=True)
class ClassifiedLeg:
    """A built ledger entry paired with the parsed account type of its leg."""

    entry: LedgerEntry
    account_type: AccountTypeCode


@dataclass(frozen=True)
class Voucher:
    """Output voucher. Field order of to_dict() is significant."""

    date: str
    voucher_type_name: str
    party_ledger_name: str
    ledger_entries: tuple[LedgerEntry, ...] = ()
    reference_no: str | None = None
    reference_date: str | None = None
    voucher_no: str | None = None

    message_key = "voucher"

    @property
    def ledger_names(self) -> tuple[str, ...]:
        return tuple(e.ledger_name for e in self.ledger_entries)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"date": self.date}
        if self.reference_no is not None:
            data["reference"] = self.reference_no
        if self.reference_date is not None:
            data["reference_date"] = self.reference_date
        data["voucher_type_name"] = self.voucher_type_name
        data["party_ledger_name"] = self.party_ledger_name
        if self.voucher_no is not None:
            data["voucher_number"] = self.voucher_no
        data["ledger_entries"] = [e.to_dict() for e in self.ledger_entries]
        return data


@dataclass(frozen=True)
class LedgerMaster:
    """Ledger master record: an account under its (alias-resolved) group."""

    name: str
    parent: str

    message_key = "ledger"

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "parent": self.parent,
            "language_name": {"name": self.name},
        }


@dataclass(frozen=True)
class ExportDocument:
    """
    Fixed four-level wrapper around the ordered output records.

    envelope -> body -> import_data -> request_data -> [{voucher: [Voucher]}, ...]
    """

    items: tuple[Voucher | LedgerMaster, ...] = field(default_factory=tuple)

    @property
    def vouchers(self) -> tuple[Voucher, ...]:
        return tuple(i for i in self.items if isinstance(i, Voucher))

    def request_data(self) -> list[dict[str, Any]]:
        return [{item.message_key: [item.to_dict()]} for item in self.items]

    def to_dict(self) -> dict[str, Any]:
        return {
            "envelope": {
                "body": {
                    "import_data": {
                        "request_data": self.request_data(),
                    },
                },
            },
        }
