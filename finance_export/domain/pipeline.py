"""
Per-voucher transformation: RawVoucher -> Voucher.

    raw voucher + account directory
      -> VoucherTypeClassifier / AccountTypeClassifier (alias-resolved)
      -> build_ledger_entry
      -> resolve_party_ledger
      -> assemble_voucher

Pure and synchronous. Reference data is read-only, so one VoucherPipeline
can be shared by any number of threads. Errors raised here belong to the
voucher being transformed.
"""

from __future__ import annotations

from finance_export.domain.assembler import assemble_ledger_master, assemble_voucher
from finance_export.domain.classifiers import (
    AccountTypeClassifier,
    NameResolver,
    VoucherTypeClassifier,
)
from finance_export.domain.ledger import build_ledger_entry
from finance_export.domain.types import (
    Account,
    AccountDirectory,
    ClassifiedLeg,
    LedgerMaster,
    RawVoucher,
    Voucher,
)


class _Identity:
    def resolve(self, name: str) -> str:
        return name


class VoucherPipeline:
    """Transforms raw vouchers and accounts using one run's reference data."""

    def __init__(
        self,
        directory: AccountDirectory,
        account_aliases: NameResolver | None = None,
        voucher_type_aliases: NameResolver | None = None,
        account_type_aliases: NameResolver | None = None,
    ):
        self._directory = directory
        self._account_aliases = account_aliases or _Identity()
        self._voucher_types = VoucherTypeClassifier(voucher_type_aliases)
        self._account_types = AccountTypeClassifier(account_type_aliases)

    @property
    def directory(self) -> AccountDirectory:
        return self._directory

    def ledger_name(self, account_id: str) -> str:
        """Directory name of an account, rewritten through the account alias table."""
        return self._account_aliases.resolve(self._directory.name_of(account_id))

    def classify_legs(self, raw: RawVoucher) -> list[ClassifiedLeg]:
        legs: list[ClassifiedLeg] = []
        for trn in raw.legs:
            account_type = self._account_types.parse(trn.account_type_code)
            entry = build_ledger_entry(self.ledger_name(trn.account_id), trn.amount)
            legs.append(ClassifiedLeg(entry=entry, account_type=account_type))
        return legs

    def transform(self, raw: RawVoucher) -> Voucher:
        voucher_type_name = self._voucher_types.classify(raw.voucher_type_code)
        return assemble_voucher(raw, voucher_type_name, self.classify_legs(raw))

    def ledger_master(self, account: Account) -> LedgerMaster:
        """Ledger master for an account; its account type code must be set."""
        group = self._account_types.classify(account.account_type_code or "")
        return assemble_ledger_master(self._account_aliases.resolve(account.name), group)
