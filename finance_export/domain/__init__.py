"""
finance_export.domain -- Pure types and transformation rules.

ZERO I/O. Nothing here reads files, talks to the store or logs.
"""

from finance_export.domain.assembler import (
    assemble_document,
    assemble_ledger_master,
    assemble_voucher,
    check_voucher,
    sort_ledger_entries,
)
from finance_export.domain.classifiers import (
    AccountTypeClassifier,
    NameResolver,
    VoucherTypeClassifier,
)
from finance_export.domain.codes import (
    PARTY_ACCOUNT_TYPES,
    SALES_PURCHASE_TYPES,
    AccountTypeCode,
    VoucherTypeCode,
)
from finance_export.domain.ledger import build_ledger_entry
from finance_export.domain.party import party_candidates, resolve_party_ledger
from finance_export.domain.pipeline import VoucherPipeline
from finance_export.domain.types import (
    Account,
    AccountDirectory,
    AliasEntry,
    ClassifiedLeg,
    ExportDocument,
    LedgerEntry,
    LedgerMaster,
    RawVoucher,
    Transaction,
    Voucher,
)

__all__ = [
    "Account",
    "AccountDirectory",
    "AccountTypeClassifier",
    "AccountTypeCode",
    "AliasEntry",
    "ClassifiedLeg",
    "ExportDocument",
    "LedgerEntry",
    "LedgerMaster",
    "NameResolver",
    "PARTY_ACCOUNT_TYPES",
    "RawVoucher",
    "SALES_PURCHASE_TYPES",
    "Transaction",
    "Voucher",
    "VoucherPipeline",
    "VoucherTypeClassifier",
    "VoucherTypeCode",
    "assemble_document",
    "assemble_ledger_master",
    "assemble_voucher",
    "build_ledger_entry",
    "check_voucher",
    "party_candidates",
    "resolve_party_ledger",
    "sort_ledger_entries",
]
