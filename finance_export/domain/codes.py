"""
finance_export.domain.codes -- Closed enumerations of source-system codes.

Account-type and voucher-type codes arrive as upper-case strings from the
operational store. Each enumeration is closed: parsing a code outside the
set raises a typed classification error instead of passing it through.

Display names are the canonical names written to the import format before
alias resolution. They reproduce historical export output, including the
GST and EFT groupings that share a display name with income/sale groups.
"""

from __future__ import annotations

from enum import Enum

from finance_export.exceptions import UnknownAccountTypeError, UnknownVoucherTypeError


class AccountTypeCode(str, Enum):
    """Account type codes recognized in transaction legs and account records."""

    DIRECT_INCOME = "DIRECT_INCOME"
    INDIRECT_INCOME = "INDIRECT_INCOME"
    SALE = "SALE"
    DIRECT_EXPENSE = "DIRECT_EXPENSE"
    INDIRECT_EXPENSE = "INDIRECT_EXPENSE"
    PURCHASE = "PURCHASE"
    FIXED_ASSET = "FIXED_ASSET"
    CURRENT_ASSET = "CURRENT_ASSET"
    LONGTERM_LIABILITY = "LONGTERM_LIABILITY"
    CURRENT_LIABILITY = "CURRENT_LIABILITY"
    EQUITY = "EQUITY"
    CASH = "CASH"
    STOCK = "STOCK"
    UNDEPOSITED_FUNDS = "UNDEPOSITED_FUNDS"
    BANK_ACCOUNT = "BANK_ACCOUNT"
    BANK_OD_ACCOUNT = "BANK_OD_ACCOUNT"
    GST_PAYABLE = "GST_PAYABLE"
    GST_RECEIVABLE = "GST_RECEIVABLE"
    EFT_ACCOUNT = "EFT_ACCOUNT"
    PAYABLE = "PAYABLE"
    RECEIVABLE = "RECEIVABLE"
    ACCOUNT_PAYABLE = "ACCOUNT_PAYABLE"
    ACCOUNT_RECEIVABLE = "ACCOUNT_RECEIVABLE"
    TRADE_PAYABLE = "TRADE_PAYABLE"
    TRADE_RECEIVABLE = "TRADE_RECEIVABLE"
    BRANCH_TRANSFER = "BRANCH_TRANSFER"

    @classmethod
    def parse(cls, code: str) -> "AccountTypeCode":
        try:
            return cls(code)
        except ValueError:
            raise UnknownAccountTypeError(code) from None

    @property
    def display_name(self) -> str:
        return _ACCOUNT_TYPE_NAMES[self]


class VoucherTypeCode(str, Enum):
    """Voucher type codes recognized on source vouchers."""

    SALE = "SALE"
    CREDIT_NOTE = "CREDIT_NOTE"
    PURCHASE = "PURCHASE"
    DEBIT_NOTE = "DEBIT_NOTE"
    PAYMENT = "PAYMENT"
    RECEIPT = "RECEIPT"
    JOURNAL = "JOURNAL"
    CONTRA = "CONTRA"

    @classmethod
    def parse(cls, code: str) -> "VoucherTypeCode":
        try:
            return cls(code)
        except ValueError:
            raise UnknownVoucherTypeError(code) from None

    @property
    def display_name(self) -> str:
        return _VOUCHER_TYPE_NAMES[self]


_ACCOUNT_TYPE_NAMES: dict[AccountTypeCode, str] = {
    AccountTypeCode.DIRECT_INCOME: "Direct Income",
    AccountTypeCode.INDIRECT_INCOME: "Indirect Income",
    AccountTypeCode.SALE: "Sale",
    AccountTypeCode.DIRECT_EXPENSE: "Direct Expense",
    AccountTypeCode.INDIRECT_EXPENSE: "Indirect Expense",
    AccountTypeCode.PURCHASE: "Purchase",
    AccountTypeCode.FIXED_ASSET: "Fixed Asset",
    AccountTypeCode.CURRENT_ASSET: "Current Asset",
    AccountTypeCode.LONGTERM_LIABILITY: "LongTerm Liability",
    AccountTypeCode.CURRENT_LIABILITY: "Current Liability",
    AccountTypeCode.EQUITY: "Equity",
    AccountTypeCode.CASH: "Cash",
    AccountTypeCode.STOCK: "Stock",
    AccountTypeCode.UNDEPOSITED_FUNDS: "Undeposited Funds",
    AccountTypeCode.BANK_ACCOUNT: "Bank Account",
    AccountTypeCode.BANK_OD_ACCOUNT: "Bank OD Account",
    AccountTypeCode.GST_PAYABLE: "Direct Income",
    AccountTypeCode.GST_RECEIVABLE: "Indirect Income",
    AccountTypeCode.EFT_ACCOUNT: "Sale",
    AccountTypeCode.PAYABLE: "Payable",
    AccountTypeCode.RECEIVABLE: "Receivable",
    AccountTypeCode.ACCOUNT_PAYABLE: "Account Payable",
    AccountTypeCode.ACCOUNT_RECEIVABLE: "Account Receivable",
    AccountTypeCode.TRADE_PAYABLE: "Trade Payable",
    AccountTypeCode.TRADE_RECEIVABLE: "Trade Receivable",
    AccountTypeCode.BRANCH_TRANSFER: "Branch Transfer",
}

_VOUCHER_TYPE_NAMES: dict[VoucherTypeCode, str] = {
    VoucherTypeCode.SALE: "Sales",
    VoucherTypeCode.CREDIT_NOTE: "Credit Note",
    VoucherTypeCode.PURCHASE: "Purchase",
    VoucherTypeCode.DEBIT_NOTE: "Debit Note",
    VoucherTypeCode.PAYMENT: "Payment",
    VoucherTypeCode.RECEIPT: "Receipt",
    VoucherTypeCode.JOURNAL: "Journal",
    VoucherTypeCode.CONTRA: "Contra",
}


# Legs that can stand for the counterparty of a sales/purchase-family voucher
PARTY_ACCOUNT_TYPES: frozenset[AccountTypeCode] = frozenset({
    AccountTypeCode.TRADE_RECEIVABLE,
    AccountTypeCode.TRADE_PAYABLE,
    AccountTypeCode.ACCOUNT_RECEIVABLE,
    AccountTypeCode.ACCOUNT_PAYABLE,
    AccountTypeCode.CASH,
    AccountTypeCode.BANK_ACCOUNT,
    AccountTypeCode.BANK_OD_ACCOUNT,
    AccountTypeCode.EFT_ACCOUNT,
})

# Voucher type names as written to the output, used by the party rules
CONTRA = VoucherTypeCode.CONTRA.display_name
RECEIPT = VoucherTypeCode.RECEIPT.display_name
PAYMENT = VoucherTypeCode.PAYMENT.display_name
JOURNAL = VoucherTypeCode.JOURNAL.display_name

SALES_PURCHASE_TYPES: frozenset[str] = frozenset({
    VoucherTypeCode.SALE.display_name,
    VoucherTypeCode.PURCHASE.display_name,
    VoucherTypeCode.CREDIT_NOTE.display_name,
    VoucherTypeCode.DEBIT_NOTE.display_name,
})
