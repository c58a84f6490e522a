"""
Typed Exception Hierarchy for the voucher export pipeline.

Every error has a TYPED exception class and a machine-readable ``code``
class attribute, and carries structured data (account id, row number, ...)
rather than only a message string. Callers catch by type, never by message.

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    FinanceExportError (base)
    |
    +-- ClassificationError
    |   +-- UnknownAccountTypeError
    |   +-- UnknownVoucherTypeError
    |
    +-- AccountDirectoryError
    |   +-- UnknownAccountError
    |
    +-- PartyResolutionError
    |   +-- NoPartyCandidateError
    |
    +-- SourceDataError
    |   +-- MalformedAliasTableError
    |   +-- MalformedSourceRecordError
    |
    +-- ConsistencyViolationError

===============================================================================
SCOPE
===============================================================================

Category        | Code                     | Scope
----------------|--------------------------|---------------------------------
Classification  | UNKNOWN_ACCOUNT_TYPE     | One voucher (or one ledger master)
                | UNKNOWN_VOUCHER_TYPE     | One voucher
Directory       | UNKNOWN_ACCOUNT          | One voucher
Party           | NO_PARTY_CANDIDATE       | One voucher
Source data     | MALFORMED_ALIAS_TABLE    | Whole run, raised at load time
                | MALFORMED_SOURCE_RECORD  | Whole run, raised at load time
Internal        | CONSISTENCY_VIOLATION    | Bug; always propagates

Per-voucher errors are collected by ExportService into VoucherOutcome
records; they never abort the run.
"""

from __future__ import annotations


class FinanceExportError(Exception):
    """
    Base exception for all export errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "FINANCE_EXPORT_ERROR"


# Classification exceptions


class ClassificationError(FinanceExportError):
    """Base exception for code classification errors."""

    code: str = "CLASSIFICATION_ERROR"


class UnknownAccountTypeError(ClassificationError):
    """Account type code is outside the closed set of known codes."""

    code: str = "UNKNOWN_ACCOUNT_TYPE"

    def __init__(self, account_type_code: str):
        self.account_type_code = account_type_code
        super().__init__(f"Unknown account type: {account_type_code!r}")


class UnknownVoucherTypeError(ClassificationError):
    """Voucher type code is outside the closed set of known codes."""

    code: str = "UNKNOWN_VOUCHER_TYPE"

    def __init__(self, voucher_type_code: str):
        self.voucher_type_code = voucher_type_code
        super().__init__(f"Unknown voucher type: {voucher_type_code!r}")


# Account directory exceptions


class AccountDirectoryError(FinanceExportError):
    """Base exception for account directory lookups."""

    code: str = "ACCOUNT_DIRECTORY_ERROR"


class UnknownAccountError(AccountDirectoryError):
    """A leg references an account id absent from the directory."""

    code: str = "UNKNOWN_ACCOUNT"

    def __init__(self, account_id: str):
        self.account_id = account_id
        super().__init__(f"Account not found in directory: {account_id}")


# Party resolution exceptions


class PartyResolutionError(FinanceExportError):
    """Base exception for party ledger selection."""

    code: str = "PARTY_RESOLUTION_ERROR"


class NoPartyCandidateError(PartyResolutionError):
    """Sales/purchase-family voucher has no receivable, payable, cash or bank leg."""

    code: str = "NO_PARTY_CANDIDATE"

    def __init__(self, voucher_type_name: str):
        self.voucher_type_name = voucher_type_name
        super().__init__(
            f"No party ledger candidate for {voucher_type_name!r} voucher"
        )


# Source data exceptions (fatal, raised at load time)


class SourceDataError(FinanceExportError):
    """Base exception for unreadable reference or source input."""

    code: str = "SOURCE_DATA_ERROR"


class MalformedAliasTableError(SourceDataError):
    """An alias table has a bad header or row."""

    code: str = "MALFORMED_ALIAS_TABLE"

    def __init__(self, source: str, row_number: int, reason: str):
        self.source = source
        self.row_number = row_number
        self.reason = reason
        super().__init__(
            f"Malformed alias table {source} at row {row_number}: {reason}"
        )


class MalformedSourceRecordError(SourceDataError):
    """A voucher or account record from a source file cannot be mapped."""

    code: str = "MALFORMED_SOURCE_RECORD"

    def __init__(self, source: str, row_number: int, reason: str):
        self.source = source
        self.row_number = row_number
        self.reason = reason
        super().__init__(
            f"Malformed source record {source} #{row_number}: {reason}"
        )


# Internal invariants


class ConsistencyViolationError(FinanceExportError):
    """An assembled voucher breaks an output invariant. Indicates a bug."""

    code: str = "CONSISTENCY_VIOLATION"

    def __init__(self, reason: str, voucher_no: str | None = None):
        self.reason = reason
        self.voucher_no = voucher_no
        where = f" (voucher {voucher_no})" if voucher_no else ""
        super().__init__(f"Consistency violation{where}: {reason}")
