"""Services: export runs over the voucher pipeline."""

from finance_export.services.export_service import (
    ExportFailure,
    ExportRunResult,
    ExportService,
    LedgerOutcome,
    RunSummary,
    VoucherOutcome,
    load_alias_table,
)

__all__ = [
    "ExportFailure",
    "ExportRunResult",
    "ExportService",
    "LedgerOutcome",
    "RunSummary",
    "VoucherOutcome",
    "load_alias_table",
]
