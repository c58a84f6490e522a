"""Read-only selectors over the operational store."""

from finance_export.selectors.voucher_selector import VoucherSelector

__all__ = ["VoucherSelector"]
