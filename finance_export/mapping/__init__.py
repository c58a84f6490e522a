"""Mapping: alias tables and source record -> domain value conversion."""

from finance_export.mapping.alias_table import AliasTable
from finance_export.mapping.records import (
    account_from_record,
    load_accounts,
    load_vouchers,
    to_amount,
    voucher_from_record,
)

__all__ = [
    "AliasTable",
    "account_from_record",
    "load_accounts",
    "load_vouchers",
    "to_amount",
    "voucher_from_record",
]
