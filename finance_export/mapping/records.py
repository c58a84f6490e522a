"""
Mapping from source records (dicts from an adapter) to domain input values.

Record shape follows the store's export (keys already normalized by the JSON
adapter: lower case, no underscores):

    voucher: {date, vouchertype, voucherno?, refno?, billdate?,
              trns: [{account, amount, accounttype}, ...]}
    account: {id, name, accounttype?}

A record that cannot be mapped raises MalformedSourceRecordError. Pure apart
from the load_* helpers, which read through an adapter.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

from finance_export.adapters import adapter_for_path
from finance_export.adapters.base import SOURCE_ROW_KEY
from finance_export.domain.types import Account, RawVoucher, Transaction
from finance_export.exceptions import MalformedSourceRecordError


def _text(value: Any) -> str | None:
    if value is None:
        return None
    s = str(value).strip()
    return s or None


def to_amount(value: Any) -> Decimal:
    """Coerce a numeric or string amount to Decimal. Raises ValueError."""
    if isinstance(value, bool) or value is None:
        raise ValueError(f"not a number: {value!r}")
    if isinstance(value, Decimal):
        return value
    try:
        amount = Decimal(str(value).strip())
    except InvalidOperation:
        raise ValueError(f"not a number: {value!r}") from None
    if not amount.is_finite():
        raise ValueError(f"not a finite number: {value!r}")
    return amount


def voucher_from_record(record: dict[str, Any], source: str = "<memory>") -> RawVoucher:
    row_number = int(record.get(SOURCE_ROW_KEY, 0))

    def fail(reason: str) -> MalformedSourceRecordError:
        return MalformedSourceRecordError(source, row_number, reason)

    date = _text(record.get("date"))
    if date is None:
        raise fail("missing date")
    voucher_type = _text(record.get("vouchertype"))
    if voucher_type is None:
        raise fail("missing voucherType")
    trns = record.get("trns", record.get("legs"))
    if not isinstance(trns, list):
        raise fail("trns must be a list")

    legs: list[Transaction] = []
    for i, trn in enumerate(trns, start=1):
        if not isinstance(trn, dict):
            raise fail(f"leg {i} is not an object")
        account_id = _text(trn.get("account"))
        account_type = _text(trn.get("accounttype"))
        if account_id is None:
            raise fail(f"leg {i} has no account")
        if account_type is None:
            raise fail(f"leg {i} has no accountType")
        try:
            amount = to_amount(trn.get("amount"))
        except ValueError as e:
            raise fail(f"leg {i}: {e}") from None
        legs.append(Transaction(account_id=account_id, amount=amount, account_type_code=account_type))

    return RawVoucher(
        date=date,
        voucher_type_code=voucher_type,
        legs=tuple(legs),
        reference_no=_text(record.get("refno")),
        reference_date=_text(record.get("billdate")),
        voucher_no=_text(record.get("voucherno")),
    )


def account_from_record(record: dict[str, Any], source: str = "<memory>") -> Account:
    row_number = int(record.get(SOURCE_ROW_KEY, 0))
    account_id = _text(record.get("id"))
    name = _text(record.get("name"))
    if account_id is None:
        raise MalformedSourceRecordError(source, row_number, "missing id")
    if name is None:
        raise MalformedSourceRecordError(source, row_number, "missing name")
    return Account(id=account_id, name=name, account_type_code=_text(record.get("accounttype")))


def load_vouchers(path: Path, options: dict[str, Any] | None = None) -> list[RawVoucher]:
    adapter = adapter_for_path(path)
    return [voucher_from_record(r, str(path)) for r in adapter.read(path, options or {})]


def load_accounts(path: Path, options: dict[str, Any] | None = None) -> list[Account]:
    adapter = adapter_for_path(path)
    return [account_from_record(r, str(path)) for r in adapter.read(path, options or {})]
