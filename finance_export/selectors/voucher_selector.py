"""
Module: finance_export.selectors.voucher_selector
Responsibility: Read accounts and vouchers from the store and return them as
    domain input values (Account, RawVoucher).
Architecture position: Selectors.  May import from models/ and domain types.
    Selectors NEVER create, modify, or delete data.

Behavior:
    - Vouchers with from_date <= date <= to_date, ordered by date then id.
    - Legs in sequence order; amount = credit - debit.
    - STOCK legs are dropped: inventory movements are not exported.
    - Dates are rendered with the caller's strftime formats.
"""

from __future__ import annotations

from datetime import date

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from finance_export.domain.codes import AccountTypeCode
from finance_export.domain.types import Account, RawVoucher, Transaction
from finance_export.models.source import StoreAccount, StoreVoucher

DEFAULT_DATE_FORMAT = "%Y-%m-%d"
DEFAULT_REFERENCE_DATE_FORMAT = "%Y%m%d"

_EXCLUDED_LEG_TYPES = frozenset({AccountTypeCode.STOCK.value})


class VoucherSelector:
    """Read-only queries for the export. The caller owns the session."""

    def __init__(self, session: Session):
        self.session = session

    def list_accounts(self) -> list[Account]:
        rows = self.session.scalars(select(StoreAccount).order_by(StoreAccount.id)).all()
        return [
            Account(id=row.id, name=row.name, account_type_code=row.account_type)
            for row in rows
        ]

    def list_vouchers(
        self,
        from_date: date,
        to_date: date,
        date_format: str = DEFAULT_DATE_FORMAT,
        reference_date_format: str = DEFAULT_REFERENCE_DATE_FORMAT,
    ) -> list[RawVoucher]:
        stmt = (
            select(StoreVoucher)
            .where(StoreVoucher.date >= from_date, StoreVoucher.date <= to_date)
            .order_by(StoreVoucher.date, StoreVoucher.id)
            .options(selectinload(StoreVoucher.transactions))
        )
        vouchers: list[RawVoucher] = []
        for row in self.session.scalars(stmt).all():
            legs = tuple(
                Transaction(
                    account_id=trn.account_id,
                    amount=trn.credit - trn.debit,
                    account_type_code=trn.account_type,
                )
                for trn in row.transactions
                if trn.account_type not in _EXCLUDED_LEG_TYPES
            )
            vouchers.append(
                RawVoucher(
                    date=row.date.strftime(date_format),
                    voucher_type_code=row.voucher_type,
                    legs=legs,
                    reference_no=row.ref_no,
                    reference_date=(
                        row.bill_date.strftime(reference_date_format) if row.bill_date else None
                    ),
                    voucher_no=row.voucher_no,
                )
            )
        return vouchers
