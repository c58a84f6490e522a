"""
Module: finance_export.models.source
Responsibility: Read models for the store's accounts, vouchers and voucher
    legs.  Legs keep separate debit and credit columns; the selector nets
    them into a signed amount.
Architecture position: Models.  Imports from models/base.py only.
"""

from __future__ import annotations

import datetime as dt
from decimal import Decimal

from sqlalchemy import ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from finance_export.models.base import Base


class StoreAccount(Base):
    """Chart of accounts entry: id, display name and account type code."""

    __tablename__ = "accounts"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    account_type: Mapped[str | None] = mapped_column(String(50), nullable=True)


class StoreVoucher(Base):
    """A posted voucher header."""

    __tablename__ = "vouchers"

    __table_args__ = (Index("idx_voucher_date", "date"),)

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    date: Mapped[dt.date] = mapped_column(nullable=False)
    voucher_type: Mapped[str] = mapped_column(String(50), nullable=False)
    voucher_no: Mapped[str | None] = mapped_column(String(100), nullable=True)
    ref_no: Mapped[str | None] = mapped_column(String(100), nullable=True)
    bill_date: Mapped[dt.date | None] = mapped_column(nullable=True)

    transactions: Mapped[list[StoreTransaction]] = relationship(
        back_populates="voucher",
        order_by="StoreTransaction.seq",
    )


class StoreTransaction(Base):
    """One account leg of a voucher."""

    __tablename__ = "voucher_transactions"

    __table_args__ = (Index("idx_voucher_transaction_voucher", "voucher_id", "seq"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    voucher_id: Mapped[str] = mapped_column(ForeignKey("vouchers.id"), nullable=False)
    seq: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    account_id: Mapped[str] = mapped_column(String(64), nullable=False)
    account_type: Mapped[str] = mapped_column(String(50), nullable=False)
    debit: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))
    credit: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))

    voucher: Mapped[StoreVoucher] = relationship(back_populates="transactions")
