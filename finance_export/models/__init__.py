"""ORM models for the operational data store the export reads from."""

from finance_export.models.base import Base
from finance_export.models.source import StoreAccount, StoreTransaction, StoreVoucher

__all__ = ["Base", "StoreAccount", "StoreTransaction", "StoreVoucher"]
