"""
Module: finance_export.models.base
Responsibility: Declarative base for the store's ORM models.  Provides a
    type annotation map so monetary columns are always Numeric, never float.
Architecture position: Models.  MUST NOT import from selectors/, services/
    or domain/.
"""

from datetime import date
from decimal import Decimal
from typing import ClassVar

from sqlalchemy import Date, Numeric
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """
    Declarative base for all store models.

    Guarantees:
        - Decimal maps to Numeric(38, 9) -- financial-grade precision.
        - date maps to Date.
    """

    type_annotation_map: ClassVar[dict] = {
        Decimal: Numeric(38, 9),
        date: Date(),
    }
