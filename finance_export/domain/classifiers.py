"""
Account-type and voucher-type classification.

classify(code) parses the code against its closed enumeration, maps it to
the canonical display name, then pipes the name through an alias resolver.
Unknown codes raise UnknownAccountTypeError / UnknownVoucherTypeError;
the caller decides how far the failure reaches.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from finance_export.domain.codes import AccountTypeCode, VoucherTypeCode


@runtime_checkable
class NameResolver(Protocol):
    """Anything that rewrites a name (AliasTable)."""

    def resolve(self, name: str) -> str:
        ...


class AccountTypeClassifier:
    """Account type code -> alias-resolved group name."""

    def __init__(self, aliases: NameResolver | None = None):
        self._aliases = aliases

    def parse(self, code: str) -> AccountTypeCode:
        return AccountTypeCode.parse(code)

    def classify(self, code: str) -> str:
        name = self.parse(code).display_name
        return self._aliases.resolve(name) if self._aliases is not None else name


class VoucherTypeClassifier:
    """Voucher type code -> alias-resolved voucher type name."""

    def __init__(self, aliases: NameResolver | None = None):
        self._aliases = aliases

    def parse(self, code: str) -> VoucherTypeCode:
        return VoucherTypeCode.parse(code)

    def classify(self, code: str) -> str:
        name = self.parse(code).display_name
        return self._aliases.resolve(name) if self._aliases is not None else name
