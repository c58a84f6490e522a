"""Tests for VoucherPipeline: raw voucher + reference data -> Voucher."""

import pytest

from finance_export.domain import Account, AccountDirectory, LedgerMaster, VoucherPipeline
from finance_export.exceptions import (
    UnknownAccountError,
    UnknownAccountTypeError,
    UnknownVoucherTypeError,
)
from finance_export.mapping import AliasTable


class TestTransform:

    def test_sale(self, pipeline, make_voucher, make_leg):
        raw = make_voucher("SALE", make_leg("Cash", 118, "CASH"), make_leg("Sales Income", -118, "DIRECT_INCOME"))
        voucher = pipeline.transform(raw)
        assert voucher.voucher_type_name == "Sales"
        assert voucher.party_ledger_name == "Cash"
        assert [(e.ledger_name, e.is_deemed_positive) for e in voucher.ledger_entries] == [
            ("Cash", False),
            ("Sales Income", True),
        ]

    def test_contra_last_positive_wins(self, pipeline, make_voucher, make_leg):
        raw = make_voucher(
            "CONTRA",
            make_leg("Cash", 40, "CASH"),
            make_leg("Bank", 60, "BANK_ACCOUNT"),
            make_leg("A", -100, "CURRENT_ASSET"),
        )
        assert pipeline.transform(raw).party_ledger_name == "Bank"

    def test_account_alias_applies_to_ledger_and_party(self, directory, make_voucher, make_leg):
        aliases = AliasTable.from_pairs([("Cash", "Cash-in-hand")])
        pipeline = VoucherPipeline(directory, account_aliases=aliases)
        raw = make_voucher("SALE", make_leg("Cash", 118, "CASH"), make_leg("Sales Income", -118, "DIRECT_INCOME"))
        voucher = pipeline.transform(raw)
        assert voucher.party_ledger_name == "Cash-in-hand"
        assert voucher.ledger_names == ("Cash-in-hand", "Sales Income")

    def test_voucher_type_alias_changes_party_rules(self, directory, make_voucher, make_leg):
        aliases = AliasTable.from_pairs([("Sales", "Sales GST")])
        pipeline = VoucherPipeline(directory, voucher_type_aliases=aliases)
        raw = make_voucher("SALE", make_leg("Sales Income", -118, "DIRECT_INCOME"), make_leg("A", 118, "CURRENT_ASSET"))
        voucher = pipeline.transform(raw)
        assert voucher.voucher_type_name == "Sales GST"
        assert voucher.party_ledger_name == ""

    def test_unknown_account_id(self, pipeline, make_voucher, make_leg):
        raw = make_voucher("JOURNAL", make_leg("Nowhere", 1, "CASH"))
        with pytest.raises(UnknownAccountError) as exc_info:
            pipeline.transform(raw)
        assert exc_info.value.account_id == "Nowhere"

    def test_unknown_account_type(self, pipeline, make_voucher, make_leg):
        raw = make_voucher("JOURNAL", make_leg("Cash", 1, "BOGUS"))
        with pytest.raises(UnknownAccountTypeError):
            pipeline.transform(raw)

    def test_unknown_voucher_type(self, pipeline, make_voucher, make_leg):
        raw = make_voucher("STOCK_JOURNAL", make_leg("Cash", 1, "CASH"))
        with pytest.raises(UnknownVoucherTypeError):
            pipeline.transform(raw)

    def test_directory_name_is_used_not_id(self, make_voucher, make_leg):
        directory = AccountDirectory([Account(id="64a1", name="HDFC Bank"), Account(id="64a2", name="Rent")])
        raw = make_voucher("PAYMENT", make_leg("64a1", -900, "BANK_ACCOUNT"), make_leg("64a2", 900, "INDIRECT_EXPENSE"))
        voucher = VoucherPipeline(directory).transform(raw)
        assert voucher.party_ledger_name == "HDFC Bank"
        assert voucher.ledger_names == ("Rent", "HDFC Bank")


class TestLedgerMaster:

    def test_group_from_account_type(self, pipeline):
        account = Account(id="1", name="HDFC Bank", account_type_code="BANK_ACCOUNT")
        assert pipeline.ledger_master(account) == LedgerMaster(name="HDFC Bank", parent="Bank Account")

    def test_group_and_name_aliases(self, directory):
        pipeline = VoucherPipeline(
            directory,
            account_aliases=AliasTable.from_pairs([("Output GST", "Output IGST")]),
            account_type_aliases=AliasTable.from_pairs([("Direct Income", "Duties & Taxes")]),
        )
        account = Account(id="Output GST", name="Output GST", account_type_code="GST_PAYABLE")
        assert pipeline.ledger_master(account) == LedgerMaster(name="Output IGST", parent="Duties & Taxes")

    def test_missing_account_type(self, pipeline):
        with pytest.raises(UnknownAccountTypeError):
            pipeline.ledger_master(Account(id="1", name="Loose"))


class TestAccountDirectory:

    def test_first_account_with_an_id_wins(self):
        directory = AccountDirectory([Account(id="1", name="First"), Account(id="1", name="Second")])
        assert directory.name_of("1") == "First"
        assert len(directory) == 1

    def test_iteration_and_membership(self, directory):
        assert "Cash" in directory
        assert "Nowhere" not in directory
        assert [a.id for a in directory][:2] == ["Cash", "Bank"]
