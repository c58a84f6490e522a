"""Tests for source record mapping and the JSON/CSV adapters."""

from decimal import Decimal
from pathlib import Path

import pytest

from finance_export.adapters import CsvSourceAdapter, JsonSourceAdapter, adapter_for_path
from finance_export.adapters.base import SOURCE_ROW_KEY
from finance_export.domain import Account, RawVoucher, Transaction
from finance_export.exceptions import MalformedSourceRecordError
from finance_export.mapping import (
    account_from_record,
    load_accounts,
    load_vouchers,
    to_amount,
    voucher_from_record,
)

SALE_RECORD = {
    "date": "2024-04-01",
    "voucherType": "SALE",
    "voucherNo": "S-1",
    "refNo": "INV-7",
    "billDate": "20240330",
    "trns": [
        {"account": "64a1", "accountType": "CASH", "amount": 118.00},
        {"account": "64a2", "accountType": "DIRECT_INCOME", "amount": -118.00},
    ],
}


class TestToAmount:

    @pytest.mark.parametrize(
        "value,expected",
        [(118, Decimal("118")), ("-118.50", Decimal("-118.50")), (Decimal("1.10"), Decimal("1.10")), (" 5 ", Decimal("5"))],
    )
    def test_accepts_numbers_and_strings(self, value, expected):
        assert to_amount(value) == expected

    @pytest.mark.parametrize("value", [None, True, "abc", "NaN", "Infinity", ""])
    def test_rejects_non_numbers(self, value):
        with pytest.raises(ValueError):
            to_amount(value)


class TestVoucherFromRecord:

    def test_maps_normalized_record(self):
        record = {
            "date": "2024-04-01",
            "vouchertype": "PAYMENT",
            "voucherno": "P-1",
            "trns": [
                {"account": "Bank", "accounttype": "BANK_ACCOUNT", "amount": Decimal("-100")},
                {"account": "Supplier", "accounttype": "TRADE_PAYABLE", "amount": "100"},
            ],
        }
        raw = voucher_from_record(record)
        assert raw == RawVoucher(
            date="2024-04-01",
            voucher_type_code="PAYMENT",
            legs=(
                Transaction("Bank", Decimal("-100"), "BANK_ACCOUNT"),
                Transaction("Supplier", Decimal("100"), "TRADE_PAYABLE"),
            ),
            voucher_no="P-1",
        )

    def test_blank_optional_fields_become_none(self):
        raw = voucher_from_record({"date": "2024-04-01", "vouchertype": "JOURNAL", "trns": [], "refno": "  "})
        assert raw.reference_no is None
        assert raw.legs == ()

    @pytest.mark.parametrize(
        "record,reason",
        [
            ({"vouchertype": "SALE", "trns": []}, "missing date"),
            ({"date": "2024-04-01", "trns": []}, "missing voucherType"),
            ({"date": "2024-04-01", "vouchertype": "SALE", "trns": {}}, "trns must be a list"),
            ({"date": "2024-04-01", "vouchertype": "SALE", "trns": [{"accounttype": "CASH", "amount": 1}]}, "leg 1 has no account"),
            ({"date": "2024-04-01", "vouchertype": "SALE", "trns": [{"account": "x", "amount": 1}]}, "leg 1 has no accountType"),
            ({"date": "2024-04-01", "vouchertype": "SALE", "trns": [{"account": "x", "accounttype": "CASH"}]}, "leg 1: not a number"),
        ],
    )
    def test_malformed_records(self, record, reason):
        record = {**record, SOURCE_ROW_KEY: 4}
        with pytest.raises(MalformedSourceRecordError) as exc_info:
            voucher_from_record(record, "vouchers.json")
        assert exc_info.value.reason == reason or exc_info.value.reason.startswith(reason)
        assert exc_info.value.row_number == 4
        assert exc_info.value.source == "vouchers.json"

    def test_unknown_codes_are_not_rejected_here(self):
        record = {"date": "2024-04-01", "vouchertype": "BOGUS", "trns": [{"account": "x", "accounttype": "BOGUS", "amount": 1}]}
        assert voucher_from_record(record).voucher_type_code == "BOGUS"


class TestAccountFromRecord:

    def test_maps_account(self):
        assert account_from_record({"id": "64a1", "name": "Cash", "accounttype": "CASH"}) == Account(
            id="64a1", name="Cash", account_type_code="CASH"
        )

    def test_account_type_is_optional(self):
        assert account_from_record({"id": "1", "name": "Cash"}).account_type_code is None

    def test_missing_name(self):
        with pytest.raises(MalformedSourceRecordError, match="missing name"):
            account_from_record({"id": "1"})


class TestLoadFromFiles:

    def test_json_array_with_camel_case_keys(self, write_json):
        path = write_json("vouchers.json", [SALE_RECORD])
        [raw] = load_vouchers(path)
        assert raw.voucher_type_code == "SALE"
        assert raw.reference_no == "INV-7"
        assert raw.reference_date == "20240330"
        assert raw.legs[0] == Transaction("64a1", Decimal("118.00"), "CASH")

    def test_float_amounts_keep_written_precision(self, tmp_path):
        path = tmp_path / "vouchers.json"
        path.write_text(
            '[{"date": "2024-04-01", "voucherType": "JOURNAL", "trns": [{"account": "a", "accountType": "CASH", "amount": 0.10}]}]',
            encoding="utf-8",
        )
        [raw] = load_vouchers(path)
        assert str(raw.legs[0].amount) == "0.10"

    def test_jsonl(self, write_json):
        path = write_json("accounts.jsonl", [
            {"id": "64a1", "name": "Cash", "accountType": "CASH"},
            {"id": "64a2", "name": "Sales", "account_type": "SALE"},
        ])
        accounts = load_accounts(path)
        assert [(a.id, a.account_type_code) for a in accounts] == [("64a1", "CASH"), ("64a2", "SALE")]

    def test_bad_record_names_file_and_position(self, write_json):
        path = write_json("vouchers.jsonl", [SALE_RECORD, {"date": "2024-04-02"}])
        with pytest.raises(MalformedSourceRecordError) as exc_info:
            load_vouchers(path)
        assert exc_info.value.row_number == 2
        assert exc_info.value.source == str(path)


class TestJsonSourceAdapter:

    def test_json_path_and_non_objects(self, tmp_path):
        path = tmp_path / "dump.json"
        path.write_text('{"data": {"records": [{"Id": 1}, 5, {"Id": 2}]}}', encoding="utf-8")
        rows = list(JsonSourceAdapter().read(path, {"json_path": "data.records"}))
        assert [r["id"] for r in rows] == [1, 2]
        assert [r[SOURCE_ROW_KEY] for r in rows] == [1, 3]

    def test_probe(self, write_json):
        path = write_json("accounts.json", [{"id": "1", "name": "a"}, {"id": "2", "accountType": "CASH"}])
        probe = JsonSourceAdapter().probe(path, {})
        assert probe.row_count == 2
        assert probe.columns == ("accounttype", "id", "name")


class TestCsvSourceAdapter:

    def test_rows_carry_line_numbers(self, write_csv):
        path = write_csv("a.csv", [["x", "y"], ["1", "2"], ["3", "4"]])
        rows = list(CsvSourceAdapter().read(path, {}))
        assert [(r["x"], r[SOURCE_ROW_KEY]) for r in rows] == [("1", 2), ("3", 3)]

    def test_probe(self, write_csv):
        path = write_csv("a.csv", [["x", "y"], ["1", "2"]])
        probe = CsvSourceAdapter().probe(path, {})
        assert probe.columns == ("x", "y")
        assert probe.row_count == 1

    def test_custom_delimiter(self, tmp_path):
        path = tmp_path / "a.csv"
        path.write_text("x;y\n1;2\n", encoding="utf-8")
        rows = list(CsvSourceAdapter().read(path, {"delimiter": ";"}))
        assert rows[0]["y"] == "2"


def test_adapter_for_path():
    assert isinstance(adapter_for_path(Path("x.JSONL")), JsonSourceAdapter)
    assert isinstance(adapter_for_path(Path("x.txt")), CsvSourceAdapter)
