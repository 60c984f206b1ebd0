from datetime import date, datetime
from types import SimpleNamespace

import pytest

from models import TransactionRecord, TransactionType
from normalizer import normalize_date, normalize_record, normalize_records, normalize_tags


def test_string_tags_are_split_and_trimmed():
    assert normalize_tags("a, b ,c") == ["a", "b", "c"]


def test_missing_tags_become_empty_list():
    assert normalize_record({"tags": None}).tags == []
    assert normalize_record({}).tags == []


def test_string_tags_keep_empty_segments():
    assert normalize_tags("a,,b") == ["a", "", "b"]
    assert normalize_tags("") == [""]


def test_list_tags_pass_through_with_duplicates():
    assert normalize_tags(["x", "x", "y"]) == ["x", "x", "y"]
    assert normalize_tags(("x",)) == ["x"]


def test_datetime_string_is_truncated_to_date():
    assert normalize_record({"date": "2024-10-03T00:00:00Z"}).date == "2024-10-03"
    assert normalize_date("2024-10-03 14:22:01+05:30") == "2024-10-03"


@pytest.mark.parametrize("value", ["", None, "not a date", "2024-13-45", 20241003])
def test_unparsable_date_becomes_empty(value):
    assert normalize_date(value) == ""


def test_date_objects_are_formatted():
    assert normalize_date(date(2024, 1, 5)) == "2024-01-05"
    assert normalize_date(datetime(2024, 1, 5, 23, 59)) == "2024-01-05"


def test_type_defaults_to_expense():
    assert normalize_record({"type": "income"}).type == TransactionType.INCOME
    assert normalize_record({"type": "INCOME"}).type == TransactionType.EXPENSE
    assert normalize_record({"type": "refund"}).type == "expense"
    assert normalize_record({}).type == "expense"


def test_blank_category_becomes_other():
    assert normalize_record({"category": ""}).category == "Other"
    assert normalize_record({"category": None}).category == "Other"
    assert normalize_record({"category": "food"}).category == "food"


def test_bad_amount_degrades_to_zero():
    assert normalize_record({"amount": "abc"}).amount == 0.0
    assert normalize_record({"amount": float("nan")}).amount == 0.0
    assert normalize_record({"amount": "12.5"}).amount == 12.5


def test_reads_attribute_rows():
    row = SimpleNamespace(
        id="abc", amount=850, description="Groceries", category="Food",
        date="2024-10-03", type="expense", tags="essentials, monthly",
    )
    record = normalize_record(row)
    assert record == TransactionRecord(
        id="abc", amount=850.0, description="Groceries", category="Food",
        date="2024-10-03", type=TransactionType.EXPENSE, tags=["essentials", "monthly"],
    )


@pytest.mark.parametrize(
    "raw",
    [
        {},
        None,
        {"tags": None, "date": "2024-10-03T10:00:00Z", "type": "income"},
        {"tags": "a, b ,c", "category": "", "amount": "9"},
        {"tags": ["x", "y"], "date": "garbage", "id": 7},
    ],
)
def test_normalize_is_idempotent(raw):
    once = normalize_record(raw)
    assert normalize_record(once) == once


def test_normalize_records_keeps_order():
    records = normalize_records([{"id": "2"}, {"id": "1"}])
    assert [r.id for r in records] == ["2", "1"]
