"""Unit tests for CSV normalization and manual entry"""

import pytest
from datetime import date
from finance_mentor.domain.models import Category, TransactionType
from finance_mentor.domain.normalizer import (
    DEFAULT_DESCRIPTION,
    create_transaction,
    detect_columns,
    normalize,
    parse_amount,
    parse_date,
    parse_transactions,
)
from finance_mentor.domain.exceptions import (
    InvalidTransactionDataError,
    MalformedInputError,
    MissingRequiredColumnsError,
    NoValidRowsError,
)


BANK_EXPORT = "Date,Amount,Description\n2024-01-05,45.00,Grocery Mart\n2024-01-06,-1500,Monthly Rent"


def test_end_to_end_two_row_export():
    """Grocery and rent rows become FOOD and HOUSING expenses with positive amounts"""
    result = parse_transactions(BANK_EXPORT)

    assert result.skipped_rows == 0
    grocery, rent = result.transactions

    assert grocery.date == date(2024, 1, 5)
    assert grocery.amount == 45.00
    assert grocery.type == TransactionType.EXPENSE
    assert grocery.category == Category.FOOD

    assert rent.date == date(2024, 1, 6)
    assert rent.amount == 1500.0
    assert rent.type == TransactionType.EXPENSE
    assert rent.category == Category.HOUSING


def test_normalizing_twice_gives_same_rows():
    """Independent runs agree on everything but ids"""
    first = parse_transactions(BANK_EXPORT).transactions
    second = parse_transactions(BANK_EXPORT).transactions

    def strip_ids(txns):
        return [(t.date, t.amount, t.type, t.category, t.description) for t in txns]

    assert strip_ids(first) == strip_ids(second)


def test_ids_do_not_collide_with_existing(txn):
    existing = [txn("abc", 10.0)]
    result = parse_transactions(BANK_EXPORT, existing)

    ids = {t.id for t in result.transactions}
    assert len(ids) == 2
    assert "abc" not in ids


def test_exact_category_beats_keyword():
    raw = "Date,Amount,Description,Category\n2024-02-01,30,rent-a-car,Food & Dining"
    (row,) = parse_transactions(raw).transactions

    assert row.category == Category.FOOD
    assert row.type == TransactionType.EXPENSE


def test_credit_type_forces_income():
    raw = "Date,Amount,Description,Category,Type\n2024-02-01,25,refund,Shopping,credit"
    (row,) = parse_transactions(raw).transactions

    assert row.category == Category.INCOME
    assert row.type == TransactionType.INCOME


def test_bad_rows_are_skipped_and_counted():
    raw = (
        "Date,Amount,Description\n"
        "2024-01-05,45.00,Grocery Mart\n"
        "not-a-date,10,Coffee\n"
        "2024-01-07,abc,Nothing\n"
        "2024-01-08\n"
        "2024-01-09,0,Zero\n"
    )
    result = parse_transactions(raw)

    assert len(result.transactions) == 1
    assert result.skipped_rows == 4


def test_overflowing_amount_is_skipped():
    """Too many digits parse to inf; the row is counted as skipped"""
    raw = "Date,Amount,Description\n2024-01-05," + "9" * 400 + ",Grocery\n2024-01-06,10,Salary deposit"
    result = parse_transactions(raw)

    assert [t.amount for t in result.transactions] == [10.0]
    assert result.skipped_rows == 1


def test_missing_description_uses_default():
    raw = "Date,Amount\n2024-01-05,12.50"
    (row,) = parse_transactions(raw).transactions

    assert row.description == DEFAULT_DESCRIPTION
    assert row.category == Category.MISCELLANEOUS


def test_quoted_currency_amounts():
    raw = 'Date,Amount,Description\n01/30/2025,"$1,234.56",Amazon order'
    (row,) = parse_transactions(raw).transactions

    assert row.amount == 1234.56
    assert row.date == date(2025, 1, 30)
    assert row.category == Category.SHOPPING


@pytest.mark.parametrize("raw", ["", "Date,Amount", "\n\n  \n"])
def test_empty_input_is_malformed(raw: str):
    with pytest.raises(MalformedInputError):
        parse_transactions(raw)


def test_missing_amount_column():
    with pytest.raises(MissingRequiredColumnsError):
        parse_transactions("Date,Description\n2024-01-05,Coffee")


def test_every_row_rejected():
    with pytest.raises(NoValidRowsError):
        parse_transactions("Date,Amount\nyesterday,12\n2024-01-05,n/a")


def test_normalize_reports_error_instead_of_raising():
    result = normalize("Date,Description\n2024-01-05,Coffee")

    assert not result.success
    assert result.error.reason == "missing_required_columns"
    assert result.transactions == []


def test_detect_columns_first_match_wins():
    columns = detect_columns(["Transaction Date", "Narrative", "Debit Amount", "Credit Amount", "CR/DR"])

    assert columns == {"date": 0, "description": 1, "amount": 2, "type": 4}


@pytest.mark.parametrize(
    "raw,expected",
    [("45.00", 45.0), ("-1,500", -1500.0), ("$ 12", 12.0), ("", None), ("abc", None), ("1.2.3", None), ("9" * 400, None)],
)
def test_parse_amount(raw, expected):
    assert parse_amount(raw) == expected


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("2024-01-05", date(2024, 1, 5)),
        ("2024-01-05T10:30:00", date(2024, 1, 5)),
        ("01/30/2025", date(2025, 1, 30)),
        ("Jan 30, 2025", date(2025, 1, 30)),
        ("30.01.2025", date(2025, 1, 30)),
        ("2024-02-30", None),
        ("", None),
    ],
)
def test_parse_date(raw, expected):
    assert parse_date(raw) == expected


def test_create_transaction_manual_entry():
    txn = create_transaction(date(2025, 3, 1), 42.5, TransactionType.EXPENSE, Category.FOOD, "  Lunch  ")

    assert txn.amount == 42.5
    assert txn.description == "Lunch"
    assert txn.id


def test_create_transaction_rejects_non_positive_amount():
    with pytest.raises(InvalidTransactionDataError):
        create_transaction(date(2025, 3, 1), 0, TransactionType.EXPENSE, Category.FOOD, "Lunch")


def test_create_transaction_rejects_inconsistent_type():
    with pytest.raises(InvalidTransactionDataError):
        create_transaction(date(2025, 3, 1), 10, TransactionType.EXPENSE, Category.INCOME, "Salary")


@pytest.mark.parametrize("amount", [float("inf"), float("nan")])
def test_create_transaction_rejects_non_finite_amount(amount):
    with pytest.raises(InvalidTransactionDataError):
        create_transaction(date(2025, 3, 1), amount, TransactionType.EXPENSE, Category.FOOD, "Lunch")
