"""Unit tests for category and type resolution"""

import pytest
from finance_mentor.domain import categorizer
from finance_mentor.domain.models import Category, TransactionType


def test_exact_label_beats_keyword():
    assert categorizer.resolve("Food & Dining", "", "rent-a-car") == (Category.FOOD, TransactionType.EXPENSE)


def test_income_marker_overrides_category():
    assert categorizer.resolve("Shopping", "credit", "refund") == (Category.INCOME, TransactionType.INCOME)


@pytest.mark.parametrize("marker", ["income", "CREDIT", " cr "])
def test_income_markers_are_case_insensitive(marker: str):
    _, txn_type = categorizer.resolve("", marker, "Something")
    assert txn_type == TransactionType.INCOME


def test_income_category_always_income_type():
    assert categorizer.resolve("income", "debit", "Bonus") == (Category.INCOME, TransactionType.INCOME)


@pytest.mark.parametrize(
    "description,expected",
    [
        ("Whole Foods", Category.FOOD),
        ("Apartment rent", Category.HOUSING),
        ("ACME PAYROLL", Category.INCOME),
        ("Uber trip", Category.TRANSPORT),
        ("City Water Dept", Category.UTILITIES),
        ("Netflix.com", Category.ENTERTAINMENT),
        ("CVS Pharmacy", Category.HEALTH),
        ("Walmart Store", Category.FOOD),  # "mart" is checked before "store"
        ("Coffee", Category.MISCELLANEOUS),
    ],
)
def test_keyword_rules_in_order(description: str, expected: Category):
    assert categorizer.guess_category(description) == expected


def test_keyword_income_sets_income_type():
    assert categorizer.resolve(None, None, "Direct Deposit") == (Category.INCOME, TransactionType.INCOME)


def test_unknown_label_falls_back_to_keywords():
    assert categorizer.resolve("Groceries", "", "grocery run") == (Category.FOOD, TransactionType.EXPENSE)


def test_every_category_has_a_bucket():
    buckets = {categorizer.budget_bucket(c) for c in Category}
    assert buckets == {categorizer.NEEDS, categorizer.WANTS, categorizer.SAVINGS}


def test_bucket_assignment():
    assert categorizer.budget_bucket(Category.HOUSING) == categorizer.NEEDS
    assert categorizer.budget_bucket(Category.SHOPPING) == categorizer.WANTS
    assert categorizer.budget_bucket(Category.INVESTMENT) == categorizer.SAVINGS
