"""Unit tests for summaries, spending statistics and the transaction set"""

import math
import pytest
from datetime import date
from finance_mentor.domain.exceptions import NotFoundError
from finance_mentor.domain.models import Category, TransactionType
from finance_mentor.domain.summary import (
    compute_summary,
    previous_month_start,
    spending_insights,
    top_expense_categories,
)
from finance_mentor.domain.transaction_set import TransactionSet


def test_summary_totals(sample_transactions):
    summary = compute_summary(sample_transactions)

    assert summary.total_income == 12800.0
    assert summary.total_expenses == 3000.0 + 8 * 120.0
    assert summary.net_worth == 15000.0 + 12800.0 - 3960.0
    assert summary.savings_rate == pytest.approx((12800.0 - 3960.0) / 12800.0)


def test_summary_without_income_has_zero_rate(txn):
    summary = compute_summary([txn("a", 50.0)], starting_balance=0.0)

    assert summary.savings_rate == 0.0
    assert not math.isnan(summary.savings_rate)
    assert summary.net_worth == -50.0


def test_summary_of_empty_set():
    summary = compute_summary([])

    assert summary.total_income == 0.0
    assert summary.total_expenses == 0.0
    assert summary.savings_rate == 0.0
    assert summary.net_worth == 15000.0


def test_overspending_gives_negative_rate(txn):
    summary = compute_summary([txn("i", 1000.0, Category.INCOME), txn("e", 1500.0)])
    assert summary.savings_rate == pytest.approx(-0.5)


def test_top_categories_ties_keep_first_seen(txn):
    transactions = [
        txn("1", 50.0, Category.SHOPPING),
        txn("2", 80.0, Category.FOOD),
        txn("3", 50.0, Category.HEALTH),
        txn("4", 10.0, Category.UTILITIES),
    ]

    top = top_expense_categories(transactions)

    assert top == [(Category.FOOD, 80.0), (Category.SHOPPING, 50.0), (Category.HEALTH, 50.0)]


def test_previous_month_start_wraps_year():
    assert previous_month_start(date(2025, 1, 20)) == date(2024, 12, 1)
    assert previous_month_start(date(2025, 3, 31)) == date(2025, 2, 1)


def test_spending_insights_month_over_month(txn, today):
    transactions = [
        txn("this", 150.0, Category.FOOD, days_ago=5),  # March 10
        txn("last", 100.0, Category.FOOD, days_ago=25),  # Feb 18
        txn("pay", 2000.0, Category.INCOME, days_ago=1),
    ]

    stats = spending_insights(transactions, today=today)

    assert stats.this_month_expenses == 150.0
    assert stats.last_month_expenses == 100.0
    assert stats.monthly_change_pct == pytest.approx(50.0)
    assert stats.average_expense == 125.0
    assert stats.largest_expense.id == "this"
    assert stats.largest_income.id == "pay"


def test_spending_insights_without_last_month(txn, today):
    stats = spending_insights([txn("this", 150.0, days_ago=1)], today=today)
    assert stats.monthly_change_pct is None


class TestTransactionSet:
    def test_newest_first(self, txn):
        txns = TransactionSet([txn("old", 1.0, days_ago=10), txn("new", 2.0, days_ago=1)])
        assert [t.id for t in txns] == ["new", "old"]

    def test_add_returns_new_set(self, txn):
        original = TransactionSet([txn("a", 1.0)])
        updated = original.add(txn("b", 2.0))

        assert len(original) == 1
        assert len(updated) == 2
        assert "b" in updated
        assert "b" not in original

    def test_remove(self, txn):
        txns = TransactionSet([txn("a", 1.0), txn("b", 2.0)])
        assert [t.id for t in txns.remove("a")] == ["b"]

    def test_remove_unknown_id(self):
        with pytest.raises(NotFoundError):
            TransactionSet().remove("missing")

    def test_replace(self, txn):
        txns = TransactionSet([txn("a", 1.0)])
        replaced = txns.replace("a", txn("a2", 5.0))

        assert replaced.get("a2").amount == 5.0
        assert "a" not in replaced

    def test_filters(self, sample_transactions, today):
        txns = TransactionSet(sample_transactions)

        assert len(txns.filter(txn_type=TransactionType.INCOME)) == 4
        assert len(txns.filter(category=Category.HOUSING)) == 2
        assert len(txns.filter(search="mart")) == 8
        assert len(txns.filter(search="housing")) == 2
        assert len(txns.filter(min_amount=1000, max_amount=2000)) == 2
        assert len(txns.filter(days=7, today=today)) == 3  # salary day 2, groceries days 0 and 7

    def test_filter_date_bounds(self, sample_transactions):
        txns = TransactionSet(sample_transactions)
        selected = txns.filter(start=date(2025, 3, 1), end=date(2025, 3, 14))

        assert {t.id for t in selected} == {"salary_0", "rent_0", "grocery_1", "grocery_2"}
