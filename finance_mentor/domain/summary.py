"""Aggregations over a transaction set"""

from collections import OrderedDict
from dataclasses import dataclass
from datetime import date
from typing import Dict, Iterable, List, Optional, Tuple

from finance_mentor.domain.models import Category, FinancialSummary, Transaction, TransactionType


def compute_summary(transactions: Iterable[Transaction], starting_balance: float = 15000.0) -> FinancialSummary:
    """
    Recompute the financial summary from scratch.

    savings_rate is a fraction (0.2 == 20%). It is 0 when there is no income
    and may be negative when expenses exceed income.
    """
    total_income = 0.0
    total_expenses = 0.0
    for txn in transactions:
        if txn.type == TransactionType.INCOME:
            total_income += txn.amount
        else:
            total_expenses += txn.amount

    savings_rate = (total_income - total_expenses) / total_income if total_income > 0 else 0.0

    return FinancialSummary(
        total_income=total_income,
        total_expenses=total_expenses,
        net_worth=starting_balance + total_income - total_expenses,
        savings_rate=savings_rate,
    )


def expense_category_totals(transactions: Iterable[Transaction]) -> Dict[Category, float]:
    """Per-category expense totals, keyed in first-encountered order"""
    totals: Dict[Category, float] = OrderedDict()
    for txn in transactions:
        if txn.type != TransactionType.EXPENSE:
            continue
        totals[txn.category] = totals.get(txn.category, 0.0) + txn.amount
    return totals


def top_expense_categories(transactions: Iterable[Transaction], limit: int = 3) -> List[Tuple[Category, float]]:
    """Largest expense categories, descending; ties keep first-encountered order"""
    totals = expense_category_totals(transactions)
    # sorted() is stable, so equal totals stay in insertion order
    ranked = sorted(totals.items(), key=lambda item: item[1], reverse=True)
    return ranked[:limit]


def month_start(day: date) -> date:
    return day.replace(day=1)


def previous_month_start(day: date) -> date:
    if day.month == 1:
        return date(day.year - 1, 12, 1)
    return date(day.year, day.month - 1, 1)


@dataclass(frozen=True)
class SpendingInsights:
    """Month-over-month and per-transaction spending statistics"""

    this_month_expenses: float
    last_month_expenses: float
    monthly_change_pct: Optional[float]
    average_expense: float
    average_income: float
    largest_expense: Optional[Transaction]
    largest_income: Optional[Transaction]


def spending_insights(transactions: Iterable[Transaction], today: Optional[date] = None) -> SpendingInsights:
    """Compare this calendar month's expenses with last month's"""
    today = today or date.today()
    this_start = month_start(today)
    last_start = previous_month_start(today)

    txns = list(transactions)
    expenses = [t for t in txns if t.type == TransactionType.EXPENSE]
    income = [t for t in txns if t.type == TransactionType.INCOME]

    this_month = sum(t.amount for t in expenses if this_start <= t.date <= today)
    last_month = sum(t.amount for t in expenses if last_start <= t.date < this_start)
    change = ((this_month - last_month) / last_month) * 100 if last_month > 0 else None

    return SpendingInsights(
        this_month_expenses=this_month,
        last_month_expenses=last_month,
        monthly_change_pct=change,
        average_expense=sum(t.amount for t in expenses) / len(expenses) if expenses else 0.0,
        average_income=sum(t.amount for t in income) / len(income) if income else 0.0,
        largest_expense=max(expenses, key=lambda t: t.amount) if expenses else None,
        largest_income=max(income, key=lambda t: t.amount) if income else None,
    )
