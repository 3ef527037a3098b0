"""Health scoring engine - score, status tier and insights from a transaction set"""

import math
from typing import Iterable, List, Optional, Tuple

from finance_mentor.domain.models import (
    Category,
    FinancialSummary,
    HealthScore,
    HealthStatus,
    Transaction,
    TransactionType,
)
from finance_mentor.domain.summary import expense_category_totals

LOW_SAVINGS_RATE = 0.10
TARGET_SAVINGS_RATE = 0.20
CONCENTRATION_THRESHOLD = 0.40

LOW_SAVINGS_PENALTY = 30
BELOW_TARGET_PENALTY = 15
CONCENTRATION_PENALTY = 20

DEFAULT_INSIGHTS = (
    "Your finances look balanced. Keep up the good work!",
    "Consider setting up automatic savings transfers.",
    "Review your budget monthly to stay on track.",
)


def dominant_expense_category(transactions: Iterable[Transaction]) -> Tuple[Optional[Category], float]:
    """
    Largest expense category and its share of total expenses.

    Returns (None, 0.0) when there are no expenses.
    """
    totals = expense_category_totals(transactions)
    total_expenses = sum(totals.values())
    if total_expenses <= 0:
        return None, 0.0

    # max() returns the first of equal totals, matching first-encountered order
    category, amount = max(totals.items(), key=lambda item: item[1])
    return category, amount / total_expenses


def concentration_insight(transactions: Iterable[Transaction]) -> Optional[str]:
    """Flag a single category taking more than 40% of spending"""
    category, share = dominant_expense_category(transactions)
    if category is None or share <= CONCENTRATION_THRESHOLD:
        return None
    return (
        f"Your {category.value} spending is {share * 100:.0f}% of total expenses. "
        "Consider setting a budget limit for this category."
    )


def savings_insight(summary: FinancialSummary) -> str:
    """Always produced; wording depends on the savings-rate band"""
    rate_pct = summary.savings_rate * 100
    if summary.savings_rate < LOW_SAVINGS_RATE:
        return (
            f"Your savings rate is {rate_pct:.1f}%. Financial experts recommend saving at least "
            "20% of your income. Try to reduce discretionary spending."
        )
    elif summary.savings_rate < TARGET_SAVINGS_RATE:
        return (
            f"You're saving {rate_pct:.1f}% of your income. Great start! "
            "Aim for 20% to build a strong financial foundation."
        )
    return (
        f"Excellent! You're saving {rate_pct:.1f}% of your income. "
        "You're on track for strong financial health."
    )


def find_anomaly(transactions: Iterable[Transaction]) -> Optional[Transaction]:
    """
    Largest expense above mean + 2 population standard deviations.

    Ties on amount resolve to the first such transaction in input order.
    """
    expenses = [t for t in transactions if t.type == TransactionType.EXPENSE]
    if not expenses:
        return None

    amounts = [t.amount for t in expenses]
    mean = sum(amounts) / len(amounts)
    std_dev = math.sqrt(sum((a - mean) ** 2 for a in amounts) / len(amounts))
    threshold = mean + 2 * std_dev

    outliers = [t for t in expenses if t.amount > threshold]
    if not outliers:
        return None
    return max(outliers, key=lambda t: t.amount)


def anomaly_insight(transactions: Iterable[Transaction]) -> Optional[str]:
    outlier = find_anomaly(transactions)
    if outlier is None:
        return None
    return (
        f"Detected an unusual expense: ${outlier.amount:.2f} for {outlier.description}. "
        "Make sure this was intentional."
    )


def generate_insights(summary: FinancialSummary, transactions: Iterable[Transaction]) -> List[str]:
    """Concentration, savings and anomaly insights in that order (at most 3)"""
    txns = list(transactions)
    candidates = [
        concentration_insight(txns),
        savings_insight(summary),
        anomaly_insight(txns),
    ]
    insights = [c for c in candidates if c]
    return insights if insights else list(DEFAULT_INSIGHTS)


def calculate_score(summary: FinancialSummary, transactions: Iterable[Transaction]) -> int:
    """
    Score from 0 (critical) to 100 (excellent).

    Deductions:
    - 30: savings rate below 10%
    - 15: savings rate below 20%
    - 20: one category above 40% of expenses
    """
    score = 100

    if summary.savings_rate < LOW_SAVINGS_RATE:
        score -= LOW_SAVINGS_PENALTY
    elif summary.savings_rate < TARGET_SAVINGS_RATE:
        score -= BELOW_TARGET_PENALTY

    _, max_share = dominant_expense_category(transactions)
    if summary.total_expenses > 0 and max_share > CONCENTRATION_THRESHOLD:
        score -= CONCENTRATION_PENALTY

    return max(0, min(100, score))


def determine_status(score: int) -> HealthStatus:
    """
    Map score to tier:
    - 80+:   Excellent
    - 60-79: Good
    - 40-59: Fair
    - <40:   Critical
    """
    if score >= 80:
        return HealthStatus.EXCELLENT
    elif score >= 60:
        return HealthStatus.GOOD
    elif score >= 40:
        return HealthStatus.FAIR
    return HealthStatus.CRITICAL


def score_health(summary: FinancialSummary, transactions: Iterable[Transaction]) -> HealthScore:
    """Main entry point: score, status and insights for a transaction set"""
    txns = list(transactions)
    score = calculate_score(summary, txns)
    return HealthScore(
        score=score,
        status=determine_status(score),
        insights=generate_insights(summary, txns),
    )
