"""Budgets and savings goals"""

from dataclasses import dataclass, replace
from datetime import date, timedelta
from enum import Enum
from typing import Iterable, Optional

from finance_mentor.domain.exceptions import InvalidTransactionDataError
from finance_mentor.domain.models import Category, Transaction, TransactionType


class BudgetPeriod(str, Enum):
    MONTHLY = "monthly"
    WEEKLY = "weekly"


@dataclass(frozen=True)
class Budget:
    """Spending limit for one category"""

    id: str
    category: Category
    limit: float
    period: BudgetPeriod = BudgetPeriod.MONTHLY


@dataclass(frozen=True)
class BudgetStatus:
    budget: Budget
    spent: float
    remaining: float
    percent_used: float
    over_limit: bool


def period_start(period: BudgetPeriod, today: date) -> date:
    """First day counted against a budget: month start, or 7 days back for weekly"""
    if period == BudgetPeriod.MONTHLY:
        return today.replace(day=1)
    return today - timedelta(days=7)


def calculate_spent(budget: Budget, transactions: Iterable[Transaction], today: Optional[date] = None) -> float:
    """Expenses in the budget's category since the period start"""
    start = period_start(budget.period, today or date.today())
    return sum(
        t.amount
        for t in transactions
        if t.type == TransactionType.EXPENSE and t.category == budget.category and t.date >= start
    )


def budget_status(budget: Budget, transactions: Iterable[Transaction], today: Optional[date] = None) -> BudgetStatus:
    spent = calculate_spent(budget, transactions, today)
    percent = (spent / budget.limit) * 100 if budget.limit > 0 else 0.0
    return BudgetStatus(
        budget=budget,
        spent=spent,
        remaining=budget.limit - spent,
        percent_used=percent,
        over_limit=spent > budget.limit,
    )


@dataclass(frozen=True)
class SavingsGoal:
    """A named savings target"""

    id: str
    name: str
    target_amount: float
    current_amount: float = 0.0
    deadline: Optional[date] = None
    color: str = "#3b82f6"

    @property
    def progress(self) -> float:
        """Percent of target reached, capped at 100"""
        if self.target_amount <= 0:
            return 0.0
        return min(self.current_amount / self.target_amount * 100, 100.0)

    @property
    def is_complete(self) -> bool:
        return self.current_amount >= self.target_amount

    def days_left(self, today: Optional[date] = None) -> Optional[int]:
        """Days until the deadline; 0 or less means it has passed"""
        if self.deadline is None:
            return None
        return (self.deadline - (today or date.today())).days

    def add_funds(self, amount: float) -> "SavingsGoal":
        """Return a new goal with amount added; the receiver is unchanged"""
        if amount <= 0:
            raise InvalidTransactionDataError("Contribution must be greater than zero")
        return replace(self, current_amount=self.current_amount + amount)
