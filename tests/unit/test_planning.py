"""Unit tests for budgets, savings goals and recurring schedules"""

import pytest
from datetime import date
from finance_mentor.domain.exceptions import InvalidTransactionDataError
from finance_mentor.domain.models import Category, TransactionType
from finance_mentor.domain.planning import Budget, BudgetPeriod, SavingsGoal, budget_status, calculate_spent
from finance_mentor.domain.recurring import (
    Frequency,
    advance,
    calculate_next_date,
    execute_now,
    new_schedule,
    toggle_active,
)


class TestBudgets:
    def test_monthly_budget_counts_since_first_of_month(self, sample_transactions, today):
        budget = Budget(id="b1", category=Category.FOOD, limit=500.0)
        # Groceries on Mar 15, Mar 8 and Mar 1
        assert calculate_spent(budget, sample_transactions, today) == 360.0

    def test_weekly_budget_counts_last_seven_days(self, sample_transactions, today):
        budget = Budget(id="b1", category=Category.FOOD, limit=200.0, period=BudgetPeriod.WEEKLY)
        assert calculate_spent(budget, sample_transactions, today) == 240.0

    def test_status_over_limit(self, sample_transactions, today):
        budget = Budget(id="b1", category=Category.HOUSING, limit=1000.0)
        status = budget_status(budget, sample_transactions, today)

        assert status.spent == 1500.0
        assert status.remaining == -500.0
        assert status.percent_used == 150.0
        assert status.over_limit


class TestSavingsGoals:
    def test_progress_is_capped(self):
        goal = SavingsGoal(id="g", name="Trip", target_amount=1000.0, current_amount=1500.0)
        assert goal.progress == 100.0
        assert goal.is_complete

    def test_add_funds_returns_new_goal(self):
        goal = SavingsGoal(id="g", name="Trip", target_amount=1000.0, current_amount=200.0)
        updated = goal.add_funds(300.0)

        assert updated.current_amount == 500.0
        assert updated.progress == 50.0
        assert goal.current_amount == 200.0

    def test_add_funds_rejects_non_positive(self):
        goal = SavingsGoal(id="g", name="Trip", target_amount=1000.0)
        with pytest.raises(InvalidTransactionDataError):
            goal.add_funds(0)

    def test_days_left(self, today):
        goal = SavingsGoal(id="g", name="Trip", target_amount=1000.0, deadline=date(2025, 4, 14))
        assert goal.days_left(today) == 30
        assert SavingsGoal(id="g", name="Trip", target_amount=1.0).days_left(today) is None


class TestRecurring:
    @pytest.mark.parametrize(
        "frequency,expected",
        [
            (Frequency.DAILY, date(2025, 1, 31)),
            (Frequency.WEEKLY, date(2025, 2, 6)),
            (Frequency.MONTHLY, date(2025, 2, 28)),
            (Frequency.YEARLY, date(2026, 1, 30)),
        ],
    )
    def test_advance(self, frequency, expected):
        assert advance(date(2025, 1, 30), frequency) == expected

    def test_next_date_skips_past_occurrences(self):
        start = date(2025, 1, 1)
        assert calculate_next_date(start, Frequency.WEEKLY, today=date(2025, 1, 20)) == date(2025, 1, 22)

    def test_next_date_in_future_is_start(self):
        start = date(2025, 6, 1)
        assert calculate_next_date(start, Frequency.MONTHLY, today=date(2025, 3, 15)) == start

    def test_monthly_keeps_day_of_month_anchor(self):
        start = date(2025, 1, 31)
        assert calculate_next_date(start, Frequency.MONTHLY, today=date(2025, 2, 10)) == date(2025, 2, 28)
        assert calculate_next_date(start, Frequency.MONTHLY, today=date(2025, 3, 1)) == date(2025, 3, 31)

    def test_execute_now_books_today_and_advances(self, today):
        schedule = new_schedule(
            "r1",
            TransactionType.EXPENSE,
            15.99,
            Category.ENTERTAINMENT,
            "Netflix",
            Frequency.MONTHLY,
            date(2025, 1, 20),
            today=today,
        )
        assert schedule.next_date == date(2025, 3, 20)

        txn, updated = execute_now(schedule, [], today)

        assert txn.date == today
        assert txn.amount == 15.99
        assert txn.description == "Netflix (Recurring)"
        assert txn.category == Category.ENTERTAINMENT
        assert updated.next_date == date(2025, 4, 20)
        assert schedule.next_date == date(2025, 3, 20)

    def test_toggle_active(self, today):
        schedule = new_schedule(
            "r1", TransactionType.INCOME, 3200.0, Category.INCOME, "Salary", Frequency.WEEKLY, today, today=today
        )
        assert schedule.is_active
        assert not toggle_active(schedule).is_active

    def test_paused_schedule_cannot_execute(self, today):
        schedule = new_schedule(
            "r1", TransactionType.EXPENSE, 60.0, Category.UTILITIES, "Internet", Frequency.MONTHLY, today, today=today
        )

        with pytest.raises(InvalidTransactionDataError, match="paused"):
            execute_now(toggle_active(schedule), [], today)
