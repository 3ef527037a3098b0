"""Recurring transaction schedules"""

from dataclasses import dataclass, replace
from datetime import date, timedelta
from enum import Enum
from typing import Iterable, Optional, Tuple

from finance_mentor.domain.exceptions import InvalidTransactionDataError
from finance_mentor.domain.models import Category, Transaction, TransactionType
from finance_mentor.domain.normalizer import create_transaction
from finance_mentor.utils.date_utils import add_months, add_years


class Frequency(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


@dataclass(frozen=True)
class RecurringTransaction:
    """Template for a transaction that repeats on a schedule"""

    id: str
    type: TransactionType
    amount: float
    category: Category
    description: str
    frequency: Frequency
    start_date: date
    next_date: date
    is_active: bool = True


def advance(from_date: date, frequency: Frequency) -> date:
    """One period after from_date"""
    if frequency == Frequency.DAILY:
        return from_date + timedelta(days=1)
    elif frequency == Frequency.WEEKLY:
        return from_date + timedelta(days=7)
    elif frequency == Frequency.MONTHLY:
        return add_months(from_date, 1)
    return add_years(from_date, 1)


def calculate_next_date(start_date: date, frequency: Frequency, today: Optional[date] = None) -> date:
    """
    First occurrence on or after today.

    Monthly/yearly steps are counted from start_date, so a schedule starting on
    the 31st lands on the last day of shorter months and returns to the 31st.
    """
    today = today or date.today()
    if frequency in (Frequency.DAILY, Frequency.WEEKLY):
        candidate = start_date
        while candidate < today:
            candidate = advance(candidate, frequency)
        return candidate

    months_per_step = 1 if frequency == Frequency.MONTHLY else 12
    steps = 0
    candidate = start_date
    while candidate < today:
        steps += 1
        candidate = add_months(start_date, steps * months_per_step)
    return candidate


def new_schedule(
    schedule_id: str,
    txn_type: TransactionType,
    amount: float,
    category: Category,
    description: str,
    frequency: Frequency,
    start_date: date,
    today: Optional[date] = None,
) -> RecurringTransaction:
    return RecurringTransaction(
        id=schedule_id,
        type=txn_type,
        amount=amount,
        category=category,
        description=description,
        frequency=frequency,
        start_date=start_date,
        next_date=calculate_next_date(start_date, frequency, today),
    )


def toggle_active(schedule: RecurringTransaction) -> RecurringTransaction:
    return replace(schedule, is_active=not schedule.is_active)


def execute_now(
    schedule: RecurringTransaction,
    existing_transactions: Iterable[Transaction] = (),
    today: Optional[date] = None,
) -> Tuple[Transaction, RecurringTransaction]:
    """
    Book one occurrence today and move next_date forward.

    Returns the new transaction and the updated schedule; neither input is mutated.

    Raises:
        InvalidTransactionDataError: the schedule is paused
    """
    if not schedule.is_active:
        raise InvalidTransactionDataError("Recurring transaction is paused")
    today = today or date.today()
    txn = create_transaction(
        today,
        schedule.amount,
        schedule.type,
        schedule.category,
        f"{schedule.description} (Recurring)",
        existing_transactions,
    )
    return txn, replace(schedule, next_date=advance(schedule.next_date, schedule.frequency))
