"""Generated sample history used when no (readable) saved state exists"""

import random
from datetime import date, timedelta
from typing import List, Optional

from finance_mentor.domain.models import Category, Transaction, TransactionType
from finance_mentor.domain.normalizer import new_transaction_id

SALARY_AMOUNT = 3200.0
SALARY_DAYS_AGO = (0, 14, 28, 42, 56)
RENT_AMOUNT = 1500.0


def generate_demo_transactions(
    today: Optional[date] = None,
    rng: Optional[random.Random] = None,
    expense_count: int = 50,
    history_days: int = 60,
) -> List[Transaction]:
    """
    Bi-weekly salary plus random expenses over the last history_days.

    Housing only appears as a monthly rent payment (days-ago divisible by 30).
    """
    today = today or date.today()
    rng = rng or random.Random()
    taken = set()
    transactions = []

    def add(days_ago: int, amount: float, txn_type: TransactionType, category: Category, description: str) -> None:
        txn_id = new_transaction_id(taken)
        taken.add(txn_id)
        transactions.append(
            Transaction(
                id=txn_id,
                date=today - timedelta(days=days_ago),
                amount=amount,
                type=txn_type,
                category=category,
                description=description,
            )
        )

    for days_ago in SALARY_DAYS_AGO:
        add(days_ago, SALARY_AMOUNT, TransactionType.INCOME, Category.INCOME, "Bi-weekly Salary")

    expense_categories = [c for c in Category if c != Category.INCOME]
    for _ in range(expense_count):
        days_ago = rng.randrange(history_days)
        category = rng.choice(expense_categories)
        amount = round(rng.random() * 100 + 10, 2)
        if category == Category.HOUSING:
            if days_ago % 30 != 0:
                continue
            amount = RENT_AMOUNT
        add(days_ago, amount, TransactionType.EXPENSE, category, f"{category.value} purchase")

    return sorted(transactions, key=lambda t: t.date, reverse=True)
