"""JSON/CSV encoding of domain entities for export and persisted state"""

import csv
import io
import json
import math
from datetime import date
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple, TypeVar

from finance_mentor.domain.exceptions import InvalidTransactionDataError
from finance_mentor.domain.models import Category, Transaction, TransactionType
from finance_mentor.domain.planning import Budget, BudgetPeriod, SavingsGoal
from finance_mentor.domain.recurring import Frequency, RecurringTransaction

T = TypeVar("T")

CSV_HEADERS = ["Date", "Type", "Category", "Description", "Amount"]


def transaction_to_dict(txn: Transaction) -> Dict[str, Any]:
    return {
        "id": txn.id,
        "date": txn.date.isoformat(),
        "amount": txn.amount,
        "type": txn.type.value,
        "category": txn.category.value,
        "description": txn.description,
    }


def transaction_from_dict(data: Dict[str, Any]) -> Transaction:
    """
    Decode one exported transaction.

    Raises:
        InvalidTransactionDataError: missing fields, unknown enum values or broken invariants
    """
    try:
        txn = Transaction(
            id=str(data["id"]),
            date=date.fromisoformat(data["date"]),
            amount=float(data["amount"]),
            type=TransactionType(data["type"]),
            category=Category(data["category"]),
            description=str(data.get("description", "")),
        )
    except (KeyError, ValueError, TypeError) as e:
        raise InvalidTransactionDataError(f"Invalid transaction record: {e}") from e

    if not math.isfinite(txn.amount) or txn.amount <= 0:
        raise InvalidTransactionDataError(f"Transaction {txn.id} has non-positive or non-finite amount")
    if (txn.category == Category.INCOME) != (txn.type == TransactionType.INCOME):
        raise InvalidTransactionDataError(f"Transaction {txn.id} has inconsistent category and type")
    return txn


def export_json(transactions: Iterable[Transaction]) -> str:
    return json.dumps([transaction_to_dict(t) for t in transactions], indent=2)


def parse_json(text: str) -> List[Transaction]:
    """Inverse of export_json()"""
    return decode_array(text, transaction_from_dict)


def export_csv(transactions: Iterable[Transaction]) -> str:
    """Every cell quoted, amounts with two decimals"""
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for txn in transactions:
        writer.writerow(
            [txn.date.isoformat(), txn.type.value, txn.category.value, txn.description, f"{txn.amount:.2f}"]
        )
    return buffer.getvalue()


def export_range_bounds(
    range_name: str,
    today: Optional[date] = None,
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> Tuple[Optional[date], Optional[date]]:
    """
    Date bounds for an export range: all, month (since the 1st), year (since
    Jan 1st) or custom (both start and end required, else everything).
    """
    today = today or date.today()
    if range_name == "month":
        return today.replace(day=1), None
    if range_name == "year":
        return date(today.year, 1, 1), None
    if range_name == "custom" and start and end:
        return start, end
    return None, None


def budget_to_dict(budget: Budget) -> Dict[str, Any]:
    return {
        "id": budget.id,
        "category": budget.category.value,
        "limit": budget.limit,
        "period": budget.period.value,
    }


def budget_from_dict(data: Dict[str, Any]) -> Budget:
    return Budget(
        id=str(data["id"]),
        category=Category(data["category"]),
        limit=float(data["limit"]),
        period=BudgetPeriod(data.get("period", BudgetPeriod.MONTHLY.value)),
    )


def goal_to_dict(goal: SavingsGoal) -> Dict[str, Any]:
    return {
        "id": goal.id,
        "name": goal.name,
        "targetAmount": goal.target_amount,
        "currentAmount": goal.current_amount,
        "deadline": goal.deadline.isoformat() if goal.deadline else "",
        "color": goal.color,
    }


def goal_from_dict(data: Dict[str, Any]) -> SavingsGoal:
    deadline = data.get("deadline")
    return SavingsGoal(
        id=str(data["id"]),
        name=str(data["name"]),
        target_amount=float(data["targetAmount"]),
        current_amount=float(data.get("currentAmount", 0.0)),
        deadline=date.fromisoformat(deadline) if deadline else None,
        color=str(data.get("color", "#3b82f6")),
    )


def recurring_to_dict(schedule: RecurringTransaction) -> Dict[str, Any]:
    return {
        "id": schedule.id,
        "type": schedule.type.value,
        "amount": schedule.amount,
        "category": schedule.category.value,
        "description": schedule.description,
        "frequency": schedule.frequency.value,
        "startDate": schedule.start_date.isoformat(),
        "nextDate": schedule.next_date.isoformat(),
        "isActive": schedule.is_active,
    }


def recurring_from_dict(data: Dict[str, Any]) -> RecurringTransaction:
    return RecurringTransaction(
        id=str(data["id"]),
        type=TransactionType(data["type"]),
        amount=float(data["amount"]),
        category=Category(data["category"]),
        description=str(data.get("description", "")),
        frequency=Frequency(data["frequency"]),
        start_date=date.fromisoformat(data["startDate"]),
        next_date=date.fromisoformat(data["nextDate"]),
        is_active=bool(data.get("isActive", True)),
    )


def encode_array(items: Iterable[T], encoder: Callable[[T], Dict[str, Any]]) -> str:
    return json.dumps([encoder(item) for item in items])


def decode_array(text: str, decoder: Callable[[Dict[str, Any]], T]) -> List[T]:
    """
    Decode a JSON array with the given per-item decoder.

    Raises:
        InvalidTransactionDataError: not JSON, not an array, or any item fails to decode
    """
    try:
        payload = json.loads(text)
    except (TypeError, ValueError) as e:
        raise InvalidTransactionDataError(f"Not valid JSON: {e}") from e
    if not isinstance(payload, list):
        raise InvalidTransactionDataError("Expected a JSON array")

    try:
        return [decoder(item) for item in payload]
    except InvalidTransactionDataError:
        raise
    except (KeyError, ValueError, TypeError, AttributeError) as e:
        raise InvalidTransactionDataError(f"Invalid record: {e}") from e
