"""Unit tests for export formats and persisted-state encoding"""

import json
import pytest
from datetime import date
from finance_mentor.domain.exceptions import InvalidTransactionDataError
from finance_mentor.domain.models import Category, TransactionType
from finance_mentor.domain.planning import Budget, BudgetPeriod, SavingsGoal
from finance_mentor.domain.recurring import Frequency, RecurringTransaction
from finance_mentor.infrastructure import serialization


def test_json_export_parses_back_field_for_field(sample_transactions):
    parsed = serialization.parse_json(serialization.export_json(sample_transactions))
    assert parsed == sample_transactions


def test_json_export_shape(txn):
    (record,) = json.loads(serialization.export_json([txn("a", 12.5, Category.FOOD, description="Lunch")]))

    assert record == {
        "id": "a",
        "date": "2025-03-15",
        "amount": 12.5,
        "type": "expense",
        "category": "Food & Dining",
        "description": "Lunch",
    }


def test_csv_export_quotes_every_cell(txn):
    text = serialization.export_csv([txn("a", 1500.0, Category.HOUSING, description='Rent, "March"')])

    assert text.splitlines() == [
        '"Date","Type","Category","Description","Amount"',
        '"2025-03-15","expense","Housing","Rent, ""March""","1500.00"',
    ]


@pytest.mark.parametrize(
    "payload",
    [
        "not json",
        '{"id": "a"}',
        '[{"id": "a", "date": "2025-01-01", "amount": 5, "type": "expense"}]',
        '[{"id": "a", "date": "2025-01-01", "amount": -5, "type": "expense", "category": "Housing"}]',
        '[{"id": "a", "date": "2025-01-01", "amount": 5, "type": "expense", "category": "Income"}]',
        '[{"id": "a", "date": "2025-01-01", "amount": Infinity, "type": "expense", "category": "Housing"}]',
        '[{"id": "a", "date": "2025-13-01", "amount": 5, "type": "expense", "category": "Housing"}]',
    ],
)
def test_parse_json_rejects_bad_payloads(payload: str):
    with pytest.raises(InvalidTransactionDataError):
        serialization.parse_json(payload)


@pytest.mark.parametrize(
    "range_name,expected",
    [
        ("all", (None, None)),
        ("month", (date(2025, 3, 1), None)),
        ("year", (date(2025, 1, 1), None)),
        ("custom", (date(2025, 2, 1), date(2025, 2, 28))),
    ],
)
def test_export_range_bounds(range_name, expected, today):
    bounds = serialization.export_range_bounds(range_name, today, date(2025, 2, 1), date(2025, 2, 28))
    assert bounds == expected


def test_custom_range_without_both_dates_exports_everything(today):
    assert serialization.export_range_bounds("custom", today, start=date(2025, 2, 1)) == (None, None)


def test_planning_records_use_camel_case_keys():
    goal = SavingsGoal(id="g", name="Trip", target_amount=1000.0, current_amount=50.0, deadline=date(2025, 6, 1))
    schedule = RecurringTransaction(
        id="r",
        type=TransactionType.EXPENSE,
        amount=9.99,
        category=Category.ENTERTAINMENT,
        description="Music",
        frequency=Frequency.MONTHLY,
        start_date=date(2025, 1, 1),
        next_date=date(2025, 4, 1),
        is_active=False,
    )

    assert serialization.goal_to_dict(goal)["targetAmount"] == 1000.0
    assert serialization.recurring_to_dict(schedule)["nextDate"] == "2025-04-01"
    assert serialization.goal_from_dict(serialization.goal_to_dict(goal)) == goal
    assert serialization.recurring_from_dict(serialization.recurring_to_dict(schedule)) == schedule


def test_decode_array_wraps_record_errors():
    budget = Budget(id="b", category=Category.FOOD, limit=300.0, period=BudgetPeriod.WEEKLY)
    text = serialization.encode_array([budget], serialization.budget_to_dict)

    assert serialization.decode_array(text, serialization.budget_from_dict) == [budget]
    with pytest.raises(InvalidTransactionDataError):
        serialization.decode_array('[{"id": "b", "category": "Nope", "limit": 1}]', serialization.budget_from_dict)
