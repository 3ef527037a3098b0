"""/v1/budgets, /v1/goals and /v1/recurring - planning tools"""

import logging
from datetime import date
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response

from finance_mentor.api.dependencies import get_state_repository, get_today
from finance_mentor.api.v1.schemas import (
    BudgetCreate,
    BudgetStatusSchema,
    ExecuteRecurringResponse,
    GoalCreate,
    GoalFunds,
    GoalSchema,
    RecurringCreate,
    RecurringSchema,
    TransactionSchema,
)
from finance_mentor.domain.exceptions import InvalidTransactionDataError
from finance_mentor.domain.models import Category, TransactionType
from finance_mentor.domain.normalizer import new_transaction_id
from finance_mentor.domain.planning import Budget, SavingsGoal, budget_status
from finance_mentor.domain.recurring import execute_now, new_schedule, toggle_active
from finance_mentor.infrastructure.database.repositories import StateRepository

router = APIRouter()


def _find(items, item_id: str, label: str):
    for index, item in enumerate(items):
        if item.id == item_id:
            return index, item
    raise HTTPException(status_code=404, detail=f"{label} {item_id} not found")


# Budgets


@router.get("/budgets", response_model=List[BudgetStatusSchema])
def list_budgets(repo: StateRepository = Depends(get_state_repository), today: date = Depends(get_today)):
    """Every budget with its spend for the current period"""
    transactions = list(repo.load_transactions())
    return [BudgetStatusSchema.from_domain(budget_status(b, transactions, today)) for b in repo.load_budgets()]


@router.post("/budgets", response_model=BudgetStatusSchema, status_code=201)
def create_budget(
    body: BudgetCreate,
    repo: StateRepository = Depends(get_state_repository),
    today: date = Depends(get_today),
):
    if body.category == Category.INCOME:
        raise HTTPException(status_code=422, detail="Budgets apply to expense categories only")

    budgets = repo.load_budgets()
    budget = Budget(
        id=new_transaction_id({b.id for b in budgets}),
        category=body.category,
        limit=body.limit,
        period=body.period,
    )
    repo.save_budgets(budgets + [budget])
    return BudgetStatusSchema.from_domain(budget_status(budget, repo.load_transactions(), today))


@router.delete("/budgets/{budget_id}", status_code=204)
def delete_budget(budget_id: str, repo: StateRepository = Depends(get_state_repository)):
    budgets = repo.load_budgets()
    index, _ = _find(budgets, budget_id, "Budget")
    repo.save_budgets(budgets[:index] + budgets[index + 1 :])
    return Response(status_code=204)


# Savings goals


@router.get("/goals", response_model=List[GoalSchema])
def list_goals(repo: StateRepository = Depends(get_state_repository), today: date = Depends(get_today)):
    return [GoalSchema.from_domain(g, today) for g in repo.load_goals()]


@router.post("/goals", response_model=GoalSchema, status_code=201)
def create_goal(
    body: GoalCreate,
    repo: StateRepository = Depends(get_state_repository),
    today: date = Depends(get_today),
):
    goals = repo.load_goals()
    goal = SavingsGoal(
        id=new_transaction_id({g.id for g in goals}),
        name=body.name,
        target_amount=body.target_amount,
        current_amount=body.current_amount,
        deadline=body.deadline,
        color=body.color,
    )
    repo.save_goals(goals + [goal])
    return GoalSchema.from_domain(goal, today)


@router.post("/goals/{goal_id}/funds", response_model=GoalSchema)
def add_goal_funds(
    goal_id: str,
    body: GoalFunds,
    repo: StateRepository = Depends(get_state_repository),
    today: date = Depends(get_today),
):
    goals = repo.load_goals()
    index, goal = _find(goals, goal_id, "Goal")
    try:
        updated = goal.add_funds(body.amount)
    except InvalidTransactionDataError as e:
        raise HTTPException(status_code=422, detail=str(e))

    repo.save_goals(goals[:index] + [updated] + goals[index + 1 :])
    if updated.is_complete and not goal.is_complete:
        logging.info("Savings goal reached", extra={"goal_id": goal_id, "goal_name": goal.name})
    return GoalSchema.from_domain(updated, today)


@router.delete("/goals/{goal_id}", status_code=204)
def delete_goal(goal_id: str, repo: StateRepository = Depends(get_state_repository)):
    goals = repo.load_goals()
    index, _ = _find(goals, goal_id, "Goal")
    repo.save_goals(goals[:index] + goals[index + 1 :])
    return Response(status_code=204)


# Recurring transactions


@router.get("/recurring", response_model=List[RecurringSchema])
def list_recurring(repo: StateRepository = Depends(get_state_repository)):
    return [RecurringSchema.from_domain(s) for s in repo.load_recurring()]


@router.post("/recurring", response_model=RecurringSchema, status_code=201)
def create_recurring(
    body: RecurringCreate,
    repo: StateRepository = Depends(get_state_repository),
    today: date = Depends(get_today),
):
    if (body.category == Category.INCOME) != (body.type == TransactionType.INCOME):
        raise HTTPException(
            status_code=422,
            detail=f"Category {body.category.value} is inconsistent with type {body.type.value}",
        )

    schedules = repo.load_recurring()
    schedule = new_schedule(
        new_transaction_id({s.id for s in schedules}),
        body.type,
        body.amount,
        body.category,
        body.description,
        body.frequency,
        body.start_date,
        today,
    )
    repo.save_recurring(schedules + [schedule])
    return RecurringSchema.from_domain(schedule)


@router.post("/recurring/{schedule_id}/toggle", response_model=RecurringSchema)
def toggle_recurring(schedule_id: str, repo: StateRepository = Depends(get_state_repository)):
    schedules = repo.load_recurring()
    index, schedule = _find(schedules, schedule_id, "Recurring transaction")
    updated = toggle_active(schedule)
    repo.save_recurring(schedules[:index] + [updated] + schedules[index + 1 :])
    return RecurringSchema.from_domain(updated)


@router.post("/recurring/{schedule_id}/execute", response_model=ExecuteRecurringResponse)
def execute_recurring(
    schedule_id: str,
    repo: StateRepository = Depends(get_state_repository),
    today: date = Depends(get_today),
):
    """Book one occurrence dated today and advance the schedule"""
    schedules = repo.load_recurring()
    index, schedule = _find(schedules, schedule_id, "Recurring transaction")
    transactions = repo.load_transactions()

    try:
        txn, updated = execute_now(schedule, transactions, today)
    except InvalidTransactionDataError as e:
        raise HTTPException(status_code=422, detail=str(e))

    repo.save_transactions(transactions.add(txn))
    repo.save_recurring(schedules[:index] + [updated] + schedules[index + 1 :])
    return ExecuteRecurringResponse(
        transaction=TransactionSchema.from_domain(txn),
        schedule=RecurringSchema.from_domain(updated),
    )


@router.delete("/recurring/{schedule_id}", status_code=204)
def delete_recurring(schedule_id: str, repo: StateRepository = Depends(get_state_repository)):
    schedules = repo.load_recurring()
    index, _ = _find(schedules, schedule_id, "Recurring transaction")
    repo.save_recurring(schedules[:index] + schedules[index + 1 :])
    return Response(status_code=204)
