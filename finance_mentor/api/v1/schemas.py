"""Pydantic schemas for API request/response validation"""

from datetime import date
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from finance_mentor.domain.models import Category, ForecastPoint, HealthScore, HealthStatus, Transaction, TransactionType
from finance_mentor.domain.planning import BudgetPeriod, BudgetStatus, SavingsGoal
from finance_mentor.domain.recurring import Frequency, RecurringTransaction


class TransactionSchema(BaseModel):
    """Single stored transaction"""

    id: str
    date: date
    amount: float
    type: TransactionType
    category: Category
    description: str

    @classmethod
    def from_domain(cls, txn: Transaction) -> "TransactionSchema":
        return cls(
            id=txn.id,
            date=txn.date,
            amount=txn.amount,
            type=txn.type,
            category=txn.category,
            description=txn.description,
        )


class TransactionCreate(BaseModel):
    """Request body for POST /v1/transactions"""

    date: date
    amount: float = Field(..., gt=0, allow_inf_nan=False, description="Magnitude; direction comes from type")
    type: TransactionType
    category: Category
    description: str = ""


class TransactionListResponse(BaseModel):
    transactions: List[TransactionSchema]
    count: int


class ImportResponse(BaseModel):
    """Response for POST /v1/transactions/import"""

    imported: int
    skipped_rows: int
    transactions: List[TransactionSchema]


class SummaryResponse(BaseModel):
    total_income: float
    total_expenses: float
    net_worth: float
    savings_rate: float = Field(..., description="Fraction of income kept, 0 when there is no income")


class ForecastPointSchema(BaseModel):
    date: date
    projected: float
    actual: Optional[float] = None
    upper_bound: Optional[float] = None
    lower_bound: Optional[float] = None

    @classmethod
    def from_domain(cls, point: ForecastPoint) -> "ForecastPointSchema":
        return cls(
            date=point.date,
            projected=point.projected,
            actual=point.actual,
            upper_bound=point.upper_bound,
            lower_bound=point.lower_bound,
        )


class ForecastResponse(BaseModel):
    points: List[ForecastPointSchema]


class HealthScoreResponse(BaseModel):
    """Response for GET /v1/health-score"""

    score: int = Field(..., ge=0, le=100)
    status: HealthStatus
    insights: List[str]
    degraded: bool = Field(False, description="True when the local scorer answered")

    @classmethod
    def from_domain(cls, health: HealthScore, degraded: bool) -> "HealthScoreResponse":
        return cls(score=health.score, status=health.status, insights=list(health.insights), degraded=degraded)


class ChatTurn(BaseModel):
    role: Literal["user", "assistant"]
    content: str


class ChatRequest(BaseModel):
    """Request body for POST /v1/assistant/chat"""

    message: str = Field(..., min_length=1)
    history: List[ChatTurn] = Field(default_factory=list)


class ChatResponse(BaseModel):
    reply: str
    intent: str
    degraded: bool


class BudgetCreate(BaseModel):
    category: Category
    limit: float = Field(..., gt=0, allow_inf_nan=False)
    period: BudgetPeriod = BudgetPeriod.MONTHLY


class BudgetStatusSchema(BaseModel):
    """A budget and how much of it has been used this period"""

    id: str
    category: Category
    limit: float
    period: BudgetPeriod
    spent: float
    remaining: float
    percent_used: float
    over_limit: bool

    @classmethod
    def from_domain(cls, status: BudgetStatus) -> "BudgetStatusSchema":
        return cls(
            id=status.budget.id,
            category=status.budget.category,
            limit=status.budget.limit,
            period=status.budget.period,
            spent=status.spent,
            remaining=status.remaining,
            percent_used=status.percent_used,
            over_limit=status.over_limit,
        )


class GoalCreate(BaseModel):
    name: str = Field(..., min_length=1)
    target_amount: float = Field(..., gt=0, allow_inf_nan=False)
    current_amount: float = Field(0.0, ge=0, allow_inf_nan=False)
    deadline: Optional[date] = None
    color: str = "#3b82f6"


class GoalFunds(BaseModel):
    amount: float = Field(..., gt=0, allow_inf_nan=False)


class GoalSchema(BaseModel):
    id: str
    name: str
    target_amount: float
    current_amount: float
    deadline: Optional[date] = None
    color: str
    progress: float
    is_complete: bool
    days_left: Optional[int] = None

    @classmethod
    def from_domain(cls, goal: SavingsGoal, today: date) -> "GoalSchema":
        return cls(
            id=goal.id,
            name=goal.name,
            target_amount=goal.target_amount,
            current_amount=goal.current_amount,
            deadline=goal.deadline,
            color=goal.color,
            progress=goal.progress,
            is_complete=goal.is_complete,
            days_left=goal.days_left(today),
        )


class RecurringCreate(BaseModel):
    type: TransactionType
    amount: float = Field(..., gt=0, allow_inf_nan=False)
    category: Category
    description: str = Field(..., min_length=1)
    frequency: Frequency
    start_date: date


class RecurringSchema(BaseModel):
    id: str
    type: TransactionType
    amount: float
    category: Category
    description: str
    frequency: Frequency
    start_date: date
    next_date: date
    is_active: bool

    @classmethod
    def from_domain(cls, schedule: RecurringTransaction) -> "RecurringSchema":
        return cls(
            id=schedule.id,
            type=schedule.type,
            amount=schedule.amount,
            category=schedule.category,
            description=schedule.description,
            frequency=schedule.frequency,
            start_date=schedule.start_date,
            next_date=schedule.next_date,
            is_active=schedule.is_active,
        )


class ExecuteRecurringResponse(BaseModel):
    transaction: TransactionSchema
    schedule: RecurringSchema
