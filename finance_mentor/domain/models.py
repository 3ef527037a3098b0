"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import List, Optional


class TransactionType(str, Enum):
    """Direction of a money movement"""

    INCOME = "income"
    EXPENSE = "expense"


class Category(str, Enum):
    """Closed set of spending categories; values are the display labels"""

    HOUSING = "Housing"
    FOOD = "Food & Dining"
    TRANSPORT = "Transportation"
    UTILITIES = "Utilities"
    ENTERTAINMENT = "Entertainment"
    SHOPPING = "Shopping"
    HEALTH = "Health"
    INCOME = "Income"
    INVESTMENT = "Investment"
    MISCELLANEOUS = "Miscellaneous"


class HealthStatus(str, Enum):
    """Tier derived from the health score"""

    CRITICAL = "Critical"
    FAIR = "Fair"
    GOOD = "Good"
    EXCELLENT = "Excellent"


@dataclass(frozen=True)
class Transaction:
    """A single dated, categorized money movement"""

    id: str
    date: date
    amount: float
    type: TransactionType
    category: Category
    description: str

    @property
    def signed_amount(self) -> float:
        """Income positive, expense negative"""
        return self.amount if self.type == TransactionType.INCOME else -self.amount


@dataclass(frozen=True)
class FinancialSummary:
    """Totals derived from a transaction set"""

    total_income: float
    total_expenses: float
    net_worth: float
    savings_rate: float


@dataclass(frozen=True)
class ForecastPoint:
    """One calendar day of the balance series"""

    date: date
    projected: float
    actual: Optional[float] = None
    upper_bound: Optional[float] = None
    lower_bound: Optional[float] = None


@dataclass(frozen=True)
class HealthScore:
    """Output of the health scorer (or the remote analysis)"""

    score: int
    status: HealthStatus
    insights: List[str] = field(default_factory=list)
