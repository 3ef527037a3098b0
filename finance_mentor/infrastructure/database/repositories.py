"""Key-value state store and the repository that reads/writes app collections"""

import logging
import random
from abc import ABC, abstractmethod
from typing import Callable, Dict, List, Optional, TypeVar

from sqlalchemy.orm import Session

from finance_mentor.domain.demo_data import generate_demo_transactions
from finance_mentor.domain.exceptions import InvalidTransactionDataError
from finance_mentor.domain.planning import Budget, SavingsGoal
from finance_mentor.domain.recurring import RecurringTransaction
from finance_mentor.domain.transaction_set import TransactionSet
from finance_mentor.infrastructure import serialization
from finance_mentor.infrastructure.database.models import StateEntry
from finance_mentor.infrastructure.observability.metrics import state_reinitialized_counter

logger = logging.getLogger(__name__)

T = TypeVar("T")

TRANSACTIONS_KEY = "transactions"
BUDGETS_KEY = "budgets"
GOALS_KEY = "savingsGoals"
RECURRING_KEY = "recurringTransactions"


class KeyValueStore(ABC):
    """Minimal string key-value store"""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        ...

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        ...

    @abstractmethod
    def remove(self, key: str) -> None:
        ...

    @abstractmethod
    def clear(self) -> None:
        ...


class InMemoryKeyValueStore(KeyValueStore):
    """Dict-backed store for tests and ephemeral sessions"""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def clear(self) -> None:
        self._data.clear()


class SqlKeyValueStore(KeyValueStore):
    """Store backed by the app_state table; every write commits"""

    def __init__(self, db: Session):
        self.db = db

    def get(self, key: str) -> Optional[str]:
        entry = self.db.get(StateEntry, key)
        return entry.value if entry else None

    def set(self, key: str, value: str) -> None:
        entry = self.db.get(StateEntry, key)
        if entry is None:
            self.db.add(StateEntry(key=key, value=value))
        else:
            entry.value = value
        self.db.commit()

    def remove(self, key: str) -> None:
        self.db.query(StateEntry).filter(StateEntry.key == key).delete()
        self.db.commit()

    def clear(self) -> None:
        self.db.query(StateEntry).delete()
        self.db.commit()


class StateRepository:
    """
    Reads and rewrites the persisted collections.

    Each collection is a JSON array under its own key. Unreadable state is
    discarded and replaced with generated defaults rather than raised.
    """

    def __init__(
        self,
        store: KeyValueStore,
        seed_demo_data: bool = True,
        rng_factory: Callable[[], random.Random] = random.Random,
    ):
        self.store = store
        self.seed_demo_data = seed_demo_data
        self.rng_factory = rng_factory

    def _load(self, key: str, decoder: Callable[[dict], T], defaults: Callable[[], List[T]], encoder) -> List[T]:
        raw = self.store.get(key)
        if raw is not None:
            try:
                return serialization.decode_array(raw, decoder)
            except InvalidTransactionDataError as e:
                logger.warning(
                    "Discarding corrupt persisted state",
                    extra={"state_key": key, "error": str(e)},
                )
                state_reinitialized_counter.labels(key=key).inc()
                self.store.remove(key)

        items = defaults()
        self.store.set(key, serialization.encode_array(items, encoder))
        return items

    def load_transactions(self) -> TransactionSet:
        def defaults():
            return generate_demo_transactions(rng=self.rng_factory()) if self.seed_demo_data else []

        items = self._load(
            TRANSACTIONS_KEY,
            serialization.transaction_from_dict,
            defaults,
            serialization.transaction_to_dict,
        )
        return TransactionSet(items)

    def save_transactions(self, transactions: TransactionSet) -> None:
        self.store.set(TRANSACTIONS_KEY, serialization.encode_array(transactions, serialization.transaction_to_dict))

    def load_budgets(self) -> List[Budget]:
        return self._load(BUDGETS_KEY, serialization.budget_from_dict, list, serialization.budget_to_dict)

    def save_budgets(self, budgets: List[Budget]) -> None:
        self.store.set(BUDGETS_KEY, serialization.encode_array(budgets, serialization.budget_to_dict))

    def load_goals(self) -> List[SavingsGoal]:
        return self._load(GOALS_KEY, serialization.goal_from_dict, list, serialization.goal_to_dict)

    def save_goals(self, goals: List[SavingsGoal]) -> None:
        self.store.set(GOALS_KEY, serialization.encode_array(goals, serialization.goal_to_dict))

    def load_recurring(self) -> List[RecurringTransaction]:
        return self._load(
            RECURRING_KEY,
            serialization.recurring_from_dict,
            list,
            serialization.recurring_to_dict,
        )

    def save_recurring(self, schedules: List[RecurringTransaction]) -> None:
        self.store.set(RECURRING_KEY, serialization.encode_array(schedules, serialization.recurring_to_dict))
