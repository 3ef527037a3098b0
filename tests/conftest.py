"""Pytest fixtures for testing"""

import pytest
from datetime import date, timedelta
from typing import Generator, List
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from finance_mentor.api.main import create_app
from finance_mentor.api.dependencies import get_analysis_client, get_state_repository, get_today
from finance_mentor.infrastructure.clients.openrouter import OpenRouterClient
from finance_mentor.infrastructure.database.models import Base
from finance_mentor.infrastructure.database.repositories import InMemoryKeyValueStore, StateRepository
from finance_mentor.domain.models import Category, Transaction, TransactionType


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

TODAY = date(2025, 3, 15)


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def repo(store: InMemoryKeyValueStore) -> StateRepository:
    """Repository over an in-memory store with demo seeding off"""
    return StateRepository(store, seed_demo_data=False)


@pytest.fixture
def client(repo: StateRepository) -> TestClient:
    """Create FastAPI test client with in-memory state and no remote model"""
    app = create_app(create_tables=False)

    app.dependency_overrides[get_state_repository] = lambda: repo
    app.dependency_overrides[get_analysis_client] = lambda: OpenRouterClient(api_key="")
    app.dependency_overrides[get_today] = lambda: TODAY
    return TestClient(app)


def make_txn(
    txn_id: str,
    amount: float,
    category: Category = Category.FOOD,
    days_ago: int = 0,
    description: str = "Test",
    today: date = TODAY,
) -> Transaction:
    """Transaction whose type follows its category"""
    txn_type = TransactionType.INCOME if category == Category.INCOME else TransactionType.EXPENSE
    return Transaction(
        id=txn_id,
        date=today - timedelta(days=days_ago),
        amount=amount,
        type=txn_type,
        category=category,
        description=description,
    )


@pytest.fixture
def sample_transactions() -> List[Transaction]:
    """Two months of salary, rent and groceries"""
    transactions = []

    # Bi-weekly salary deposits
    for i, days_ago in enumerate((2, 16, 30, 44)):
        transactions.append(make_txn(f"salary_{i}", 3200.0, Category.INCOME, days_ago, "Payroll Deposit"))

    # Monthly rent
    for i, days_ago in enumerate((14, 44)):
        transactions.append(make_txn(f"rent_{i}", 1500.0, Category.HOUSING, days_ago, "Rent"))

    # Weekly groceries
    for i, days_ago in enumerate(range(0, 56, 7)):
        transactions.append(make_txn(f"grocery_{i}", 120.0, Category.FOOD, days_ago, "Grocery Mart"))

    return transactions


@pytest.fixture
def txn():
    """Factory fixture: txn("id", 50.0, Category.FOOD, days_ago=3)"""
    return make_txn
