"""Dependency injection for FastAPI endpoints"""

import random
from datetime import date

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from finance_mentor.config import settings
from finance_mentor.domain.forecast import ForecastConfig
from finance_mentor.infrastructure.clients.openrouter import OpenRouterClient
from finance_mentor.infrastructure.database.repositories import SqlKeyValueStore, StateRepository
from finance_mentor.infrastructure.database.session import get_db


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_state_repository(db: Session = Depends(get_db)) -> StateRepository:
    """Provide the persisted-state repository for this request"""
    return StateRepository(SqlKeyValueStore(db), seed_demo_data=settings.seed_demo_data)


def get_analysis_client() -> OpenRouterClient:
    """Provide OpenRouter client instance"""
    return OpenRouterClient()


def get_today() -> date:
    return date.today()


def get_forecast_config() -> ForecastConfig:
    return ForecastConfig(
        starting_balance=settings.starting_balance,
        trailing_days=settings.forecast_trailing_days,
        forward_days=settings.forecast_forward_days,
        payday_interval_days=settings.payday_interval_days,
        payday_amount=settings.payday_amount,
        avg_daily_spend=settings.avg_daily_spend,
        spend_jitter=settings.spend_jitter,
    )


def get_forecast_rng() -> random.Random:
    return random.Random(settings.forecast_seed)


def get_assistant_rng() -> random.Random:
    return random.Random(settings.assistant_seed)
