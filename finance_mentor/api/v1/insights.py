"""GET /v1/summary, /v1/forecast and /v1/health-score"""

import logging
import random
from datetime import date

from fastapi import APIRouter, Depends, Request

from finance_mentor.api.dependencies import (
    get_analysis_client,
    get_forecast_config,
    get_forecast_rng,
    get_request_id,
    get_state_repository,
    get_today,
)
from finance_mentor.api.v1.schemas import ForecastPointSchema, ForecastResponse, HealthScoreResponse, SummaryResponse
from finance_mentor.config import settings
from finance_mentor.domain.forecast import ForecastConfig, project
from finance_mentor.domain.summary import compute_summary
from finance_mentor.infrastructure.clients.analysis import HealthAnalysisProvider
from finance_mentor.infrastructure.clients.openrouter import OpenRouterClient
from finance_mentor.infrastructure.database.repositories import StateRepository
from finance_mentor.infrastructure.observability.metrics import health_score_histogram

router = APIRouter()


@router.get("/summary", response_model=SummaryResponse)
def get_summary(repo: StateRepository = Depends(get_state_repository)):
    summary = compute_summary(repo.load_transactions(), starting_balance=settings.starting_balance)
    return SummaryResponse(
        total_income=summary.total_income,
        total_expenses=summary.total_expenses,
        net_worth=summary.net_worth,
        savings_rate=summary.savings_rate,
    )


@router.get("/forecast", response_model=ForecastResponse)
def get_forecast(
    repo: StateRepository = Depends(get_state_repository),
    config: ForecastConfig = Depends(get_forecast_config),
    rng: random.Random = Depends(get_forecast_rng),
    today: date = Depends(get_today),
):
    """Trailing actual balances followed by the simulated forward window"""
    points = project(repo.load_transactions(), config=config, rng=rng, today=today)
    return ForecastResponse(points=[ForecastPointSchema.from_domain(p) for p in points])


@router.get("/health-score", response_model=HealthScoreResponse)
async def get_health_score(
    request: Request,
    repo: StateRepository = Depends(get_state_repository),
    client: OpenRouterClient = Depends(get_analysis_client),
):
    """
    Score financial health with the remote model.

    Any remote failure (no key, timeout, bad payload) is answered by the
    local scorer and flagged as degraded instead of failing the request.
    """
    transactions = repo.load_transactions()
    summary = compute_summary(transactions, starting_balance=settings.starting_balance)

    result = await HealthAnalysisProvider(client, summary, transactions).resolve(settings.http_timeout_seconds)
    health_score_histogram.observe(result.value.score)

    logging.info(
        "Health score served",
        extra={
            "request_id": get_request_id(request),
            "score": result.value.score,
            "status": result.value.status.value,
            "degraded": result.degraded,
        },
    )
    return HealthScoreResponse.from_domain(result.value, degraded=result.degraded)
