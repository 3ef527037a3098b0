"""POST /v1/assistant/chat - financial assistant conversation"""

import logging
import random
from datetime import date

from fastapi import APIRouter, Depends, Request

from finance_mentor.api.dependencies import (
    get_analysis_client,
    get_assistant_rng,
    get_request_id,
    get_state_repository,
    get_today,
)
from finance_mentor.api.v1.schemas import ChatRequest, ChatResponse
from finance_mentor.config import settings
from finance_mentor.domain.assistant import classify_intent
from finance_mentor.domain.summary import compute_summary
from finance_mentor.infrastructure.clients.analysis import ChatAnalysisProvider
from finance_mentor.infrastructure.clients.openrouter import ChatMessage, OpenRouterClient
from finance_mentor.infrastructure.database.repositories import StateRepository

router = APIRouter()


@router.post("/assistant/chat", response_model=ChatResponse)
async def chat(
    body: ChatRequest,
    request: Request,
    repo: StateRepository = Depends(get_state_repository),
    client: OpenRouterClient = Depends(get_analysis_client),
    rng: random.Random = Depends(get_assistant_rng),
    today: date = Depends(get_today),
):
    transactions = repo.load_transactions()
    summary = compute_summary(transactions, starting_balance=settings.starting_balance)
    intent = classify_intent(body.message)

    provider = ChatAnalysisProvider(
        client,
        body.message,
        summary,
        transactions,
        history=[ChatMessage(turn.role, turn.content) for turn in body.history],
        rng=rng,
        today=today,
    )
    result = await provider.resolve(settings.http_timeout_seconds)

    logging.info(
        "Assistant replied",
        extra={"request_id": get_request_id(request), "intent": intent.value, "degraded": result.degraded},
    )
    return ChatResponse(reply=result.value, intent=intent.value, degraded=result.degraded)
