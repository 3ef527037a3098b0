"""OpenRouter client against the stub server over ASGI"""

import httpx
import pytest
from stub_services.openrouter_server.main import app as stub_app
from finance_mentor.domain.exceptions import RemoteAnalysisError
from finance_mentor.domain.models import FinancialSummary, HealthStatus
from finance_mentor.infrastructure.clients.analysis import HealthAnalysisProvider
from finance_mentor.infrastructure.clients.openrouter import ChatMessage, OpenRouterClient

SUMMARY = FinancialSummary(total_income=4000.0, total_expenses=3500.0, net_worth=15500.0, savings_rate=0.125)


def stub_client(api_key: str = "sk-or-local") -> OpenRouterClient:
    return OpenRouterClient(
        api_key=api_key,
        base_url="http://stub/api/v1",
        model="stub-model",
        transport=httpx.ASGITransport(app=stub_app),
    )


async def test_chat_round_trip():
    answer = await stub_client().complete([ChatMessage("user", "how do I save?")])
    assert answer == "(stub stub-model) You asked: how do I save?"


async def test_fenced_health_answer_is_accepted():
    result = await HealthAnalysisProvider(stub_client(), SUMMARY, []).resolve()

    assert not result.degraded
    assert result.value.score == 72
    assert result.value.status == HealthStatus.GOOD


async def test_unknown_route_is_http_error():
    client = OpenRouterClient(
        api_key="sk-or-local",
        base_url="http://stub/api/v2",
        transport=httpx.ASGITransport(app=stub_app),
    )

    with pytest.raises(RemoteAnalysisError) as exc:
        await client.complete([ChatMessage("user", "hi")])
    assert exc.value.reason == "http_error"
