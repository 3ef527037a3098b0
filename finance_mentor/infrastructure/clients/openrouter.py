"""OpenRouter chat-completions client for remote financial analysis"""

import json
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

import httpx

from finance_mentor.config import settings
from finance_mentor.domain.exceptions import RemoteAnalysisError
from finance_mentor.domain.models import FinancialSummary, HealthScore, HealthStatus, Transaction
from finance_mentor.infrastructure.observability.metrics import remote_latency_histogram
from finance_mentor.infrastructure.serialization import transaction_to_dict

SYSTEM_PROMPT = """
You are 'Finny', an empathetic, knowledgeable, and practical financial mentor.
Your goal is to help users improve their financial health through actionable advice.

Guidelines:
1. Tone: Friendly, encouraging, but professional. Avoid being judgmental.
2. Format: Use bullet points for lists. Use bold text for emphasis. Keep paragraphs short.
3. Content: Analyze the user's specific data (income, expenses, net worth) and give
   specific, actionable steps. Explain financial concepts simply.
4. Safety: Do not recommend specific securities. Explain general principles instead.
"""

HEALTH_SYSTEM_PROMPT = "You are a financial analyst JSON generator."

ROLES = ("user", "assistant", "system")


@dataclass(frozen=True)
class ChatMessage:
    """One turn of a chat request"""

    role: str  # user | assistant | system
    content: str

    def __post_init__(self):
        if self.role not in ROLES:
            raise ValueError(f"Unsupported chat role: {self.role}")


def build_context(summary: FinancialSummary, recent_transactions: Sequence[Transaction]) -> str:
    recent = [transaction_to_dict(t) for t in list(recent_transactions)[:5]]
    return (
        "Current User Context:\n"
        f"- Net Worth: ${summary.net_worth:.2f}\n"
        f"- Income: ${summary.total_income:.2f}\n"
        f"- Expenses: ${summary.total_expenses:.2f}\n"
        f"- Savings Rate: {summary.savings_rate * 100:.1f}%\n"
        f"- Recent Transactions (Last 5): {json.dumps(recent)}"
    )


def build_chat_messages(
    history: Sequence[ChatMessage],
    new_message: str,
    summary: FinancialSummary,
    recent_transactions: Sequence[Transaction],
) -> List[ChatMessage]:
    """System prompt with user context, prior turns, then the new question"""
    system = ChatMessage("system", f"{SYSTEM_PROMPT}\nSystem Context: {build_context(summary, recent_transactions)}")
    prior = [m for m in history if m.role != "system"]
    return [system, *prior, ChatMessage("user", new_message)]


def build_health_prompt(summary: FinancialSummary) -> str:
    return (
        "Analyze this financial data and return a JSON object.\n\n"
        "Data:\n"
        f"- Income: ${summary.total_income:.2f}\n"
        f"- Expenses: ${summary.total_expenses:.2f}\n"
        f"- Net Worth: ${summary.net_worth:.2f}\n"
        f"- Savings Rate: {summary.savings_rate:.4f}\n\n"
        "Required JSON Structure:\n"
        '{"score": integer (0-100), "status": "Critical" | "Fair" | "Good" | "Excellent", '
        '"insights": [three short, actionable strings]}\n\n'
        "IMPORTANT: Return ONLY the raw JSON string. Do not use markdown code blocks."
    )


def strip_code_fences(text: str) -> str:
    return text.replace("```json", "").replace("```", "").strip()


def parse_health_payload(text: str) -> HealthScore:
    """
    Validate a remote health-score answer.

    Raises:
        RemoteAnalysisError: anything other than {score: 0-100 int, status, insights: [3 strings]}
    """
    try:
        payload = json.loads(strip_code_fences(text))
    except ValueError as e:
        raise RemoteAnalysisError(f"Health score is not JSON: {e}", reason="malformed") from e

    if not isinstance(payload, dict):
        raise RemoteAnalysisError("Health score payload is not an object", reason="malformed")

    score = payload.get("score")
    if isinstance(score, bool) or not isinstance(score, int) or not 0 <= score <= 100:
        raise RemoteAnalysisError(f"Invalid score: {score!r}", reason="malformed")

    try:
        status = HealthStatus(payload.get("status"))
    except ValueError as e:
        raise RemoteAnalysisError(f"Invalid status: {payload.get('status')!r}", reason="malformed") from e

    insights = payload.get("insights")
    if not isinstance(insights, list) or len(insights) != 3 or not all(isinstance(i, str) for i in insights):
        raise RemoteAnalysisError("Insights must be a list of three strings", reason="malformed")

    return HealthScore(score=score, status=status, insights=list(insights))


class OpenRouterClient:
    """Client for the OpenRouter chat-completions API"""

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = settings.openrouter_api_key if api_key is None else api_key
        self.base_url = base_url or settings.openrouter_base_url
        self.model = model or settings.openrouter_model
        self.timeout = timeout or settings.http_timeout_seconds
        self.transport = transport

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key) and "PLACEHOLDER" not in self.api_key and self.api_key.startswith("sk-or-")

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
            "HTTP-Referer": settings.site_url,
            "X-Title": settings.site_name,
        }

    async def _post_messages(self, messages: Sequence[ChatMessage]) -> str:
        """
        Send a chat-completions request and return the first choice's content.

        Raises:
            RemoteAnalysisError: On missing key, timeout, HTTP errors, or invalid response
        """
        if not self.is_configured:
            raise RemoteAnalysisError("OpenRouter API key is missing or invalid", reason="missing_credential")

        body: Dict[str, Any] = {
            "model": self.model,
            "messages": [{"role": m.role, "content": m.content} for m in messages],
        }

        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                with remote_latency_histogram.time():
                    response = await client.post(
                        f"{self.base_url}/chat/completions",
                        json=body,
                        headers=self._headers(),
                    )
                    response.raise_for_status()
                data = response.json()
                content = data["choices"][0]["message"]["content"]

            except httpx.TimeoutException as e:
                raise RemoteAnalysisError(f"OpenRouter timeout after {self.timeout}s", reason="timeout") from e
            except httpx.HTTPStatusError as e:
                raise RemoteAnalysisError(
                    f"OpenRouter error: {e.response.status_code}", reason="http_error"
                ) from e
            except httpx.RequestError as e:
                raise RemoteAnalysisError(f"OpenRouter unreachable: {e}", reason="http_error") from e
            except (KeyError, IndexError, ValueError, TypeError) as e:
                raise RemoteAnalysisError(f"Invalid response from OpenRouter: {e}", reason="malformed") from e

        if not isinstance(content, str) or not content.strip():
            raise RemoteAnalysisError("OpenRouter returned an empty answer", reason="malformed")
        return content

    async def complete(self, messages: Sequence[ChatMessage]) -> str:
        """Free-text chat answer"""
        return await self._post_messages(messages)

    async def health_score(self, summary: FinancialSummary) -> HealthScore:
        """Structured health score; malformed answers raise like network failures"""
        text = await self._post_messages(
            [ChatMessage("system", HEALTH_SYSTEM_PROMPT), ChatMessage("user", build_health_prompt(summary))]
        )
        return parse_health_payload(text)
