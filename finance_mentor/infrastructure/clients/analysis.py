"""Remote-first analysis with a deterministic local fallback"""

import asyncio
import logging
import random
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date
from typing import Generic, Optional, Sequence, TypeVar

from finance_mentor.domain.assistant import respond
from finance_mentor.domain.exceptions import RemoteAnalysisError
from finance_mentor.domain.models import FinancialSummary, HealthScore, Transaction
from finance_mentor.domain.scoring import score_health
from finance_mentor.infrastructure.clients.openrouter import ChatMessage, OpenRouterClient, build_chat_messages
from finance_mentor.infrastructure.observability.metrics import analysis_fallback_counter

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class AnalysisResult(Generic[T]):
    """Outcome of an analysis; degraded means the local engine answered"""

    value: T
    degraded: bool = False
    reason: Optional[str] = None


class AnalysisProvider(ABC, Generic[T]):
    """
    Strategy with a remote attempt and a local answer.

    resolve() never raises for remote trouble: a missing key, timeout,
    HTTP failure or malformed payload all produce the local answer.
    """

    kind = "analysis"

    @abstractmethod
    async def try_remote(self) -> T:
        ...

    @abstractmethod
    def local_fallback(self) -> T:
        ...

    async def resolve(self, timeout: Optional[float] = None) -> AnalysisResult[T]:
        try:
            value = await asyncio.wait_for(self.try_remote(), timeout)
        except asyncio.TimeoutError:
            reason = "timeout"
        except RemoteAnalysisError as e:
            reason = e.reason
            if reason != "missing_credential":
                logger.warning(f"Remote {self.kind} failed: {e}", extra={"kind": self.kind, "reason": reason})
        else:
            return AnalysisResult(value=value)

        analysis_fallback_counter.labels(kind=self.kind, reason=reason).inc()
        logger.info("Serving local analysis", extra={"kind": self.kind, "reason": reason})
        return AnalysisResult(value=self.local_fallback(), degraded=True, reason=reason)


class ChatAnalysisProvider(AnalysisProvider[str]):
    """Assistant answer from the remote model or the rule-based assistant"""

    kind = "chat"

    def __init__(
        self,
        client: OpenRouterClient,
        query: str,
        summary: FinancialSummary,
        transactions: Sequence[Transaction],
        history: Sequence[ChatMessage] = (),
        rng: Optional[random.Random] = None,
        today: Optional[date] = None,
    ):
        self.client = client
        self.query = query
        self.summary = summary
        self.transactions = list(transactions)
        self.history = list(history)
        self.rng = rng
        self.today = today

    async def try_remote(self) -> str:
        messages = build_chat_messages(self.history, self.query, self.summary, self.transactions)
        return await self.client.complete(messages)

    def local_fallback(self) -> str:
        return respond(self.query, self.summary, self.transactions, rng=self.rng, today=self.today)


class HealthAnalysisProvider(AnalysisProvider[HealthScore]):
    """Health score from the remote model or the local scorer"""

    kind = "health_score"

    def __init__(self, client: OpenRouterClient, summary: FinancialSummary, transactions: Sequence[Transaction]):
        self.client = client
        self.summary = summary
        self.transactions = list(transactions)

    async def try_remote(self) -> HealthScore:
        return await self.client.health_score(self.summary)

    def local_fallback(self) -> HealthScore:
        return score_health(self.summary, self.transactions)
