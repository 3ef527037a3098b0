"""Cash-flow forecast - trailing actual balances plus a simulated forward window"""

import random
from collections import defaultdict
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional

from finance_mentor.domain.models import ForecastPoint, Transaction
from finance_mentor.utils.date_utils import generate_date_range


@dataclass(frozen=True)
class ForecastConfig:
    """
    Forecast assumptions.

    spend_jitter is the half-width of the uniform daily spend perturbation,
    as a fraction of avg_daily_spend (0.25 -> +/-25%).
    """

    starting_balance: float = 15000.0
    trailing_days: int = 30
    forward_days: int = 30
    payday_interval_days: int = 14
    payday_amount: float = 3200.0
    avg_daily_spend: float = 120.0
    spend_jitter: float = 0.25


def daily_net(transactions: Iterable[Transaction]) -> Dict[date, float]:
    """Signed amounts bucketed by calendar date"""
    buckets: Dict[date, float] = defaultdict(float)
    for txn in transactions:
        buckets[txn.date] += txn.signed_amount
    return buckets


def trailing_balances(
    transactions: Iterable[Transaction],
    config: ForecastConfig,
    today: date,
) -> List[ForecastPoint]:
    """
    One point per day from today - trailing_days to today (inclusive).

    The balance on each day is starting_balance plus every transaction dated
    on or before that day, so history older than the window seeds the walk.
    """
    buckets = daily_net(transactions)
    window_start = today - timedelta(days=config.trailing_days)

    balance = config.starting_balance + sum(
        amount for day, amount in buckets.items() if day < window_start
    )

    points = []
    for day in generate_date_range(window_start, today):
        balance += buckets.get(day, 0.0)
        points.append(ForecastPoint(date=day, actual=balance, projected=balance))
    return points


def forward_projection(
    base_balance: float,
    config: ForecastConfig,
    today: date,
    rng: random.Random,
) -> List[ForecastPoint]:
    """Simulate forward_days of paydays and noisy daily spend from base_balance"""
    jitter = config.avg_daily_spend * config.spend_jitter
    balance = base_balance

    points = []
    for i in range(1, config.forward_days + 1):
        if config.payday_interval_days > 0 and i % config.payday_interval_days == 0:
            balance += config.payday_amount

        balance -= config.avg_daily_spend + rng.uniform(-jitter, jitter)

        points.append(
            ForecastPoint(
                date=today + timedelta(days=i),
                projected=balance,
                upper_bound=balance * 1.1,
                lower_bound=balance * 0.9,
            )
        )
    return points


def project(
    transactions: Iterable[Transaction],
    config: Optional[ForecastConfig] = None,
    rng: Optional[random.Random] = None,
    today: Optional[date] = None,
) -> List[ForecastPoint]:
    """
    Build the combined forecast series.

    Args:
        transactions: Full transaction set (not mutated)
        config: Forecast assumptions (defaults: 15000 start, 30/30 days,
            3200 payday every 14 days, 120 daily spend)
        rng: Random source for the spend perturbation. Pass a seeded
            random.Random for a reproducible series.
        today: Last day of the trailing window (default: date.today())

    Returns:
        trailing_days + 1 actual points followed by forward_days projected
        points, strictly ascending by date.
    """
    config = config or ForecastConfig()
    rng = rng or random.Random()
    today = today or date.today()

    trailing = trailing_balances(transactions, config, today)
    base_balance = trailing[-1].actual if trailing else config.starting_balance

    return trailing + forward_projection(base_balance, config, today, rng)
