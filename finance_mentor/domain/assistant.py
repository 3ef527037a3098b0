"""Local assistant engine - intent classification and templated answers"""

import random
import re
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from finance_mentor.domain import categorizer
from finance_mentor.domain.models import FinancialSummary, HealthStatus, Transaction
from finance_mentor.domain.scoring import (
    anomaly_insight,
    concentration_insight,
    generate_insights,
    savings_insight,
    score_health,
)
from finance_mentor.domain.summary import expense_category_totals, spending_insights, top_expense_categories


class Intent(str, Enum):
    GREETING = "greeting"
    THANKS = "thanks"
    SPENDING = "spending"
    SAVINGS = "savings"
    BUDGET = "budget"
    HEALTH = "health"
    GOALS = "goals"
    ADVICE = "advice"
    ANALYSIS = "analysis"
    COMPARISON = "comparison"
    GENERAL = "general"


# Evaluated top to bottom, first match wins. Conversational intents come first
# so "hey, any saving tips?" is a greeting.
INTENT_PATTERNS: Tuple[Tuple[Intent, "re.Pattern[str]"], ...] = (
    (Intent.GREETING, re.compile(r"^(hi|hello|hey|good morning|good afternoon|good evening|sup|yo)")),
    (Intent.THANKS, re.compile(r"thank|thanks|appreciate|grateful")),
    (Intent.SPENDING, re.compile(r"spend|expense|cost|paid|bought|purchase")),
    (Intent.SAVINGS, re.compile(r"save|saving|emergency fund|nest egg")),
    (Intent.BUDGET, re.compile(r"budget|limit|allocat|plan")),
    (Intent.HEALTH, re.compile(r"health|score|status|doing|perform")),
    (Intent.GOALS, re.compile(r"goal|target|aim|objective")),
    (Intent.ADVICE, re.compile(r"tip|advice|recommend|suggest|help|how to|what should")),
    (Intent.ANALYSIS, re.compile(r"analyz|review|look at|check|examine|breakdown")),
    (Intent.COMPARISON, re.compile(r"compar|versus|vs|better|worse")),
)

GREETINGS = (
    "Hey there! Ready to talk about your finances?",
    "Hello! How can I help you manage your money today?",
    "Hi! Great to see you! What financial questions do you have?",
    "Hey! Let's make your money work smarter together!",
)

THANKS = (
    "You're very welcome! Happy to help anytime!",
    "My pleasure! That's what I'm here for!",
    "Glad I could help! Feel free to ask anything else!",
    "Anytime! Your financial success is my mission!",
)

SPENDING_INTROS = (
    "Let me break down your spending for you!",
    "Here's what I found about your expenses!",
    "Alright, let's dive into where your money's going!",
    "I've analyzed your spending patterns - here's the scoop!",
)

TIPS = (
    "Set up automatic transfers to savings on payday",
    "Track every expense for 30 days to identify spending patterns",
    "Use the 24-hour rule for non-essential purchases over $50",
    "Build an emergency fund covering 3-6 months of expenses",
    "Review and cancel unused subscriptions",
    "Meal prep to reduce food expenses",
    "Use cashback credit cards for regular purchases (pay in full)",
    "Negotiate bills like insurance and internet annually",
    "Invest in index funds for long-term growth",
    "Set specific, measurable financial goals",
)

NEEDS_SHARE = 0.5
WANTS_SHARE = 0.3
SAVINGS_SHARE = 0.2

STATUS_HEADLINES = {
    HealthStatus.EXCELLENT: "**Excellent!** Your finances are in great shape.",
    HealthStatus.GOOD: "**Good!** You're doing well, with room for improvement.",
    HealthStatus.FAIR: "**Fair.** Some areas need attention.",
    HealthStatus.CRITICAL: "**Needs Work.** Let's work on your finances.",
}


def classify_intent(message: str) -> Intent:
    """Lower-case the message and return the first matching intent"""
    lower = (message or "").strip().lower()
    for intent, pattern in INTENT_PATTERNS:
        if pattern.search(lower):
            return intent
    return Intent.GENERAL


@dataclass(frozen=True)
class BudgetSplit:
    """50/30/20 targets for a given income"""

    needs: float
    wants: float
    savings: float


def budget_split(total_income: float) -> BudgetSplit:
    return BudgetSplit(
        needs=total_income * NEEDS_SHARE,
        wants=total_income * WANTS_SHARE,
        savings=total_income * SAVINGS_SHARE,
    )


def bucket_totals(transactions: Sequence[Transaction]) -> Dict[str, float]:
    """Expense totals per 50/30/20 bucket"""
    totals = {categorizer.NEEDS: 0.0, categorizer.WANTS: 0.0, categorizer.SAVINGS: 0.0}
    for category, amount in expense_category_totals(transactions).items():
        totals[categorizer.budget_bucket(category)] += amount
    return totals


def budget_recommendations(summary: FinancialSummary, transactions: Sequence[Transaction]) -> List[str]:
    """Where spending strays from 50/30/20 and how far savings are from 20%"""
    recommendations = []
    if summary.total_income > 0:
        totals = bucket_totals(transactions)
        needs_pct = totals[categorizer.NEEDS] / summary.total_income * 100
        wants_pct = totals[categorizer.WANTS] / summary.total_income * 100
        if needs_pct > NEEDS_SHARE * 100:
            recommendations.append(
                f"Your essential expenses are {needs_pct:.0f}% of income. Try to keep them under 50%."
            )
        if wants_pct > WANTS_SHARE * 100:
            recommendations.append(
                f"Discretionary spending is {wants_pct:.0f}% of income. Consider reducing to 30% or less."
            )

    if summary.savings_rate < SAVINGS_SHARE:
        gap = savings_gap(summary)
        recommendations.append(f"To reach 20% savings rate, try to save an additional ${gap:.2f} per month.")
    return recommendations


def savings_gap(summary: FinancialSummary) -> float:
    """Extra monthly savings needed to hit a 20% savings rate"""
    target = summary.total_income * SAVINGS_SHARE
    current = summary.total_income - summary.total_expenses
    return max(target - current, 0.0)


@dataclass(frozen=True)
class ResponseContext:
    query: str
    summary: FinancialSummary
    transactions: Sequence[Transaction]
    rng: random.Random
    today: date


def _format_greeting(ctx: ResponseContext) -> str:
    return ctx.rng.choice(GREETINGS)


def _format_thanks(ctx: ResponseContext) -> str:
    return ctx.rng.choice(THANKS)


def _format_spending(ctx: ResponseContext) -> str:
    summary = ctx.summary
    lines = [ctx.rng.choice(SPENDING_INTROS), ""]

    if summary.total_expenses <= 0:
        lines.append("I don't see any expenses yet. Add or import some transactions and ask me again!")
        return "\n".join(lines)

    verdict = (
        "That's quite a bit - let's see where it's going!"
        if summary.total_expenses > summary.total_income * 0.8
        else "Not bad! Let's see the breakdown."
    )
    lines.append(f"You've spent **${summary.total_expenses:.2f}** in total. {verdict}")
    lines.append("")

    top = top_expense_categories(ctx.transactions, limit=3)
    lines.append(f"**Your Top {len(top)} Spending Categories:**")
    for rank, (category, amount) in enumerate(top, start=1):
        share = amount / summary.total_expenses * 100
        lines.append(f"{rank}. **{category.value}**: ${amount:.2f} ({share:.1f}%)")

    take = concentration_insight(ctx.transactions)
    if take:
        lines.extend(["", f"**My Take:** {take}"])

    lines.extend(["", "*Want to dig deeper? Just ask me about any specific category!*"])
    return "\n".join(lines)


def _format_savings(ctx: ResponseContext) -> str:
    summary = ctx.summary
    monthly_savings = summary.total_income - summary.total_expenses
    rate_pct = summary.savings_rate * 100
    gap = savings_gap(summary)

    if summary.savings_rate >= 0.20:
        lines = [
            f"You're crushing it with a **{rate_pct:.1f}%** savings rate!",
            "",
            f"That's **${monthly_savings:.2f}** going into savings. Here's what you could do next:",
            "- Set up automatic investments",
            "- Start a down payment fund",
            "- Max out your retirement accounts",
            "- Build wealth through index funds",
        ]
    elif summary.savings_rate >= 0.10:
        lines = [
            f"Nice work! You're saving **{rate_pct:.1f}%** of your income.",
            "",
            f"That's **${monthly_savings:.2f}** - not bad at all! To hit 20% you'd need an extra **${gap:.2f}**.",
            "",
            "**Quick wins to get there:**",
            "- Cut one subscription you barely use",
            "- Cook at home 2 more times per week",
            "- Negotiate your bills (internet, insurance)",
            "- Sell stuff you don't need",
        ]
    else:
        lines = [
            "Let's talk savings!",
            "",
            f"Right now you're saving **{rate_pct:.1f}%** (about **${monthly_savings:.2f}**).",
            f"To get to 20%, we need to find **${gap:.2f}** more.",
            "",
            "**Let's start small:**",
            "1. Track every expense for a week",
            '2. Find your biggest "money leak"',
            "3. Cut it by 50% (not 100% - be realistic!)",
            "4. Automate that savings",
        ]

    lines.extend(["", savings_insight(summary)])
    return "\n".join(lines)


def _format_budget(ctx: ResponseContext) -> str:
    split = budget_split(ctx.summary.total_income)
    lines = [
        "**Budget Recommendations**",
        "",
        f"Based on your income of ${ctx.summary.total_income:.2f} and the 50/30/20 rule:",
        f"- Needs (50%): ${split.needs:.2f} - housing, food, utilities, transport",
        f"- Wants (30%): ${split.wants:.2f} - entertainment, shopping",
        f"- Savings (20%): ${split.savings:.2f} - emergency fund, investments, goals",
        "",
    ]

    recommendations = budget_recommendations(ctx.summary, ctx.transactions)
    if recommendations:
        lines.append("**Your Budget Analysis:**")
        lines.extend(f"{idx}. {rec}" for idx, rec in enumerate(recommendations, start=1))
    else:
        lines.append("Your budget looks well-balanced! Keep up the good work.")
    return "\n".join(lines)


def _format_health(ctx: ResponseContext) -> str:
    health = score_health(ctx.summary, ctx.transactions)
    lines = [
        "**Financial Health Check**",
        "",
        f"Health Score: **{health.score}/100**",
        "",
        STATUS_HEADLINES[health.status],
    ]
    if health.insights:
        lines.extend(["", "**Areas to Address:**"])
        lines.extend(f"{idx}. {insight}" for idx, insight in enumerate(health.insights, start=1))
    return "\n".join(lines)


def _format_analysis(ctx: ResponseContext) -> str:
    summary = ctx.summary
    lines = [
        "**Complete Financial Analysis**",
        "",
        "**Overview:**",
        f"- Income: ${summary.total_income:.2f}",
        f"- Expenses: ${summary.total_expenses:.2f}",
        f"- Net: ${summary.total_income - summary.total_expenses:.2f}",
        f"- Savings Rate: {summary.savings_rate * 100:.1f}%",
    ]
    insights = generate_insights(summary, ctx.transactions)[:3]
    if insights:
        lines.extend(["", "**Key Insights:**"])
        lines.extend(f"{idx}. {insight}" for idx, insight in enumerate(insights, start=1))
    return "\n".join(lines)


def _format_comparison(ctx: ResponseContext) -> str:
    stats = spending_insights(ctx.transactions, today=ctx.today)
    lines = ["**How You Compare**", ""]

    if stats.monthly_change_pct is None:
        lines.append(f"This month you've spent ${stats.this_month_expenses:.2f}. I need last month's data to compare.")
    else:
        direction = "more" if stats.monthly_change_pct > 0 else "less"
        lines.append(
            f"This month you've spent ${stats.this_month_expenses:.2f} vs ${stats.last_month_expenses:.2f} "
            f"last month ({abs(stats.monthly_change_pct):.1f}% {direction})."
        )

    if ctx.summary.total_income > 0:
        totals = bucket_totals(ctx.transactions)
        needs_pct = totals[categorizer.NEEDS] / ctx.summary.total_income * 100
        wants_pct = totals[categorizer.WANTS] / ctx.summary.total_income * 100
        lines.extend(
            [
                "",
                "**Against the 50/30/20 rule:**",
                f"- Needs: {needs_pct:.0f}% of income (target 50%)",
                f"- Wants: {wants_pct:.0f}% of income (target 30%)",
                f"- Savings: {ctx.summary.savings_rate * 100:.0f}% of income (target 20%)",
            ]
        )

    anomaly = anomaly_insight(ctx.transactions)
    if anomaly:
        lines.extend(["", anomaly])
    return "\n".join(lines)


def _format_tips(ctx: ResponseContext) -> str:
    tips = ctx.rng.sample(TIPS, 3)
    lines = ["**Financial Tips & Advice**", "", "Here are some personalized recommendations:", ""]
    lines.extend(f"{idx}. {tip}" for idx, tip in enumerate(tips, start=1))
    lines.extend(["", "**Remember:** Small consistent changes lead to big results over time!"])
    return "\n".join(lines)


FORMATTERS: Dict[Intent, Callable[[ResponseContext], str]] = {
    Intent.GREETING: _format_greeting,
    Intent.THANKS: _format_thanks,
    Intent.SPENDING: _format_spending,
    Intent.SAVINGS: _format_savings,
    Intent.BUDGET: _format_budget,
    Intent.HEALTH: _format_health,
    Intent.GOALS: _format_tips,
    Intent.ADVICE: _format_tips,
    Intent.ANALYSIS: _format_analysis,
    Intent.COMPARISON: _format_comparison,
    Intent.GENERAL: _format_tips,
}


def respond(
    query: str,
    summary: FinancialSummary,
    transactions: Sequence[Transaction],
    rng: Optional[random.Random] = None,
    today: Optional[date] = None,
) -> str:
    """
    Answer a free-text question without any remote model.

    Stateless: the intent depends only on the query, and template choice only
    on the injected rng.
    """
    intent = classify_intent(query)
    ctx = ResponseContext(
        query=query,
        summary=summary,
        transactions=list(transactions),
        rng=rng or random.Random(),
        today=today or date.today(),
    )
    return FORMATTERS[intent](ctx)
