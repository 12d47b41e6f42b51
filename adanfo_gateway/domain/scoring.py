"""Credit scoring engine - score evolution from repayment history"""

from typing import Sequence

from adanfo_gateway.domain.models import MAX_CREDIT_SCORE, MIN_CREDIT_SCORE, RepaymentEvent

RECENT_WINDOW = 3


def history_adjustment(history: Sequence[RepaymentEvent]) -> int:
    """
    Score delta from the on-time ratio over the full history.

    - 100% on time with at least 3 repayments: +30
    - 85%+ on time: +15
    - 70%+ on time: 0
    - below 70%: -25
    """
    total = len(history)
    on_time = sum(1 for event in history if event.on_time)
    ratio = on_time / total

    if ratio == 1.0 and total >= 3:
        return 30
    elif ratio >= 0.85:
        return 15
    elif ratio >= 0.70:
        return 0
    else:
        return -25


def recency_adjustment(history: Sequence[RepaymentEvent]) -> int:
    """Score delta from the last 3 repayments: +10 all on time, -20 all late, 0 mixed or too few"""
    if len(history) < RECENT_WINDOW:
        return 0

    recent_on_time = sum(1 for event in history[-RECENT_WINDOW:] if event.on_time)
    if recent_on_time == RECENT_WINDOW:
        return 10
    if recent_on_time == 0:
        return -20
    return 0


def next_score(current_score: int, history: Sequence[RepaymentEvent]) -> int:
    """
    Recompute a credit score from the full repayment history (oldest first).

    Pure and deterministic: replaying the same score and history gives the same result.
    The result is clamped to the 300-850 range.
    """
    if not history:
        return current_score

    score = current_score + history_adjustment(history) + recency_adjustment(history)
    return max(MIN_CREDIT_SCORE, min(MAX_CREDIT_SCORE, score))


def credit_rating(score: int) -> str:
    """Rating band shown to lenders next to a borrower's score"""
    if score >= 750:
        return "Excellent"
    elif score >= 670:
        return "Good"
    elif score >= 580:
        return "Fair"
    else:
        return "Poor"
