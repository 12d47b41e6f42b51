"""Interest rate tiers and amortizing loan payments"""

import math

from adanfo_gateway.domain.exceptions import ComputationError
from adanfo_gateway.domain.models import LoanQuote


def interest_rate_for(credit_score: int, duration_months: int) -> float:
    """
    Annual interest rate in percent, priced from credit score.

    Tiers:
    - 750+:     8%
    - 650-749: 10%
    - <650:    12% (also covers a missing score of 0)
    - +1 point for terms longer than 24 months
    """
    if credit_score >= 750:
        rate = 8.0
    elif credit_score >= 650:
        rate = 10.0
    else:
        rate = 12.0

    if duration_months > 24:
        rate += 1.0

    return rate


def monthly_payment(principal: float, duration_months: int, annual_rate: float) -> float:
    """
    Standard amortizing payment, unrounded.

    payment = P * r * (1 + r)^n / ((1 + r)^n - 1), with r = annual_rate / 100 / 12.
    A zero rate degenerates to P / n. Degenerate inputs yield NaN instead of raising.
    """
    if duration_months <= 0:
        return math.nan

    monthly_rate = annual_rate / 100 / 12
    try:
        if monthly_rate == 0:
            return principal / duration_months
        growth = (1 + monthly_rate) ** duration_months
        return principal * monthly_rate * growth / (growth - 1)
    except (ZeroDivisionError, OverflowError):
        return math.nan


def quote(principal: float, duration_months: int, credit_score: int) -> LoanQuote:
    """
    Price a loan: rate from credit tier, then monthly payment and total repayment.

    Monetary values are rounded to 2 decimals only on the returned quote.

    Raises:
        ComputationError: Inputs produce a non-finite payment (e.g. a zero-month term).
            The error carries a zeroed quote.
    """
    annual_rate = interest_rate_for(credit_score, duration_months)
    payment = monthly_payment(principal, duration_months, annual_rate)
    total = payment * duration_months

    if not (math.isfinite(payment) and math.isfinite(total)):
        raise ComputationError(
            f"Cannot amortize principal {principal} over {duration_months} months"
        )

    return LoanQuote(
        annual_rate=annual_rate,
        monthly_payment=round(payment, 2),
        total_repayment=round(total, 2),
    )
