"""Student loan eligibility rules"""

from datetime import date, datetime

from adanfo_gateway.config import settings
from adanfo_gateway.domain.models import BorrowerProfile, EligibilityResult
from adanfo_gateway.utils.date_utils import add_months


def check_eligibility(
    profile: BorrowerProfile,
    duration_months: int,
    now: datetime,
    min_gpa: float | None = None,
    min_months_to_completion: int | None = None,
) -> EligibilityResult:
    """
    Check a borrower's academic profile against a loan duration.

    Rules are evaluated in order and the first failure is returned:
    1. Borrower must be currently enrolled
    2. GPA must be at least min_gpa (inclusive)
    3. Completion date must be at least min_months_to_completion calendar months away
    4. Loan must end on or before the completion date

    Args:
        profile: Verified borrower profile
        duration_months: Requested loan term
        now: Evaluation instant (injected clock, never wall-clock)

    Returns:
        EligibilityResult with a single rejection reason when not eligible
    """
    if min_gpa is None:
        min_gpa = settings.min_gpa
    if min_months_to_completion is None:
        min_months_to_completion = settings.min_months_to_completion

    if not profile.is_enrolled:
        return EligibilityResult(eligible=False, reason="not currently enrolled")

    if profile.gpa < min_gpa:
        return EligibilityResult(eligible=False, reason=f"GPA below minimum requirement of {min_gpa}")

    today: date = now.date()
    if profile.completion_date < add_months(today, min_months_to_completion):
        return EligibilityResult(
            eligible=False,
            reason=f"completion date must be at least {min_months_to_completion} months away",
        )

    if add_months(today, duration_months) > profile.completion_date:
        return EligibilityResult(eligible=False, reason="loan repayment period exceeds completion date")

    return EligibilityResult(eligible=True)
