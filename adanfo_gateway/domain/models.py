"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Optional

# Loan terms offered to students, in months
LOAN_DURATIONS = (3, 6, 12, 18, 24)

MIN_CREDIT_SCORE = 300
MAX_CREDIT_SCORE = 850


class LoanStatus(str, Enum):
    """Lifecycle status of a loan request"""

    PENDING = "pending"
    FUNDED = "funded"
    REPAID = "repaid"
    DEFAULTED = "defaulted"

    @property
    def is_terminal(self) -> bool:
        return self in (LoanStatus.REPAID, LoanStatus.DEFAULTED)


class LoanPurpose(str, Enum):
    """What the borrower intends to spend the loan on"""

    TUITION = "tuition"
    BOOKS = "books"
    HOUSING = "housing"
    TECHNOLOGY = "technology"
    LIVING = "living"
    TRANSPORTATION = "transportation"
    OTHER = "other"


@dataclass
class AcademicRecord:
    """Verified academic attributes supplied by the eligibility verifier"""

    is_enrolled: bool
    institution: str
    gpa: float
    completion_date: date


@dataclass
class BorrowerProfile:
    """Verified student borrower"""

    borrower_ref: str
    display_name: str
    is_enrolled: bool
    institution: str
    gpa: float  # 0.0 - 4.0
    completion_date: date
    credit_score: int = 0  # 0 means no score yet
    is_verified: bool = False


@dataclass
class LoanQuote:
    """Pricing of a loan: annual rate in percent plus payment amounts"""

    annual_rate: float
    monthly_payment: float
    total_repayment: float


@dataclass
class EligibilityResult:
    """Outcome of an eligibility check; reason is set only on rejection"""

    eligible: bool
    reason: Optional[str] = None


@dataclass
class LoanRequest:
    """Loan request as listed in the lending pool"""

    id: str
    borrower_ref: str
    borrower_name: str
    principal: float
    duration_months: int
    purpose: LoanPurpose
    credit_score: int
    interest_rate: float
    monthly_payment: float
    total_repayment: float
    status: LoanStatus
    created_at: datetime
    description: Optional[str] = None
    expected_completion: Optional[date] = None
    funded_by: Optional[str] = None
    funded_amount: Optional[float] = None
    funded_at: Optional[datetime] = None
    settled_at: Optional[datetime] = None


@dataclass
class RepaymentEvent:
    """Single repayment outcome in a borrower's history (append-only)"""

    loan_ref: str
    borrower_ref: str
    occurred_at: datetime
    on_time: bool


@dataclass
class FilterCriteria:
    """Lender-side search filter; None bounds are open"""

    min_amount: Optional[float] = None
    max_amount: Optional[float] = None
    min_duration: Optional[int] = None
    max_duration: Optional[int] = None
    min_interest_rate: Optional[float] = None
    max_interest_rate: Optional[float] = None
    min_credit_score: Optional[int] = None
    status: Optional[LoanStatus] = None
    search_term: Optional[str] = None


@dataclass
class PortfolioSummary:
    """Aggregates over the loans a lender currently has funded"""

    funder_ref: str
    funded_loans: int
    total_invested: float
    average_interest_rate: float
    expected_return: float
