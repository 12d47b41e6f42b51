"""Pydantic schemas for API request/response validation"""

from pydantic import BaseModel, Field
from datetime import date, datetime
from typing import List, Optional

from adanfo_gateway.domain.models import BorrowerProfile, LoanRequest, LoanStatus


class RegisterBorrowerRequest(BaseModel):
    """Request body for POST /v1/borrowers"""

    borrower_ref: str = Field(..., min_length=1, description="Opaque identity reference")
    display_name: str = Field("", description="Name shown to lenders")


class BorrowerResponse(BaseModel):
    borrower_ref: str
    display_name: str
    is_enrolled: bool
    institution: str
    gpa: float
    completion_date: date
    credit_score: int
    is_verified: bool

    @classmethod
    def from_domain(cls, profile: BorrowerProfile) -> "BorrowerResponse":
        return cls(
            borrower_ref=profile.borrower_ref,
            display_name=profile.display_name,
            is_enrolled=profile.is_enrolled,
            institution=profile.institution,
            gpa=profile.gpa,
            completion_date=profile.completion_date,
            credit_score=profile.credit_score,
            is_verified=profile.is_verified,
        )


class ScoreResponse(BaseModel):
    """Response for GET /v1/borrowers/{ref}/score"""

    borrower_ref: str
    credit_score: int
    rating: str


class RepaymentRequest(BaseModel):
    """Request body for POST /v1/borrowers/{ref}/repayments"""

    loan_id: str = Field(..., min_length=1)
    on_time: bool


class QuoteResponse(BaseModel):
    """Response for GET /v1/quote"""

    annual_rate: float
    monthly_payment: float
    total_repayment: float


class SubmitLoanRequest(BaseModel):
    """Request body for POST /v1/loans; business rules are checked by the marketplace"""

    borrower_ref: str = Field(..., min_length=1)
    principal: float
    duration_months: int
    purpose: str
    description: Optional[str] = None


class FundLoanRequest(BaseModel):
    """Request body for POST /v1/loans/{id}/fund"""

    funder_ref: str = Field(..., min_length=1)
    amount: float


class SettleLoanRequest(BaseModel):
    """Request body for POST /v1/loans/{id}/settle"""

    outcome: LoanStatus


class LoanResponse(BaseModel):
    id: str
    borrower_ref: str
    borrower_name: str
    principal: float
    duration_months: int
    purpose: str
    description: Optional[str] = None
    credit_score: int
    interest_rate: float
    monthly_payment: float
    total_repayment: float
    status: str
    created_at: datetime
    expected_completion: Optional[date] = None
    funded_by: Optional[str] = None
    funded_amount: Optional[float] = None
    funded_at: Optional[datetime] = None
    settled_at: Optional[datetime] = None

    @classmethod
    def from_domain(cls, request: LoanRequest) -> "LoanResponse":
        return cls(
            id=request.id,
            borrower_ref=request.borrower_ref,
            borrower_name=request.borrower_name,
            principal=request.principal,
            duration_months=request.duration_months,
            purpose=request.purpose.value,
            description=request.description,
            credit_score=request.credit_score,
            interest_rate=request.interest_rate,
            monthly_payment=request.monthly_payment,
            total_repayment=request.total_repayment,
            status=request.status.value,
            created_at=request.created_at,
            expected_completion=request.expected_completion,
            funded_by=request.funded_by,
            funded_amount=request.funded_amount,
            funded_at=request.funded_at,
            settled_at=request.settled_at,
        )


class LoanListResponse(BaseModel):
    loans: List[LoanResponse]


class SettlementResponse(BaseModel):
    """Response for POST /v1/loans/{id}/settle"""

    loan: LoanResponse
    borrower_credit_score: int


class PortfolioResponse(BaseModel):
    """Response for GET /v1/lenders/{ref}/portfolio"""

    funder_ref: str
    funded_loans: int
    total_invested: float
    average_interest_rate: float
    expected_return: float
