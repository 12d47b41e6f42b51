"""Loan pool endpoints - quotes, submission, search, funding and settlement"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from adanfo_gateway.api.dependencies import get_ledger, get_marketplace, get_registry, get_request_id
from adanfo_gateway.api.v1.errors import internal_error, to_http_error
from adanfo_gateway.api.v1.schemas import (
    FundLoanRequest,
    LoanListResponse,
    LoanResponse,
    QuoteResponse,
    SettleLoanRequest,
    SettlementResponse,
    SubmitLoanRequest,
)
from adanfo_gateway.domain.amortization import quote
from adanfo_gateway.domain.exceptions import DomainException
from adanfo_gateway.domain.models import FilterCriteria, LoanStatus
from adanfo_gateway.services.borrowers import BorrowerRegistry
from adanfo_gateway.services.ledger import CreditLedger
from adanfo_gateway.services.marketplace import LoanMarketplace

router = APIRouter()


@router.get("/quote", response_model=QuoteResponse)
def get_quote(
    request: Request,
    principal: float = Query(..., gt=0),
    duration_months: int = Query(...),
    credit_score: int = Query(0, ge=0),
):
    """Preview rate and payments for a prospective loan"""
    try:
        pricing = quote(principal, duration_months, credit_score)
    except DomainException as e:
        raise to_http_error(e, get_request_id(request))

    return QuoteResponse(
        annual_rate=pricing.annual_rate,
        monthly_payment=pricing.monthly_payment,
        total_repayment=pricing.total_repayment,
    )


@router.post("/loans", response_model=LoanResponse, status_code=201)
def submit_loan(
    request_body: SubmitLoanRequest,
    request: Request,
    registry: BorrowerRegistry = Depends(get_registry),
    marketplace: LoanMarketplace = Depends(get_marketplace),
):
    """
    Submit a loan request to the pool.

    Flow:
    1. Load the borrower's verified profile
    2. Validate terms and run eligibility rules
    3. Price from credit score and persist as pending
    """
    request_id = get_request_id(request)
    try:
        profile = registry.get(request_body.borrower_ref)
        loan = marketplace.submit(
            profile,
            request_body.principal,
            request_body.duration_months,
            request_body.purpose,
            request_body.description,
        )
    except DomainException as e:
        raise to_http_error(e, request_id)
    except Exception as e:
        raise internal_error(e, request_id)

    return LoanResponse.from_domain(loan)


@router.get("/loans", response_model=LoanListResponse)
def search_loans(
    min_amount: Optional[float] = Query(None),
    max_amount: Optional[float] = Query(None),
    min_duration: Optional[int] = Query(None),
    max_duration: Optional[int] = Query(None),
    min_interest_rate: Optional[float] = Query(None),
    max_interest_rate: Optional[float] = Query(None),
    min_credit_score: Optional[int] = Query(None),
    status: Optional[LoanStatus] = Query(None),
    q: Optional[str] = Query(None, description="Matches amount, purpose, duration or rate"),
    marketplace: LoanMarketplace = Depends(get_marketplace),
):
    """Browse the loan pool with lender filter criteria"""
    criteria = FilterCriteria(
        min_amount=min_amount,
        max_amount=max_amount,
        min_duration=min_duration,
        max_duration=max_duration,
        min_interest_rate=min_interest_rate,
        max_interest_rate=max_interest_rate,
        min_credit_score=min_credit_score,
        status=status,
        search_term=q,
    )
    loans = marketplace.search(criteria)
    return LoanListResponse(loans=[LoanResponse.from_domain(loan) for loan in loans])


@router.get("/loans/{loan_id}", response_model=LoanResponse)
def get_loan(loan_id: str, request: Request, marketplace: LoanMarketplace = Depends(get_marketplace)):
    try:
        loan = marketplace.get_request(loan_id)
    except DomainException as e:
        raise to_http_error(e, get_request_id(request))

    return LoanResponse.from_domain(loan)


@router.post("/loans/{loan_id}/fund", response_model=LoanResponse)
def fund_loan(
    loan_id: str,
    request_body: FundLoanRequest,
    request: Request,
    marketplace: LoanMarketplace = Depends(get_marketplace),
):
    """Fund a pending loan; only the first lender succeeds"""
    request_id = get_request_id(request)
    try:
        loan = marketplace.fund(loan_id, request_body.funder_ref, request_body.amount)
    except DomainException as e:
        raise to_http_error(e, request_id)
    except Exception as e:
        raise internal_error(e, request_id)

    return LoanResponse.from_domain(loan)


@router.post("/loans/{loan_id}/settle", response_model=SettlementResponse)
def settle_loan(
    loan_id: str,
    request_body: SettleLoanRequest,
    request: Request,
    ledger: CreditLedger = Depends(get_ledger),
):
    """Close a funded loan as repaid or defaulted and rescore the borrower"""
    request_id = get_request_id(request)
    try:
        loan, score = ledger.settle_loan(loan_id, request_body.outcome)
    except DomainException as e:
        raise to_http_error(e, request_id)
    except Exception as e:
        raise internal_error(e, request_id)

    return SettlementResponse(loan=LoanResponse.from_domain(loan), borrower_credit_score=score)
