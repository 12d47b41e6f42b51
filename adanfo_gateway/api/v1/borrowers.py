"""Borrower endpoints - registration, credit score and repayment history"""

from fastapi import APIRouter, Depends, Request

from adanfo_gateway.api.dependencies import (
    get_ledger,
    get_marketplace,
    get_registry,
    get_request_id,
    get_verifier_client,
)
from adanfo_gateway.api.v1.errors import internal_error, to_http_error
from adanfo_gateway.api.v1.schemas import (
    BorrowerResponse,
    LoanListResponse,
    LoanResponse,
    RegisterBorrowerRequest,
    RepaymentRequest,
    ScoreResponse,
)
from adanfo_gateway.domain.exceptions import DomainException, VerifierAPIError
from adanfo_gateway.domain.scoring import credit_rating
from adanfo_gateway.infrastructure.clients.verifier import VerifierClient
from adanfo_gateway.infrastructure.observability.metrics import verifier_fetch_failures_counter
from adanfo_gateway.services.borrowers import BorrowerRegistry
from adanfo_gateway.services.ledger import CreditLedger
from adanfo_gateway.services.marketplace import LoanMarketplace

router = APIRouter()


@router.post("/borrowers", response_model=BorrowerResponse, status_code=201)
async def register_borrower(
    request_body: RegisterBorrowerRequest,
    request: Request,
    registry: BorrowerRegistry = Depends(get_registry),
    verifier: VerifierClient = Depends(get_verifier_client),
):
    """
    Register a student borrower.

    Flow:
    1. Fetch the verified academic record from the verifier
    2. Create (or refresh) the borrower profile, marked verified
    """
    request_id = get_request_id(request)
    try:
        record = await verifier.get_academic_record(request_body.borrower_ref)
        profile = registry.register(request_body.borrower_ref, request_body.display_name, record)
        return BorrowerResponse.from_domain(profile)

    except VerifierAPIError as e:
        verifier_fetch_failures_counter.inc()
        raise to_http_error(e, request_id)

    except DomainException as e:
        raise to_http_error(e, request_id)

    except Exception as e:
        raise internal_error(e, request_id)


@router.get("/borrowers/{borrower_ref}/score", response_model=ScoreResponse)
def get_score(borrower_ref: str, request: Request, ledger: CreditLedger = Depends(get_ledger)):
    """Current credit score with its lender-facing rating"""
    try:
        score = ledger.current_score(borrower_ref)
    except DomainException as e:
        raise to_http_error(e, get_request_id(request))

    return ScoreResponse(borrower_ref=borrower_ref, credit_score=score, rating=credit_rating(score))


@router.get("/borrowers/{borrower_ref}/loans", response_model=LoanListResponse)
def list_borrower_loans(borrower_ref: str, marketplace: LoanMarketplace = Depends(get_marketplace)):
    """All loan requests a borrower has submitted"""
    loans = marketplace.list_for_borrower(borrower_ref)
    return LoanListResponse(loans=[LoanResponse.from_domain(loan) for loan in loans])


@router.post("/borrowers/{borrower_ref}/repayments", response_model=ScoreResponse)
def record_repayment(
    borrower_ref: str,
    request_body: RepaymentRequest,
    request: Request,
    ledger: CreditLedger = Depends(get_ledger),
):
    """Record a repayment outcome and return the recomputed score"""
    request_id = get_request_id(request)
    try:
        score = ledger.record_repayment_event(borrower_ref, request_body.loan_id, request_body.on_time)
    except DomainException as e:
        raise to_http_error(e, request_id)
    except Exception as e:
        raise internal_error(e, request_id)

    return ScoreResponse(borrower_ref=borrower_ref, credit_score=score, rating=credit_rating(score))
