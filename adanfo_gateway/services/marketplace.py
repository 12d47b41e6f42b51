"""Lending pool - loan request submission, lender search and funding"""

import uuid
from dataclasses import replace
from typing import List, Optional

from adanfo_gateway.config import settings
from adanfo_gateway.domain.amortization import quote
from adanfo_gateway.domain.eligibility import check_eligibility
from adanfo_gateway.domain.exceptions import (
    ComputationError,
    EligibilityError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from adanfo_gateway.domain.models import (
    LOAN_DURATIONS,
    BorrowerProfile,
    FilterCriteria,
    LoanPurpose,
    LoanRequest,
    LoanStatus,
    PortfolioSummary,
)
from adanfo_gateway.domain.ports import Clock, LoanRequestStore, SystemClock
from adanfo_gateway.infrastructure.observability.logging import log_funding, log_rejection, log_submission
from adanfo_gateway.infrastructure.observability.metrics import funding_counter, record_submission


def format_number(value: float) -> str:
    """Render a number the way lenders type it: 2000.0 -> "2000", 10.5 -> "10.5" """
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)


def matches(request: LoanRequest, criteria: FilterCriteria) -> bool:
    """True when a request satisfies every bound in the criteria"""
    if criteria.status is not None and request.status != criteria.status:
        return False
    if criteria.min_amount is not None and request.principal < criteria.min_amount:
        return False
    if criteria.max_amount is not None and request.principal > criteria.max_amount:
        return False
    if criteria.min_duration is not None and request.duration_months < criteria.min_duration:
        return False
    if criteria.max_duration is not None and request.duration_months > criteria.max_duration:
        return False
    if criteria.min_interest_rate is not None and request.interest_rate < criteria.min_interest_rate:
        return False
    if criteria.max_interest_rate is not None and request.interest_rate > criteria.max_interest_rate:
        return False
    if criteria.min_credit_score is not None and request.credit_score < criteria.min_credit_score:
        return False

    if criteria.search_term:
        term = criteria.search_term.lower()
        haystack = (
            format_number(request.principal),
            request.purpose.value,
            str(request.duration_months),
            format_number(request.interest_rate),
        )
        if not any(term in field.lower() for field in haystack):
            return False

    return True


class LoanMarketplace:
    """Orchestrates the loan request lifecycle up to funding.

    Funding is serialized per request through the store's compare-and-swap,
    so of several concurrent lenders exactly one wins.
    """

    def __init__(
        self,
        store: LoanRequestStore,
        clock: Optional[Clock] = None,
        max_principal: Optional[float] = None,
        default_credit_score: Optional[int] = None,
    ):
        self.store = store
        self.clock = clock or SystemClock()
        self.max_principal = max_principal if max_principal is not None else settings.max_principal
        self.default_credit_score = (
            default_credit_score if default_credit_score is not None else settings.default_credit_score
        )

    def _validate_terms(self, principal: float, duration_months: int, purpose: str) -> LoanPurpose:
        if not 0 < principal <= self.max_principal:
            raise ValidationError(
                f"principal must be greater than 0 and at most {format_number(self.max_principal)}"
            )
        if duration_months not in LOAN_DURATIONS:
            allowed = ", ".join(str(d) for d in LOAN_DURATIONS)
            raise ValidationError(f"duration must be one of {allowed} months")
        try:
            return LoanPurpose(purpose)
        except ValueError:
            allowed = ", ".join(p.value for p in LoanPurpose)
            raise ValidationError(f"purpose must be one of {allowed}") from None

    def submit(
        self,
        profile: BorrowerProfile,
        principal: float,
        duration_months: int,
        purpose: str,
        description: Optional[str] = None,
    ) -> LoanRequest:
        """
        Put a new loan request into the pool.

        Flow:
        1. Validate amount, duration and purpose
        2. Require a verified profile and run the eligibility rules
        3. Price the loan from the borrower's credit score (650 when unset)
        4. Persist as Pending

        Raises:
            ValidationError: Malformed terms
            EligibilityError: Unverified borrower or failed eligibility rule
            ComputationError: Degenerate amortization input
        """
        try:
            loan_purpose = self._validate_terms(principal, duration_months, purpose)
        except ValidationError as e:
            record_submission("invalid")
            log_rejection("submit", str(e), borrower_ref=profile.borrower_ref)
            raise

        now = self.clock.now()

        if not profile.is_verified:
            reason = "borrower profile is not verified"
        else:
            reason = check_eligibility(profile, duration_months, now).reason

        if reason is not None:
            record_submission("ineligible")
            log_rejection("submit", reason, borrower_ref=profile.borrower_ref)
            raise EligibilityError(reason)

        credit_score = profile.credit_score or self.default_credit_score
        try:
            pricing = quote(principal, duration_months, credit_score)
        except ComputationError as e:
            record_submission("invalid")
            log_rejection("submit", str(e), borrower_ref=profile.borrower_ref)
            raise

        request = LoanRequest(
            id=str(uuid.uuid4()),
            borrower_ref=profile.borrower_ref,
            borrower_name=profile.display_name,
            principal=float(principal),
            duration_months=duration_months,
            purpose=loan_purpose,
            description=description or None,
            credit_score=credit_score,
            interest_rate=pricing.annual_rate,
            monthly_payment=pricing.monthly_payment,
            total_repayment=pricing.total_repayment,
            status=LoanStatus.PENDING,
            created_at=now,
            expected_completion=profile.completion_date,
        )
        self.store.put(request)

        record_submission("accepted", pricing.annual_rate)
        log_submission(request.id, request.borrower_ref, request.principal, duration_months, pricing.annual_rate)
        return request

    def search(self, criteria: FilterCriteria) -> List[LoanRequest]:
        """Requests matching all criteria, in store insertion order"""
        return [request for request in self.store.list() if matches(request, criteria)]

    def get_request(self, request_id: str) -> LoanRequest:
        request = self.store.get(request_id)
        if request is None:
            raise NotFoundError(f"Loan request {request_id} not found")
        return request

    def list_for_borrower(self, borrower_ref: str) -> List[LoanRequest]:
        """All of a borrower's requests, whatever their status"""
        return [request for request in self.store.list() if request.borrower_ref == borrower_ref]

    def fund(self, request_id: str, funder_ref: str, funded_amount: float) -> LoanRequest:
        """
        Commit lender capital to a Pending request.

        Raises:
            NotFoundError: Unknown request id
            InvalidStateError: Request is not Pending, or another lender funded it first
            ValidationError: Amount is not positive or exceeds the principal
        """
        request = self.store.get(request_id)
        if request is None:
            funding_counter.labels(outcome="not_found").inc()
            raise NotFoundError(f"Loan request {request_id} not found")

        if request.status != LoanStatus.PENDING:
            funding_counter.labels(outcome="conflict").inc()
            raise InvalidStateError(f"Loan request {request_id} is {request.status.value}, not pending")

        if not 0 < funded_amount <= request.principal:
            funding_counter.labels(outcome="invalid").inc()
            raise ValidationError(
                f"funded amount must be greater than 0 and at most {format_number(request.principal)}"
            )

        funded = replace(
            request,
            status=LoanStatus.FUNDED,
            funded_by=funder_ref,
            funded_amount=float(funded_amount),
            funded_at=self.clock.now(),
        )
        if not self.store.compare_and_swap(request_id, LoanStatus.PENDING, funded):
            funding_counter.labels(outcome="conflict").inc()
            log_rejection("fund", "already funded", loan_request_id=request_id, funder_ref=funder_ref)
            raise InvalidStateError(f"Loan request {request_id} is no longer pending")

        funding_counter.labels(outcome="funded").inc()
        log_funding(request_id, funder_ref, funded.funded_amount)
        return funded

    def lender_portfolio(self, funder_ref: str) -> PortfolioSummary:
        """Totals over the loans this lender has funded and that are still outstanding"""
        funded = [
            request
            for request in self.store.list()
            if request.status == LoanStatus.FUNDED and request.funded_by == funder_ref
        ]

        average_rate = sum(r.interest_rate for r in funded) / len(funded) if funded else 0.0

        return PortfolioSummary(
            funder_ref=funder_ref,
            funded_loans=len(funded),
            total_invested=round(sum(r.funded_amount or r.principal for r in funded), 2),
            average_interest_rate=round(average_rate, 2),
            expected_return=round(sum(r.total_repayment for r in funded), 2),
        )
