"""Unit tests for loan submission, pool search and funding"""

import pytest
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from datetime import datetime, timezone
from threading import Barrier
from adanfo_gateway.domain.amortization import quote
from adanfo_gateway.domain.exceptions import (
    EligibilityError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from adanfo_gateway.domain.models import FilterCriteria, LoanPurpose, LoanRequest, LoanStatus
from adanfo_gateway.domain.ports import FixedClock
from adanfo_gateway.services.marketplace import LoanMarketplace, format_number

NOW = datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def marketplace(loan_store) -> LoanMarketplace:
    return LoanMarketplace(loan_store, clock=FixedClock(NOW), max_principal=10_000, default_credit_score=650)


def stored_request(request_id: str, **overrides) -> LoanRequest:
    """Loan request written straight to the store, bypassing submission"""
    fields = dict(
        id=request_id,
        borrower_ref="student-x",
        borrower_name="Student X",
        principal=2000.0,
        duration_months=12,
        purpose=LoanPurpose.BOOKS,
        credit_score=700,
        interest_rate=10.0,
        monthly_payment=175.83,
        total_repayment=2109.97,
        status=LoanStatus.PENDING,
        created_at=NOW,
    )
    fields.update(overrides)
    return LoanRequest(**fields)


def test_submit_creates_pending_request(marketplace, loan_store, profile):
    """Unset credit score is priced as 650"""
    request = marketplace.submit(profile, 2000, 12, "tuition", "Second semester fees")

    expected = quote(2000, 12, 650)
    assert request.status == LoanStatus.PENDING
    assert request.credit_score == 650
    assert request.interest_rate == expected.annual_rate == 10.0
    assert request.monthly_payment == expected.monthly_payment
    assert request.total_repayment == expected.total_repayment
    assert request.created_at == NOW
    assert request.purpose == LoanPurpose.TUITION
    assert request.expected_completion == profile.completion_date
    assert request.funded_by is None
    assert loan_store.get(request.id) == request


def test_submit_prices_with_existing_score(marketplace, profile):
    request = marketplace.submit(replace(profile, credit_score=780), 5000, 6, "technology")

    assert request.credit_score == 780
    assert request.interest_rate == 8.0


@pytest.mark.parametrize("principal", [0, -100, 10_000.01])
def test_submit_rejects_out_of_range_principal(marketplace, profile, principal):
    with pytest.raises(ValidationError):
        marketplace.submit(profile, principal, 12, "tuition")


def test_submit_accepts_principal_ceiling(marketplace, profile):
    assert marketplace.submit(profile, 10_000, 12, "tuition").principal == 10_000


def test_submit_rejects_unknown_duration(marketplace, profile):
    with pytest.raises(ValidationError, match="duration"):
        marketplace.submit(profile, 1000, 9, "tuition")


def test_submit_rejects_unknown_purpose(marketplace, profile):
    with pytest.raises(ValidationError, match="purpose"):
        marketplace.submit(profile, 1000, 12, "holiday")


def test_submit_rejects_unverified_profile(marketplace, loan_store, profile):
    with pytest.raises(EligibilityError) as exc_info:
        marketplace.submit(replace(profile, is_verified=False), 1000, 12, "tuition")

    assert exc_info.value.reason == "borrower profile is not verified"
    assert loan_store.list() == []


def test_submit_surfaces_eligibility_reason(marketplace, loan_store, profile):
    with pytest.raises(EligibilityError) as exc_info:
        marketplace.submit(replace(profile, gpa=1.4), 1000, 12, "tuition")

    assert exc_info.value.reason == "GPA below minimum requirement of 1.5"
    assert loan_store.list() == []


def test_submit_then_search_pending_round_trip(marketplace, profile):
    submitted = marketplace.submit(profile, 3500, 18, "housing")

    found = marketplace.search(FilterCriteria(status=LoanStatus.PENDING))

    assert [r.id for r in found] == [submitted.id]
    assert found[0].interest_rate == submitted.interest_rate
    assert found[0].monthly_payment == submitted.monthly_payment
    assert found[0].total_repayment == submitted.total_repayment


def test_search_min_credit_score_excludes_lower(marketplace, loan_store):
    loan_store.put(stored_request("a", credit_score=749))
    loan_store.put(stored_request("b", credit_score=750))

    found = marketplace.search(FilterCriteria(min_credit_score=750))

    assert [r.id for r in found] == ["b"]


def test_search_ranges_are_inclusive(marketplace, loan_store):
    loan_store.put(stored_request("low", principal=500.0, duration_months=3, interest_rate=8.0))
    loan_store.put(stored_request("mid", principal=2000.0, duration_months=12, interest_rate=10.0))
    loan_store.put(stored_request("high", principal=9000.0, duration_months=24, interest_rate=12.0))

    assert [r.id for r in marketplace.search(FilterCriteria(min_amount=500, max_amount=2000))] == ["low", "mid"]
    assert [r.id for r in marketplace.search(FilterCriteria(min_duration=12, max_duration=24))] == ["mid", "high"]
    assert [r.id for r in marketplace.search(FilterCriteria(min_interest_rate=10, max_interest_rate=10))] == ["mid"]


def test_search_status_filter(marketplace, loan_store):
    loan_store.put(stored_request("p1"))
    loan_store.put(stored_request("f1", status=LoanStatus.FUNDED))
    loan_store.put(stored_request("p2"))

    assert [r.id for r in marketplace.search(FilterCriteria(status=LoanStatus.PENDING))] == ["p1", "p2"]
    assert [r.id for r in marketplace.search(FilterCriteria(status=LoanStatus.FUNDED))] == ["f1"]
    assert len(marketplace.search(FilterCriteria())) == 3


def test_search_term_matches_any_field(marketplace, loan_store):
    loan_store.put(stored_request("books", purpose=LoanPurpose.BOOKS, principal=1500.0))
    loan_store.put(stored_request("rent", purpose=LoanPurpose.HOUSING, principal=4200.0, duration_months=6))
    loan_store.put(stored_request("laptop", purpose=LoanPurpose.TECHNOLOGY, interest_rate=12.0, duration_months=3))

    assert [r.id for r in marketplace.search(FilterCriteria(search_term="HOUS"))] == ["rent"]
    assert [r.id for r in marketplace.search(FilterCriteria(search_term="4200"))] == ["rent"]
    # "12" hits the duration of the first loan and the rate of the last one
    assert [r.id for r in marketplace.search(FilterCriteria(search_term="12"))] == ["books", "laptop"]


def test_search_term_ignores_trailing_zero_decimal(marketplace, loan_store):
    loan_store.put(stored_request("a", principal=2000.0))

    assert marketplace.search(FilterCriteria(search_term="2000.0")) == []
    assert len(marketplace.search(FilterCriteria(search_term="2000"))) == 1


def test_format_number():
    assert format_number(2000.0) == "2000"
    assert format_number(10.5) == "10.5"
    assert format_number(12) == "12"


def test_fund_pending_request(marketplace, loan_store):
    loan_store.put(stored_request("loan-1"))

    funded = marketplace.fund("loan-1", "lender-1", 2000)

    assert funded.status == LoanStatus.FUNDED
    assert funded.funded_by == "lender-1"
    assert funded.funded_amount == 2000.0
    assert funded.funded_at == NOW
    assert loan_store.get("loan-1") == funded


def test_fund_unknown_request(marketplace):
    with pytest.raises(NotFoundError):
        marketplace.fund("missing", "lender-1", 100)


@pytest.mark.parametrize("status", [LoanStatus.FUNDED, LoanStatus.REPAID, LoanStatus.DEFAULTED])
def test_fund_non_pending_request(marketplace, loan_store, status):
    loan_store.put(stored_request("loan-1", status=status))

    with pytest.raises(InvalidStateError):
        marketplace.fund("loan-1", "lender-1", 100)


@pytest.mark.parametrize("amount", [0, -5, 2000.01])
def test_fund_rejects_invalid_amount(marketplace, loan_store, amount):
    loan_store.put(stored_request("loan-1"))

    with pytest.raises(ValidationError):
        marketplace.fund("loan-1", "lender-1", amount)

    assert loan_store.get("loan-1").status == LoanStatus.PENDING


def test_concurrent_funding_has_single_winner(marketplace, loan_store):
    """50 lenders race for the same request: exactly one wins"""
    loan_store.put(stored_request("contested"))
    lenders = 50
    start_line = Barrier(lenders)

    def attempt(i: int):
        start_line.wait()
        try:
            return marketplace.fund("contested", f"lender-{i}", 1000)
        except InvalidStateError as e:
            return e

    with ThreadPoolExecutor(max_workers=lenders) as pool:
        outcomes = list(pool.map(attempt, range(lenders)))

    winners = [o for o in outcomes if isinstance(o, LoanRequest)]
    losers = [o for o in outcomes if isinstance(o, InvalidStateError)]
    assert len(winners) == 1
    assert len(losers) == lenders - 1
    assert loan_store.get("contested").funded_by == winners[0].funded_by


def test_get_request(marketplace, loan_store):
    loan_store.put(stored_request("loan-1"))

    assert marketplace.get_request("loan-1").id == "loan-1"
    with pytest.raises(NotFoundError):
        marketplace.get_request("nope")


def test_list_for_borrower(marketplace, loan_store):
    loan_store.put(stored_request("a", borrower_ref="s1"))
    loan_store.put(stored_request("b", borrower_ref="s2"))
    loan_store.put(stored_request("c", borrower_ref="s1", status=LoanStatus.REPAID))

    assert [r.id for r in marketplace.list_for_borrower("s1")] == ["a", "c"]


def test_lender_portfolio(marketplace, loan_store):
    loan_store.put(stored_request("a", interest_rate=8.0, total_repayment=1100.0))
    loan_store.put(stored_request("b", interest_rate=12.0, total_repayment=2200.0))
    loan_store.put(stored_request("c"))
    marketplace.fund("a", "lender-1", 1500)
    marketplace.fund("b", "lender-1", 2000)
    marketplace.fund("c", "lender-2", 2000)

    summary = marketplace.lender_portfolio("lender-1")

    assert summary.funded_loans == 2
    assert summary.total_invested == 3500.0
    assert summary.average_interest_rate == 10.0
    assert summary.expected_return == 3300.0


def test_empty_lender_portfolio(marketplace):
    summary = marketplace.lender_portfolio("nobody")

    assert summary.funded_loans == 0
    assert summary.average_interest_rate == 0.0
