"""GET /v1/lenders/{ref}/portfolio - Lender dashboard totals"""

from fastapi import APIRouter, Depends

from adanfo_gateway.api.dependencies import get_marketplace
from adanfo_gateway.api.v1.schemas import PortfolioResponse
from adanfo_gateway.services.marketplace import LoanMarketplace

router = APIRouter()


@router.get("/lenders/{funder_ref}/portfolio", response_model=PortfolioResponse)
def get_portfolio(funder_ref: str, marketplace: LoanMarketplace = Depends(get_marketplace)):
    """
    Summarize a lender's outstanding funded loans.

    Returns:
        Count, total invested, average interest rate and expected return
    """
    summary = marketplace.lender_portfolio(funder_ref)
    return PortfolioResponse(
        funder_ref=summary.funder_ref,
        funded_loans=summary.funded_loans,
        total_invested=summary.total_invested,
        average_interest_rate=summary.average_interest_rate,
        expected_return=summary.expected_return,
    )
