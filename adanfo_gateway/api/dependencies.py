"""Dependency injection for FastAPI endpoints"""

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from adanfo_gateway.domain.ports import Clock, SystemClock
from adanfo_gateway.infrastructure.clients.verifier import VerifierClient
from adanfo_gateway.infrastructure.database.repositories import (
    SqlBorrowerProfileStore,
    SqlLoanRequestStore,
    SqlRepaymentHistoryStore,
)
from adanfo_gateway.infrastructure.database.session import get_db
from adanfo_gateway.services.borrowers import BorrowerRegistry
from adanfo_gateway.services.ledger import CreditLedger
from adanfo_gateway.services.locks import KeyedLock
from adanfo_gateway.services.marketplace import LoanMarketplace

# Shared across requests: borrower mutations are serialized process-wide
borrower_locks = KeyedLock()


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_clock() -> Clock:
    """Provide the evaluation clock"""
    return SystemClock()


def get_verifier_client() -> VerifierClient:
    """Provide academic verifier client instance"""
    return VerifierClient()


def get_marketplace(db: Session = Depends(get_db), clock: Clock = Depends(get_clock)) -> LoanMarketplace:
    return LoanMarketplace(SqlLoanRequestStore(db), clock=clock)


def get_ledger(db: Session = Depends(get_db), clock: Clock = Depends(get_clock)) -> CreditLedger:
    return CreditLedger(
        SqlBorrowerProfileStore(db),
        SqlRepaymentHistoryStore(db),
        loans=SqlLoanRequestStore(db),
        clock=clock,
        locks=borrower_locks,
    )


def get_registry(db: Session = Depends(get_db)) -> BorrowerRegistry:
    return BorrowerRegistry(SqlBorrowerProfileStore(db), locks=borrower_locks)
