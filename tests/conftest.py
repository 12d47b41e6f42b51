"""Pytest fixtures for testing"""

import httpx
import pytest
from datetime import date, datetime, timezone
from typing import Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from adanfo_gateway.api.dependencies import get_clock, get_verifier_client
from adanfo_gateway.api.main import create_app
from adanfo_gateway.domain.models import BorrowerProfile
from adanfo_gateway.domain.ports import FixedClock
from adanfo_gateway.infrastructure.clients.verifier import VerifierClient
from adanfo_gateway.infrastructure.database.models import Base
from adanfo_gateway.infrastructure.database.session import get_db
from adanfo_gateway.infrastructure.memory.stores import (
    InMemoryBorrowerProfileStore,
    InMemoryLoanRequestStore,
    InMemoryRepaymentHistoryStore,
)
from mock_services.verifier_server.main import app as verifier_app


# Every date rule in the tests is evaluated against this instant
NOW = datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)

# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False, "timeout": 30})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def session_factory(db: Session) -> sessionmaker:
    """Independent sessions on the test database, one per worker thread"""
    return TestingSessionLocal


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(NOW)


@pytest.fixture
def verifier_client() -> VerifierClient:
    """Verifier client wired to the mock verifier app in-process"""
    return VerifierClient(base_url="http://verifier", transport=httpx.ASGITransport(app=verifier_app))


@pytest.fixture
def client(db: Session, clock: FixedClock, verifier_client: VerifierClient) -> TestClient:
    """Create FastAPI test client with test database, fixed clock and mock verifier"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_clock] = lambda: clock
    app.dependency_overrides[get_verifier_client] = lambda: verifier_client
    return TestClient(app)


@pytest.fixture
def profile() -> BorrowerProfile:
    """Verified, enrolled student graduating well after any offered loan term"""
    return BorrowerProfile(
        borrower_ref="student-1",
        display_name="Ama Mensah",
        is_enrolled=True,
        institution="University of Ghana",
        gpa=3.2,
        completion_date=date(2028, 6, 30),
        credit_score=0,
        is_verified=True,
    )


@pytest.fixture
def loan_store() -> InMemoryLoanRequestStore:
    return InMemoryLoanRequestStore()


@pytest.fixture
def profile_store() -> InMemoryBorrowerProfileStore:
    return InMemoryBorrowerProfileStore()


@pytest.fixture
def history_store() -> InMemoryRepaymentHistoryStore:
    return InMemoryRepaymentHistoryStore()
