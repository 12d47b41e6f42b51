"""SQLAlchemy ORM models for borrowers, loan requests and repayment history"""

from sqlalchemy import Boolean, Column, Date, DateTime, Float, Integer, String, Text
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class BorrowerProfileRecord(Base):
    """Verified student borrower with current credit score"""

    __tablename__ = "borrower_profile"

    borrower_ref = Column(String(128), primary_key=True)
    display_name = Column(Text, nullable=False)
    is_enrolled = Column(Boolean, nullable=False)
    institution = Column(Text, nullable=False)
    gpa = Column(Float, nullable=False)
    completion_date = Column(Date, nullable=False)
    credit_score = Column(Integer, nullable=False, default=0)
    is_verified = Column(Boolean, nullable=False, default=False)


class LoanRequestRecord(Base):
    """Loan request in the lending pool"""

    __tablename__ = "loan_request"

    # Surrogate key keeps insertion order for pool listings
    seq = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String(36), nullable=False, unique=True, index=True)
    borrower_ref = Column(String(128), nullable=False, index=True)
    borrower_name = Column(Text, nullable=False)
    principal = Column(Float, nullable=False)
    duration_months = Column(Integer, nullable=False)
    purpose = Column(Text, nullable=False)
    description = Column(Text, nullable=True)
    credit_score = Column(Integer, nullable=False)
    interest_rate = Column(Float, nullable=False)
    monthly_payment = Column(Float, nullable=False)
    total_repayment = Column(Float, nullable=False)
    status = Column(Text, nullable=False, default="pending", index=True)
    created_at = Column(DateTime(timezone=True), nullable=False)
    expected_completion = Column(Date, nullable=True)
    funded_by = Column(String(128), nullable=True, index=True)
    funded_amount = Column(Float, nullable=True)
    funded_at = Column(DateTime(timezone=True), nullable=True)
    settled_at = Column(DateTime(timezone=True), nullable=True)


class RepaymentEventRecord(Base):
    """Append-only repayment history entry"""

    __tablename__ = "repayment_event"

    id = Column(Integer, primary_key=True, autoincrement=True)
    borrower_ref = Column(String(128), nullable=False, index=True)
    loan_ref = Column(String(36), nullable=False)
    occurred_at = Column(DateTime(timezone=True), nullable=False)
    on_time = Column(Boolean, nullable=False)
