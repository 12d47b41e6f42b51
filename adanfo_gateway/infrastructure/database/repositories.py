"""Data access layer implementing the lending stores on SQLAlchemy.

Every mutation commits its own transaction and rolls back on failure, so a
write either fully lands or has no effect.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import update
from sqlalchemy.orm import Session

from adanfo_gateway.domain.models import (
    BorrowerProfile,
    LoanPurpose,
    LoanRequest,
    LoanStatus,
    RepaymentEvent,
)
from adanfo_gateway.domain.ports import BorrowerProfileStore, LoanRequestStore, RepaymentHistoryStore
from adanfo_gateway.infrastructure.database.models import (
    BorrowerProfileRecord,
    LoanRequestRecord,
    RepaymentEventRecord,
)


def _aware(value: Optional[datetime]) -> Optional[datetime]:
    """SQLite drops tzinfo; stored timestamps are always UTC"""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _loan_columns(request: LoanRequest) -> Dict[str, Any]:
    """Mutable columns of a loan request row"""
    return {
        "borrower_ref": request.borrower_ref,
        "borrower_name": request.borrower_name,
        "principal": request.principal,
        "duration_months": request.duration_months,
        "purpose": request.purpose.value,
        "description": request.description,
        "credit_score": request.credit_score,
        "interest_rate": request.interest_rate,
        "monthly_payment": request.monthly_payment,
        "total_repayment": request.total_repayment,
        "status": request.status.value,
        "created_at": request.created_at,
        "expected_completion": request.expected_completion,
        "funded_by": request.funded_by,
        "funded_amount": request.funded_amount,
        "funded_at": request.funded_at,
        "settled_at": request.settled_at,
    }


def _to_loan(row: LoanRequestRecord) -> LoanRequest:
    return LoanRequest(
        id=row.id,
        borrower_ref=row.borrower_ref,
        borrower_name=row.borrower_name,
        principal=row.principal,
        duration_months=row.duration_months,
        purpose=LoanPurpose(row.purpose),
        description=row.description,
        credit_score=row.credit_score,
        interest_rate=row.interest_rate,
        monthly_payment=row.monthly_payment,
        total_repayment=row.total_repayment,
        status=LoanStatus(row.status),
        created_at=_aware(row.created_at),
        expected_completion=row.expected_completion,
        funded_by=row.funded_by,
        funded_amount=row.funded_amount,
        funded_at=_aware(row.funded_at),
        settled_at=_aware(row.settled_at),
    )


def _to_profile(row: BorrowerProfileRecord) -> BorrowerProfile:
    return BorrowerProfile(
        borrower_ref=row.borrower_ref,
        display_name=row.display_name,
        is_enrolled=row.is_enrolled,
        institution=row.institution,
        gpa=row.gpa,
        completion_date=row.completion_date,
        credit_score=row.credit_score,
        is_verified=row.is_verified,
    )


class SqlLoanRequestStore(LoanRequestStore):
    """Repository for loan requests"""

    def __init__(self, db: Session):
        self.db = db

    def get(self, request_id: str) -> Optional[LoanRequest]:
        row = self.db.query(LoanRequestRecord).filter(LoanRequestRecord.id == request_id).first()
        return _to_loan(row) if row is not None else None

    def put(self, request: LoanRequest) -> None:
        """Insert a new request or overwrite an existing one"""
        try:
            row = self.db.query(LoanRequestRecord).filter(LoanRequestRecord.id == request.id).first()
            if row is None:
                self.db.add(LoanRequestRecord(id=request.id, **_loan_columns(request)))
            else:
                for column, value in _loan_columns(request).items():
                    setattr(row, column, value)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

    def list(self) -> List[LoanRequest]:
        rows = self.db.query(LoanRequestRecord).order_by(LoanRequestRecord.seq).all()
        return [_to_loan(row) for row in rows]

    def compare_and_swap(self, request_id: str, expected_status: LoanStatus, updated: LoanRequest) -> bool:
        """Conditional UPDATE ... WHERE status = expected; the row count tells who won"""
        try:
            result = self.db.execute(
                update(LoanRequestRecord)
                .where(
                    LoanRequestRecord.id == request_id,
                    LoanRequestRecord.status == expected_status.value,
                )
                .values(**_loan_columns(updated))
                .execution_options(synchronize_session=False)
            )
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        return result.rowcount == 1


class SqlBorrowerProfileStore(BorrowerProfileStore):
    """Repository for borrower profiles"""

    def __init__(self, db: Session):
        self.db = db

    def get(self, borrower_ref: str) -> Optional[BorrowerProfile]:
        row = self.db.get(BorrowerProfileRecord, borrower_ref)
        return _to_profile(row) if row is not None else None

    def put(self, profile: BorrowerProfile) -> None:
        try:
            self.db.merge(
                BorrowerProfileRecord(
                    borrower_ref=profile.borrower_ref,
                    display_name=profile.display_name,
                    is_enrolled=profile.is_enrolled,
                    institution=profile.institution,
                    gpa=profile.gpa,
                    completion_date=profile.completion_date,
                    credit_score=profile.credit_score,
                    is_verified=profile.is_verified,
                )
            )
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise


class SqlRepaymentHistoryStore(RepaymentHistoryStore):
    """Repository for append-only repayment history"""

    def __init__(self, db: Session):
        self.db = db

    def append(self, borrower_ref: str, event: RepaymentEvent) -> None:
        try:
            self.db.add(
                RepaymentEventRecord(
                    borrower_ref=borrower_ref,
                    loan_ref=event.loan_ref,
                    occurred_at=event.occurred_at,
                    on_time=event.on_time,
                )
            )
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

    def list(self, borrower_ref: str) -> List[RepaymentEvent]:
        rows = (
            self.db.query(RepaymentEventRecord)
            .filter(RepaymentEventRecord.borrower_ref == borrower_ref)
            .order_by(RepaymentEventRecord.id)
            .all()
        )
        return [
            RepaymentEvent(
                loan_ref=row.loan_ref,
                borrower_ref=row.borrower_ref,
                occurred_at=_aware(row.occurred_at),
                on_time=row.on_time,
            )
            for row in rows
        ]
