"""Credit ledger - repayment history and credit score updates"""

from dataclasses import replace
from typing import Optional, Tuple

from adanfo_gateway.config import settings
from adanfo_gateway.domain.exceptions import InvalidStateError, NotFoundError, ValidationError
from adanfo_gateway.domain.models import LoanRequest, LoanStatus, RepaymentEvent
from adanfo_gateway.domain.ports import (
    BorrowerProfileStore,
    Clock,
    LoanRequestStore,
    RepaymentHistoryStore,
    SystemClock,
)
from adanfo_gateway.domain.scoring import next_score
from adanfo_gateway.infrastructure.observability.logging import log_rejection, log_score_update
from adanfo_gateway.infrastructure.observability.metrics import record_score_update
from adanfo_gateway.services.locks import KeyedLock


class CreditLedger:
    """Owns borrowers' repayment histories and is the only writer of credit scores.

    The append -> recompute -> persist sequence runs under a per-borrower lock,
    so concurrent repayments for one borrower never drop an entry or score a
    stale history. Share one KeyedLock between ledgers serving the same stores.
    """

    def __init__(
        self,
        profiles: BorrowerProfileStore,
        history: RepaymentHistoryStore,
        loans: Optional[LoanRequestStore] = None,
        clock: Optional[Clock] = None,
        locks: Optional[KeyedLock] = None,
        default_credit_score: Optional[int] = None,
    ):
        self.profiles = profiles
        self.history = history
        self.loans = loans
        self.clock = clock or SystemClock()
        self.locks = locks or KeyedLock()
        self.default_credit_score = (
            default_credit_score if default_credit_score is not None else settings.default_credit_score
        )

    def current_score(self, borrower_ref: str) -> int:
        profile = self.profiles.get(borrower_ref)
        if profile is None:
            raise NotFoundError(f"Borrower {borrower_ref} not found")
        return profile.credit_score

    def record_repayment_event(self, borrower_ref: str, loan_ref: str, on_time: bool) -> int:
        """
        Append a repayment to the borrower's history and rescore.

        The new score is computed from the full ordered history on top of the
        stored score (an unset score starts from the default of 650).
        The score is written before the event is appended; if the append
        fails the previous profile is restored, so either both land or neither.

        Raises:
            NotFoundError: Unknown borrower
        """
        with self.locks.hold(borrower_ref):
            profile = self.profiles.get(borrower_ref)
            if profile is None:
                raise NotFoundError(f"Borrower {borrower_ref} not found")

            event = RepaymentEvent(
                loan_ref=loan_ref,
                borrower_ref=borrower_ref,
                occurred_at=self.clock.now(),
                on_time=on_time,
            )
            previous = profile.credit_score
            history = self.history.list(borrower_ref) + [event]
            score = next_score(previous or self.default_credit_score, history)

            self.profiles.put(replace(profile, credit_score=score))
            try:
                self.history.append(borrower_ref, event)
            except Exception:
                self.profiles.put(profile)
                raise

        record_score_update(previous, score)
        log_score_update(borrower_ref, loan_ref, on_time, previous, score)
        return score

    def settle_loan(self, loan_ref: str, outcome: LoanStatus) -> Tuple[LoanRequest, int]:
        """
        Close a funded loan as Repaid or Defaulted and record the final repayment outcome.

        Runs under the borrower's lock. If rescoring fails after the status swap,
        the loan is swapped back to Funded so the settlement can be retried.

        Returns:
            (settled loan, borrower's new credit score)

        Raises:
            ValidationError: Outcome is not a terminal status
            NotFoundError: Unknown loan
            InvalidStateError: Loan is not currently Funded
        """
        if self.loans is None:
            raise RuntimeError("CreditLedger was created without a loan store")
        if not outcome.is_terminal:
            raise ValidationError("settlement outcome must be repaid or defaulted")

        loan = self.loans.get(loan_ref)
        if loan is None:
            raise NotFoundError(f"Loan request {loan_ref} not found")
        if loan.status != LoanStatus.FUNDED:
            raise InvalidStateError(f"Loan request {loan_ref} is {loan.status.value}, not funded")

        with self.locks.hold(loan.borrower_ref):
            if self.profiles.get(loan.borrower_ref) is None:
                raise NotFoundError(f"Borrower {loan.borrower_ref} not found")

            settled = replace(loan, status=outcome, settled_at=self.clock.now())
            if not self.loans.compare_and_swap(loan_ref, LoanStatus.FUNDED, settled):
                log_rejection("settle", "already settled", loan_request_id=loan_ref)
                raise InvalidStateError(f"Loan request {loan_ref} is no longer funded")

            try:
                score = self.record_repayment_event(
                    loan.borrower_ref, loan_ref, on_time=outcome == LoanStatus.REPAID
                )
            except Exception:
                self.loans.compare_and_swap(loan_ref, outcome, loan)
                raise

        return settled, score
