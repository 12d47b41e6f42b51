"""Domain-specific exceptions"""

from typing import Optional

from adanfo_gateway.domain.models import LoanQuote


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class ValidationError(DomainException):
    """Input is malformed or out of range"""

    pass


class EligibilityError(DomainException):
    """Borrower does not meet the lending rules"""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class NotFoundError(DomainException):
    """Unknown loan request or borrower"""

    pass


class InvalidStateError(DomainException):
    """Operation not allowed in the loan's current lifecycle status"""

    pass


class ComputationError(DomainException):
    """Amortization inputs produced a non-finite result"""

    def __init__(self, message: str, quote: Optional[LoanQuote] = None):
        super().__init__(message)
        self.quote = quote or LoanQuote(annual_rate=0.0, monthly_payment=0.0, total_repayment=0.0)


class VerifierAPIError(DomainException):
    """Academic verifier returned an error or is unavailable"""

    pass
