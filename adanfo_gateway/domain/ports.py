"""Abstract collaborators the lending engine depends on.

Stores are the only suspension points of the engine. Every mutation must be
atomic at the store boundary: it either fully persists or has no effect.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from adanfo_gateway.domain.models import BorrowerProfile, LoanRequest, LoanStatus, RepaymentEvent
from adanfo_gateway.utils.date_utils import utcnow


class LoanRequestStore(ABC):
    """Durable storage of loan requests keyed by id"""

    @abstractmethod
    def get(self, request_id: str) -> Optional[LoanRequest]:
        ...

    @abstractmethod
    def put(self, request: LoanRequest) -> None:
        ...

    @abstractmethod
    def list(self) -> List[LoanRequest]:
        """All requests in insertion order"""

    @abstractmethod
    def compare_and_swap(self, request_id: str, expected_status: LoanStatus, updated: LoanRequest) -> bool:
        """Replace the stored request only if its status is still expected_status"""


class BorrowerProfileStore(ABC):
    @abstractmethod
    def get(self, borrower_ref: str) -> Optional[BorrowerProfile]:
        ...

    @abstractmethod
    def put(self, profile: BorrowerProfile) -> None:
        ...


class RepaymentHistoryStore(ABC):
    @abstractmethod
    def append(self, borrower_ref: str, event: RepaymentEvent) -> None:
        ...

    @abstractmethod
    def list(self, borrower_ref: str) -> List[RepaymentEvent]:
        """Borrower's events, oldest first"""


class Clock(ABC):
    @abstractmethod
    def now(self) -> datetime:
        ...


class SystemClock(Clock):
    """Wall-clock time in UTC"""

    def now(self) -> datetime:
        return utcnow()


class FixedClock(Clock):
    """Clock pinned to a given instant; used for deterministic evaluation"""

    def __init__(self, instant: datetime):
        self.instant = instant

    def now(self) -> datetime:
        return self.instant
