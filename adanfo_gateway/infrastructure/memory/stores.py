"""Thread-safe in-memory stores for embedding the engine and for tests"""

from collections import defaultdict
from dataclasses import replace
from threading import RLock
from typing import Dict, List, Optional

from adanfo_gateway.domain.models import BorrowerProfile, LoanRequest, LoanStatus, RepaymentEvent
from adanfo_gateway.domain.ports import BorrowerProfileStore, LoanRequestStore, RepaymentHistoryStore


class InMemoryLoanRequestStore(LoanRequestStore):
    """Dict-backed; insertion order is preserved by the dict"""

    def __init__(self):
        self._lock = RLock()
        self._requests: Dict[str, LoanRequest] = {}

    def get(self, request_id: str) -> Optional[LoanRequest]:
        with self._lock:
            request = self._requests.get(request_id)
            return replace(request) if request is not None else None

    def put(self, request: LoanRequest) -> None:
        with self._lock:
            self._requests[request.id] = replace(request)

    def list(self) -> List[LoanRequest]:
        with self._lock:
            return [replace(request) for request in self._requests.values()]

    def compare_and_swap(self, request_id: str, expected_status: LoanStatus, updated: LoanRequest) -> bool:
        with self._lock:
            current = self._requests.get(request_id)
            if current is None or current.status != expected_status:
                return False
            self._requests[request_id] = replace(updated)
            return True


class InMemoryBorrowerProfileStore(BorrowerProfileStore):
    def __init__(self):
        self._lock = RLock()
        self._profiles: Dict[str, BorrowerProfile] = {}

    def get(self, borrower_ref: str) -> Optional[BorrowerProfile]:
        with self._lock:
            profile = self._profiles.get(borrower_ref)
            return replace(profile) if profile is not None else None

    def put(self, profile: BorrowerProfile) -> None:
        with self._lock:
            self._profiles[profile.borrower_ref] = replace(profile)


class InMemoryRepaymentHistoryStore(RepaymentHistoryStore):
    def __init__(self):
        self._lock = RLock()
        self._events: Dict[str, List[RepaymentEvent]] = defaultdict(list)

    def append(self, borrower_ref: str, event: RepaymentEvent) -> None:
        with self._lock:
            self._events[borrower_ref].append(replace(event))

    def list(self, borrower_ref: str) -> List[RepaymentEvent]:
        with self._lock:
            return list(self._events.get(borrower_ref, []))
