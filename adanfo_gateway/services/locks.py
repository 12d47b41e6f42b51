"""Per-entity mutual exclusion"""

from contextlib import contextmanager
from threading import Lock, RLock
from typing import Dict, Iterator


class KeyedLock:
    """One lock per key: mutations of the same entity are serialized, different entities run in parallel.

    A key's lock lives only while some thread holds or waits for it; the entry
    is dropped when the last holder leaves.
    """

    def __init__(self):
        self._guard = Lock()
        self._locks: Dict[str, RLock] = {}
        self._holders: Dict[str, int] = {}

    def _acquire_entry(self, key: str) -> RLock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = RLock()
            self._holders[key] = self._holders.get(key, 0) + 1
            return lock

    def _release_entry(self, key: str) -> None:
        with self._guard:
            self._holders[key] -= 1
            if self._holders[key] == 0:
                del self._holders[key]
                del self._locks[key]

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)

    @contextmanager
    def hold(self, key: str) -> Iterator[None]:
        lock = self._acquire_entry(key)
        try:
            with lock:
                yield
        finally:
            self._release_entry(key)
