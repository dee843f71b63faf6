"""
Per-tender serialization

Every operation on a tender runs while holding that tender's lock, so two
mutations of the same tender never interleave and readers never see a
half-applied change. Different tenders have different locks and proceed in
parallel. Creating a tender and changing roles use their own locks.

A tender's lock exists from the moment its TenderCreated event is applied.
Calls naming an id no tender has hold the creation lock instead, so asking
about unknown ids never grows the registry.
"""

import threading
from contextlib import contextmanager
from typing import Iterator


class TenderLockRegistry:
    """Hands out one reentrant lock per existing tender"""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._tender_locks: dict[int, threading.RLock] = {}
        self.creation_lock = threading.RLock()
        self.access_lock = threading.RLock()

    def register(self, tender_id: int) -> None:
        """Create the lock for a newly created tender (no-op if present)"""
        with self._guard:
            self._tender_locks.setdefault(tender_id, threading.RLock())

    def _lookup(self, tender_id: int) -> "threading.RLock | None":
        with self._guard:
            return self._tender_locks.get(tender_id)

    def __len__(self) -> int:
        with self._guard:
            return len(self._tender_locks)

    @contextmanager
    def for_tender(self, tender_id: int) -> Iterator[None]:
        """Hold the tender's lock for the duration of the block"""
        lock = self._lookup(tender_id)
        if lock is None:
            # Unknown id: nothing can create it while we hold the creation lock
            with self.creation_lock:
                lock = self._lookup(tender_id)
                if lock is None:
                    yield
                    return
        with lock:
            yield
