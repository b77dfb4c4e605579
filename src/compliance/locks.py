"""
Per-ship mutual exclusion for ledger mutations.

Banking, borrowing and the compliance balance upsert for the same ship
must not interleave: each reads a balance and writes based on it.
"""

import threading
from contextlib import contextmanager
from typing import Dict


class ShipLocks:
    """Registry of re-entrant locks keyed by ship id."""

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: Dict[str, threading.RLock] = {}

    def _lock_for(self, ship_id: str) -> threading.RLock:
        with self._guard:
            lock = self._locks.get(ship_id)
            if lock is None:
                lock = threading.RLock()
                self._locks[ship_id] = lock
            return lock

    @contextmanager
    def hold(self, ship_id: str):
        """Hold the lock for ``ship_id`` for the duration of the block."""
        lock = self._lock_for(ship_id)
        with lock:
            yield


# Shared by every engine built in this process.
ship_locks = ShipLocks()
