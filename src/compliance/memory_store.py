"""
In-process implementation of the ledger persistence port.

Used by unit tests and the CLI dry runs. Transactions snapshot the whole
store and restore it when the block raises.
"""

import copy
import itertools
import threading
import uuid
from contextlib import contextmanager
from dataclasses import replace
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple

from .ports import LedgerStore
from .results import (
    BankApplication,
    BankEntry,
    BorrowEntry,
    ComplianceBalance,
    Pool,
    PoolMember,
)


def _now() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryLedgerStore(LedgerStore):
    """Dictionary-backed ``LedgerStore``."""

    def __init__(self):
        self._lock = threading.RLock()
        self._ids = itertools.count(1)
        self._compliance: Dict[Tuple[str, int], ComplianceBalance] = {}
        self._bank_entries: List[BankEntry] = []
        self._applications: List[BankApplication] = []
        self._borrows: Dict[Tuple[str, int], BorrowEntry] = {}
        self._pools: Dict[str, Pool] = {}

    @contextmanager
    def transaction(self):
        with self._lock:
            snapshot = copy.deepcopy(self._state())
            try:
                yield self
            except Exception:
                self._restore(snapshot)
                raise

    def _state(self):
        return (
            self._compliance,
            self._bank_entries,
            self._applications,
            self._borrows,
            self._pools,
        )

    def _restore(self, snapshot):
        (
            self._compliance,
            self._bank_entries,
            self._applications,
            self._borrows,
            self._pools,
        ) = snapshot

    # ---- compliance balances ------------------------------------------------

    def upsert_compliance(self, balance: ComplianceBalance) -> ComplianceBalance:
        with self._lock:
            self._compliance[(balance.ship_id, balance.year)] = replace(balance)
            return replace(balance)

    def get_compliance(self, ship_id: str, year: int) -> Optional[ComplianceBalance]:
        stored = self._compliance.get((ship_id, year))
        return replace(stored) if stored else None

    # ---- banking ------------------------------------------------------------

    def add_bank_entry(self, ship_id: str, year: int, amount: float) -> BankEntry:
        with self._lock:
            entry = BankEntry(
                id=str(next(self._ids)),
                ship_id=ship_id,
                year=year,
                banked_amount=amount,
                amount=amount,
                created_at=_now(),
            )
            self._bank_entries.append(entry)
            return replace(entry)

    def list_bank_entries(
        self,
        ship_id: Optional[str] = None,
        year: Optional[int] = None,
        include_spent: bool = False,
        for_update: bool = False,
    ) -> List[BankEntry]:
        with self._lock:
            return [
                replace(e) for e in self._bank_entries
                if (ship_id is None or e.ship_id == ship_id)
                and (year is None or e.year == year)
                and (include_spent or e.amount > 0)
            ]

    def set_bank_entry_amount(self, entry_id: str, amount: float) -> BankEntry:
        with self._lock:
            for entry in self._bank_entries:
                if entry.id == entry_id:
                    entry.amount = amount
                    return replace(entry)
        raise KeyError(f"Bank entry {entry_id} not found")

    def total_banked(self, ship_id: str) -> float:
        with self._lock:
            return sum(e.amount for e in self._bank_entries if e.ship_id == ship_id)

    def banked_from(self, ship_id: str, year: int) -> float:
        with self._lock:
            return sum(
                e.banked_amount for e in self._bank_entries
                if e.ship_id == ship_id and e.year == year
            )

    def add_bank_application(self, ship_id: str, year: int, amount: float) -> BankApplication:
        with self._lock:
            application = BankApplication(
                id=str(next(self._ids)),
                ship_id=ship_id,
                year=year,
                amount=amount,
                created_at=_now(),
            )
            self._applications.append(application)
            return replace(application)

    def applied_to(self, ship_id: str, year: int) -> float:
        with self._lock:
            return sum(
                a.amount for a in self._applications
                if a.ship_id == ship_id and a.year == year
            )

    # ---- borrowing ----------------------------------------------------------

    def get_borrow(self, ship_id: str, year: int) -> Optional[BorrowEntry]:
        stored = self._borrows.get((ship_id, year))
        return replace(stored) if stored else None

    def add_borrow(
        self, ship_id: str, year: int, amount: float, aggravated_amount: float
    ) -> BorrowEntry:
        with self._lock:
            if (ship_id, year) in self._borrows:
                raise ValueError(f"Borrow entry already exists for {ship_id}/{year}")
            entry = BorrowEntry(
                id=str(uuid.uuid4()),
                ship_id=ship_id,
                year=year,
                amount=amount,
                aggravated_amount=aggravated_amount,
                created_at=_now(),
            )
            self._borrows[(ship_id, year)] = entry
            return replace(entry)

    def mark_borrow_repaid(self, entry_id: str) -> BorrowEntry:
        with self._lock:
            for entry in self._borrows.values():
                if entry.id == entry_id:
                    entry.repaid = True
                    entry.repaid_at = _now()
                    return replace(entry)
        raise KeyError(f"Borrow entry {entry_id} not found")

    def list_borrows(self, ship_id: str) -> List[BorrowEntry]:
        with self._lock:
            entries = [replace(e) for e in self._borrows.values() if e.ship_id == ship_id]
        return sorted(entries, key=lambda e: e.year, reverse=True)

    # ---- pooling ------------------------------------------------------------

    def create_pool(
        self,
        year: int,
        total_cb_before: float,
        total_cb_after: float,
        members: List[PoolMember],
    ) -> Pool:
        with self._lock:
            pool = Pool(
                id=str(uuid.uuid4()),
                year=year,
                total_cb_before=total_cb_before,
                total_cb_after=total_cb_after,
                members=[replace(m) for m in members],
                created_at=_now(),
            )
            self._pools[pool.id] = pool
            return copy.deepcopy(pool)

    def get_pool(self, pool_id: str) -> Optional[Pool]:
        pool = self._pools.get(pool_id)
        return copy.deepcopy(pool) if pool else None
