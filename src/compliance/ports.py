"""
Interfaces the compliance engine consumes.

``LedgerStore`` is the persistence port; every ledger component receives
one explicitly. ``FuelDataSource`` supplies the per ship-year fuel records
the balances are computed from.
"""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from dataclasses import dataclass, field
from typing import List, Optional

from .ghg_intensity import FuelRecord
from .results import (
    BankApplication,
    BankEntry,
    BorrowEntry,
    ComplianceBalance,
    Pool,
    PoolMember,
)


class LedgerStore(ABC):
    """Persistence port for compliance balances, bank, borrow and pool records."""

    @abstractmethod
    def transaction(self) -> AbstractContextManager:
        """Unit of work: commits on normal exit, rolls back on exception."""

    # ---- compliance balances ------------------------------------------------

    @abstractmethod
    def upsert_compliance(self, balance: ComplianceBalance) -> ComplianceBalance:
        ...

    @abstractmethod
    def get_compliance(self, ship_id: str, year: int) -> Optional[ComplianceBalance]:
        ...

    # ---- banking ------------------------------------------------------------

    @abstractmethod
    def add_bank_entry(self, ship_id: str, year: int, amount: float) -> BankEntry:
        ...

    @abstractmethod
    def list_bank_entries(
        self,
        ship_id: Optional[str] = None,
        year: Optional[int] = None,
        include_spent: bool = False,
        for_update: bool = False,
    ) -> List[BankEntry]:
        """Entries oldest first. Spent entries (amount 0) only on request."""

    @abstractmethod
    def set_bank_entry_amount(self, entry_id: str, amount: float) -> BankEntry:
        ...

    @abstractmethod
    def total_banked(self, ship_id: str) -> float:
        ...

    @abstractmethod
    def banked_from(self, ship_id: str, year: int) -> float:
        """Sum of amounts originally banked out of a ship-year's surplus."""

    @abstractmethod
    def add_bank_application(self, ship_id: str, year: int, amount: float) -> BankApplication:
        ...

    @abstractmethod
    def applied_to(self, ship_id: str, year: int) -> float:
        """Sum of banked surplus applied against a ship-year deficit."""

    # ---- borrowing ----------------------------------------------------------

    @abstractmethod
    def get_borrow(self, ship_id: str, year: int) -> Optional[BorrowEntry]:
        ...

    @abstractmethod
    def add_borrow(
        self, ship_id: str, year: int, amount: float, aggravated_amount: float
    ) -> BorrowEntry:
        ...

    @abstractmethod
    def mark_borrow_repaid(self, entry_id: str) -> BorrowEntry:
        ...

    @abstractmethod
    def list_borrows(self, ship_id: str) -> List[BorrowEntry]:
        """Entries for a ship, most recent year first."""

    # ---- pooling ------------------------------------------------------------

    @abstractmethod
    def create_pool(
        self,
        year: int,
        total_cb_before: float,
        total_cb_after: float,
        members: List[PoolMember],
    ) -> Pool:
        ...

    @abstractmethod
    def get_pool(self, pool_id: str) -> Optional[Pool]:
        ...


@dataclass
class FuelConsumption:
    """Fuel records and auxiliary energy in scope for one ship-year."""
    fuels: List[FuelRecord] = field(default_factory=list)
    aux_energy_mj: float = 0.0


class FuelDataSource(ABC):
    """Upstream supplier of fuel consumption per ship-year."""

    @abstractmethod
    def fuel_consumption(self, ship_id: str, year: int) -> Optional[FuelConsumption]:
        """Return the consumption in scope, or None when nothing is known."""
