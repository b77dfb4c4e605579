"""
Compliance ledger engine facade.

One object exposing every ledger operation over a single persistence
store. Transport-agnostic: the HTTP layer builds one per request.
"""

from typing import List, Optional, Sequence

from .locks import ShipLocks
from .orchestrator import ComplianceOrchestrator
from .pooling import PoolAllocator
from .ports import FuelDataSource, LedgerStore
from .results import (
    ApplyBankedResult,
    BankBalance,
    BankEntry,
    BankResult,
    BorrowEntry,
    BorrowResult,
    BorrowValidation,
    ComplianceBalance,
    PenaltyAssessment,
    Pool,
    PoolMemberInput,
    PoolResult,
    PoolValidation,
)
from .targets import target_for


class ComplianceEngine:
    """Banking, borrowing and pooling over compliance balances."""

    def __init__(
        self,
        store: LedgerStore,
        fuel_source: FuelDataSource,
        locks: Optional[ShipLocks] = None,
    ):
        self.orchestrator = ComplianceOrchestrator(store, fuel_source, locks)
        self.banking = self.orchestrator.banking
        self.borrowing = self.orchestrator.borrowing
        self.pooling = PoolAllocator(store)

    # ---- compliance ---------------------------------------------------------

    @staticmethod
    def get_target(year: int) -> float:
        return target_for(year)

    def compute_balance(self, ship_id: str, year: int) -> ComplianceBalance:
        return self.orchestrator.compute_balance(ship_id, year)

    def adjusted_cb(self, ship_id: str, year: int) -> float:
        return self.orchestrator.adjusted_cb(ship_id, year)

    def penalty_exposure(
        self, ship_id: str, year: int, consecutive_years: int = 1
    ) -> PenaltyAssessment:
        return self.orchestrator.penalty_exposure(ship_id, year, consecutive_years)

    # ---- banking ------------------------------------------------------------

    def bank_surplus(self, ship_id: str, year: int, amount: float) -> BankResult:
        return self.banking.bank_surplus(ship_id, year, amount)

    def apply_banked(self, ship_id: str, year: int, amount: float) -> ApplyBankedResult:
        return self.banking.apply_banked(ship_id, year, amount)

    def get_bank_balance(self, ship_id: str) -> BankBalance:
        return self.banking.get_balance(ship_id)

    def bank_records(
        self, ship_id: Optional[str] = None, year: Optional[int] = None
    ) -> List[BankEntry]:
        return self.banking.records(ship_id, year)

    # ---- borrowing ----------------------------------------------------------

    def validate_borrow(self, ship_id: str, year: int) -> BorrowValidation:
        return self.borrowing.validate(ship_id, year)

    def borrow(self, ship_id: str, year: int) -> BorrowResult:
        return self.borrowing.borrow(ship_id, year)

    def borrow_history(self, ship_id: str) -> List[BorrowEntry]:
        return self.borrowing.history(ship_id)

    # ---- pooling ------------------------------------------------------------

    def validate_pool(self, members: Sequence[PoolMemberInput]) -> PoolValidation:
        return self.pooling.validate(members)

    def create_pool(self, year: int, members: Sequence[PoolMemberInput]) -> PoolResult:
        return self.pooling.create_pool(year, members)

    def get_pool(self, pool_id: str) -> Optional[Pool]:
        return self.pooling.get_pool(pool_id)
