"""
Advance compliance surplus (ACS) borrowing, Article 20(2).

A ship in deficit may borrow up to 2% of target * energy against next
year's balance, repaid the following year with a 10% aggravation. It may
not borrow in two consecutive years. Per ship-year the entry moves
NoEntry -> Borrowed -> Repaid and never back.
"""

import logging
from typing import TYPE_CHECKING, List, Optional

from .errors import Reason, ShipDataNotFoundError
from .locks import ShipLocks
from .ports import LedgerStore
from .results import BorrowEntry, BorrowResult, BorrowValidation

if TYPE_CHECKING:
    from .orchestrator import ComplianceOrchestrator

logger = logging.getLogger(__name__)


class BorrowingLedger:
    """Validates, records and settles ACS borrowing."""

    def __init__(
        self,
        store: LedgerStore,
        orchestrator: "ComplianceOrchestrator",
        locks: ShipLocks,
    ):
        self.store = store
        self.orchestrator = orchestrator
        self.locks = locks

    def validate(self, ship_id: str, year: int) -> BorrowValidation:
        """Check whether the ship may borrow for ``year`` and how much."""
        if self.store.get_borrow(ship_id, year - 1) is not None:
            return BorrowValidation(
                can_borrow=False,
                reason=Reason.CONSECUTIVE_BORROW,
                message=(
                    f"Cannot borrow for 2 consecutive years "
                    f"(ship {ship_id} borrowed in {year - 1})"
                ),
            )

        try:
            adjusted = self.orchestrator.adjusted_cb(ship_id, year)
        except ShipDataNotFoundError as e:
            return BorrowValidation(
                can_borrow=False, reason=Reason.NO_COMPLIANCE_DATA, message=e.message,
            )

        if adjusted >= 0:
            return BorrowValidation(
                can_borrow=False,
                reason=Reason.NO_DEFICIT,
                message=f"No deficit to borrow against (adjusted CB {adjusted} >= 0)",
            )

        balance = self.store.get_compliance(ship_id, year)
        max_acs = self.orchestrator.calculator.max_borrowing(year, balance.energy_scope_mj)
        deficit = abs(adjusted)

        if deficit > max_acs:
            return BorrowValidation(
                can_borrow=False,
                reason=Reason.EXCEEDS_LIMIT,
                message=(
                    f"Deficit ({deficit:.5f} gCO2eq) exceeds 2% limit "
                    f"({max_acs:.5f} gCO2eq)"
                ),
                max_allowed_acs=max_acs,
                deficit_amount=deficit,
            )

        return BorrowValidation(
            can_borrow=True,
            max_allowed_acs=max_acs,
            deficit_amount=deficit,
        )

    def borrow(self, ship_id: str, year: int) -> BorrowResult:
        """Borrow the full deficit for ``year``; repayable in ``year + 1``."""
        with self.locks.hold(ship_id), self.store.transaction():
            validation = self.validate(ship_id, year)
            if not validation.can_borrow:
                logger.warning(
                    "Borrowing rejected for %s/%s (%s): %s",
                    ship_id, year, validation.reason.value, validation.message,
                )
                return BorrowResult(False, validation.message, validation.reason)

            if self.store.get_borrow(ship_id, year) is not None:
                logger.warning("Borrowing rejected for %s/%s: already borrowed", ship_id, year)
                return BorrowResult(
                    False,
                    f"Already borrowed for {year}",
                    Reason.ALREADY_BORROWED,
                )

            amount = validation.deficit_amount
            aggravated = self.orchestrator.calculator.aggravated_acs(amount)
            entry = self.store.add_borrow(ship_id, year, amount, aggravated)

        logger.info(
            "Ship %s borrowed %.5f gCO2eq for %s, repay %.5f in %s",
            ship_id, amount, year, aggravated, year + 1,
        )
        return BorrowResult(
            True,
            f"Successfully borrowed {amount:.5f} gCO2eq. "
            f"Must repay {aggravated:.5f} gCO2eq in {year + 1}.",
            entry=entry,
            aggravated_amount=aggravated,
        )

    def settle_previous_year(self, ship_id: str, year: int) -> float:
        """
        Mark last year's borrowing repaid and return the aggravated amount.

        Returns 0.0 when there is nothing outstanding, including on every
        call after the first settlement.
        """
        with self.locks.hold(ship_id), self.store.transaction():
            entry = self.store.get_borrow(ship_id, year - 1)
            if entry is None or entry.repaid:
                return 0.0
            self.store.mark_borrow_repaid(entry.id)

        logger.info(
            "Settled %s ACS of ship %s: %.5f gCO2eq deducted in %s",
            year - 1, ship_id, entry.aggravated_amount, year,
        )
        return entry.aggravated_amount

    def repayment_due(self, ship_id: str, year: int) -> float:
        """Aggravated amount deducted from ``year`` for last year's settled borrowing."""
        entry = self.store.get_borrow(ship_id, year - 1)
        if entry is None or not entry.repaid:
            return 0.0
        return entry.aggravated_amount

    def history(self, ship_id: str) -> List[BorrowEntry]:
        return self.store.list_borrows(ship_id)

    def entry(self, ship_id: str, year: int) -> Optional[BorrowEntry]:
        return self.store.get_borrow(ship_id, year)
