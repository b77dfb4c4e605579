"""
Banking of surplus compliance balance (Article 20(1)).

A ship with a positive CB may bank part or all of it for later years;
banked surplus does not expire. Applying banked surplus to a deficit debits
the bank entries oldest first, so the same surplus is never spent twice.
"""

import logging
import math
from typing import TYPE_CHECKING, List, Optional

from .errors import Reason, ShipDataNotFoundError
from .locks import ShipLocks
from .ports import LedgerStore
from .results import ApplyBankedResult, BankBalance, BankEntry, BankResult
from .rounding import round5

if TYPE_CHECKING:
    from .orchestrator import ComplianceOrchestrator

logger = logging.getLogger(__name__)


class BankingLedger:
    """Records banked surplus and applies it against deficits."""

    def __init__(
        self,
        store: LedgerStore,
        orchestrator: "ComplianceOrchestrator",
        locks: ShipLocks,
    ):
        self.store = store
        self.orchestrator = orchestrator
        self.locks = locks

    def bank_surplus(self, ship_id: str, year: int, amount: float) -> BankResult:
        """
        Bank ``amount`` gCO2eq out of the ship-year's surplus.

        The surplus still available is the CB less whatever has already
        been banked from the same ship-year.
        """
        if not math.isfinite(amount):
            return self._reject(
                BankResult(
                    False,
                    f"Amount to bank must be a finite number (got {amount}).",
                    Reason.INVALID_AMOUNT,
                ),
                ship_id, year,
            )

        with self.locks.hold(ship_id), self.store.transaction():
            try:
                balance = self.orchestrator.compute_balance(ship_id, year)
            except ShipDataNotFoundError as e:
                return BankResult(False, e.message, Reason.NO_COMPLIANCE_DATA)

            cb = balance.cb_value
            if cb <= 0:
                return self._reject(
                    BankResult(
                        False,
                        f"Cannot bank surplus. Compliance balance is not positive ({cb}).",
                        Reason.NO_SURPLUS,
                    ),
                    ship_id, year,
                )

            available = round5(cb - self.store.banked_from(ship_id, year))
            if amount > available:
                return self._reject(
                    BankResult(
                        False,
                        f"Amount to bank ({amount}) exceeds available surplus ({available}).",
                        Reason.INSUFFICIENT_SURPLUS,
                        available_surplus=available,
                    ),
                    ship_id, year,
                )

            if amount <= 0:
                return self._reject(
                    BankResult(
                        False,
                        f"Amount to bank must be positive (got {amount}).",
                        Reason.INVALID_AMOUNT,
                    ),
                    ship_id, year,
                )

            entry = self.store.add_bank_entry(ship_id, year, round5(amount))

        logger.info("Banked %s gCO2eq for ship %s from %s", entry.amount, ship_id, year)
        return BankResult(
            True,
            f"Successfully banked {entry.amount} gCO2eq for ship {ship_id}.",
            entry=entry,
            available_surplus=round5(available - entry.amount),
        )

    def apply_banked(self, ship_id: str, year: int, amount: float) -> ApplyBankedResult:
        """
        Apply banked surplus against the ship-year deficit.

        The current CB counts surplus already applied to this ship-year.
        At most the outstanding deficit is applied; that much is debited
        from the bank in the same transaction.
        """
        if not math.isfinite(amount):
            return self._reject(
                ApplyBankedResult(
                    False,
                    f"Amount to apply must be a finite number (got {amount}).",
                    Reason.INVALID_AMOUNT,
                ),
                ship_id, year,
            )

        with self.locks.hold(ship_id), self.store.transaction():
            try:
                raw = self.orchestrator.compute_balance(ship_id, year).cb_value
            except ShipDataNotFoundError as e:
                return ApplyBankedResult(False, e.message, Reason.NO_COMPLIANCE_DATA)

            cb = round5(raw + self.store.applied_to(ship_id, year))
            if cb >= 0:
                return self._reject(
                    ApplyBankedResult(
                        False,
                        f"Cannot apply banked surplus. Ship has no deficit (CB {cb}).",
                        Reason.NO_DEFICIT,
                        cb_before=cb,
                    ),
                    ship_id, year,
                )

            entries = self.store.list_bank_entries(ship_id=ship_id, for_update=True)
            total_banked = round5(sum(e.amount for e in entries))
            if total_banked < amount:
                return self._reject(
                    ApplyBankedResult(
                        False,
                        f"Insufficient banked surplus. Available: {total_banked}, "
                        f"Requested: {amount}.",
                        Reason.INSUFFICIENT_BANKED,
                        cb_before=cb,
                    ),
                    ship_id, year,
                )

            if amount <= 0:
                return self._reject(
                    ApplyBankedResult(
                        False,
                        f"Amount to apply must be positive (got {amount}).",
                        Reason.INVALID_AMOUNT,
                        cb_before=cb,
                    ),
                    ship_id, year,
                )

            applied = round5(min(amount, abs(cb)))
            self._debit(entries, applied)
            self.store.add_bank_application(ship_id, year, applied)
            cb_after = round5(cb + applied)

        logger.info(
            "Applied %s gCO2eq banked surplus to ship %s/%s: CB %s -> %s",
            applied, ship_id, year, cb, cb_after,
        )
        return ApplyBankedResult(
            True,
            f"Successfully applied {applied} gCO2eq from banked surplus.",
            cb_before=cb,
            cb_after=cb_after,
            applied=applied,
        )

    def get_balance(self, ship_id: str) -> BankBalance:
        entries = self.store.list_bank_entries(ship_id=ship_id)
        return BankBalance(
            ship_id=ship_id,
            total_banked=round5(sum(e.amount for e in entries)),
            entries=entries,
        )

    def records(self, ship_id: Optional[str] = None, year: Optional[int] = None) -> List[BankEntry]:
        """All bank entries, spent ones included, oldest first."""
        return self.store.list_bank_entries(ship_id=ship_id, year=year, include_spent=True)

    def total_banked(self, ship_id: str) -> float:
        return round5(self.store.total_banked(ship_id))

    def applied_to(self, ship_id: str, year: int) -> float:
        return round5(self.store.applied_to(ship_id, year))

    # ---- private helpers ----------------------------------------------------

    def _debit(self, entries: List[BankEntry], amount: float) -> None:
        """Debit ``amount`` from ``entries`` oldest first."""
        remaining = amount
        for entry in entries:
            if remaining <= 0:
                break
            take = min(entry.amount, remaining)
            self.store.set_bank_entry_amount(entry.id, round5(entry.amount - take))
            remaining = round5(remaining - take)

    @staticmethod
    def _reject(result, ship_id: str, year: int):
        logger.warning(
            "Banking rejected for %s/%s (%s): %s",
            ship_id, year, result.reason.value, result.message,
        )
        return result
