"""
Compliance orchestration: raw balance -> adjusted balance.

The adjusted compliance balance is the raw CB for a ship-year, less the
aggravated repayment of last year's borrowing, plus banked surplus applied
(or available to apply) against a deficit. It is recomputed on every call.
"""

import logging
from typing import Optional

from .banking import BankingLedger
from .borrowing import BorrowingLedger
from .errors import NoPenaltyBasisError, ShipDataNotFoundError
from .fueleu import ComplianceCalculator
from .ghg_intensity import GHGIntensityCalculator
from .locks import ShipLocks, ship_locks
from .ports import FuelDataSource, LedgerStore
from .results import ComplianceBalance, PenaltyAssessment
from .rounding import round5
from .targets import target_for

logger = logging.getLogger(__name__)


class ComplianceOrchestrator:
    """Composes the calculators and ledgers for one persistence store."""

    def __init__(
        self,
        store: LedgerStore,
        fuel_source: FuelDataSource,
        locks: Optional[ShipLocks] = None,
    ):
        self.store = store
        self.fuel_source = fuel_source
        self.locks = locks or ship_locks
        self.intensity = GHGIntensityCalculator()
        self.calculator = ComplianceCalculator()
        self.banking = BankingLedger(store, self, self.locks)
        self.borrowing = BorrowingLedger(store, self, self.locks)

    def compute_balance(self, ship_id: str, year: int) -> ComplianceBalance:
        """
        Compute and persist the raw compliance balance for a ship-year.

        Raises:
            ShipDataNotFoundError: no fuel data is available upstream
        """
        consumption = self.fuel_source.fuel_consumption(ship_id, year)
        if consumption is None:
            raise ShipDataNotFoundError(ship_id, year)

        intensity = self.intensity.compute(consumption.fuels, consumption.aux_energy_mj)
        target = target_for(year)
        balance = ComplianceBalance(
            ship_id=ship_id,
            year=year,
            cb_value=self.calculator.compliance_balance(
                target, intensity.total, intensity.energy
            ),
            actual_intensity=intensity.total,
            target_intensity=target,
            energy_scope_mj=intensity.energy,
        )

        with self.locks.hold(ship_id), self.store.transaction():
            stored = self.store.upsert_compliance(balance)

        logger.debug(
            "CB %s/%s: target=%.5f actual=%.5f energy=%.5f cb=%.5f",
            ship_id, year, target, intensity.total, intensity.energy, stored.cb_value,
        )
        return stored

    def adjusted_cb(self, ship_id: str, year: int) -> float:
        """Return the compliance balance after borrowing and banking adjustments."""
        with self.locks.hold(ship_id), self.store.transaction():
            raw = self.compute_balance(ship_id, year).cb_value

            repayment = self.borrowing.settle_previous_year(ship_id, year)
            if not repayment:
                repayment = self.borrowing.repayment_due(ship_id, year)
            adjusted = raw - repayment

            adjusted += self.banking.applied_to(ship_id, year)

            total_banked = self.banking.total_banked(ship_id)
            if adjusted < 0 and total_banked > 0:
                preview = min(abs(adjusted), total_banked)
                adjusted = round5(adjusted + preview)

        return round5(adjusted)

    def penalty_exposure(
        self, ship_id: str, year: int, consecutive_years: int = 1
    ) -> PenaltyAssessment:
        """
        Penalty on the adjusted balance, net of any ACS borrowed for the year.

        Raises:
            NoPenaltyBasisError: deficit in a ship-year with no energy in scope
        """
        adjusted = self.adjusted_cb(ship_id, year)
        balance = self.store.get_compliance(ship_id, year)
        entry = self.borrowing.entry(ship_id, year)
        borrowed = entry.amount if entry else 0.0
        effective = round5(adjusted + borrowed)
        if effective < 0 and balance.actual_intensity <= 0:
            raise NoPenaltyBasisError(ship_id, year, effective)

        return PenaltyAssessment(
            ship_id=ship_id,
            year=year,
            adjusted_cb=adjusted,
            borrowed=borrowed,
            effective_cb=effective,
            actual_intensity=balance.actual_intensity,
            consecutive_years=consecutive_years,
            penalty_eur=self.calculator.penalty(
                effective, balance.actual_intensity, consecutive_years
            ),
        )
