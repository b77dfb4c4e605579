"""
FuelEU Maritime (EU 2023/1805) compliance balance and penalty calculator.

- Compliance balance: CB = (GHGIE_target - GHGIE_actual) * energy
- Penalty: |CB| / (GHGIE_actual * 41,000) * 2,400 EUR, escalated 10% per
  consecutive non-compliant year (Annex IV Part B)
- Advance compliance surplus (borrowing) ceiling and aggravation (Article 20)

Sign convention: CB >= 0 is surplus (compliant), CB < 0 is deficit.
"""

import logging

from .rounding import round5, round_penalty_eur
from .targets import target_for

logger = logging.getLogger(__name__)


# MJ per tonne VLSFO, the energy equivalence used by the penalty
VLSFO_LCV_MJ_PER_T = 41000

# Penalty: EUR 2,400 per tonne VLSFO equivalent
PENALTY_EUR_PER_T_VLSFO = 2400
CONSECUTIVE_YEAR_ESCALATION = 0.10

# Borrowing: at most 2% of target * energy, repaid with 10% aggravation
MAX_BORROWING_FRACTION = 0.02
BORROWING_AGGRAVATION = 1.10


class ComplianceCalculator:
    """Derives compliance balances, borrowing limits and penalties."""

    @staticmethod
    def compliance_balance(target: float, actual: float, energy_mj: float) -> float:
        """Return the compliance balance in gCO2eq (positive = surplus)."""
        return round5((target - actual) * energy_mj)

    @staticmethod
    def penalty(cb: float, actual_intensity: float, consecutive_years: int = 1) -> int:
        """
        Calculate the FuelEU penalty for a compliance balance.

        Args:
            cb: Compliance balance in gCO2eq (negative for a deficit)
            actual_intensity: Actual GHG intensity in gCO2eq/MJ
            consecutive_years: Years of non-compliance including the current one

        Returns:
            Penalty in whole EUR; 0 when the balance is not a deficit
        """
        if cb >= 0:
            return 0
        if consecutive_years < 1:
            raise ValueError(
                f"consecutive_years must be at least 1, got {consecutive_years}"
            )
        if actual_intensity <= 0:
            raise ValueError(
                f"actual_intensity must be positive for a deficit, got {actual_intensity}"
            )

        base = abs(cb) / (actual_intensity * VLSFO_LCV_MJ_PER_T) * PENALTY_EUR_PER_T_VLSFO
        multiplier = 1 + (consecutive_years - 1) * CONSECUTIVE_YEAR_ESCALATION
        return round_penalty_eur(base * multiplier)

    @staticmethod
    def max_borrowing(year: int, energy_mj: float) -> float:
        """Maximum advance compliance surplus for a ship-year (gCO2eq)."""
        return round5(MAX_BORROWING_FRACTION * target_for(year) * energy_mj)

    @staticmethod
    def aggravated_acs(amount: float) -> float:
        """Amount to repay the following year for ``amount`` borrowed."""
        return round5(amount * BORROWING_AGGRAVATION)
