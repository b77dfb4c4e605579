"""
FuelEU Maritime Well-to-Wake GHG intensity calculator.

Implements the Annex I formula over a list of per-fuel consumption records:

    energy = sum(M_i * LCV_i * RWD_i) + E_aux
    WtT    = sum(M_i * LCV_i * CO2eq_WtT,i) / energy
    TtW    = sum(M_i * LCV_i * ((1 - C_slip/100) + C_slip/100) * CO2eq_TtW,i) / energy
    GHGIE  = WtT + TtW

Mass is in grams, LCV in MJ/g, emission factors in gCO2eq/MJ.
Reference: EU Regulation 2023/1805, Annex I and Annex II (defaults).
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from .errors import UnknownFuelTypeError
from .rounding import round5

logger = logging.getLogger(__name__)


# =============================================================================
# Emission Factor Data (Annex II defaults)
# =============================================================================

# Lower Calorific Values (MJ/g fuel)
LCV = {
    "hfo": 0.0405,
    "lfo": 0.0410,
    "vlsfo": 0.0410,
    "mdo": 0.0427,
    "mgo": 0.0427,
    "lng": 0.0491,
    "lpg_propane": 0.0460,
    "lpg_butane": 0.0460,
    "methanol": 0.0199,
    "ethanol": 0.0268,
}

# Well-to-Tank emission factors (gCO2eq/MJ)
WTT_FACTORS = {
    "hfo": 13.5,
    "lfo": 13.2,
    "vlsfo": 13.2,
    "mdo": 14.4,
    "mgo": 14.4,
    "lng": 18.5,
    "lpg_propane": 7.8,
    "lpg_butane": 7.8,
    "methanol": 31.3,
    "ethanol": 31.3,
}

# Tank-to-Wake CO2eq factors (gCO2eq/MJ), CO2 + CH4 + N2O
TTW_FACTORS = {
    "hfo": 78.24,
    "lfo": 78.19,
    "vlsfo": 78.19,
    "mdo": 76.37,
    "mgo": 76.37,
    "lng": 70.70,
    "lpg_propane": 65.22,
    "lpg_butane": 65.87,
    "methanol": 69.08,
    "ethanol": 69.08,
}

# Methane slip (% of fuel not combusted) by LNG engine type
LNG_SLIP_COEFFICIENTS = {
    "otto_ms": 3.1,
    "otto_ss": 1.7,
    "diesel_ss": 0.2,
    "lbsi": 2.6,
}

RFNBO_REWARD_FACTOR = 2.0
DEFAULT_REWARD_FACTOR = 1.0
RFNBO_REWARD_YEARS = (2025, 2033)


def normalise_fuel_type(fuel_type: str) -> str:
    return fuel_type.strip().lower().replace(" ", "_")


def reward_factor(year: int, is_rfnbo: bool = False) -> float:
    """RFNBOs count double towards the energy denominator in 2025-2033."""
    first, last = RFNBO_REWARD_YEARS
    if is_rfnbo and first <= year <= last:
        return RFNBO_REWARD_FACTOR
    return DEFAULT_REWARD_FACTOR


def slip_coefficient(fuel_type: str, engine_type: Optional[str] = None) -> float:
    """Slip coefficient (%) for a fuel / engine combination; 0 for liquid fuels."""
    if normalise_fuel_type(fuel_type) != "lng" or not engine_type:
        return 0.0
    return LNG_SLIP_COEFFICIENTS.get(normalise_fuel_type(engine_type), 0.0)


# =============================================================================
# Data Types
# =============================================================================

@dataclass(frozen=True)
class FuelRecord:
    """Consumption of one fuel within the reporting scope."""
    fuel_type: str
    mass_g: float
    lcv_mj_per_g: float
    wtt_factor: float  # gCO2eq/MJ
    ttw_factor: float  # gCO2eq/MJ
    slip_pct: float = 0.0
    reward_factor: float = DEFAULT_REWARD_FACTOR
    is_rfnbo: bool = False

    @classmethod
    def from_defaults(
        cls,
        fuel_type: str,
        mass_g: float,
        year: int,
        engine_type: Optional[str] = None,
        is_rfnbo: bool = False,
    ) -> "FuelRecord":
        """Build a record from the Annex II default factors."""
        key = normalise_fuel_type(fuel_type)
        if key not in LCV:
            raise UnknownFuelTypeError(fuel_type)
        return cls(
            fuel_type=key,
            mass_g=mass_g,
            lcv_mj_per_g=LCV[key],
            wtt_factor=WTT_FACTORS[key],
            ttw_factor=TTW_FACTORS[key],
            slip_pct=slip_coefficient(key, engine_type),
            reward_factor=reward_factor(year, is_rfnbo),
            is_rfnbo=is_rfnbo,
        )

    @property
    def energy_mj(self) -> float:
        return self.mass_g * self.lcv_mj_per_g


@dataclass
class GHGIntensityResult:
    """Result of a GHG intensity calculation (gCO2eq/MJ, MJ)."""
    well_to_tank: float
    tank_to_wake: float
    total: float
    energy: float


# =============================================================================
# Calculator
# =============================================================================

class GHGIntensityCalculator:
    """Aggregates per-fuel energy and emissions into a WtW GHG intensity."""

    def compute(
        self, fuels: List[FuelRecord], aux_energy_mj: float = 0.0
    ) -> GHGIntensityResult:
        """
        Calculate WtT, TtW and total GHG intensity for a fuel mix.

        Args:
            fuels: Fuel consumption records in scope
            aux_energy_mj: Additional energy (e.g. onshore power supply)

        Returns:
            GHGIntensityResult; all zeros when there is no energy in scope
        """
        total_energy = sum(
            f.mass_g * f.lcv_mj_per_g * f.reward_factor for f in fuels
        ) + aux_energy_mj

        if total_energy == 0:
            return GHGIntensityResult(
                well_to_tank=0.0, tank_to_wake=0.0, total=0.0, energy=0.0,
            )

        wtt_numerator = 0.0
        ttw_numerator = 0.0
        for fuel in fuels:
            energy = fuel.mass_g * fuel.lcv_mj_per_g
            wtt_numerator += energy * fuel.wtt_factor

            # Slipped fuel shares the combusted TtW factor; no separate
            # slip factor is modelled, so the fractions sum to 1.
            combusted = 1 - fuel.slip_pct / 100
            slipped = fuel.slip_pct / 100
            ttw_numerator += energy * fuel.ttw_factor * (combusted + slipped)

        wtt = wtt_numerator / total_energy
        ttw = ttw_numerator / total_energy

        logger.debug(
            "GHG intensity over %d fuels: energy=%.2f MJ wtt=%.5f ttw=%.5f",
            len(fuels), total_energy, wtt, ttw,
        )

        return GHGIntensityResult(
            well_to_tank=round5(wtt),
            tank_to_wake=round5(ttw),
            total=round5(wtt + ttw),
            energy=round5(total_energy),
        )


def fuel_info() -> List[Dict]:
    """Return fuel types with their default emission factor data."""
    fuels = []
    for fuel_key in LCV:
        wtt = WTT_FACTORS[fuel_key]
        ttw = TTW_FACTORS[fuel_key]
        fuels.append({
            "id": fuel_key,
            "name": fuel_key.upper().replace("_", " "),
            "lcv_mj_per_g": LCV[fuel_key],
            "wtt_gco2eq_per_mj": wtt,
            "ttw_gco2eq_per_mj": ttw,
            "wtw_gco2eq_per_mj": round(wtt + ttw, 2),
        })
    return fuels
