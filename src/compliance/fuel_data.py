"""
Fuel consumption data sources.

No voyage aggregation pipeline feeds the ledger yet. ``StaticFuelDataSource``
stands in for it with a fixed intensity and energy scope;
``RouteFuelDataSource`` derives consumption from the route registry.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple

from .ghg_intensity import LCV, WTT_FACTORS, FuelRecord, normalise_fuel_type
from .ports import FuelConsumption, FuelDataSource

logger = logging.getLogger(__name__)

GRAMS_PER_TONNE = 1_000_000

DEFAULT_ACTUAL_INTENSITY = 90.5  # gCO2eq/MJ
DEFAULT_ENERGY_SCOPE_MJ = 5_000_000.0


def reported_intensity_record(actual_intensity: float, energy_mj: float) -> FuelRecord:
    """
    Single synthetic record reproducing a reported intensity and energy.

    LCV of 1 MJ/g makes mass equal to energy; the whole intensity is booked
    as tank-to-wake.
    """
    return FuelRecord(
        fuel_type="reported",
        mass_g=energy_mj,
        lcv_mj_per_g=1.0,
        wtt_factor=0.0,
        ttw_factor=actual_intensity,
    )


class StaticFuelDataSource(FuelDataSource):
    """Fixed intensity / energy for every ship, with optional per-ship values."""

    def __init__(
        self,
        actual_intensity: float = DEFAULT_ACTUAL_INTENSITY,
        energy_scope_mj: float = DEFAULT_ENERGY_SCOPE_MJ,
        overrides: Optional[Dict[str, Tuple[float, float]]] = None,
    ):
        self.actual_intensity = actual_intensity
        self.energy_scope_mj = energy_scope_mj
        self.overrides = dict(overrides or {})

    def set_ship(self, ship_id: str, actual_intensity: float, energy_scope_mj: float):
        self.overrides[ship_id] = (actual_intensity, energy_scope_mj)

    def fuel_consumption(self, ship_id: str, year: int) -> Optional[FuelConsumption]:
        actual, energy = self.overrides.get(
            ship_id, (self.actual_intensity, self.energy_scope_mj)
        )
        return FuelConsumption(fuels=[reported_intensity_record(actual, energy)])


@dataclass
class RouteRecord:
    """Route registry row as seen by the fuel data source."""
    route_id: str
    fuel_type: str
    year: int
    ghg_intensity: float
    fuel_consumption_t: float


class RouteFuelDataSource(FuelDataSource):
    """
    Consumption derived from a registered route (route id == ship id).

    The route's fuel mass is converted with the Annex II LCV of its fuel;
    the default WtT factor is kept and the remainder of the reported
    intensity is booked as tank-to-wake.
    """

    def __init__(
        self,
        lookup: Callable[[str, int], Optional[RouteRecord]],
        fallback: Optional[FuelDataSource] = None,
    ):
        self.lookup = lookup
        self.fallback = fallback

    def fuel_consumption(self, ship_id: str, year: int) -> Optional[FuelConsumption]:
        route = self.lookup(ship_id, year)
        if route is None:
            if self.fallback is not None:
                logger.info("No route for %s/%s, using fallback data source", ship_id, year)
                return self.fallback.fuel_consumption(ship_id, year)
            return None

        key = normalise_fuel_type(route.fuel_type)
        if key in LCV:
            lcv = LCV[key]
            wtt = WTT_FACTORS[key]
        else:
            logger.warning(
                "Route %s uses unknown fuel %s, booking reported intensity only",
                route.route_id, route.fuel_type,
            )
            lcv = 1.0
            wtt = 0.0

        record = FuelRecord(
            fuel_type=key,
            mass_g=route.fuel_consumption_t * GRAMS_PER_TONNE,
            lcv_mj_per_g=lcv,
            wtt_factor=wtt,
            ttw_factor=route.ghg_intensity - wtt,
        )
        return FuelConsumption(fuels=[record])
