"""Compliance ledger for FuelEU Maritime (EU 2023/1805): balances, banking, borrowing, pooling."""

from .engine import ComplianceEngine
from .errors import ErrorKind, LedgerError, Reason, ShipDataNotFoundError
from .fuel_data import RouteFuelDataSource, StaticFuelDataSource
from .fueleu import ComplianceCalculator
from .ghg_intensity import FuelRecord, GHGIntensityCalculator
from .memory_store import InMemoryLedgerStore
from .results import PoolMemberInput
from .targets import target_for

__all__ = [
    "ComplianceCalculator",
    "ComplianceEngine",
    "ErrorKind",
    "FuelRecord",
    "GHGIntensityCalculator",
    "InMemoryLedgerStore",
    "LedgerError",
    "PoolMemberInput",
    "Reason",
    "RouteFuelDataSource",
    "ShipDataNotFoundError",
    "StaticFuelDataSource",
    "target_for",
]
