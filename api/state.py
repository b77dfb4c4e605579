"""
Shared application state for the FuelEU Ledger API.

Holds the process-wide pieces every request needs (mock fuel data source,
per-ship lock registry) and builds a ``ComplianceEngine`` per request
around the request's database session.
"""
import threading
import logging
from typing import Optional, Dict, Any
from datetime import datetime, timezone

from fastapi import Depends
from sqlalchemy.orm import Session

from api.config import settings
from api.database import get_db
from api.repository import SqlLedgerStore, route_lookup
from src.compliance.engine import ComplianceEngine
from src.compliance.fuel_data import RouteFuelDataSource, StaticFuelDataSource
from src.compliance.locks import ShipLocks, ship_locks
from src.compliance.ports import FuelDataSource

logger = logging.getLogger(__name__)


class ApplicationState:
    """
    Singleton application state manager.

    Use get_app_state() to access the singleton instance.
    """

    _instance: Optional['ApplicationState'] = None
    _lock: threading.Lock = threading.Lock()

    def __new__(cls):
        """Ensure singleton pattern."""
        if cls._instance is None:
            with cls._lock:
                # Double-check locking
                if cls._instance is None:
                    cls._instance = super().__new__(cls)
                    cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        """Initialize application state (only once)."""
        if self._initialized:
            return

        self._initialized = True
        self._mock_source = StaticFuelDataSource(
            actual_intensity=settings.mock_actual_intensity,
            energy_scope_mj=settings.mock_energy_scope_mj,
        )
        self._startup_time = datetime.now(timezone.utc)

        logger.info(
            "Application state initialized (fuel data source: %s)",
            settings.fuel_data_source,
        )

    @property
    def mock_source(self) -> StaticFuelDataSource:
        return self._mock_source

    @property
    def locks(self) -> ShipLocks:
        return ship_locks

    def fuel_source(self, db: Session) -> FuelDataSource:
        """Fuel data source for one request."""
        if settings.fuel_data_source == "routes":
            fallback = self._mock_source if settings.mock_fallback else None
            return RouteFuelDataSource(route_lookup(db), fallback=fallback)
        return self._mock_source

    @property
    def uptime_seconds(self) -> float:
        """Get application uptime in seconds."""
        return (datetime.now(timezone.utc) - self._startup_time).total_seconds()

    def health_check(self) -> Dict[str, Any]:
        return {
            'fuel_data_source': settings.fuel_data_source,
            'uptime_seconds': self.uptime_seconds,
        }


def get_app_state() -> ApplicationState:
    """
    Get the application state singleton.

    Returns:
        ApplicationState: The singleton application state instance
    """
    return ApplicationState()


def get_engine(db: Session = Depends(get_db)) -> ComplianceEngine:
    """FastAPI dependency: compliance engine bound to the request session."""
    state = get_app_state()
    return ComplianceEngine(SqlLedgerStore(db), state.fuel_source(db), state.locks)
