"""
Shared pytest fixtures for FuelEU Ledger tests.

CRITICAL: Database patching must occur at module-import time so SQLite
engine creation (without pool_size/max_overflow params) happens before
api.database is imported anywhere. The _patched_create_engine wrapper
strips pool params that are invalid for SQLite.
"""

import os
import sys
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

# ---------------------------------------------------------------------------
# Section 1: Environment setup (before ANY api.* imports)
# ---------------------------------------------------------------------------
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("DB_ECHO", "false")
os.environ.setdefault("FUEL_DATA_SOURCE", "mock")

# ---------------------------------------------------------------------------
# Section 2: Patch SQLAlchemy engine creation for SQLite compatibility
# ---------------------------------------------------------------------------
from sqlalchemy import create_engine as _real_create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool


def _patched_create_engine(url, **kwargs):
    """Create engine, stripping pool params invalid for SQLite.

    Uses StaticPool so all connections share the same in-memory database.
    """
    if str(url).startswith("sqlite"):
        kwargs.pop("pool_size", None)
        kwargs.pop("max_overflow", None)
        kwargs.pop("pool_pre_ping", None)
        kwargs.setdefault("connect_args", {"check_same_thread": False})
        kwargs["poolclass"] = StaticPool
    return _real_create_engine(url, **kwargs)


# Apply patch before api.database is imported
_patcher = patch("sqlalchemy.create_engine", _patched_create_engine)
_patcher.start()

# Clear any cached api.database imports so patch takes effect
for _mod in list(sys.modules.keys()):
    if _mod.startswith("api.database"):
        del sys.modules[_mod]

from api.database import Base, get_db, engine as test_engine  # noqa: E402
import api.models  # noqa: E402,F401 - ensure all ORM models are registered

from src.compliance.engine import ComplianceEngine  # noqa: E402
from src.compliance.fuel_data import StaticFuelDataSource  # noqa: E402
from src.compliance.locks import ShipLocks  # noqa: E402
from src.compliance.memory_store import InMemoryLedgerStore  # noqa: E402

TestingSessionLocal = sessionmaker(
    autocommit=False, autoflush=False, bind=test_engine
)
Base.metadata.create_all(bind=test_engine)

# ---------------------------------------------------------------------------
# Section 3: Core database + client fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def db():
    """Create a test database session with transaction isolation."""
    connection = test_engine.connect()
    transaction = connection.begin()
    session = TestingSessionLocal(bind=connection)

    yield session

    session.close()
    transaction.rollback()
    connection.close()


@pytest.fixture
def client(db):
    """Create a FastAPI TestClient with database dependency override."""
    from api.main import app

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Section 4: Ledger engine fixtures
# ---------------------------------------------------------------------------

# Fleet used across ledger tests (gCO2eq/MJ, MJ). Against the 2025 target
# of 89.3368: SURPLUS_SHIP CB = +4,336,800; DEFICIT_SHIP CB = -5,816,000.
SURPLUS_SHIP = "SURPLUS-1"
DEFICIT_SHIP = "DEFICIT-1"
SMALL_DEFICIT_SHIP = "DEFICIT-2"
BIG_DEFICIT_SHIP = "DEFICIT-BIG"
# Surplus in 2025-2029 (+2,336,800), deficit from 2030 (-1,309,600)
SWING_SHIP = "SWING-1"


@pytest.fixture
def fuel_source():
    """Static fuel data: 90.5 gCO2eq/MJ over 5,000,000 MJ unless overridden."""
    source = StaticFuelDataSource(actual_intensity=90.5, energy_scope_mj=5_000_000.0)
    source.set_ship(SURPLUS_SHIP, 85.0, 1_000_000.0)
    source.set_ship(DEFICIT_SHIP, 90.5, 5_000_000.0)
    # CB 2025 = -1,000,000
    source.set_ship(SMALL_DEFICIT_SHIP, 90.3368, 1_000_000.0)
    # 2025 deficit well above the 2% borrowing cap
    source.set_ship(BIG_DEFICIT_SHIP, 95.0, 5_000_000.0)
    source.set_ship(SWING_SHIP, 87.0, 1_000_000.0)
    return source


@pytest.fixture
def store():
    return InMemoryLedgerStore()


@pytest.fixture
def engine(store, fuel_source):
    """Compliance engine over an in-memory store with its own lock registry."""
    return ComplianceEngine(store, fuel_source, ShipLocks())
