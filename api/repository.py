"""
SQLAlchemy implementation of the compliance ledger persistence port.

One ``SqlLedgerStore`` wraps one session. ``transaction()`` is re-entrant:
only the outermost block commits or rolls back.
"""

import logging
import uuid
from contextlib import contextmanager
from datetime import datetime
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from api import models
from src.compliance.fuel_data import RouteRecord
from src.compliance.ports import LedgerStore
from src.compliance.results import (
    BankApplication,
    BankEntry,
    BorrowEntry,
    ComplianceBalance,
    Pool,
    PoolMember,
)

logger = logging.getLogger(__name__)


def _as_uuid(value: str) -> Optional[uuid.UUID]:
    try:
        return uuid.UUID(str(value))
    except ValueError:
        return None


# =============================================================================
# Row -> record conversion
# =============================================================================

def _compliance(row: models.ShipCompliance) -> ComplianceBalance:
    return ComplianceBalance(
        ship_id=row.ship_id,
        year=row.year,
        cb_value=row.cb_gco2eq,
        actual_intensity=row.ghgie_actual,
        target_intensity=row.ghgie_target,
        energy_scope_mj=row.energy_scope_mj,
    )


def _bank_entry(row: models.BankEntry) -> BankEntry:
    return BankEntry(
        id=str(row.id),
        ship_id=row.ship_id,
        year=row.year,
        banked_amount=row.banked_amount_gco2eq,
        amount=row.amount_gco2eq,
        created_at=row.created_at,
    )


def _borrow_entry(row: models.BorrowEntry) -> BorrowEntry:
    return BorrowEntry(
        id=str(row.id),
        ship_id=row.ship_id,
        year=row.year,
        amount=row.amount_gco2eq,
        aggravated_amount=row.aggravated_amount,
        repaid=row.repaid,
        created_at=row.created_at,
        repaid_at=row.repaid_at,
    )


def _pool(row: models.Pool) -> Pool:
    return Pool(
        id=str(row.id),
        year=row.year,
        total_cb_before=row.total_cb_before,
        total_cb_after=row.total_cb_after,
        members=[
            PoolMember(ship_id=m.ship_id, cb_before=m.cb_before, cb_after=m.cb_after)
            for m in row.members
        ],
        created_at=row.created_at,
    )


# =============================================================================
# Store
# =============================================================================

class SqlLedgerStore(LedgerStore):
    """``LedgerStore`` backed by a SQLAlchemy session."""

    def __init__(self, db: Session):
        self.db = db
        self._depth = 0

    @contextmanager
    def transaction(self):
        self._depth += 1
        try:
            yield self
            if self._depth == 1:
                self.db.commit()
            else:
                self.db.flush()
        except Exception:
            if self._depth == 1:
                logger.error("Ledger transaction failed, rolling back")
                self.db.rollback()
            raise
        finally:
            self._depth -= 1

    # ---- compliance balances ------------------------------------------------

    def _compliance_row(self, ship_id: str, year: int) -> Optional[models.ShipCompliance]:
        return (
            self.db.query(models.ShipCompliance)
            .filter(models.ShipCompliance.ship_id == ship_id, models.ShipCompliance.year == year)
            .first()
        )

    def upsert_compliance(self, balance: ComplianceBalance) -> ComplianceBalance:
        row = self._compliance_row(balance.ship_id, balance.year)
        if row is None:
            row = models.ShipCompliance(ship_id=balance.ship_id, year=balance.year)
            self.db.add(row)
        row.cb_gco2eq = balance.cb_value
        row.ghgie_actual = balance.actual_intensity
        row.ghgie_target = balance.target_intensity
        row.energy_scope_mj = balance.energy_scope_mj
        self.db.flush()
        return _compliance(row)

    def get_compliance(self, ship_id: str, year: int) -> Optional[ComplianceBalance]:
        row = self._compliance_row(ship_id, year)
        return _compliance(row) if row else None

    # ---- banking ------------------------------------------------------------

    def add_bank_entry(self, ship_id: str, year: int, amount: float) -> BankEntry:
        row = models.BankEntry(
            ship_id=ship_id,
            year=year,
            banked_amount_gco2eq=amount,
            amount_gco2eq=amount,
        )
        self.db.add(row)
        self.db.flush()
        return _bank_entry(row)

    def list_bank_entries(
        self,
        ship_id: Optional[str] = None,
        year: Optional[int] = None,
        include_spent: bool = False,
        for_update: bool = False,
    ) -> List[BankEntry]:
        query = self.db.query(models.BankEntry)
        if ship_id is not None:
            query = query.filter(models.BankEntry.ship_id == ship_id)
        if year is not None:
            query = query.filter(models.BankEntry.year == year)
        if not include_spent:
            query = query.filter(models.BankEntry.amount_gco2eq > 0)
        if for_update:
            query = query.with_for_update()
        return [_bank_entry(row) for row in query.order_by(models.BankEntry.id).all()]

    def set_bank_entry_amount(self, entry_id: str, amount: float) -> BankEntry:
        row = self.db.get(models.BankEntry, int(entry_id))
        if row is None:
            raise KeyError(f"Bank entry {entry_id} not found")
        row.amount_gco2eq = amount
        self.db.flush()
        return _bank_entry(row)

    def total_banked(self, ship_id: str) -> float:
        total = (
            self.db.query(func.coalesce(func.sum(models.BankEntry.amount_gco2eq), 0.0))
            .filter(models.BankEntry.ship_id == ship_id)
            .scalar()
        )
        return float(total)

    def banked_from(self, ship_id: str, year: int) -> float:
        total = (
            self.db.query(func.coalesce(func.sum(models.BankEntry.banked_amount_gco2eq), 0.0))
            .filter(models.BankEntry.ship_id == ship_id, models.BankEntry.year == year)
            .scalar()
        )
        return float(total)

    def add_bank_application(self, ship_id: str, year: int, amount: float) -> BankApplication:
        row = models.BankApplication(ship_id=ship_id, year=year, amount_gco2eq=amount)
        self.db.add(row)
        self.db.flush()
        return BankApplication(
            id=str(row.id),
            ship_id=row.ship_id,
            year=row.year,
            amount=row.amount_gco2eq,
            created_at=row.created_at,
        )

    def applied_to(self, ship_id: str, year: int) -> float:
        total = (
            self.db.query(func.coalesce(func.sum(models.BankApplication.amount_gco2eq), 0.0))
            .filter(
                models.BankApplication.ship_id == ship_id,
                models.BankApplication.year == year,
            )
            .scalar()
        )
        return float(total)

    # ---- borrowing ----------------------------------------------------------

    def _borrow_row(self, ship_id: str, year: int) -> Optional[models.BorrowEntry]:
        return (
            self.db.query(models.BorrowEntry)
            .filter(models.BorrowEntry.ship_id == ship_id, models.BorrowEntry.year == year)
            .first()
        )

    def get_borrow(self, ship_id: str, year: int) -> Optional[BorrowEntry]:
        row = self._borrow_row(ship_id, year)
        return _borrow_entry(row) if row else None

    def add_borrow(
        self, ship_id: str, year: int, amount: float, aggravated_amount: float
    ) -> BorrowEntry:
        row = models.BorrowEntry(
            ship_id=ship_id,
            year=year,
            amount_gco2eq=amount,
            aggravated_amount=aggravated_amount,
            repaid=False,
        )
        self.db.add(row)
        self.db.flush()
        return _borrow_entry(row)

    def mark_borrow_repaid(self, entry_id: str) -> BorrowEntry:
        key = _as_uuid(entry_id)
        row = self.db.get(models.BorrowEntry, key) if key else None
        if row is None:
            raise KeyError(f"Borrow entry {entry_id} not found")
        row.repaid = True
        row.repaid_at = datetime.utcnow()
        self.db.flush()
        return _borrow_entry(row)

    def list_borrows(self, ship_id: str) -> List[BorrowEntry]:
        rows = (
            self.db.query(models.BorrowEntry)
            .filter(models.BorrowEntry.ship_id == ship_id)
            .order_by(models.BorrowEntry.year.desc())
            .all()
        )
        return [_borrow_entry(row) for row in rows]

    # ---- pooling ------------------------------------------------------------

    def create_pool(
        self,
        year: int,
        total_cb_before: float,
        total_cb_after: float,
        members: List[PoolMember],
    ) -> Pool:
        pool = models.Pool(
            year=year,
            total_cb_before=total_cb_before,
            total_cb_after=total_cb_after,
        )
        for position, member in enumerate(members):
            pool.members.append(models.PoolMember(
                position=position,
                ship_id=member.ship_id,
                cb_before=member.cb_before,
                cb_after=member.cb_after,
            ))
        self.db.add(pool)
        self.db.flush()
        return _pool(pool)

    def get_pool(self, pool_id: str) -> Optional[Pool]:
        key = _as_uuid(pool_id)
        if key is None:
            return None
        row = self.db.get(models.Pool, key)
        return _pool(row) if row else None


# =============================================================================
# Route registry lookup
# =============================================================================

def route_lookup(db: Session):
    """Build a ``RouteFuelDataSource`` lookup bound to ``db``."""

    def _lookup(ship_id: str, year: int) -> Optional[RouteRecord]:
        row = (
            db.query(models.Route)
            .filter(models.Route.route_id == ship_id, models.Route.year == year)
            .first()
        )
        if row is None:
            return None
        return RouteRecord(
            route_id=row.route_id,
            fuel_type=row.fuel_type,
            year=row.year,
            ghg_intensity=row.ghg_intensity,
            fuel_consumption_t=row.fuel_consumption_t,
        )

    return _lookup
