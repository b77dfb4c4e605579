"""
SQLAlchemy models for the FuelEU Ledger database.
"""

from sqlalchemy import (
    Column,
    String,
    Float,
    Integer,
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from datetime import datetime
import uuid

from api.database import Base


class ShipCompliance(Base):
    """Computed compliance balance per ship and year (upserted on recompute)."""

    __tablename__ = "ship_compliance"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    ship_id = Column(String(100), nullable=False)
    year = Column(Integer, nullable=False)
    cb_gco2eq = Column(Float, nullable=False)
    ghgie_actual = Column(Float, nullable=False)
    ghgie_target = Column(Float, nullable=False)
    energy_scope_mj = Column(Float, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )

    __table_args__ = (
        UniqueConstraint("ship_id", "year", name="uq_ship_compliance_ship_year"),
    )

    def __repr__(self):
        return f"<ShipCompliance(ship_id='{self.ship_id}', year={self.year}, cb={self.cb_gco2eq})>"


class BankEntry(Base):
    """Surplus banked out of a ship-year; amount_gco2eq is the unspent remainder."""

    __tablename__ = "bank_entries"

    # Integer key gives a deterministic oldest-first debit order
    id = Column(Integer, primary_key=True, autoincrement=True)
    ship_id = Column(String(100), nullable=False, index=True)
    year = Column(Integer, nullable=False)
    banked_amount_gco2eq = Column(Float, nullable=False)
    amount_gco2eq = Column(Float, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        Index("ix_bank_entries_ship_year", "ship_id", "year"),
    )

    def __repr__(self):
        return f"<BankEntry(ship_id='{self.ship_id}', year={self.year}, amount={self.amount_gco2eq})>"


class BankApplication(Base):
    """Banked surplus applied against a ship-year deficit."""

    __tablename__ = "bank_applications"

    id = Column(Integer, primary_key=True, autoincrement=True)
    ship_id = Column(String(100), nullable=False)
    year = Column(Integer, nullable=False)
    amount_gco2eq = Column(Float, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        Index("ix_bank_applications_ship_year", "ship_id", "year"),
    )


class BorrowEntry(Base):
    """Advance compliance surplus borrowed for a ship-year."""

    __tablename__ = "borrow_entries"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    ship_id = Column(String(100), nullable=False, index=True)
    year = Column(Integer, nullable=False)
    amount_gco2eq = Column(Float, nullable=False)
    aggravated_amount = Column(Float, nullable=False)
    repaid = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    repaid_at = Column(DateTime, nullable=True)

    __table_args__ = (
        UniqueConstraint("ship_id", "year", name="uq_borrow_entries_ship_year"),
    )

    def __repr__(self):
        return f"<BorrowEntry(ship_id='{self.ship_id}', year={self.year}, repaid={self.repaid})>"


class Pool(Base):
    """Compliance pool for one reporting year."""

    __tablename__ = "pools"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    year = Column(Integer, nullable=False, index=True)
    total_cb_before = Column(Float, nullable=False)
    total_cb_after = Column(Float, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    members = relationship(
        "PoolMember",
        back_populates="pool",
        cascade="all, delete-orphan",
        order_by="PoolMember.position",
    )

    def __repr__(self):
        return f"<Pool(id={self.id}, year={self.year})>"


class PoolMember(Base):
    """Member ship of a pool with its balance before and after allocation."""

    __tablename__ = "pool_members"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    pool_id = Column(
        UUID(as_uuid=True), ForeignKey("pools.id", ondelete="CASCADE"), nullable=False, index=True
    )
    position = Column(Integer, nullable=False)
    ship_id = Column(String(100), nullable=False)
    cb_before = Column(Float, nullable=False)
    cb_after = Column(Float, nullable=False)

    # Relationships
    pool = relationship("Pool", back_populates="members")

    def __repr__(self):
        return f"<PoolMember(ship_id='{self.ship_id}', before={self.cb_before}, after={self.cb_after})>"


class Route(Base):
    """Registered route with its reported GHG intensity."""

    __tablename__ = "routes"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    route_id = Column(String(100), nullable=False, unique=True, index=True)
    vessel_type = Column(String(100), nullable=False)
    fuel_type = Column(String(50), nullable=False)
    year = Column(Integer, nullable=False, index=True)
    ghg_intensity = Column(Float, nullable=False)
    fuel_consumption_t = Column(Float, nullable=False)
    distance_km = Column(Float, nullable=False)
    total_emissions_t = Column(Float, nullable=False)
    is_baseline = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)

    def __repr__(self):
        return f"<Route(route_id='{self.route_id}', year={self.year})>"
