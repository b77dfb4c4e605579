"""Ledger records and operation results."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from .errors import ErrorKind, Reason


# =============================================================================
# Ledger records
# =============================================================================

@dataclass
class ComplianceBalance:
    """Derived compliance balance for one ship-year."""
    ship_id: str
    year: int
    cb_value: float
    actual_intensity: float
    target_intensity: float
    energy_scope_mj: float

    @property
    def is_compliant(self) -> bool:
        return self.cb_value >= 0

    @property
    def surplus(self) -> Optional[float]:
        return self.cb_value if self.cb_value > 0 else None

    @property
    def deficit(self) -> Optional[float]:
        return abs(self.cb_value) if self.cb_value < 0 else None


@dataclass
class BankEntry:
    """Banked surplus; ``amount`` is what remains after debits."""
    id: str
    ship_id: str
    year: int
    banked_amount: float
    amount: float
    created_at: Optional[datetime] = None


@dataclass
class BankApplication:
    """Banked surplus applied against a ship-year deficit."""
    id: str
    ship_id: str
    year: int
    amount: float
    created_at: Optional[datetime] = None


@dataclass
class BorrowEntry:
    """Advance compliance surplus borrowed for a ship-year."""
    id: str
    ship_id: str
    year: int
    amount: float
    aggravated_amount: float
    repaid: bool = False
    created_at: Optional[datetime] = None
    repaid_at: Optional[datetime] = None


@dataclass
class PoolMember:
    ship_id: str
    cb_before: float
    cb_after: float


@dataclass
class Pool:
    id: str
    year: int
    total_cb_before: float
    total_cb_after: float
    members: List[PoolMember] = field(default_factory=list)
    created_at: Optional[datetime] = None


# =============================================================================
# Operation results
# =============================================================================

@dataclass
class OperationResult:
    """Outcome of a ledger operation; ``reason`` is set on rejection."""
    success: bool
    message: str
    reason: Optional[Reason] = None

    @property
    def kind(self) -> Optional[ErrorKind]:
        return self.reason.kind if self.reason else None


@dataclass
class BankResult(OperationResult):
    entry: Optional[BankEntry] = None
    available_surplus: Optional[float] = None


@dataclass
class ApplyBankedResult(OperationResult):
    cb_before: Optional[float] = None
    cb_after: Optional[float] = None
    applied: Optional[float] = None


@dataclass
class BankBalance:
    ship_id: str
    total_banked: float
    entries: List[BankEntry] = field(default_factory=list)


@dataclass
class BorrowValidation:
    can_borrow: bool
    reason: Optional[Reason] = None
    message: Optional[str] = None
    max_allowed_acs: Optional[float] = None
    deficit_amount: Optional[float] = None


@dataclass
class BorrowResult(OperationResult):
    entry: Optional[BorrowEntry] = None
    aggravated_amount: Optional[float] = None


@dataclass
class PoolMemberInput:
    ship_id: str
    cb_before: float


@dataclass
class PoolValidation:
    is_valid: bool
    message: Optional[str] = None
    reason: Optional[Reason] = None


@dataclass
class PoolResult:
    is_valid: bool
    year: int
    total_cb_before: float
    total_cb_after: float
    members: List[PoolMember] = field(default_factory=list)
    pool_id: Optional[str] = None
    message: Optional[str] = None
    reason: Optional[Reason] = None


@dataclass
class PenaltyAssessment:
    ship_id: str
    year: int
    adjusted_cb: float
    borrowed: float
    effective_cb: float
    actual_intensity: float
    consecutive_years: int
    penalty_eur: int
