"""
Error taxonomy for the compliance ledger.

Expected business-rule rejections are reported as structured results
carrying a ``Reason``; each reason belongs to exactly one ``ErrorKind``.
Exceptions are reserved for missing upstream data and malformed inputs
that cannot be expressed as a result.
"""

from enum import Enum


class ErrorKind(str, Enum):
    INVALID_INPUT = "invalid_input"
    STATE_CONFLICT = "state_conflict"
    INSUFFICIENT_RESOURCE = "insufficient_resource"
    NOT_FOUND = "not_found"


class Reason(str, Enum):
    """Why a ledger operation was rejected."""
    INVALID_AMOUNT = "invalid_amount"
    INVALID_MEMBERS = "invalid_members"
    NO_SURPLUS = "no_surplus"
    NO_DEFICIT = "no_deficit"
    INSUFFICIENT_SURPLUS = "insufficient_surplus"
    INSUFFICIENT_BANKED = "insufficient_banked"
    CONSECUTIVE_BORROW = "consecutive_borrow"
    EXCEEDS_LIMIT = "exceeds_limit"
    ALREADY_BORROWED = "already_borrowed"
    POOL_NEGATIVE = "pool_negative"
    DEFICIT_WORSENED = "deficit_worsened"
    SURPLUS_NEGATIVE = "surplus_negative"
    NO_COMPLIANCE_DATA = "no_compliance_data"
    NO_PENALTY_BASIS = "no_penalty_basis"

    @property
    def kind(self) -> ErrorKind:
        return REASON_KINDS[self]


REASON_KINDS = {
    Reason.INVALID_AMOUNT: ErrorKind.INVALID_INPUT,
    Reason.INVALID_MEMBERS: ErrorKind.INVALID_INPUT,
    Reason.NO_SURPLUS: ErrorKind.STATE_CONFLICT,
    Reason.NO_DEFICIT: ErrorKind.STATE_CONFLICT,
    Reason.CONSECUTIVE_BORROW: ErrorKind.STATE_CONFLICT,
    Reason.EXCEEDS_LIMIT: ErrorKind.INSUFFICIENT_RESOURCE,
    Reason.ALREADY_BORROWED: ErrorKind.STATE_CONFLICT,
    Reason.POOL_NEGATIVE: ErrorKind.STATE_CONFLICT,
    Reason.DEFICIT_WORSENED: ErrorKind.STATE_CONFLICT,
    Reason.SURPLUS_NEGATIVE: ErrorKind.STATE_CONFLICT,
    Reason.INSUFFICIENT_SURPLUS: ErrorKind.INSUFFICIENT_RESOURCE,
    Reason.INSUFFICIENT_BANKED: ErrorKind.INSUFFICIENT_RESOURCE,
    Reason.NO_COMPLIANCE_DATA: ErrorKind.NOT_FOUND,
    Reason.NO_PENALTY_BASIS: ErrorKind.STATE_CONFLICT,
}


class LedgerError(Exception):
    """Base class for compliance ledger exceptions."""

    kind = ErrorKind.INVALID_INPUT
    reason = None

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ShipDataNotFoundError(LedgerError):
    """No fuel / energy data is available for a ship-year."""

    kind = ErrorKind.NOT_FOUND
    reason = Reason.NO_COMPLIANCE_DATA

    def __init__(self, ship_id: str, year: int):
        super().__init__(f"No fuel consumption data for ship {ship_id} in {year}")
        self.ship_id = ship_id
        self.year = year


class UnknownFuelTypeError(LedgerError):
    """Fuel type missing from the default emission factor table."""

    kind = ErrorKind.INVALID_INPUT

    def __init__(self, fuel_type: str):
        super().__init__(f"Unknown fuel type: {fuel_type}")
        self.fuel_type = fuel_type


class NoPenaltyBasisError(LedgerError):
    """A deficit is carried into a ship-year with no energy in scope."""

    kind = ErrorKind.STATE_CONFLICT
    reason = Reason.NO_PENALTY_BASIS

    def __init__(self, ship_id: str, year: int, effective_cb: float):
        super().__init__(
            f"Ship {ship_id} has a deficit of {abs(effective_cb)} gCO2eq in {year} "
            f"but no energy in scope to price the penalty against"
        )
        self.ship_id = ship_id
        self.year = year
        self.effective_cb = effective_cb
