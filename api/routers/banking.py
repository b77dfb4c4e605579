"""
Banking API router.

Banks surplus compliance balance and applies banked surplus against
deficits (FuelEU Article 20).
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from api.errors import ERROR_RESPONSES, error_response
from api.schemas.banking import (
    BankRequest,
    BankEntryModel,
    BankResponse,
    ApplyBankedResponse,
    BankBalanceResponse,
    BankRecordsResponse,
)
from api.state import get_engine
from src.compliance.engine import ComplianceEngine
from src.compliance.results import BankEntry

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/banking", tags=["Banking"], responses=ERROR_RESPONSES)


def _entry_model(entry: BankEntry) -> BankEntryModel:
    return BankEntryModel(**vars(entry))


@router.post("/bank", response_model=BankResponse)
def bank_surplus(request: BankRequest, engine: ComplianceEngine = Depends(get_engine)):
    """Bank part of a ship-year's positive compliance balance."""
    result = engine.bank_surplus(request.ship_id, request.year, request.amount)
    if not result.success:
        return error_response(result.message, result.reason)
    return BankResponse(
        message=result.message,
        entry=_entry_model(result.entry),
        available_surplus=result.available_surplus,
    )


@router.post("/apply", response_model=ApplyBankedResponse)
def apply_banked(request: BankRequest, engine: ComplianceEngine = Depends(get_engine)):
    """Apply banked surplus to a ship-year deficit."""
    result = engine.apply_banked(request.ship_id, request.year, request.amount)
    if not result.success:
        return error_response(result.message, result.reason)
    return ApplyBankedResponse(
        message=result.message,
        cb_before=result.cb_before,
        cb_after=result.cb_after,
        applied=result.applied,
    )


@router.get("/balance", response_model=BankBalanceResponse)
def get_bank_balance(
    ship_id: str = Query(..., alias="shipId", min_length=1),
    engine: ComplianceEngine = Depends(get_engine),
):
    """Unspent banked surplus of a ship."""
    balance = engine.get_bank_balance(ship_id)
    return BankBalanceResponse(
        ship_id=balance.ship_id,
        total_banked=balance.total_banked,
        entries=[_entry_model(e) for e in balance.entries],
    )


@router.get("/records", response_model=BankRecordsResponse)
def get_bank_records(
    ship_id: Optional[str] = Query(None, alias="shipId"),
    year: Optional[int] = Query(None),
    engine: ComplianceEngine = Depends(get_engine),
):
    """All bank entries, spent ones included, optionally filtered."""
    return BankRecordsResponse(
        records=[_entry_model(e) for e in engine.bank_records(ship_id, year)],
    )
