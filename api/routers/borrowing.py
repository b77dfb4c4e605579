"""
Borrowing API router.

Advance compliance surplus (FuelEU Article 20(2)): validation, borrowing
and per-ship history.
"""

import logging

from fastapi import APIRouter, Depends, Query

from api.errors import ERROR_RESPONSES, error_response
from api.schemas.borrowing import (
    BorrowValidationResponse,
    BorrowEntryModel,
    BorrowResponse,
    BorrowHistoryResponse,
)
from api.schemas.common import ShipYearRequest
from api.state import get_engine
from src.compliance.engine import ComplianceEngine

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/borrowing", tags=["Borrowing"], responses=ERROR_RESPONSES)


@router.get("/validate", response_model=BorrowValidationResponse)
def validate_borrow(
    ship_id: str = Query(..., alias="shipId", min_length=1),
    year: int = Query(..., ge=2000, le=2100),
    engine: ComplianceEngine = Depends(get_engine),
):
    """
    Check whether a ship may borrow for a year.

    Always 200: a refusal is reported in ``can_borrow``/``reason``.
    """
    validation = engine.validate_borrow(ship_id, year)
    return BorrowValidationResponse(
        can_borrow=validation.can_borrow,
        reason=validation.reason.value if validation.reason else None,
        message=validation.message,
        max_allowed_acs=validation.max_allowed_acs,
        deficit_amount=validation.deficit_amount,
    )


@router.post("/borrow", response_model=BorrowResponse)
def borrow(request: ShipYearRequest, engine: ComplianceEngine = Depends(get_engine)):
    """Borrow the full deficit; repaid next year with 10% aggravation."""
    result = engine.borrow(request.ship_id, request.year)
    if not result.success:
        return error_response(result.message, result.reason)
    return BorrowResponse(
        message=result.message,
        entry=BorrowEntryModel(**vars(result.entry)),
        aggravated_amount=result.aggravated_amount,
    )


@router.get("/history", response_model=BorrowHistoryResponse)
def borrow_history(
    ship_id: str = Query(..., alias="shipId", min_length=1),
    engine: ComplianceEngine = Depends(get_engine),
):
    """Borrow entries of a ship, most recent year first."""
    return BorrowHistoryResponse(
        ship_id=ship_id,
        entries=[BorrowEntryModel(**vars(e)) for e in engine.borrow_history(ship_id)],
    )
