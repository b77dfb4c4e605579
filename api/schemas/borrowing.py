"""Borrowing (advance compliance surplus) API schemas."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel


class BorrowValidationResponse(BaseModel):
    can_borrow: bool
    reason: Optional[str] = None
    message: Optional[str] = None
    max_allowed_acs: Optional[float] = None
    deficit_amount: Optional[float] = None


class BorrowEntryModel(BaseModel):
    id: str
    ship_id: str
    year: int
    amount: float
    aggravated_amount: float
    repaid: bool
    created_at: Optional[datetime] = None
    repaid_at: Optional[datetime] = None


class BorrowResponse(BaseModel):
    success: bool = True
    message: str
    entry: BorrowEntryModel
    aggravated_amount: float


class BorrowHistoryResponse(BaseModel):
    ship_id: str
    entries: List[BorrowEntryModel]
