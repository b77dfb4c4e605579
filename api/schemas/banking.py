"""Banking API schemas."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from .common import ShipYearRequest


class BankRequest(ShipYearRequest):
    amount: float = Field(..., allow_inf_nan=False, description="gCO2eq to bank or apply")


class BankEntryModel(BaseModel):
    id: str
    ship_id: str
    year: int
    banked_amount: float
    amount: float
    created_at: Optional[datetime] = None


class BankResponse(BaseModel):
    success: bool = True
    message: str
    entry: Optional[BankEntryModel] = None
    available_surplus: Optional[float] = None


class ApplyBankedResponse(BaseModel):
    success: bool = True
    message: str
    cb_before: float
    cb_after: float
    applied: float


class BankBalanceResponse(BaseModel):
    ship_id: str
    total_banked: float
    entries: List[BankEntryModel]


class BankRecordsResponse(BaseModel):
    records: List[BankEntryModel]
