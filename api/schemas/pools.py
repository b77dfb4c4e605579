"""Compliance pooling API schemas."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class PoolMemberRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    ship_id: str = Field(..., alias="shipId", min_length=1, max_length=100)
    cb_before: float = Field(..., alias="cbBefore", description="Adjusted CB entering the pool")


class PoolValidateRequest(BaseModel):
    members: List[PoolMemberRequest]


class PoolCreateRequest(BaseModel):
    year: int = Field(..., ge=2000, le=2100)
    members: List[PoolMemberRequest]


class PoolValidationResponse(BaseModel):
    is_valid: bool
    message: Optional[str] = None
    reason: Optional[str] = None


class PoolMemberModel(BaseModel):
    ship_id: str
    cb_before: float
    cb_after: float


class PoolResponse(BaseModel):
    """Persisted pool with its allocation."""
    pool_id: str
    year: int
    total_cb_before: float
    total_cb_after: float
    members: List[PoolMemberModel]
    created_at: Optional[datetime] = None
