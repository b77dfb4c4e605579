"""Common shared schemas used across multiple domains."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ShipYearRequest(BaseModel):
    """Ship and reporting year; accepts ``shipId`` or ``ship_id``."""
    model_config = ConfigDict(populate_by_name=True)

    ship_id: str = Field(..., alias="shipId", min_length=1, max_length=100)
    year: int = Field(..., ge=2000, le=2100)


class ErrorResponse(BaseModel):
    """Body returned for every rejected ledger operation."""
    success: bool = False
    reason: Optional[str] = None
    kind: Optional[str] = None
    message: str
