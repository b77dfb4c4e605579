"""Route registry API schemas."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class RouteCreateRequest(BaseModel):
    route_id: str = Field(..., min_length=1, max_length=100)
    vessel_type: str = Field(..., min_length=1, max_length=100)
    fuel_type: str = Field(..., min_length=1, max_length=50)
    year: int = Field(..., ge=2000, le=2100)
    ghg_intensity: float = Field(..., gt=0, description="gCO2eq/MJ")
    fuel_consumption_t: float = Field(..., ge=0)
    distance_km: float = Field(..., ge=0)
    total_emissions_t: float = Field(..., ge=0)
    is_baseline: bool = False


class RouteModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    route_id: str
    vessel_type: str
    fuel_type: str
    year: int
    ghg_intensity: float
    fuel_consumption_t: float
    distance_km: float
    total_emissions_t: float
    is_baseline: bool
    created_at: Optional[datetime] = None


class RouteListResponse(BaseModel):
    routes: List[RouteModel]


class RouteComparison(BaseModel):
    route: RouteModel
    percent_diff: float
    is_compliant: bool


class ComparisonResponse(BaseModel):
    baseline: RouteModel
    target: float
    comparisons: List[RouteComparison]
