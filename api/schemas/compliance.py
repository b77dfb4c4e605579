"""Compliance balance API schemas."""

from typing import List, Optional

from pydantic import BaseModel, Field


class TargetResponse(BaseModel):
    year: int
    target: float


class ComplianceBalanceResponse(BaseModel):
    """Raw compliance balance for one ship-year (gCO2eq, gCO2eq/MJ, MJ)."""
    ship_id: str
    year: int
    cb_gco2eq: float
    ghgie_actual: float
    ghgie_target: float
    energy_scope_mj: float
    is_compliant: bool
    surplus: Optional[float] = None
    deficit: Optional[float] = None


class AdjustedCBResponse(BaseModel):
    ship_id: str
    year: int
    adjusted_cb: float


class PenaltyResponse(BaseModel):
    """Penalty exposure on the adjusted balance."""
    ship_id: str
    year: int
    adjusted_cb: float
    borrowed: float
    effective_cb: float
    actual_intensity: float
    consecutive_years: int
    penalty_eur: int


class LimitYear(BaseModel):
    """GHG intensity limit for one band of the schedule."""
    start_year: int
    end_year: Optional[int] = None
    reduction_pct: float
    target: float


class LimitsResponse(BaseModel):
    limits: List[LimitYear]
    reference_ghg: float


class FuelInfo(BaseModel):
    """Default emission factors for one fuel type."""
    id: str
    name: str
    lcv_mj_per_g: float
    wtt_gco2eq_per_mj: float
    ttw_gco2eq_per_mj: float
    wtw_gco2eq_per_mj: float


class FuelTypesResponse(BaseModel):
    fuel_types: List[FuelInfo]


class FuelInput(BaseModel):
    """Mass of one fuel consumed within the reporting scope."""
    fuel_type: str = Field(..., min_length=1, max_length=50)
    mass_t: float = Field(..., ge=0, description="Fuel mass (t)")
    engine_type: Optional[str] = Field(None, description="LNG engine, e.g. otto_ms")
    is_rfnbo: bool = False


class IntensityRequest(BaseModel):
    """Request for a Well-to-Wake GHG intensity calculation."""
    fuels: List[FuelInput] = Field(..., min_length=1, max_length=20)
    aux_energy_mj: float = Field(0.0, ge=0)
    year: int = Field(2025, ge=2020, le=2100)


class IntensityResponse(BaseModel):
    year: int
    well_to_tank: float
    tank_to_wake: float
    ghg_intensity: float
    energy_mj: float
    target: float
    compliance_balance_gco2eq: float
