"""
FuelEU Maritime (EU 2023/1805) compliance API router.

Target intensities, raw and adjusted compliance balances, penalty
exposure, and the reference data behind them.
"""

import logging

from fastapi import APIRouter, Depends, Query

from api.schemas.compliance import (
    TargetResponse,
    ComplianceBalanceResponse,
    AdjustedCBResponse,
    PenaltyResponse,
    LimitsResponse, LimitYear,
    FuelTypesResponse, FuelInfo,
    IntensityRequest, IntensityResponse,
)
from api.state import get_engine
from src.compliance.engine import ComplianceEngine
from src.compliance.fueleu import ComplianceCalculator
from src.compliance.ghg_intensity import FuelRecord, GHGIntensityCalculator, fuel_info
from src.compliance.fuel_data import GRAMS_PER_TONNE
from src.compliance.targets import REFERENCE_GHG, schedule, target_for

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/compliance", tags=["Compliance"])

_intensity = GHGIntensityCalculator()


# ---- reference data endpoints -----------------------------------------------

@router.get("/target", response_model=TargetResponse)
async def get_target(year: int = Query(..., ge=2000, le=2100)):
    """GHG intensity target (gCO2eq/MJ) applicable in a reporting year."""
    return TargetResponse(year=year, target=target_for(year))


@router.get("/limits", response_model=LimitsResponse)
async def get_limits():
    """Return the full reduction schedule."""
    return LimitsResponse(
        limits=[
            LimitYear(
                start_year=band.start_year,
                end_year=band.end_year if band.end_year >= 0 else None,
                reduction_pct=band.reduction_pct,
                target=band.target_intensity,
            )
            for band in schedule()
        ],
        reference_ghg=REFERENCE_GHG,
    )


@router.get("/fuel-types", response_model=FuelTypesResponse)
async def get_fuel_types():
    """List supported fuel types with their default WtW emission factors."""
    return FuelTypesResponse(fuel_types=[FuelInfo(**f) for f in fuel_info()])


@router.post("/intensity", response_model=IntensityResponse)
async def calculate_intensity(request: IntensityRequest):
    """Calculate Well-to-Wake GHG intensity and CB for a fuel mix."""
    fuels = [
        FuelRecord.from_defaults(
            f.fuel_type,
            f.mass_t * GRAMS_PER_TONNE,
            request.year,
            engine_type=f.engine_type,
            is_rfnbo=f.is_rfnbo,
        )
        for f in request.fuels
    ]
    result = _intensity.compute(fuels, request.aux_energy_mj)
    target = target_for(request.year)
    return IntensityResponse(
        year=request.year,
        well_to_tank=result.well_to_tank,
        tank_to_wake=result.tank_to_wake,
        ghg_intensity=result.total,
        energy_mj=result.energy,
        target=target,
        compliance_balance_gco2eq=ComplianceCalculator.compliance_balance(
            target, result.total, result.energy
        ),
    )


# ---- ship balance endpoints -------------------------------------------------

@router.get("/cb", response_model=ComplianceBalanceResponse)
def get_compliance_balance(
    ship_id: str = Query(..., alias="shipId", min_length=1),
    year: int = Query(..., ge=2000, le=2100),
    engine: ComplianceEngine = Depends(get_engine),
):
    """Compute (and store) the raw compliance balance of a ship-year."""
    balance = engine.compute_balance(ship_id, year)
    return ComplianceBalanceResponse(
        ship_id=balance.ship_id,
        year=balance.year,
        cb_gco2eq=balance.cb_value,
        ghgie_actual=balance.actual_intensity,
        ghgie_target=balance.target_intensity,
        energy_scope_mj=balance.energy_scope_mj,
        is_compliant=balance.is_compliant,
        surplus=balance.surplus,
        deficit=balance.deficit,
    )


@router.get("/adjusted-cb", response_model=AdjustedCBResponse)
def get_adjusted_cb(
    ship_id: str = Query(..., alias="shipId", min_length=1),
    year: int = Query(..., ge=2000, le=2100),
    engine: ComplianceEngine = Depends(get_engine),
):
    """Compliance balance after borrowing repayment and banked surplus."""
    return AdjustedCBResponse(
        ship_id=ship_id, year=year, adjusted_cb=engine.adjusted_cb(ship_id, year),
    )


@router.get("/penalty", response_model=PenaltyResponse)
def get_penalty(
    ship_id: str = Query(..., alias="shipId", min_length=1),
    year: int = Query(..., ge=2000, le=2100),
    consecutive_years: int = Query(1, alias="consecutiveYears", ge=1, le=20),
    engine: ComplianceEngine = Depends(get_engine),
):
    """Penalty exposure (EUR) on the adjusted balance of a ship-year."""
    assessment = engine.penalty_exposure(ship_id, year, consecutive_years)
    return PenaltyResponse(**vars(assessment))
