"""
Route registry API router.

Registered routes carry a reported GHG intensity; one of them can be
marked as the baseline the others are compared against. In
``FUEL_DATA_SOURCE=routes`` mode the registry also feeds the ledger
(route id == ship id).
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from api.database import get_db
from api.errors import ResourceConflictError, ResourceNotFoundError
from api.models import Route
from api.schemas.routes import (
    RouteCreateRequest,
    RouteModel,
    RouteListResponse,
    RouteComparison,
    ComparisonResponse,
)
from src.compliance.targets import FIRST_TARGET_YEAR, target_for

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/routes", tags=["Routes"])


@router.get("", response_model=RouteListResponse)
def list_routes(
    vessel_type: Optional[str] = Query(None, alias="vesselType"),
    fuel_type: Optional[str] = Query(None, alias="fuelType"),
    year: Optional[int] = Query(None),
    db: Session = Depends(get_db),
):
    """List registered routes with optional filters."""
    query = db.query(Route)

    if vessel_type:
        query = query.filter(Route.vessel_type == vessel_type)
    if fuel_type:
        query = query.filter(Route.fuel_type == fuel_type)
    if year is not None:
        query = query.filter(Route.year == year)

    routes = query.order_by(Route.route_id).all()
    return RouteListResponse(routes=[RouteModel.model_validate(r) for r in routes])


@router.post("", response_model=RouteModel, status_code=201)
def create_route(body: RouteCreateRequest, db: Session = Depends(get_db)):
    """Register a route."""
    if db.query(Route).filter(Route.route_id == body.route_id).first():
        raise ResourceConflictError(f"Route {body.route_id} already exists")

    if body.is_baseline:
        _clear_baseline(db)
    route = Route(**body.model_dump())
    db.add(route)
    db.commit()
    db.refresh(route)

    logger.info(f"Registered route {route.route_id} ({route.fuel_type}, {route.year})")
    return RouteModel.model_validate(route)


# Declared before /{route_id} so "comparison" is not taken for a route id
@router.get("/comparison", response_model=ComparisonResponse)
def get_comparison(db: Session = Depends(get_db)):
    """Compare every route's intensity with the baseline route."""
    baseline = db.query(Route).filter(Route.is_baseline.is_(True)).first()
    if baseline is None:
        raise ResourceNotFoundError("No baseline route set")

    target = target_for(FIRST_TARGET_YEAR)
    others = (
        db.query(Route)
        .filter(Route.id != baseline.id)
        .order_by(Route.route_id)
        .all()
    )

    comparisons = []
    for route in others:
        percent_diff = (route.ghg_intensity - baseline.ghg_intensity) / baseline.ghg_intensity * 100
        comparisons.append(RouteComparison(
            route=RouteModel.model_validate(route),
            percent_diff=round(percent_diff, 2),
            is_compliant=route.ghg_intensity <= target,
        ))

    return ComparisonResponse(
        baseline=RouteModel.model_validate(baseline),
        target=target,
        comparisons=comparisons,
    )


@router.get("/{route_id}", response_model=RouteModel)
def get_route(route_id: str, db: Session = Depends(get_db)):
    return RouteModel.model_validate(_get_route_or_404(route_id, db))


@router.post("/{route_id}/baseline", response_model=RouteModel)
def set_baseline(route_id: str, db: Session = Depends(get_db)):
    """Mark a route as the comparison baseline (only one at a time)."""
    route = _get_route_or_404(route_id, db)
    _clear_baseline(db)
    route.is_baseline = True
    db.commit()
    db.refresh(route)

    logger.info(f"Baseline route set to {route_id}")
    return RouteModel.model_validate(route)


def _get_route_or_404(route_id: str, db: Session) -> Route:
    route = db.query(Route).filter(Route.route_id == route_id).first()
    if route is None:
        raise ResourceNotFoundError(f"Route {route_id} not found")
    return route


def _clear_baseline(db: Session) -> None:
    db.query(Route).filter(Route.is_baseline.is_(True)).update({Route.is_baseline: False})
