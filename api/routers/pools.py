"""
Pooling API router.

Validates and creates compliance pools (FuelEU Article 21).
"""

import logging
from typing import List

from fastapi import APIRouter, Depends

from api.errors import ERROR_RESPONSES, ResourceNotFoundError, error_response
from api.schemas.pools import (
    PoolMemberRequest,
    PoolValidateRequest,
    PoolCreateRequest,
    PoolValidationResponse,
    PoolMemberModel,
    PoolResponse,
)
from api.state import get_engine
from src.compliance.engine import ComplianceEngine
from src.compliance.results import PoolMemberInput

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/pools", tags=["Pooling"], responses=ERROR_RESPONSES)


def _inputs(members: List[PoolMemberRequest]) -> List[PoolMemberInput]:
    return [PoolMemberInput(ship_id=m.ship_id, cb_before=m.cb_before) for m in members]


@router.post("/validate", response_model=PoolValidationResponse)
def validate_pool(request: PoolValidateRequest, engine: ComplianceEngine = Depends(get_engine)):
    """Check pool membership rules without allocating."""
    validation = engine.validate_pool(_inputs(request.members))
    return PoolValidationResponse(
        is_valid=validation.is_valid,
        message=validation.message,
        reason=validation.reason.value if validation.reason else None,
    )


@router.post("", response_model=PoolResponse, status_code=201)
def create_pool(request: PoolCreateRequest, engine: ComplianceEngine = Depends(get_engine)):
    """Allocate surplus to deficits across members and persist the pool."""
    result = engine.create_pool(request.year, _inputs(request.members))
    if not result.is_valid:
        return error_response(result.message, result.reason)
    return PoolResponse(
        pool_id=result.pool_id,
        year=result.year,
        total_cb_before=result.total_cb_before,
        total_cb_after=result.total_cb_after,
        members=[PoolMemberModel(**vars(m)) for m in result.members],
    )


@router.get("/{pool_id}", response_model=PoolResponse)
def get_pool(pool_id: str, engine: ComplianceEngine = Depends(get_engine)):
    pool = engine.get_pool(pool_id)
    if pool is None:
        raise ResourceNotFoundError(f"Pool {pool_id} not found")
    return PoolResponse(
        pool_id=pool.id,
        year=pool.year,
        total_cb_before=pool.total_cb_before,
        total_cb_after=pool.total_cb_after,
        members=[PoolMemberModel(**vars(m)) for m in pool.members],
        created_at=pool.created_at,
    )
