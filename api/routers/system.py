"""
System / health API router.

Handles the root endpoint and the health check.
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from api.database import get_db
from api.middleware import get_request_id
from api.state import get_app_state

router = APIRouter(tags=["System"])

logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"


@router.get("/")
async def root():
    """
    API root endpoint.

    Returns basic API information and available endpoint categories.
    """
    return {
        "name": "FuelEU Ledger API",
        "version": API_VERSION,
        "status": "operational",
        "docs": "/api/docs",
        "endpoints": {
            "health": "/api/health",
            "compliance": "/api/compliance/...",
            "banking": "/api/banking/...",
            "borrowing": "/api/borrowing/...",
            "pools": "/api/pools/...",
            "routes": "/api/routes/...",
        }
    }


@router.get("/api/health")
def health_check(db: Session = Depends(get_db)):
    """
    Health check for load balancers.

    Returns 200 with ``status: healthy`` when the database answers,
    503 with ``status: unhealthy`` otherwise.
    """
    result = {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": API_VERSION,
        "request_id": get_request_id(),
        **get_app_state().health_check(),
    }

    try:
        db.execute(text("SELECT 1"))
        result["database"] = "ok"
    except SQLAlchemyError as e:
        logger.error(f"Health check database failure: {e}")
        result["status"] = "unhealthy"
        result["database"] = "unavailable"
        return JSONResponse(status_code=503, content=result)

    return result
