"""
FastAPI Backend for the FuelEU Maritime Compliance Ledger.

Provides REST API endpoints for:
- GHG intensity targets and compliance balances (CB)
- Banking surplus and applying it to deficits
- Borrowing advance compliance surplus
- Pooling compliance balances across ships
- Route registry and baseline comparison

Version: 1.0.0
"""
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import uvicorn

from api.config import settings
from api.database import init_db
from api.errors import ledger_error_handler
from api.middleware import setup_middleware, get_request_id
from api.routers import banking, borrowing, compliance, pools, routes, system
from api.state import get_app_state
from src.compliance.errors import LedgerError

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format='%(message)s',  # JSON logs are self-contained
)
logger = logging.getLogger(__name__)


# =============================================================================
# Application Factory
# =============================================================================

def create_app() -> FastAPI:
    """
    Application factory for the FuelEU Ledger API.

    Creates and configures the FastAPI application with middleware,
    exception handlers and routers.

    Returns:
        FastAPI: Configured application instance
    """
    application = FastAPI(
        title="FuelEU Ledger API",
        description="""
## FuelEU Maritime Compliance Ledger

Compliance balances for ships under Regulation (EU) 2023/1805, with the
flexibility mechanisms of Articles 20 and 21.

### Features
- GHG intensity targets 2025-2050 and Well-to-Wake intensity calculation
- Compliance balance (gCO2eq) per ship and reporting year
- Banking of surplus and application against later deficits
- Advance compliance borrowing (2% cap, 10% aggravation, no consecutive years)
- Compliance pools with greedy surplus allocation

### Errors
Rejected operations return `{"success": false, "reason", "kind", "message"}`
with status 400 (invalid input), 404 (not found), 409 (state conflict)
or 422 (insufficient resource).
        """,
        version="1.0.0",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json",
    )

    setup_middleware(
        application,
        debug=settings.is_development,
        enable_hsts=settings.is_production,
    )

    # CORS middleware - use configured origins only (NO WILDCARDS)
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    application.add_exception_handler(LedgerError, ledger_error_handler)

    @application.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.warning(
            f"Validation error on {request.method} {request.url.path}: {exc.errors()} "
            f"[request_id={get_request_id()}]"
        )
        return JSONResponse(
            status_code=422,
            content={
                "success": False,
                "reason": None,
                "kind": "validation_error",
                "message": "Request validation failed",
                "detail": jsonable_errors(exc),
            },
        )

    for module in (system, compliance, banking, borrowing, pools, routes):
        application.include_router(module.router)

    return application


def jsonable_errors(exc: RequestValidationError):
    """Pydantic errors without the non-serialisable ``ctx``/``input`` values."""
    return [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
        for err in exc.errors()
    ]


# Create the application
app = create_app()

# Initialize application state (thread-safe singleton)
_ = get_app_state()


@app.on_event("startup")
async def startup_event():
    """Create tables on SQLite; PostgreSQL schemas are managed by Alembic."""
    if settings.database_url.startswith("sqlite"):
        init_db()
    logger.info(
        f"Startup complete (environment={settings.environment}, "
        f"fuel_data_source={settings.fuel_data_source})"
    )


# ============================================================================
# Run Server
# ============================================================================

if __name__ == "__main__":
    uvicorn.run(
        "api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.is_development,
        log_level=settings.log_level,
    )
