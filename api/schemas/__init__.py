"""
FuelEU Ledger API Pydantic schemas.

Re-exports all schema classes:
    from api.schemas import BankRequest, PoolCreateRequest, ...
"""

# Common
from .common import ShipYearRequest, ErrorResponse  # noqa: F401

# Compliance
from .compliance import (  # noqa: F401
    TargetResponse,
    ComplianceBalanceResponse,
    AdjustedCBResponse,
    PenaltyResponse,
    LimitYear,
    LimitsResponse,
    FuelInfo,
    FuelTypesResponse,
    FuelInput,
    IntensityRequest,
    IntensityResponse,
)

# Banking
from .banking import (  # noqa: F401
    BankRequest,
    BankEntryModel,
    BankResponse,
    ApplyBankedResponse,
    BankBalanceResponse,
    BankRecordsResponse,
)

# Borrowing
from .borrowing import (  # noqa: F401
    BorrowValidationResponse,
    BorrowEntryModel,
    BorrowResponse,
    BorrowHistoryResponse,
)

# Pools
from .pools import (  # noqa: F401
    PoolMemberRequest,
    PoolValidateRequest,
    PoolCreateRequest,
    PoolValidationResponse,
    PoolMemberModel,
    PoolResponse,
)

# Routes
from .routes import (  # noqa: F401
    RouteCreateRequest,
    RouteModel,
    RouteListResponse,
    RouteComparison,
    ComparisonResponse,
)
