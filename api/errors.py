"""
HTTP mapping for rejected ledger operations.

Every rejection, whether returned as a failed result or raised as a
``LedgerError``, leaves the API with the same JSON body:
``{"success": false, "reason": ..., "kind": ..., "message": ...}``.
"""

import logging
from typing import Optional

from fastapi import Request
from fastapi.responses import JSONResponse

from api.middleware import get_request_id
from api.schemas.common import ErrorResponse
from src.compliance.errors import ErrorKind, LedgerError, Reason

logger = logging.getLogger(__name__)

STATUS_BY_KIND = {
    ErrorKind.INVALID_INPUT: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.STATE_CONFLICT: 409,
    ErrorKind.INSUFFICIENT_RESOURCE: 422,
}

# OpenAPI documentation of the rejection body, attached to ledger routers
ERROR_RESPONSES = {
    status: {"model": ErrorResponse} for status in sorted(set(STATUS_BY_KIND.values()))
}


class ResourceNotFoundError(LedgerError):
    """A route or pool addressed by the request does not exist."""

    kind = ErrorKind.NOT_FOUND


class ResourceConflictError(LedgerError):
    kind = ErrorKind.STATE_CONFLICT


def error_response(
    message: str,
    reason: Optional[Reason] = None,
    kind: Optional[ErrorKind] = None,
) -> JSONResponse:
    """Build the JSON error response for a rejected operation."""
    if kind is None:
        kind = reason.kind if reason else ErrorKind.INVALID_INPUT
    return JSONResponse(
        status_code=STATUS_BY_KIND[kind],
        content={
            "success": False,
            "reason": reason.value if reason else None,
            "kind": kind.value,
            "message": message,
        },
    )


async def ledger_error_handler(request: Request, exc: LedgerError) -> JSONResponse:
    """Exception handler for ``LedgerError`` raised inside a route."""
    logger.warning(
        f"{request.method} {request.url.path} rejected ({exc.kind.value}): {exc.message} "
        f"[request_id={get_request_id()}]"
    )
    return error_response(exc.message, reason=exc.reason, kind=exc.kind)
