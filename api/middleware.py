"""
Middleware for the FuelEU Ledger API.

Provides:
- Request ID tracking, echoed in the X-Request-ID header
- Structured JSON request logs carrying the request ID and ship
- Security headers for a JSON-only API
- Sanitized 500 responses for unhandled exceptions
"""
import time
import uuid
import logging
import json
from typing import Callable, Optional
from contextvars import ContextVar
from datetime import datetime

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response, JSONResponse
from fastapi import FastAPI

SERVICE_NAME = "fueleu-ledger-api"

# Context variable for request ID (thread-safe)
request_id_ctx: ContextVar[Optional[str]] = ContextVar("request_id", default=None)


def get_request_id() -> Optional[str]:
    """Get the current request ID from context."""
    return request_id_ctx.get()


class StructuredLogger:
    """
    Structured JSON logger.

    Every line is one JSON object with timestamp, level, service and the
    current request ID; extra keyword arguments become fields.
    """

    def __init__(self, name: str):
        self.logger = logging.getLogger(name)

    def _log(self, level: str, message: str, **kwargs):
        log_entry = {
            "timestamp": datetime.utcnow().isoformat() + "Z",
            "level": level,
            "message": message,
            "service": SERVICE_NAME,
            "request_id": get_request_id(),
            **kwargs
        }

        # Remove None values
        log_entry = {k: v for k, v in log_entry.items() if v is not None}

        getattr(self.logger, level.lower())(json.dumps(log_entry, default=str))

    def info(self, message: str, **kwargs):
        self._log("INFO", message, **kwargs)

    def warning(self, message: str, **kwargs):
        self._log("WARNING", message, **kwargs)

    def error(self, message: str, **kwargs):
        self._log("ERROR", message, **kwargs)

    def debug(self, message: str, **kwargs):
        self._log("DEBUG", message, **kwargs)


structured_logger = StructuredLogger("fueleu_ledger")


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """
    Adds security headers to all responses.

    The API only serves JSON, so the content policy denies everything
    except the interactive docs assets loaded from the API origin.
    """

    def __init__(self, app, enable_hsts: bool = False):
        super().__init__(app)
        self.enable_hsts = enable_hsts

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "no-referrer"
        response.headers["Cache-Control"] = "no-store"

        if not request.url.path.startswith("/api/docs"):
            response.headers["Content-Security-Policy"] = (
                "default-src 'none'; frame-ancestors 'none'"
            )

        # HTTPS deployments only
        if self.enable_hsts:
            response.headers["Strict-Transport-Security"] = (
                "max-age=31536000; includeSubDomains"
            )

        return response


class RequestIdMiddleware(BaseHTTPMiddleware):
    """
    Tags each request with an ID for log correlation.

    Accepts an incoming X-Request-ID header or generates a UUID4; the ID is
    returned in the response headers and available via get_request_id().
    """

    HEADER_NAME = "X-Request-ID"

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(self.HEADER_NAME) or str(uuid.uuid4())
        token = request_id_ctx.set(request_id)

        try:
            response = await call_next(request)
            response.headers[self.HEADER_NAME] = request_id
            return response
        finally:
            request_id_ctx.reset(token)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs every ledger request with its outcome and duration.

    Ledger mutations (POST) log at INFO; reads log at DEBUG so a busy
    dashboard does not flood the log.
    """

    EXCLUDED_PATHS = {"/api/health", "/"}

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if request.url.path in self.EXCLUDED_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        client_ip = request.client.host if request.client else "unknown"

        try:
            response = await call_next(request)
        except Exception as e:
            structured_logger.error(
                "Request failed",
                method=request.method,
                path=request.url.path,
                error=str(e),
                error_type=type(e).__name__,
                duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
                client_ip=client_ip,
            )
            raise

        fields = dict(
            method=request.method,
            path=request.url.path,
            ship_id=request.query_params.get("shipId"),
            year=request.query_params.get("year"),
            status_code=response.status_code,
            duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
            client_ip=client_ip,
        )
        if response.status_code >= 400:
            structured_logger.warning("Request rejected", **fields)
        elif request.method == "POST":
            structured_logger.info("Ledger request completed", **fields)
        else:
            structured_logger.debug("Request completed", **fields)

        return response


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """
    Turns unhandled exceptions into a 500 JSON response.

    The full error is always logged; the response carries the message only
    in debug mode, together with the request ID.
    """

    def __init__(self, app, debug: bool = False):
        super().__init__(app)
        self.debug = debug

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            return await call_next(request)
        except Exception as e:
            request_id = get_request_id()

            structured_logger.error(
                "Unhandled exception",
                error=str(e),
                error_type=type(e).__name__,
                path=request.url.path,
                method=request.method,
            )

            if self.debug:
                message = str(e)
            else:
                message = "An internal error occurred. Quote the request ID when reporting it."

            return JSONResponse(
                status_code=500,
                content={
                    "success": False,
                    "reason": None,
                    "kind": "internal",
                    "message": message,
                    "request_id": request_id,
                },
                headers={"X-Request-ID": request_id} if request_id else {},
            )


def setup_middleware(app: FastAPI, debug: bool = False, enable_hsts: bool = False):
    """
    Configure the middleware stack.

    Args:
        app: FastAPI application instance
        debug: Return exception messages in 500 responses
        enable_hsts: Send the HSTS header (requires HTTPS)

    Middleware runs in reverse order of addition.
    """
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(SecurityHeadersMiddleware, enable_hsts=enable_hsts)
    app.add_middleware(ErrorHandlingMiddleware, debug=debug)
