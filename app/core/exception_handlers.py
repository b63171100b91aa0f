"""Centralized exception handlers for the FastAPI app.

Register with register_exception_handlers(app). Maps domain and framework
exceptions to HTTP responses (SRP, OCP for adding new handlers).

SNS retries deliveries that get a 5xx, so only input that can never
succeed is answered with 4xx.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import get_settings
from app.domain.exceptions import ReplicationServiceException

logger = logging.getLogger(__name__)

# Map domain error_code to HTTP status; unmapped codes are 500
_ERROR_CODE_STATUS: dict[str, int] = {
    "MALFORMED_ENVELOPE": 400,
    "UNKNOWN_MESSAGE_TYPE": 400,
    "UNAUTHORIZED_TOPIC": 403,
    "SIGNATURE_INVALID": 403,
    "CACHE_UNAVAILABLE": 500,
    "SERVICE_UNAVAILABLE": 500,
}


def status_for_error_code(error_code: str) -> int:
    return _ERROR_CODE_STATUS.get(error_code, 500)


def _replication_exception_handler(
    request: Request, exc: ReplicationServiceException
) -> JSONResponse:
    """Return JSON from ReplicationServiceException.to_dict() with the mapped status code."""
    status = status_for_error_code(exc.error_code)
    if status >= 500:
        logger.error("%s on %s %s: %s", exc.error_code, request.method, request.url.path, exc.message)
    else:
        logger.info("Rejected %s %s: %s", request.method, request.url.path, exc.error_code)
    return JSONResponse(
        status_code=status,
        content=exc.to_dict(),
    )


def _http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Return JSON for Starlette HTTP exceptions (status + detail)."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": "HTTP_ERROR", "message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


def _generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return 500; include detail only when debug is True."""
    logger.exception("Unhandled exception: %s", exc)
    settings = get_settings()
    detail: Any = str(exc) if settings.debug else "Internal server error"
    return JSONResponse(
        status_code=500,
        content={"error": "INTERNAL_ERROR", "message": detail},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the FastAPI app.

    Call once after creating the app. Handlers: ReplicationServiceException
    (and subclasses), StarletteHTTPException, generic Exception.
    """
    app.add_exception_handler(ReplicationServiceException, _replication_exception_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(Exception, _generic_exception_handler)
