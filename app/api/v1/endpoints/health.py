"""Health check endpoints. Used for liveness and readiness probes."""

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from app.schemas.health import (
    HealthResponse,
    ReadinessErrorResponse,
    ReadinessResponse,
)

router = APIRouter()


@router.get("", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """Return simple ok status for liveness."""
    return HealthResponse()


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    responses={503: {"description": "Redis store unavailable", "model": ReadinessErrorResponse}},
)
async def readiness_check(request: Request) -> ReadinessResponse | JSONResponse:
    """Return 200 when the Redis store is reachable; 503 otherwise.

    Replication tracking cannot run without Redis, so an instance without it
    should not receive SNS deliveries.
    """
    cache = getattr(request.app.state, "cache", None)
    if cache is not None and cache.is_available():
        return ReadinessResponse(cache=True)
    return JSONResponse(
        status_code=503,
        content=ReadinessErrorResponse(message="Redis store unavailable").model_dump(),
    )
