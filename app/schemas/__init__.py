"""Pydantic request/response schemas for the API."""

from app.schemas.health import HealthResponse, ReadinessErrorResponse, ReadinessResponse
from app.schemas.sns import ReplicationSummaryResponse, SnsAckResponse, SnsStatusResponse

__all__ = [
    "HealthResponse",
    "ReadinessErrorResponse",
    "ReadinessResponse",
    "ReplicationSummaryResponse",
    "SnsAckResponse",
    "SnsStatusResponse",
]
