"""SNS webhook API schemas."""

from pydantic import BaseModel, Field

from app.application.dtos.sns import RouteResult


class ReplicationSummaryResponse(BaseModel):
    """Counters for one storage notification."""

    processed: int = Field(..., description="Records matched to an attachment and marked replicated")
    skipped: int = Field(..., description="Records without a lookup entry or attachment")
    completed: int = Field(..., description="Records whose story had every attachment replicated")
    notified: int = Field(..., description="Stored notifications attempted")


class SnsAckResponse(BaseModel):
    """Response for POST /aws/sns."""

    message: str = Field(..., description="Outcome of handling the message")
    confirmed: bool | None = Field(
        default=None, description="Subscription confirmation outcome (SubscriptionConfirmation only)"
    )
    summary: ReplicationSummaryResponse | None = Field(
        default=None, description="Replication counters (storage notifications only)"
    )

    @classmethod
    def from_result(cls, result: RouteResult) -> "SnsAckResponse":
        return cls(
            message=result.detail,
            confirmed=result.confirmed,
            summary=(
                ReplicationSummaryResponse(**result.summary.to_dict())
                if result.summary is not None
                else None
            ),
        )


class SnsStatusResponse(BaseModel):
    """Response for GET /aws/sns (liveness of the webhook route)."""

    status: str = Field(default="SNS endpoint is active", description="Endpoint status")
