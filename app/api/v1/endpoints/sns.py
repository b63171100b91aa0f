"""SNS webhook endpoint: receives storage replication events and subscription lifecycle messages.

SNS posts the JSON envelope with Content-Type text/plain, so the body is
read raw and parsed by the gate instead of a request model. The gate runs
as the first dependency; the router and its database session are only
built for deliveries it accepted.
"""

from typing import Annotated

from fastapi import APIRouter, Depends

from app.api.v1.dependencies import get_accepted_message, get_message_router
from app.application.dtos.sns import InboundMessage
from app.application.use_cases.sns import MessageRouter
from app.schemas.sns import SnsAckResponse, SnsStatusResponse

router = APIRouter()


@router.post(
    "",
    response_model=SnsAckResponse,
    response_model_exclude_none=True,
    responses={
        400: {"description": "Malformed envelope or unknown message type"},
        403: {"description": "Unauthorized topic or invalid signature"},
    },
)
async def receive_sns_message(
    message: Annotated[InboundMessage, Depends(get_accepted_message)],
    message_router: Annotated[MessageRouter, Depends(get_message_router)],
) -> SnsAckResponse:
    """Route one authenticated SNS delivery by Type."""
    result = await message_router.route(message)
    return SnsAckResponse.from_result(result)


@router.get("", response_model=SnsStatusResponse)
def sns_status() -> SnsStatusResponse:
    """Static liveness response for the webhook route."""
    return SnsStatusResponse()
