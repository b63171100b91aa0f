"""Message routing: dispatch a verified SNS message by its Type."""

from __future__ import annotations

import re

from app.application.dtos.sns import InboundMessage, RouteResult
from app.application.interfaces.services import ISubscriptionConfirmer
from app.application.services.event_extractor import (
    extract_object_created_records,
    is_storage_notification,
)
from app.application.services.signature_verifier import is_trusted_sns_url
from app.application.use_cases.replication.track_replication import ReplicationTracker
from app.domain.enums import SnsMessageType
from app.domain.exceptions import UnknownMessageTypeException
from app.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


class MessageRouter:
    """Routes SubscriptionConfirmation, Notification and UnsubscribeConfirmation messages."""

    def __init__(
        self,
        confirmer: ISubscriptionConfirmer,
        tracker: ReplicationTracker,
        sns_host_pattern: str,
    ) -> None:
        self.confirmer = confirmer
        self.tracker = tracker
        self.sns_host_pattern = re.compile(sns_host_pattern)

    async def route(self, message: InboundMessage) -> RouteResult:
        """Handle one accepted message.

        Raises:
            UnknownMessageTypeException: Type is not one of the three SNS types.
        """
        message_type = message.message_type
        if message_type is SnsMessageType.SUBSCRIPTION_CONFIRMATION:
            return await self._confirm_subscription(message)
        if message_type is SnsMessageType.NOTIFICATION:
            return await self._handle_notification(message)
        if message_type is SnsMessageType.UNSUBSCRIBE_CONFIRMATION:
            logger.info("Unsubscribe confirmation received for %s", message.topic_arn)
            return RouteResult(detail="Unsubscribe confirmation received")
        raise UnknownMessageTypeException(message.type)

    async def _confirm_subscription(self, message: InboundMessage) -> RouteResult:
        subscribe_url = message.subscribe_url
        if not is_trusted_sns_url(subscribe_url, self.sns_host_pattern):
            logger.warning("Not confirming subscription to %s: untrusted SubscribeURL %r", message.topic_arn, subscribe_url)
            return RouteResult(detail="Subscription confirmation failed", confirmed=False)

        confirmed = await self.confirmer.confirm(subscribe_url)
        if confirmed:
            logger.info("Subscription to %s confirmed", message.topic_arn)
            return RouteResult(detail="Subscription confirmed", confirmed=True)
        return RouteResult(detail="Subscription confirmation failed", confirmed=False)

    async def _handle_notification(self, message: InboundMessage) -> RouteResult:
        if not is_storage_notification(message):
            logger.info("Notification %s (subject %r) acknowledged", message.message_id, message.subject)
            return RouteResult(detail="Notification processed")
        records = extract_object_created_records(message)
        summary = await self.tracker.process(records)
        return RouteResult(detail="S3 notification processed successfully", summary=summary)
