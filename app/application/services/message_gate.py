"""Inbound message gate: envelope parsing, topic allow-list and signature check.

Nothing is mutated before accept() returns; every rejection is raised as a
domain exception that the presentation layer maps to 400/403.
"""

from __future__ import annotations

import json
from collections.abc import Iterable

from app.application.dtos.sns import InboundMessage
from app.application.interfaces.services import ISignatureVerifier
from app.domain.exceptions import (
    MalformedEnvelopeException,
    SignatureInvalidException,
    UnauthorizedTopicException,
)
from app.shared.telemetry.logging import get_logger
from app.shared.telemetry.tracing import add_span_attributes

logger = get_logger(__name__)

REQUIRED_FIELDS = ("Type", "MessageId", "TopicArn")


def parse_envelope(raw_body: bytes | str) -> InboundMessage:
    """Decode and parse the POST body into an InboundMessage.

    Raises:
        MalformedEnvelopeException: Body is not a UTF-8 JSON object or lacks a required field.
    """
    try:
        text = raw_body.decode("utf-8") if isinstance(raw_body, bytes) else raw_body
        envelope = json.loads(text)
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise MalformedEnvelopeException("Request body is not valid JSON") from e
    if not isinstance(envelope, dict):
        raise MalformedEnvelopeException("Request body must be a JSON object")

    missing = [name for name in REQUIRED_FIELDS if not envelope.get(name)]
    if missing:
        raise MalformedEnvelopeException(missing=missing)
    return InboundMessage.from_envelope(envelope)


class InboundMessageGate:
    """Authorizes inbound SNS deliveries before they reach the router."""

    def __init__(
        self,
        verifier: ISignatureVerifier,
        allowed_topic_arns: Iterable[str],
        *,
        skip_arn_validation: bool = False,
        is_production: bool = True,
    ) -> None:
        self.verifier = verifier
        self.allowed_topic_arns = frozenset(allowed_topic_arns)
        if skip_arn_validation and is_production:
            logger.warning("SKIP_SNS_ARN_VALIDATION is set in production; ignoring it")
        self.skip_arn_validation = skip_arn_validation and not is_production
        if not self.allowed_topic_arns and not self.skip_arn_validation:
            logger.warning("ALLOWED_SNS_TOPIC_ARNS is empty; every SNS message will be rejected")

    def is_topic_allowed(self, topic_arn: str) -> bool:
        """Exact-match allow-list check. An empty allow-list allows nothing."""
        if self.skip_arn_validation:
            logger.warning(
                "Skipping topic ARN validation for %s "
                "(SKIP_SNS_ARN_VALIDATION is set outside production)",
                topic_arn,
            )
            return True
        return topic_arn in self.allowed_topic_arns

    async def accept(self, raw_body: bytes | str) -> InboundMessage:
        """Parse, authorize and verify one delivery.

        Returns:
            The verified InboundMessage.

        Raises:
            MalformedEnvelopeException: Bad JSON or missing Type/MessageId/TopicArn.
            UnauthorizedTopicException: TopicArn not allow-listed.
            UnknownMessageTypeException: Type has no canonical form.
            SignatureInvalidException: Verification failed.
        """
        message = parse_envelope(raw_body)
        add_span_attributes(
            **{
                "sns.message_id": message.message_id,
                "sns.type": message.type,
                "sns.topic_arn": message.topic_arn,
            }
        )

        if not self.is_topic_allowed(message.topic_arn):
            logger.warning("Rejecting message %s from unauthorized topic %s", message.message_id, message.topic_arn)
            raise UnauthorizedTopicException(message.topic_arn)

        if not await self.verifier.verify(message):
            raise SignatureInvalidException(message.message_id)

        logger.info("Accepted %s message %s", message.type, message.message_id)
        return message
