"""Application DTOs: plain dataclasses passed between use cases and repositories."""

from app.application.dtos.email import EmailAttachment, OutboundEmail, RenderedEmail
from app.application.dtos.sns import (
    InboundMessage,
    ObjectCreatedRecord,
    ReplicationSummary,
    RouteResult,
)
from app.application.dtos.story import AttachmentResult, StoryOwnerResult

__all__ = [
    "AttachmentResult",
    "EmailAttachment",
    "InboundMessage",
    "ObjectCreatedRecord",
    "OutboundEmail",
    "RenderedEmail",
    "ReplicationSummary",
    "RouteResult",
    "StoryOwnerResult",
]
