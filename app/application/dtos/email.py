"""DTOs for outbound email (provider-agnostic)."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class EmailAttachment:
    """File attached to an outbound email. content is raw bytes; senders encode as needed."""

    content: bytes
    filename: str
    mime_type: str


@dataclass(frozen=True)
class OutboundEmail:
    """One email to one recipient with plain-text and HTML bodies."""

    to: str
    subject: str
    text: str
    html: str
    attachments: list[EmailAttachment] = field(default_factory=list)


@dataclass(frozen=True)
class RenderedEmail:
    """Subject and bodies produced by a template renderer."""

    subject: str
    text: str
    html: str
