"""DTOs for inbound SNS messages and the storage events they carry."""

from dataclasses import dataclass
from typing import Any

from app.domain.enums import SnsMessageType


@dataclass(frozen=True)
class InboundMessage:
    """One SNS HTTP(S) delivery, built from the envelope's PascalCase keys.

    type is kept as the raw string so an unknown value can still be reported;
    use message_type for the parsed enum (None when unknown).
    """

    type: str
    message_id: str
    topic_arn: str
    message: str = ""
    timestamp: str = ""
    signature_version: str = ""
    signature: str = ""
    signing_cert_url: str = ""
    subject: str | None = None
    token: str | None = None
    subscribe_url: str | None = None
    unsubscribe_url: str | None = None

    @property
    def message_type(self) -> SnsMessageType | None:
        return SnsMessageType.parse(self.type)

    @classmethod
    def from_envelope(cls, envelope: dict[str, Any]) -> "InboundMessage":
        """Build from a parsed JSON envelope. Required keys must already be validated."""

        def _opt(key: str) -> str | None:
            value = envelope.get(key)
            return None if value is None else str(value)

        return cls(
            type=str(envelope["Type"]),
            message_id=str(envelope["MessageId"]),
            topic_arn=str(envelope["TopicArn"]),
            message=str(envelope.get("Message") or ""),
            timestamp=str(envelope.get("Timestamp") or ""),
            signature_version=str(envelope.get("SignatureVersion") or ""),
            signature=str(envelope.get("Signature") or ""),
            signing_cert_url=str(envelope.get("SigningCertURL") or ""),
            subject=_opt("Subject"),
            token=_opt("Token"),
            subscribe_url=_opt("SubscribeURL"),
            unsubscribe_url=_opt("UnsubscribeURL"),
        )


@dataclass(frozen=True)
class ObjectCreatedRecord:
    """One qualifying ObjectCreated:* record from a storage notification."""

    object_key: str
    file_name: str
    size: int
    content_hash: str | None
    event_name: str


@dataclass
class ReplicationSummary:
    """Counters for one storage notification batch."""

    processed: int = 0
    skipped: int = 0
    completed: int = 0
    notified: int = 0

    def to_dict(self) -> dict[str, int]:
        return {
            "processed": self.processed,
            "skipped": self.skipped,
            "completed": self.completed,
            "notified": self.notified,
        }


@dataclass(frozen=True)
class RouteResult:
    """Outcome of routing one message; serialized into the POST response."""

    detail: str
    confirmed: bool | None = None
    summary: ReplicationSummary | None = None
