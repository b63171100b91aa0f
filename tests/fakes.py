"""In-memory fakes for the application ports, plus SNS signing helpers for tests."""

from __future__ import annotations

import asyncio
import base64
import datetime
import json
from dataclasses import replace
from typing import Any

from cryptography import x509
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding, rsa
from cryptography.x509.oid import NameOID

from app.application.dtos.email import OutboundEmail
from app.application.dtos.sns import InboundMessage
from app.application.dtos.story import AttachmentResult, StoryOwnerResult
from app.application.services.signature_verifier import build_canonical_string
from app.infrastructure.exceptions import CertificateFetchError, EmailDeliveryError

TOPIC_ARN = "arn:aws:sns:us-east-1:123456789012:replication"
CERT_URL = "https://sns.us-east-1.amazonaws.com/SimpleNotificationService-abc.pem"
SUBSCRIBE_URL = (
    "https://sns.us-east-1.amazonaws.com/?Action=ConfirmSubscription"
    f"&TopicArn={TOPIC_ARN}&Token=2336412f37"
)


# ---- Signing ----


def make_certificate(private_key: rsa.RSAPrivateKey) -> x509.Certificate:
    """Self-signed certificate for private_key, standing in for the SNS signing cert."""
    name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, "sns.amazonaws.com")])
    now = datetime.datetime.now(datetime.UTC)
    return (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(private_key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now - datetime.timedelta(days=1))
        .not_valid_after(now + datetime.timedelta(days=30))
        .sign(private_key, hashes.SHA256())
    )


def sign_envelope(
    envelope: dict[str, Any],
    private_key: rsa.RSAPrivateKey,
    *,
    signature_version: str = "1",
) -> dict[str, Any]:
    """Return a copy of envelope with SignatureVersion and a valid Signature."""
    signed = {**envelope, "SignatureVersion": signature_version}
    canonical = build_canonical_string(InboundMessage.from_envelope(signed))
    digest = hashes.SHA256() if signature_version == "2" else hashes.SHA1()
    signature = private_key.sign(canonical.encode("utf-8"), padding.PKCS1v15(), digest)
    signed["Signature"] = base64.b64encode(signature).decode("ascii")
    return signed


def notification_envelope(
    message: str = "hello",
    *,
    subject: str | None = None,
    message_id: str = "22b80b92-fdea-4c2c-8f9d-bdfb0c7bf324",
    topic_arn: str = TOPIC_ARN,
) -> dict[str, Any]:
    """Unsigned Notification envelope."""
    envelope: dict[str, Any] = {
        "Type": "Notification",
        "MessageId": message_id,
        "TopicArn": topic_arn,
        "Message": message,
        "Timestamp": "2026-10-18T10:15:00.000Z",
        "SigningCertURL": CERT_URL,
        "UnsubscribeURL": "https://sns.us-east-1.amazonaws.com/?Action=Unsubscribe",
    }
    if subject is not None:
        envelope["Subject"] = subject
    return envelope


def subscription_envelope(
    message_type: str = "SubscriptionConfirmation",
    *,
    subscribe_url: str = SUBSCRIBE_URL,
    topic_arn: str = TOPIC_ARN,
) -> dict[str, Any]:
    """Unsigned SubscriptionConfirmation (or UnsubscribeConfirmation) envelope."""
    return {
        "Type": message_type,
        "MessageId": "165545c9-2a5c-472c-8df2-7ff2be2b3b1b",
        "Token": "2336412f37",
        "TopicArn": topic_arn,
        "Message": f"You have chosen to subscribe to the topic {topic_arn}.",
        "SubscribeURL": subscribe_url,
        "Timestamp": "2026-10-18T10:14:00.000Z",
        "SigningCertURL": CERT_URL,
    }


def s3_event_message(*objects: tuple[str, int, str], event_name: str = "ObjectCreated:Put") -> str:
    """Message body of a storage notification; objects are (key, size, eTag)."""
    return json.dumps(
        {
            "Records": [
                {
                    "eventName": event_name,
                    "s3": {"object": {"key": key, "size": size, "eTag": etag}},
                }
                for key, size, etag in objects
            ]
        }
    )


# ---- Ports ----


class InMemoryStore:
    """IEphemeralStore backed by a dict. TTLs are recorded, not enforced."""

    def __init__(self) -> None:
        self.data: dict[str, Any] = {}
        self.ttls: dict[str, int] = {}
        self._lock = asyncio.Lock()

    async def get(self, key: str) -> Any:
        return self.data.get(key)

    async def set(self, key: str, value: Any, ttl: int) -> bool:
        self.data[key] = value
        self.ttls[key] = ttl
        return True

    async def delete(self, key: str) -> bool:
        self.ttls.pop(key, None)
        return self.data.pop(key, None) is not None

    async def consume(self, key: str) -> bool:
        async with self._lock:
            # Yield so concurrent consumers interleave
            await asyncio.sleep(0)
            return await self.delete(key)


class FakeAttachmentRepository:
    """IAttachmentRepository over a dict of AttachmentResult keyed by id."""

    def __init__(self, attachments: list[AttachmentResult] | None = None) -> None:
        self.rows: dict[str, AttachmentResult] = {a.id: a for a in attachments or []}
        self.update_calls: list[str] = []

    async def mark_replicated(
        self, attachment_id: str, size: int, content_hash: str | None
    ) -> AttachmentResult | None:
        self.update_calls.append(attachment_id)
        row = self.rows.get(attachment_id)
        if row is None:
            return None
        updated = replace(row, size=size, hash=content_hash, replicated=True)
        self.rows[attachment_id] = updated
        return updated

    async def list_by_story(self, story_id: str) -> list[AttachmentResult]:
        await asyncio.sleep(0)
        return [a for a in self.rows.values() if a.story_id == story_id]


class FakeStoryRepository:
    """IStoryRepository over a dict of StoryOwnerResult keyed by id."""

    def __init__(self, stories: list[StoryOwnerResult] | None = None) -> None:
        self.rows: dict[str, StoryOwnerResult] = {s.id: s for s in stories or []}
        self.complete_calls: list[str] = []

    async def mark_replication_complete(self, story_id: str) -> bool:
        self.complete_calls.append(story_id)
        row = self.rows.get(story_id)
        if row is None:
            return False
        self.rows[story_id] = replace(row, has_replicating_attachment=False)
        return True

    async def get_with_owner(self, story_id: str) -> StoryOwnerResult | None:
        return self.rows.get(story_id)


class RecordingEmailSender:
    """IEmailSender that keeps every email it is given."""

    def __init__(self) -> None:
        self.sent: list[OutboundEmail] = []

    async def send(self, email: OutboundEmail) -> None:
        self.sent.append(email)


class FailingEmailSender:
    """IEmailSender whose provider always rejects the send."""

    def __init__(self) -> None:
        self.attempts = 0

    async def send(self, email: OutboundEmail) -> None:
        self.attempts += 1
        raise EmailDeliveryError("SendGrid error (503): unavailable", status_code=503)


class FakeCertificateProvider:
    """ICertificateProvider returning one certificate (or failing) and counting calls."""

    def __init__(self, certificate: x509.Certificate | None = None) -> None:
        self.certificate = certificate
        self.requested: list[str] = []

    async def get_certificate(self, cert_url: str) -> x509.Certificate:
        self.requested.append(cert_url)
        if self.certificate is None:
            raise CertificateFetchError(cert_url, "HTTP 404")
        return self.certificate


class FakeSubscriptionConfirmer:
    """ISubscriptionConfirmer that records URLs and returns a fixed outcome."""

    def __init__(self, result: bool = True) -> None:
        self.result = result
        self.urls: list[str] = []

    async def confirm(self, subscribe_url: str) -> bool:
        self.urls.append(subscribe_url)
        return self.result


def make_attachment(
    attachment_id: str,
    story_id: str = "story1",
    *,
    file_name: str | None = None,
    replicated: bool = False,
) -> AttachmentResult:
    return AttachmentResult(
        id=attachment_id,
        story_id=story_id,
        file_name=file_name or f"{attachment_id}.jpg",
        file_type="image/jpeg",
        size=None,
        hash=None,
        replicated=replicated,
    )


def make_story(
    story_id: str = "story1",
    *,
    title: str = "Our Wedding",
    is_public: bool = False,
    owner_email: str | None = "owner@example.com",
    owner_name: str | None = "Ada",
) -> StoryOwnerResult:
    return StoryOwnerResult(
        id=story_id,
        title=title,
        is_public=is_public,
        has_replicating_attachment=True,
        owner_id="user1" if owner_email else None,
        owner_email=owner_email,
        owner_name=owner_name,
    )
