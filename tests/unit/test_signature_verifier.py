"""SnsSignatureVerifier and canonical string tests."""

import re

import pytest
from cryptography.hazmat.primitives.asymmetric import rsa

from app.application.dtos.sns import InboundMessage
from app.application.services.signature_verifier import (
    SnsSignatureVerifier,
    build_canonical_string,
    is_trusted_sns_url,
)
from app.core.config import Settings
from app.domain.exceptions import UnknownMessageTypeException
from tests.fakes import (
    FakeCertificateProvider,
    notification_envelope,
    sign_envelope,
    subscription_envelope,
)

HOST_PATTERN = Settings().sns_cert_host_pattern


def _verifier(provider: FakeCertificateProvider, **kwargs) -> SnsSignatureVerifier:
    return SnsSignatureVerifier(provider, HOST_PATTERN, **kwargs)


def test_canonical_string_for_subscription_confirmation() -> None:
    """Subscription confirmations sign Message, MessageId, SubscribeURL, Timestamp, Token, TopicArn, Type."""
    message = InboundMessage.from_envelope(
        {
            "Type": "SubscriptionConfirmation",
            "MessageId": "m-1",
            "TopicArn": "arn:t",
            "Message": "confirm",
            "SubscribeURL": "https://sns.us-east-1.amazonaws.com/?x",
            "Timestamp": "2026-01-01T00:00:00Z",
            "Token": "tok",
            "UnsubscribeURL": "https://ignored",
        }
    )
    assert build_canonical_string(message) == (
        "Message\nconfirm\n"
        "MessageId\nm-1\n"
        "SubscribeURL\nhttps://sns.us-east-1.amazonaws.com/?x\n"
        "Timestamp\n2026-01-01T00:00:00Z\n"
        "Token\ntok\n"
        "TopicArn\narn:t\n"
        "Type\nSubscriptionConfirmation\n"
    )


def test_canonical_string_includes_subject_only_when_present() -> None:
    """Notification canonical string has Subject between MessageId and Timestamp only if set."""
    without = build_canonical_string(InboundMessage.from_envelope(notification_envelope("m")))
    with_subject = build_canonical_string(
        InboundMessage.from_envelope(notification_envelope("m", subject="Hello"))
    )
    assert "Subject" not in without
    assert "MessageId\n22b80b92-fdea-4c2c-8f9d-bdfb0c7bf324\nSubject\nHello\nTimestamp\n" in with_subject


def test_canonical_string_rejects_unknown_type() -> None:
    """Types outside the three SNS types have no canonical form."""
    envelope = notification_envelope()
    envelope["Type"] = "Heartbeat"
    with pytest.raises(UnknownMessageTypeException):
        build_canonical_string(InboundMessage.from_envelope(envelope))


@pytest.mark.parametrize(
    ("url", "require_pem", "expected"),
    [
        ("https://sns.us-east-1.amazonaws.com/cert.pem", True, True),
        ("https://sns.cn-north-1.amazonaws.com.cn/cert.pem", True, True),
        ("http://sns.us-east-1.amazonaws.com/cert.pem", True, False),
        ("https://sns.us-east-1.amazonaws.com.evil.com/cert.pem", True, False),
        ("https://evil.com/sns.us-east-1.amazonaws.com/cert.pem", True, False),
        ("https://sns.us-east-1.amazonaws.com/cert.txt", True, False),
        ("https://sns.us-east-1.amazonaws.com/?Action=ConfirmSubscription", False, True),
        ("", False, False),
    ],
)
def test_is_trusted_sns_url(url: str, require_pem: bool, expected: bool) -> None:
    """Only https URLs on an SNS host pass; .pem is required for certificates."""
    assert is_trusted_sns_url(url, re.compile(HOST_PATTERN), require_pem=require_pem) is expected


async def test_valid_signature_is_accepted(private_key: rsa.RSAPrivateKey, certificate) -> None:
    """Signed notification and subscription messages verify."""
    verifier = _verifier(FakeCertificateProvider(certificate))
    for envelope in (
        notification_envelope("a", subject="Amazon S3 Notification"),
        notification_envelope("b"),
        subscription_envelope(),
        subscription_envelope("UnsubscribeConfirmation"),
    ):
        message = InboundMessage.from_envelope(sign_envelope(envelope, private_key))
        assert await verifier.verify(message) is True


async def test_signature_version_2_uses_sha256(private_key: rsa.RSAPrivateKey, certificate) -> None:
    """SignatureVersion 2 verifies with SHA256 and fails if relabelled as version 1."""
    verifier = _verifier(FakeCertificateProvider(certificate))
    envelope = sign_envelope(notification_envelope("v2"), private_key, signature_version="2")
    assert await verifier.verify(InboundMessage.from_envelope(envelope)) is True

    envelope["SignatureVersion"] = "1"
    assert await verifier.verify(InboundMessage.from_envelope(envelope)) is False


@pytest.mark.parametrize(
    ("field", "value"),
    [
        ("Message", "changed"),
        ("MessageId", "other-id"),
        ("Timestamp", "2026-10-18T10:15:01.000Z"),
        ("TopicArn", "arn:aws:sns:us-east-1:123456789012:replication2"),
        ("Subject", "Injected"),
    ],
)
async def test_any_signed_field_change_is_rejected(
    private_key: rsa.RSAPrivateKey, certificate, field: str, value: str
) -> None:
    """Mutating any signed field after signing makes verification fail."""
    verifier = _verifier(FakeCertificateProvider(certificate))
    envelope = sign_envelope(notification_envelope("body"), private_key)
    envelope[field] = value
    assert await verifier.verify(InboundMessage.from_envelope(envelope)) is False


async def test_unsigned_field_change_is_ignored(private_key: rsa.RSAPrivateKey, certificate) -> None:
    """UnsubscribeURL is not part of the canonical string."""
    verifier = _verifier(FakeCertificateProvider(certificate))
    envelope = sign_envelope(notification_envelope("body"), private_key)
    envelope["UnsubscribeURL"] = "https://example.com/anything"
    assert await verifier.verify(InboundMessage.from_envelope(envelope)) is True


async def test_unsupported_signature_version_is_rejected(private_key: rsa.RSAPrivateKey, certificate) -> None:
    """Unknown SignatureVersion values are rejected without fetching the certificate."""
    provider = FakeCertificateProvider(certificate)
    envelope = sign_envelope(notification_envelope(), private_key)
    envelope["SignatureVersion"] = "3"
    assert await _verifier(provider).verify(InboundMessage.from_envelope(envelope)) is False
    assert provider.requested == []


async def test_untrusted_cert_url_is_rejected_without_fetch(private_key: rsa.RSAPrivateKey, certificate) -> None:
    """A SigningCertURL off the SNS domain is rejected before any download."""
    provider = FakeCertificateProvider(certificate)
    envelope = sign_envelope(notification_envelope(), private_key)
    envelope["SigningCertURL"] = "https://attacker.example.com/cert.pem"
    assert await _verifier(provider).verify(InboundMessage.from_envelope(envelope)) is False
    assert provider.requested == []


async def test_certificate_fetch_failure_is_rejected(private_key: rsa.RSAPrivateKey) -> None:
    """If the certificate cannot be loaded the message is rejected (no exception)."""
    envelope = sign_envelope(notification_envelope(), private_key)
    verifier = _verifier(FakeCertificateProvider(None))
    assert await verifier.verify(InboundMessage.from_envelope(envelope)) is False


async def test_non_base64_signature_is_rejected(certificate) -> None:
    """A Signature that is not base64 is rejected."""
    envelope = notification_envelope()
    envelope["Signature"] = "not base64!!"
    verifier = _verifier(FakeCertificateProvider(certificate))
    assert await verifier.verify(InboundMessage.from_envelope(envelope)) is False


async def test_skip_flag_is_ignored_in_production(certificate) -> None:
    """SKIP_SNS_SIGNATURE_VERIFICATION has no effect in production."""
    envelope = notification_envelope()
    envelope["Signature"] = "AAAA"
    verifier = _verifier(FakeCertificateProvider(certificate), skip_verification=True, is_production=True)
    assert verifier.skip_verification is False
    assert await verifier.verify(InboundMessage.from_envelope(envelope)) is False


async def test_skip_flag_bypasses_outside_production() -> None:
    """Outside production the skip flag accepts unsigned messages without fetching anything."""
    provider = FakeCertificateProvider(None)
    verifier = _verifier(provider, skip_verification=True, is_production=False)
    assert await verifier.verify(InboundMessage.from_envelope(notification_envelope())) is True
    assert provider.requested == []
