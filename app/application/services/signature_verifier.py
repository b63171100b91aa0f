"""SNS message signature verification.

Rebuilds the canonical string SNS signed, then checks the RSA PKCS#1 v1.5
signature with the public key of the certificate at SigningCertURL.

Canonical string: for each field in the fixed order for the message type,
"<FieldName>\\n<value>\\n" concatenated. Notification uses Message, MessageId,
Subject (only when present), Timestamp, TopicArn, Type. Subscription and
unsubscribe confirmations use Message, MessageId, SubscribeURL, Timestamp,
Token, TopicArn, Type. No other field participates (UnsubscribeURL is
never signed).
"""

from __future__ import annotations

import base64
import binascii
import re
from urllib.parse import urlparse

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from app.application.dtos.sns import InboundMessage
from app.application.interfaces.services import ICertificateProvider
from app.domain.enums import SnsMessageType
from app.domain.exceptions import ReplicationServiceException, UnknownMessageTypeException
from app.shared.telemetry.logging import get_logger
from app.shared.telemetry.tracing import traced

logger = get_logger(__name__)

# SignatureVersion -> digest. Absent version is treated as "1".
_SIGNATURE_DIGESTS: dict[str, type[hashes.HashAlgorithm]] = {
    "1": hashes.SHA1,
    "2": hashes.SHA256,
}


def is_trusted_sns_url(url: str | None, host_pattern: re.Pattern[str], *, require_pem: bool = False) -> bool:
    """Return True if url is https on an SNS host (and ends in .pem when require_pem)."""
    if not url:
        return False
    parsed = urlparse(url)
    if parsed.scheme != "https" or not parsed.hostname:
        return False
    if not host_pattern.fullmatch(parsed.hostname.lower()):
        return False
    return not require_pem or parsed.path.endswith(".pem")


def build_canonical_string(message: InboundMessage) -> str:
    """Return the exact string SNS signed for this message.

    Raises:
        UnknownMessageTypeException: If message.type is not one of the three SNS types.
    """
    message_type = message.message_type
    if message_type is SnsMessageType.NOTIFICATION:
        fields: list[tuple[str, str | None]] = [
            ("Message", message.message),
            ("MessageId", message.message_id),
        ]
        if message.subject:
            fields.append(("Subject", message.subject))
        fields += [
            ("Timestamp", message.timestamp),
            ("TopicArn", message.topic_arn),
            ("Type", message.type),
        ]
    elif message_type in (
        SnsMessageType.SUBSCRIPTION_CONFIRMATION,
        SnsMessageType.UNSUBSCRIBE_CONFIRMATION,
    ):
        fields = [
            ("Message", message.message),
            ("MessageId", message.message_id),
            ("SubscribeURL", message.subscribe_url),
            ("Timestamp", message.timestamp),
            ("Token", message.token),
            ("TopicArn", message.topic_arn),
            ("Type", message.type),
        ]
    else:
        raise UnknownMessageTypeException(message.type)
    return "".join(f"{name}\n{value or ''}\n" for name, value in fields)


class SnsSignatureVerifier:
    """Verifies SNS signatures; bypass is possible only outside production."""

    def __init__(
        self,
        certificates: ICertificateProvider,
        cert_host_pattern: str,
        *,
        skip_verification: bool = False,
        is_production: bool = True,
    ) -> None:
        """Initialize the verifier.

        Args:
            certificates: Certificate provider (the injected CertificateCache).
            cert_host_pattern: Regex the SigningCertURL host must fully match.
            skip_verification: SKIP_SNS_SIGNATURE_VERIFICATION flag.
            is_production: When True the skip flag is ignored.
        """
        self.certificates = certificates
        self.cert_host_pattern = re.compile(cert_host_pattern)
        if skip_verification and is_production:
            logger.warning(
                "SKIP_SNS_SIGNATURE_VERIFICATION is set in production; ignoring it"
            )
        self.skip_verification = skip_verification and not is_production

    @traced("sns.verify_signature")
    async def verify(self, message: InboundMessage) -> bool:
        """Return True if the message signature is valid.

        Rejects (False) on an untrusted certificate URL, certificate fetch
        failure, unsupported SignatureVersion, undecodable signature or
        cryptographic mismatch.

        Raises:
            UnknownMessageTypeException: If the type has no canonical form.
        """
        if self.skip_verification:
            logger.warning(
                "Skipping SNS signature verification for message %s "
                "(SKIP_SNS_SIGNATURE_VERIFICATION is set outside production)",
                message.message_id,
            )
            return True

        canonical = build_canonical_string(message)

        if not is_trusted_sns_url(message.signing_cert_url, self.cert_host_pattern, require_pem=True):
            logger.warning(
                "Rejecting message %s: untrusted SigningCertURL %r",
                message.message_id,
                message.signing_cert_url,
            )
            return False

        digest = _SIGNATURE_DIGESTS.get(message.signature_version or "1")
        if digest is None:
            logger.warning(
                "Rejecting message %s: unsupported SignatureVersion %r",
                message.message_id,
                message.signature_version,
            )
            return False

        try:
            signature = base64.b64decode(message.signature, validate=True)
        except (binascii.Error, ValueError):
            logger.warning("Rejecting message %s: signature is not base64", message.message_id)
            return False

        try:
            certificate = await self.certificates.get_certificate(message.signing_cert_url)
        except ReplicationServiceException as e:
            logger.warning(
                "Rejecting message %s: %s", message.message_id, e.message
            )
            return False

        public_key = certificate.public_key()
        if not isinstance(public_key, rsa.RSAPublicKey):
            logger.warning("Rejecting message %s: certificate key is not RSA", message.message_id)
            return False

        try:
            public_key.verify(
                signature,
                canonical.encode("utf-8"),
                padding.PKCS1v15(),
                digest(),
            )
        except InvalidSignature:
            logger.warning("Signature mismatch for message %s", message.message_id)
            return False
        return True
