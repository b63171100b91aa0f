"""Service interfaces (ports) for the application layer.

Protocols define contracts for collaborators (DIP): the ephemeral
key-value store, email sending and rendering, certificates and the
signature verifier.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from cryptography import x509

    from app.application.dtos.email import OutboundEmail, RenderedEmail
    from app.application.dtos.sns import InboundMessage


class IEphemeralStore(Protocol):
    """TTL key-value store for lookup entries and new-story markers."""

    async def get(self, key: str) -> Any:
        """Return the stored value or None."""

    async def set(self, key: str, value: Any, ttl: int) -> bool:
        """Store value with TTL in seconds. Returns True on success."""

    async def delete(self, key: str) -> bool:
        """Delete key. Failures are logged, never raised."""

    async def consume(self, key: str) -> bool:
        """Atomically delete key; True only for the single caller that removed it."""


class IEmailSender(Protocol):
    """Protocol for delivering one email (with attachments)."""

    async def send(self, email: OutboundEmail) -> None:
        """Send the email. Raises EmailDeliveryError on provider failure."""


class IEmailTemplateRenderer(Protocol):
    """Protocol for rendering a named email template (subject, text and HTML)."""

    def render(self, template_key: str, context: dict[str, Any]) -> RenderedEmail:
        """Render the template. Raises KeyError if the key is unknown."""


class ICertificateProvider(Protocol):
    """Protocol for resolving a signing-certificate URL to a parsed certificate."""

    async def get_certificate(self, cert_url: str) -> x509.Certificate:
        """Return the certificate (cached or fetched). Raises CertificateFetchError."""


class ISubscriptionConfirmer(Protocol):
    """Protocol for confirming an SNS subscription by visiting its SubscribeURL."""

    async def confirm(self, subscribe_url: str) -> bool:
        """GET the URL; True only on a 2xx response. Failures are logged, never raised."""


class ISignatureVerifier(Protocol):
    """Protocol for SNS message signature verification."""

    async def verify(self, message: InboundMessage) -> bool:
        """Return True if the signature is valid (or verification is bypassed)."""
