"""SNS signing-certificate cache.

Certificates are fetched over HTTPS on first use and kept for a TTL
(24 hours by default). One instance is created at startup and injected;
there is no module-level cache, so tests get a fresh cache per fixture.

Concurrent misses for the same URL may both fetch; the last write wins
and both results are equivalent, so no per-URL locking is done.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass

import httpx
from cryptography import x509

from app.infrastructure.exceptions import CertificateFetchError
from app.shared.telemetry.logging import get_logger

logger = get_logger(__name__)

DEFAULT_CERT_TTL_SECONDS = 24 * 60 * 60


@dataclass(frozen=True)
class CertificateCacheEntry:
    """Cached certificate: its parsed form and when it was fetched."""

    certificate: x509.Certificate
    fetched_at: float


class CertificateCache:
    """TTL cache of parsed X.509 certificates keyed by certificate URL."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        ttl_seconds: int = DEFAULT_CERT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the cache.

        Args:
            http_client: Shared async client used for certificate downloads.
            ttl_seconds: How long a fetched certificate stays valid.
            clock: Monotonic time source (seconds); injectable for tests.
        """
        self._http = http_client
        self._ttl = ttl_seconds
        self._clock = clock
        self._entries: dict[str, CertificateCacheEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def _is_fresh(self, entry: CertificateCacheEntry) -> bool:
        return self._clock() - entry.fetched_at < self._ttl

    def evict_expired(self) -> int:
        """Drop every entry older than the TTL. Returns the number evicted."""
        expired = [url for url, entry in self._entries.items() if not self._is_fresh(entry)]
        for url in expired:
            del self._entries[url]
        return len(expired)

    def clear(self) -> None:
        """Drop all entries."""
        self._entries.clear()

    async def get_certificate(self, cert_url: str) -> x509.Certificate:
        """Return the certificate at cert_url, cache-first.

        Args:
            cert_url: SigningCertURL from the message (already host-checked by the caller).

        Returns:
            Parsed X.509 certificate.

        Raises:
            CertificateFetchError: On transport error, non-2xx status, empty body or bad PEM.
                Failures are never cached.
        """
        entry = self._entries.get(cert_url)
        if entry is not None:
            if self._is_fresh(entry):
                logger.debug("Certificate cache HIT: %s", cert_url)
                return entry.certificate
            del self._entries[cert_url]

        logger.info("Fetching signing certificate: %s", cert_url)
        entry = await self._fetch(cert_url)
        self._entries[cert_url] = entry
        return entry.certificate

    async def _fetch(self, cert_url: str) -> CertificateCacheEntry:
        try:
            response = await self._http.get(cert_url)
        except httpx.HTTPError as e:
            raise CertificateFetchError(cert_url, f"transport error: {e}") from e
        if not response.is_success:
            raise CertificateFetchError(cert_url, f"HTTP {response.status_code}")
        pem = response.text
        if not pem.strip():
            raise CertificateFetchError(cert_url, "empty certificate body")
        try:
            certificate = x509.load_pem_x509_certificate(pem.encode("utf-8"))
        except ValueError as e:
            raise CertificateFetchError(cert_url, "invalid PEM certificate") from e
        return CertificateCacheEntry(certificate=certificate, fetched_at=self._clock())
