"""Security: SNS signing-certificate retrieval and caching."""

from app.infrastructure.security.certificate_cache import (
    CertificateCache,
    CertificateCacheEntry,
)

__all__ = [
    "CertificateCache",
    "CertificateCacheEntry",
]
