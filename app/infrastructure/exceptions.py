"""Infrastructure exceptions for external calls (certificates, cache, email).

They extend ReplicationServiceException so presentation can map them
to HTTP responses consistently when they escape a use case.
"""

from app.domain.exceptions import ReplicationServiceException


class CertificateFetchError(ReplicationServiceException):
    """Raised when a signing certificate cannot be fetched or parsed."""

    def __init__(self, cert_url: str, reason: str) -> None:
        super().__init__(
            f"Could not load signing certificate: {reason}",
            "CERTIFICATE_FETCH_ERROR",
            {"cert_url": cert_url, "reason": reason},
        )


class CacheUnavailableError(ReplicationServiceException):
    """Raised when Redis is required for correctness but cannot be reached."""

    def __init__(self, operation: str, key: str) -> None:
        super().__init__(
            f"Cache unavailable during {operation}",
            "CACHE_UNAVAILABLE",
            {"operation": operation, "key": key},
        )


class EmailDeliveryError(ReplicationServiceException):
    """Raised when the email provider rejects or fails a send."""

    def __init__(self, reason: str, status_code: int | None = None) -> None:
        details: dict[str, object] = {"reason": reason}
        if status_code is not None:
            details["status_code"] = status_code
        super().__init__(f"Failed to send email: {reason}", "EMAIL_DELIVERY_ERROR", details)
