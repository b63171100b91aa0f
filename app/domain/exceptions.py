"""Domain exceptions for the replication webhook.

Defines domain-level exceptions that represent rejected input or business
rule violations. These exceptions are independent of infrastructure
concerns. Presentation layer maps them to HTTP responses in exception
handlers.
"""

from typing import Any


class ReplicationServiceException(Exception):
    """Base exception for all application errors.

    All custom exceptions should inherit from this class to allow
    consistent error handling and logging. Presentation layer maps
    these to HTTP responses using message, error_code, and details.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, topic_arn).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON error responses."""
        payload: dict[str, Any] = {"error": self.error_code, "message": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class MalformedEnvelopeException(ReplicationServiceException):
    """Raised when the inbound body is not a JSON object or lacks required fields."""

    def __init__(self, message: str = "Invalid SNS message format", missing: list[str] | None = None) -> None:
        details = {"missing_fields": missing} if missing else {}
        super().__init__(message, "MALFORMED_ENVELOPE", details)


class UnauthorizedTopicException(ReplicationServiceException):
    """Raised when TopicArn is not in the allow-list (or the allow-list is empty)."""

    def __init__(self, topic_arn: str) -> None:
        super().__init__(
            "Unauthorized SNS topic",
            "UNAUTHORIZED_TOPIC",
            {"topic_arn": topic_arn},
        )


class SignatureInvalidException(ReplicationServiceException):
    """Raised when the message signature cannot be verified."""

    def __init__(self, message_id: str) -> None:
        super().__init__(
            "Message signature verification failed",
            "SIGNATURE_INVALID",
            {"message_id": message_id},
        )


class UnknownMessageTypeException(ReplicationServiceException):
    """Raised for a message Type outside SubscriptionConfirmation/Notification/UnsubscribeConfirmation."""

    def __init__(self, message_type: str) -> None:
        super().__init__(
            f"Unknown message type: {message_type}",
            "UNKNOWN_MESSAGE_TYPE",
            {"type": message_type},
        )


class SqlNotConfiguredException(ReplicationServiceException):
    """Raised when an operation requires Postgres but DATABASE_URL is not set."""

    def __init__(self) -> None:
        super().__init__(
            message="This operation requires a SQL database that is not configured.",
            error_code="SERVICE_UNAVAILABLE",
        )
