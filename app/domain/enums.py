"""Domain enums: SNS message types and per-story completion states."""

from enum import Enum


class SnsMessageType(str, Enum):
    """Message types an SNS HTTP(S) subscription delivers."""

    SUBSCRIPTION_CONFIRMATION = "SubscriptionConfirmation"
    NOTIFICATION = "Notification"
    UNSUBSCRIBE_CONFIRMATION = "UnsubscribeConfirmation"

    @classmethod
    def parse(cls, value: str) -> "SnsMessageType | None":
        """Return the member for value, or None when the type is unknown."""
        try:
            return cls(value)
        except ValueError:
            return None


class CompletionState(str, Enum):
    """Where a story stands after one of its attachments replicated.

    COLLECTING: some attachments still replicating.
    COMPLETE: all replicated, no new-story marker to consume (edit cycle or lost race).
    NOTIFIED: all replicated and this caller consumed the marker and attempted the email.
    """

    COLLECTING = "collecting"
    COMPLETE = "complete"
    NOTIFIED = "notified"
