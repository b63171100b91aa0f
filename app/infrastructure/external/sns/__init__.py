"""SNS HTTP collaborators."""

from app.infrastructure.external.sns.subscription_client import SnsSubscriptionClient

__all__ = ["SnsSubscriptionClient"]
