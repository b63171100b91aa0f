"""SNS use cases: route accepted messages."""

from app.application.use_cases.sns.route_message import MessageRouter

__all__ = ["MessageRouter"]
