"""Application use cases: one entry point per workflow."""

from app.application.use_cases.replication import (
    CompletionAggregator,
    ReplicationTracker,
    StoryStoredNotifier,
)
from app.application.use_cases.sns import MessageRouter

__all__ = [
    "CompletionAggregator",
    "MessageRouter",
    "ReplicationTracker",
    "StoryStoredNotifier",
]
