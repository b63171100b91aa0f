"""Replication use cases: tracking, completion and the stored notification."""

from app.application.use_cases.replication.complete_story import CompletionAggregator
from app.application.use_cases.replication.notify_story_stored import (
    StoryStoredNotifier,
    build_manifest,
    manifest_filename,
)
from app.application.use_cases.replication.track_replication import ReplicationTracker

__all__ = [
    "CompletionAggregator",
    "ReplicationTracker",
    "StoryStoredNotifier",
    "build_manifest",
    "manifest_filename",
]
