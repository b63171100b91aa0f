"""Completion aggregation: flip the story flag when the last attachment replicates.

Per story:

    COLLECTING (has_replicating_attachment = true)
        -- last attachment replicated --> COMPLETE (flag false)
    COMPLETE with new-story marker
        -- marker consumed, email attempted --> NOTIFIED

Both COMPLETE-without-marker (edit cycle, lost race) and NOTIFIED are
terminal for the cycle. The marker is taken with an atomic delete, so two
deliveries that both see every sibling replicated send one email between
them.
"""

from __future__ import annotations

from app.application.interfaces.repositories import IAttachmentRepository, IStoryRepository
from app.application.services.replication_markers import ReplicationMarkers
from app.application.use_cases.replication.notify_story_stored import StoryStoredNotifier
from app.domain.enums import CompletionState
from app.shared.telemetry.logging import get_logger
from app.shared.telemetry.tracing import add_span_attributes, traced

logger = get_logger(__name__)


class CompletionAggregator:
    """Checks siblings after an attachment update and drives the story to COMPLETE/NOTIFIED."""

    def __init__(
        self,
        attachment_repo: IAttachmentRepository,
        story_repo: IStoryRepository,
        markers: ReplicationMarkers,
        notifier: StoryStoredNotifier,
    ) -> None:
        self.attachment_repo = attachment_repo
        self.story_repo = story_repo
        self.markers = markers
        self.notifier = notifier

    @traced("replication.complete_story")
    async def on_attachment_replicated(self, story_id: str) -> CompletionState:
        """Re-evaluate the story after one of its attachments replicated."""
        siblings = await self.attachment_repo.list_by_story(story_id)
        pending = [a.id for a in siblings if not a.replicated]
        add_span_attributes(
            **{"story.id": story_id, "story.attachments": len(siblings), "story.pending": len(pending)}
        )
        if not siblings or pending:
            logger.debug("Story %s still replicating (%d of %d pending)", story_id, len(pending), len(siblings))
            return CompletionState.COLLECTING

        if not await self.story_repo.mark_replication_complete(story_id):
            logger.warning("Story %s vanished before its replicating flag could be cleared", story_id)
        logger.info("All %d attachments of story %s replicated", len(siblings), story_id)

        if not await self.markers.consume_new_story(story_id):
            return CompletionState.COMPLETE

        try:
            await self.notifier.notify(story_id, siblings)
        except Exception:
            # Marker is already consumed and state committed; the email is best effort.
            logger.exception("Stored notification for story %s failed", story_id)
        return CompletionState.NOTIFIED
