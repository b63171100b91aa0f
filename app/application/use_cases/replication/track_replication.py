"""Replication tracking: map storage events to attachments and mark them replicated."""

from __future__ import annotations

from collections.abc import Iterable

from app.application.dtos.sns import ObjectCreatedRecord, ReplicationSummary
from app.application.interfaces.repositories import IAttachmentRepository
from app.application.services.replication_markers import ReplicationMarkers
from app.application.use_cases.replication.complete_story import CompletionAggregator
from app.domain.enums import CompletionState
from app.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


class ReplicationTracker:
    """Resolves each record through its lookup entry and updates the attachment.

    A missing lookup entry is the idempotency point: a redelivered or
    unrelated record finds nothing and is skipped.
    """

    def __init__(
        self,
        attachment_repo: IAttachmentRepository,
        markers: ReplicationMarkers,
        aggregator: CompletionAggregator,
    ) -> None:
        self.attachment_repo = attachment_repo
        self.markers = markers
        self.aggregator = aggregator

    async def process(self, records: Iterable[ObjectCreatedRecord]) -> ReplicationSummary:
        """Track every record in order and return batch counters."""
        summary = ReplicationSummary()
        for record in records:
            state = await self.track(record)
            if state is None:
                summary.skipped += 1
                continue
            summary.processed += 1
            if state in (CompletionState.COMPLETE, CompletionState.NOTIFIED):
                summary.completed += 1
            if state is CompletionState.NOTIFIED:
                summary.notified += 1
        logger.info(
            "Replication batch: processed=%d skipped=%d completed=%d notified=%d",
            summary.processed,
            summary.skipped,
            summary.completed,
            summary.notified,
        )
        return summary

    async def track(self, record: ObjectCreatedRecord) -> CompletionState | None:
        """Handle one record. Returns the story's state, or None if the record was skipped.

        The lookup entry is released only once the attachment update and the
        story aggregation have both returned. Store and database errors from
        either propagate and leave the entry in place, so a redelivery repeats
        both steps, which are idempotent.
        """
        attachment_id = await self.markers.resolve_attachment(record.file_name)
        if attachment_id is None:
            logger.info(
                "No lookup entry for %s; already processed, duplicate or unrelated object",
                record.file_name,
            )
            return None

        attachment = await self.attachment_repo.mark_replicated(
            attachment_id, record.size, record.content_hash
        )
        if attachment is None:
            logger.warning(
                "Attachment %s for %s no longer exists; dropping lookup entry",
                attachment_id,
                record.file_name,
            )
            await self.markers.release_attachment(record.file_name)
            return None

        logger.info(
            "Attachment %s replicated (%s, %d bytes)", attachment.id, record.file_name, record.size
        )
        state = await self.aggregator.on_attachment_replicated(attachment.story_id)
        await self.markers.release_attachment(record.file_name)
        return state
