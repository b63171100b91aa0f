"""Repository interfaces (ports) for the application layer.

Protocols define contracts; infrastructure implements them with SQLAlchemy.
Every write is a single atomic statement committed before it returns so
that concurrent deliveries for the same story see each other's updates.
"""

from __future__ import annotations

from typing import Protocol

from app.application.dtos.story import AttachmentResult, StoryOwnerResult


class IAttachmentRepository(Protocol):
    """Protocol for attachment (replication record) reads and the replicated update."""

    async def mark_replicated(
        self, attachment_id: str, size: int, content_hash: str | None
    ) -> AttachmentResult | None:
        """Set size, hash and replicated=True; return the row, or None if it does not exist.

        Repeating the call with the same values leaves the row unchanged.
        """

    async def list_by_story(self, story_id: str) -> list[AttachmentResult]:
        """Return all attachments of the story (siblings), ordered by creation."""


class IStoryRepository(Protocol):
    """Protocol for story reads and the replicating-flag update."""

    async def mark_replication_complete(self, story_id: str) -> bool:
        """Set has_replicating_attachment=False. Returns True if the story exists."""

    async def get_with_owner(self, story_id: str) -> StoryOwnerResult | None:
        """Return the story joined with its owner, or None."""
