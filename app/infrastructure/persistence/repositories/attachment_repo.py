"""Attachment repository. Interface methods return application DTOs."""

from __future__ import annotations

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.story import AttachmentResult
from app.infrastructure.persistence.models.attachment import Attachment
from app.infrastructure.persistence.repositories.base import BaseRepository


def _attachment_to_result(a: Attachment) -> AttachmentResult:
    """Map ORM Attachment to application AttachmentResult."""
    return AttachmentResult(
        id=a.id,
        story_id=a.story_id,
        file_name=a.file_name,
        file_type=a.file_type,
        size=a.size,
        hash=a.hash,
        replicated=a.replicated,
    )


class AttachmentRepository(BaseRepository[Attachment]):
    """Attachment repository (IAttachmentRepository)."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Attachment)

    async def mark_replicated(
        self, attachment_id: str, size: int, content_hash: str | None
    ) -> AttachmentResult | None:
        """Set size, hash and replicated=True in one UPDATE and commit it.

        Only ever writes replicated=True, so redelivery cannot undo it.
        """
        result = await self.db.execute(
            update(Attachment)
            .where(Attachment.id == attachment_id)
            .values(size=size, hash=content_hash, replicated=True)
            .returning(Attachment)
            .execution_options(populate_existing=True)
        )
        row = result.scalar_one_or_none()
        await self._commit()
        return _attachment_to_result(row) if row else None

    async def list_by_story(self, story_id: str) -> list[AttachmentResult]:
        result = await self.db.execute(
            select(Attachment)
            .where(Attachment.story_id == story_id)
            .order_by(Attachment.created_at, Attachment.id)
            .execution_options(populate_existing=True)
        )
        return [_attachment_to_result(a) for a in result.scalars().all()]
