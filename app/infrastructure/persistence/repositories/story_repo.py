"""Story repository. Interface methods return application DTOs."""

from __future__ import annotations

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.story import StoryOwnerResult
from app.infrastructure.persistence.models.story import Story
from app.infrastructure.persistence.models.user import User
from app.infrastructure.persistence.repositories.base import BaseRepository


class StoryRepository(BaseRepository[Story]):
    """Story repository (IStoryRepository)."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Story)

    async def mark_replication_complete(self, story_id: str) -> bool:
        """Clear has_replicating_attachment and commit. Setting it false again is harmless."""
        result = await self.db.execute(
            update(Story)
            .where(Story.id == story_id)
            .values(has_replicating_attachment=False)
            .execution_options(synchronize_session=False)
        )
        await self._commit()
        return bool(result.rowcount)

    async def get_with_owner(self, story_id: str) -> StoryOwnerResult | None:
        result = await self.db.execute(
            select(Story, User)
            .outerjoin(User, Story.user_id == User.id)
            .where(Story.id == story_id)
            .execution_options(populate_existing=True)
        )
        row = result.one_or_none()
        if row is None:
            return None
        story, owner = row
        return StoryOwnerResult(
            id=story.id,
            title=story.title,
            is_public=story.is_public,
            has_replicating_attachment=story.has_replicating_attachment,
            owner_id=owner.id if owner else None,
            owner_email=owner.email if owner else None,
            owner_name=owner.name if owner else None,
        )
