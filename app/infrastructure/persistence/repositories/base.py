"""Base repository: shared lookups and the commit-per-write helper."""

from typing import Any, Generic, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.infrastructure.persistence.database import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Base repository with get_by_id, create and _commit.

    Writes in subclasses are single UPDATE statements followed by _commit(),
    so each change is visible to concurrent sessions as soon as the method
    returns. Reads use populate_existing so objects already in the session's
    identity map are refreshed rather than served stale.
    """

    def __init__(self, db: AsyncSession, model: type[ModelType]) -> None:
        self.db = db
        self.model = model

    async def get_by_id(self, entity_id: str) -> ModelType | None:
        """Return a single record by primary key, or None."""
        model: Any = self.model
        result = await self.db.execute(
            select(self.model)
            .where(model.id == entity_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def create(self, obj: ModelType) -> ModelType:
        """Persist a new record and commit."""
        self.db.add(obj)
        await self.db.flush()
        await self.db.refresh(obj)
        await self._commit()
        return obj

    async def _commit(self) -> None:
        """Commit, rolling back the session if the commit fails."""
        try:
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise
