"""Persistence repositories. Re-exports for dependency injection."""

from app.infrastructure.persistence.repositories.attachment_repo import AttachmentRepository
from app.infrastructure.persistence.repositories.base import BaseRepository
from app.infrastructure.persistence.repositories.story_repo import StoryRepository

__all__ = [
    "AttachmentRepository",
    "BaseRepository",
    "StoryRepository",
]
