"""Persistence models: ORM entities and mixins."""

from app.infrastructure.persistence.models.attachment import Attachment
from app.infrastructure.persistence.models.mixins import (
    CuidMixin,
    CuidTimestampModel,
    TimestampMixin,
)
from app.infrastructure.persistence.models.story import Story
from app.infrastructure.persistence.models.user import User

__all__ = [
    "Attachment",
    "CuidMixin",
    "CuidTimestampModel",
    "Story",
    "TimestampMixin",
    "User",
]
