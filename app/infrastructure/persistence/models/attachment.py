"""Attachment ORM model. One uploaded file of a story and its replication state."""

from sqlalchemy import BigInteger, Boolean, ForeignKey, Index, String, text
from sqlalchemy.orm import Mapped, mapped_column

from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import CuidTimestampModel


class Attachment(CuidTimestampModel, Base):
    """Attachment entity. Table: attachment.

    replicated goes false -> true once, when the storage event for
    file_name arrives; size and hash are filled in at the same time.
    """

    __tablename__ = "attachment"

    story_id: Mapped[str] = mapped_column(
        String, ForeignKey("story.id", ondelete="CASCADE"), nullable=False
    )
    file_name: Mapped[str] = mapped_column(String, nullable=False)
    file_type: Mapped[str] = mapped_column(String, nullable=False)
    size: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    hash: Mapped[str | None] = mapped_column(String, nullable=True)
    replicated: Mapped[bool] = mapped_column(
        Boolean, nullable=False, server_default=text("false")
    )

    __table_args__ = (Index("ix_attachment_story_replicated", "story_id", "replicated"),)
