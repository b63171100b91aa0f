"""Story ORM model. Parent of attachments; tracks whether any are still replicating."""

from sqlalchemy import Boolean, ForeignKey, String, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import CuidTimestampModel
from app.infrastructure.persistence.models.user import User


class Story(CuidTimestampModel, Base):
    """Story entity. Table: story.

    has_replicating_attachment is set true by the upload side and cleared
    once, when the last attachment of the creation cycle replicates.
    """

    __tablename__ = "story"

    user_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("app_user.id", ondelete="SET NULL"), nullable=True, index=True
    )
    title: Mapped[str] = mapped_column(String, nullable=False)
    is_public: Mapped[bool] = mapped_column(
        Boolean, nullable=False, server_default=text("false")
    )
    has_replicating_attachment: Mapped[bool] = mapped_column(
        Boolean, nullable=False, server_default=text("false")
    )

    owner: Mapped[User | None] = relationship(lazy="raise")
