"""DTOs for stories, their attachments and owners (no dependency on ORM)."""

from dataclasses import dataclass


@dataclass(frozen=True)
class AttachmentResult:
    """Attachment read-model. replicated goes False -> True once and never back."""

    id: str
    story_id: str
    file_name: str
    file_type: str
    size: int | None
    hash: str | None
    replicated: bool


@dataclass(frozen=True)
class StoryOwnerResult:
    """Story with the owner fields needed to address the completion email."""

    id: str
    title: str
    is_public: bool
    has_replicating_attachment: bool
    owner_id: str | None
    owner_email: str | None
    owner_name: str | None
