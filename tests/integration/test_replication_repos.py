"""Attachment and story repository integration tests. Require a migrated Postgres.

Repositories commit every write, so each test removes the rows it created.
"""

import pytest
from sqlalchemy import delete

from app.infrastructure.persistence.models import Attachment, Story, User
from app.infrastructure.persistence.repositories import (
    AttachmentRepository,
    BaseRepository,
    StoryRepository,
)
from app.shared.utils.generators import generate_cuid


@pytest.fixture
async def story_with_attachments(db_session):
    """Owner, story with the replicating flag set and two pending attachments."""
    story_repo = StoryRepository(db_session)
    attachment_repo = AttachmentRepository(db_session)
    user = await BaseRepository(db_session, User).create(User(email=f"{generate_cuid()}@example.com", name="Ada"))
    story = await story_repo.create(Story(user_id=user.id, title="Repo Test", has_replicating_attachment=True))
    attachments = [
        await attachment_repo.create(Attachment(story_id=story.id, file_name=name, file_type="image/jpeg"))
        for name in ("FILE1", "FILE2")
    ]
    yield story, attachments
    await db_session.execute(delete(Story).where(Story.id == story.id))
    await db_session.execute(delete(User).where(User.id == user.id))
    await db_session.commit()


@pytest.mark.requires_db
async def test_mark_replicated_updates_and_is_idempotent(db_session, story_with_attachments) -> None:
    """mark_replicated sets size, hash and replicated; repeating it leaves the row the same."""
    _, attachments = story_with_attachments
    repo = AttachmentRepository(db_session)
    first = await repo.mark_replicated(attachments[0].id, 2048, "abc123")
    assert first is not None
    assert (first.replicated, first.size, first.hash) == (True, 2048, "abc123")
    again = await repo.mark_replicated(attachments[0].id, 2048, "abc123")
    assert again == first


@pytest.mark.requires_db
async def test_mark_replicated_missing_attachment_returns_none(db_session) -> None:
    assert await AttachmentRepository(db_session).mark_replicated(generate_cuid(), 1, None) is None


@pytest.mark.requires_db
async def test_list_by_story_sees_committed_updates(db_session, story_with_attachments) -> None:
    story, attachments = story_with_attachments
    repo = AttachmentRepository(db_session)
    await repo.mark_replicated(attachments[1].id, 10, None)
    siblings = await repo.list_by_story(story.id)
    assert [a.file_name for a in siblings] == ["FILE1", "FILE2"]
    assert [a.replicated for a in siblings] == [False, True]


@pytest.mark.requires_db
async def test_story_completion_and_owner_lookup(db_session, story_with_attachments) -> None:
    story, _ = story_with_attachments
    repo = StoryRepository(db_session)
    assert await repo.mark_replication_complete(story.id) is True
    result = await repo.get_with_owner(story.id)
    assert result is not None
    assert result.has_replicating_attachment is False
    assert result.owner_name == "Ada"
    assert result.owner_email.endswith("@example.com")
    assert await repo.mark_replication_complete(generate_cuid()) is False
    assert await repo.get_with_owner(generate_cuid()) is None
