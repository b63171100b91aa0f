"""Story-stored notification: manifest file plus one email to the story owner."""

from __future__ import annotations

import json
import os
import re
import tempfile
from collections.abc import Sequence
from typing import Any

import aiofiles
import aiofiles.os

from app.application.dtos.email import EmailAttachment, OutboundEmail
from app.application.dtos.story import AttachmentResult, StoryOwnerResult
from app.application.interfaces.repositories import IStoryRepository
from app.application.interfaces.services import IEmailSender, IEmailTemplateRenderer
from app.core.constants import MANIFEST_MIME_TYPE
from app.domain.exceptions import ReplicationServiceException
from app.shared.telemetry.logging import get_logger
from app.shared.utils.datetime import format_human_timestamp

logger = get_logger(__name__)

STORY_STORED_TEMPLATE = "story_stored"

_NON_ALNUM = re.compile(r"[^a-zA-Z0-9]")


def manifest_filename(story_title: str) -> str:
    """Attachment name: title with every non-alphanumeric replaced by '_', plus '_files.json'."""
    return f"{_NON_ALNUM.sub('_', story_title)}_files.json"


def build_manifest(
    story: StoryOwnerResult,
    attachments: Sequence[AttachmentResult],
    created_at: str,
) -> dict[str, Any]:
    """Manifest of every file in the story, attached to the email for the owner's records."""
    return {
        "storyId": story.id,
        "storyTitle": story.title,
        "createdAt": created_at,
        "attachments": [
            {
                "id": a.id,
                "fileName": a.file_name,
                "fileType": a.file_type,
                "size": a.size,
                "hash": a.hash,
            }
            for a in attachments
        ],
    }


class StoryStoredNotifier:
    """Sends the one-time "story stored" email once every attachment has replicated.

    Failures (missing owner, manifest serialization, provider errors) are
    logged and reported as False; they never propagate to the caller,
    whose state changes are already committed.
    """

    def __init__(
        self,
        story_repo: IStoryRepository,
        email_sender: IEmailSender,
        renderer: IEmailTemplateRenderer,
        *,
        site_domain: str,
        temp_dir: str | None = None,
    ) -> None:
        self.story_repo = story_repo
        self.email_sender = email_sender
        self.renderer = renderer
        self.site_domain = site_domain
        self.temp_dir = temp_dir

    async def notify(self, story_id: str, attachments: Sequence[AttachmentResult]) -> bool:
        """Email the story owner with the manifest attached. Returns True if the send succeeded."""
        story = await self.story_repo.get_with_owner(story_id)
        if story is None:
            logger.warning("Story %s not found; no stored notification sent", story_id)
            return False
        if not story.owner_email:
            logger.warning("Story %s has no owner email; no stored notification sent", story_id)
            return False

        created_at = format_human_timestamp()
        rendered = self.renderer.render(
            STORY_STORED_TEMPLATE,
            {
                "name": story.owner_name,
                "email": story.owner_email,
                "story_title": story.title,
                "story_id": story.id,
                "is_public": story.is_public,
                "current_date": created_at,
                "site_domain": self.site_domain,
            },
        )

        fd, temp_path = tempfile.mkstemp(prefix="story_manifest_", suffix=".json", dir=self.temp_dir)
        os.close(fd)
        try:
            async with aiofiles.open(temp_path, "w", encoding="utf-8") as f:
                await f.write(json.dumps(build_manifest(story, attachments, created_at), indent=2))
            async with aiofiles.open(temp_path, "rb") as f:
                content = await f.read()

            await self.email_sender.send(
                OutboundEmail(
                    to=story.owner_email,
                    subject=rendered.subject,
                    text=rendered.text,
                    html=rendered.html,
                    attachments=[
                        EmailAttachment(
                            content=content,
                            filename=manifest_filename(story.title),
                            mime_type=MANIFEST_MIME_TYPE,
                        )
                    ],
                )
            )
        except ReplicationServiceException as e:
            logger.warning("Stored notification for story %s not delivered: %s", story_id, e.message)
            return False
        except (OSError, TypeError, ValueError):
            logger.exception("Could not build manifest for story %s", story_id)
            return False
        finally:
            await self._remove_temp_file(temp_path)

        logger.info("Stored notification sent for story %s (%d files)", story_id, len(attachments))
        return True

    @staticmethod
    async def _remove_temp_file(path: str) -> None:
        try:
            await aiofiles.os.remove(path)
        except FileNotFoundError:
            return
        except OSError:
            logger.exception("Could not remove temporary manifest %s", path)
