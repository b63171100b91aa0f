"""Ephemeral replication bookkeeping: lookup entries and new-story markers.

Single place for the key format shared with the upload side:

    replicate:<file_name>  -> attachment id   (TTL 1 hour)
    new_story:<story_id>   -> true            (TTL 30 minutes)

The store adds its own namespace prefix.
"""

from __future__ import annotations

from app.application.interfaces.services import IEphemeralStore
from app.core.constants import CACHE_KEY_SEP, CACHE_PREFIX_NEW_STORY, CACHE_PREFIX_REPLICATE
from app.shared.telemetry.logging import get_logger

logger = get_logger(__name__)

DEFAULT_LOOKUP_TTL_SECONDS = 60 * 60
DEFAULT_NEW_STORY_TTL_SECONDS = 30 * 60


def _validate_key_component(value: str, name: str) -> None:
    """Raise ValueError if value is empty or contains the key separator."""
    if not value:
        raise ValueError(f"Key component {name!r} must not be empty")
    if CACHE_KEY_SEP in value:
        raise ValueError(f"Key component {name!r} must not contain separator {CACHE_KEY_SEP!r}")


def replicate_key(file_name: str) -> str:
    """Lookup entry key. File names are the last key segment and may contain ':'."""
    if not file_name:
        raise ValueError("Key component 'file_name' must not be empty")
    return f"{CACHE_PREFIX_REPLICATE}{CACHE_KEY_SEP}{file_name}"


def new_story_key(story_id: str) -> str:
    """New-story marker key."""
    _validate_key_component(story_id, "story_id")
    return f"{CACHE_PREFIX_NEW_STORY}{CACHE_KEY_SEP}{story_id}"


class ReplicationMarkers:
    """Reads and writes lookup entries and new-story markers through an IEphemeralStore."""

    def __init__(
        self,
        store: IEphemeralStore,
        lookup_ttl_seconds: int = DEFAULT_LOOKUP_TTL_SECONDS,
        new_story_ttl_seconds: int = DEFAULT_NEW_STORY_TTL_SECONDS,
    ) -> None:
        self.store = store
        self.lookup_ttl_seconds = lookup_ttl_seconds
        self.new_story_ttl_seconds = new_story_ttl_seconds

    # Upload side

    async def register_attachment(self, file_name: str, attachment_id: str) -> bool:
        """Map file_name to attachment_id until the replication event arrives."""
        return await self.store.set(replicate_key(file_name), attachment_id, self.lookup_ttl_seconds)

    async def mark_new_story(self, story_id: str) -> bool:
        """Flag a freshly created story so completion sends one notification."""
        return await self.store.set(new_story_key(story_id), True, self.new_story_ttl_seconds)

    # Event side

    async def resolve_attachment(self, file_name: str) -> str | None:
        """Return the attachment id for file_name, or None on a miss."""
        value = await self.store.get(replicate_key(file_name))
        if value is None or value == "":
            return None
        return str(value)

    async def release_attachment(self, file_name: str) -> None:
        """Delete the lookup entry. Failures are logged by the store."""
        if not await self.store.delete(replicate_key(file_name)):
            logger.debug("Lookup entry for %s was already gone", file_name)

    async def consume_new_story(self, story_id: str) -> bool:
        """Atomically take the new-story marker; True for exactly one caller."""
        return await self.store.consume(new_story_key(story_id))
