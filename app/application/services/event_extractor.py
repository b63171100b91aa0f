"""Extract ObjectCreated records from a storage notification payload."""

from __future__ import annotations

import json
from typing import Any
from urllib.parse import unquote_plus

from app.application.dtos.sns import InboundMessage, ObjectCreatedRecord
from app.core.constants import OBJECT_CREATED_EVENT_PREFIX, S3_NOTIFICATION_SUBJECT
from app.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


def normalize_etag(etag: Any) -> str | None:
    """Strip quote characters from an eTag; empty -> None."""
    if etag is None:
        return None
    value = str(etag).replace('"', "").replace("'", "").strip()
    return value or None


def file_name_from_key(object_key: str) -> str:
    """Last path segment of the object key (may be empty for 'folder/' keys)."""
    return object_key.rsplit("/", 1)[-1]


def is_storage_notification(message: InboundMessage) -> bool:
    return message.subject == S3_NOTIFICATION_SUBJECT


def _parse_record(record: Any) -> ObjectCreatedRecord | None:
    if not isinstance(record, dict):
        logger.warning("Skipping record that is not an object: %r", record)
        return None

    event_name = str(record.get("eventName") or "")
    if not event_name.startswith(OBJECT_CREATED_EVENT_PREFIX):
        logger.debug("Ignoring %s event", event_name or "unnamed")
        return None

    s3 = record.get("s3")
    obj = s3.get("object") if isinstance(s3, dict) else None
    if not isinstance(obj, dict):
        logger.warning("Skipping %s record without an object section", event_name)
        return None

    raw_key = obj.get("key")
    size = obj.get("size")
    if not raw_key or size is None or isinstance(size, bool):
        logger.warning("Skipping %s record missing key or size: key=%r size=%r", event_name, raw_key, size)
        return None
    try:
        size = int(size)
    except (TypeError, ValueError):
        logger.warning("Skipping %s record with non-numeric size %r", event_name, size)
        return None

    # Keys arrive URL-encoded (spaces as '+')
    object_key = unquote_plus(str(raw_key))
    file_name = file_name_from_key(object_key)
    if not file_name:
        logger.warning("Skipping record with empty file name for key %s", object_key)
        return None

    return ObjectCreatedRecord(
        object_key=object_key,
        file_name=file_name,
        size=size,
        content_hash=normalize_etag(obj.get("eTag")),
        event_name=event_name,
    )


def extract_object_created_records(message: InboundMessage) -> list[ObjectCreatedRecord]:
    """Return the qualifying ObjectCreated records of a Notification.

    A notification that is not a storage notification, whose Message is not
    JSON, or that has no Records array yields an empty list (opaque no-op).
    Bad records are logged and skipped individually.
    """
    if not is_storage_notification(message):
        logger.info("Notification %s is not a storage notification; nothing to do", message.message_id)
        return []

    try:
        payload = json.loads(message.message)
    except json.JSONDecodeError:
        logger.warning("Storage notification %s has a non-JSON Message", message.message_id)
        return []

    records = payload.get("Records") if isinstance(payload, dict) else None
    if not isinstance(records, list):
        # e.g. the s3:TestEvent sent when notifications are first configured
        logger.info("Storage notification %s carries no Records", message.message_id)
        return []

    extracted = [parsed for parsed in map(_parse_record, records) if parsed is not None]
    logger.debug(
        "Extracted %d of %d records from message %s",
        len(extracted),
        len(records),
        message.message_id,
    )
    return extracted
