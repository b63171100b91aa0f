"""Application services: inbound gate, signature verification, event extraction, markers."""

from app.application.services.event_extractor import (
    extract_object_created_records,
    is_storage_notification,
)
from app.application.services.message_gate import InboundMessageGate, parse_envelope
from app.application.services.replication_markers import (
    ReplicationMarkers,
    new_story_key,
    replicate_key,
)
from app.application.services.signature_verifier import (
    SnsSignatureVerifier,
    build_canonical_string,
    is_trusted_sns_url,
)

__all__ = [
    "InboundMessageGate",
    "ReplicationMarkers",
    "SnsSignatureVerifier",
    "build_canonical_string",
    "extract_object_created_records",
    "is_storage_notification",
    "is_trusted_sns_url",
    "new_story_key",
    "parse_envelope",
    "replicate_key",
]
