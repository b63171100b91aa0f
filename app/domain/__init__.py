"""Domain layer: enums and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from app.domain.enums import CompletionState, SnsMessageType
from app.domain.exceptions import (
    MalformedEnvelopeException,
    ReplicationServiceException,
    SignatureInvalidException,
    SqlNotConfiguredException,
    UnauthorizedTopicException,
    UnknownMessageTypeException,
)

__all__ = [
    # Enums
    "CompletionState",
    "SnsMessageType",
    # Exceptions
    "MalformedEnvelopeException",
    "ReplicationServiceException",
    "SignatureInvalidException",
    "SqlNotConfiguredException",
    "UnauthorizedTopicException",
    "UnknownMessageTypeException",
]
