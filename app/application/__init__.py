"""Application layer: interfaces, services, use cases.

Depends only on domain and protocol definitions (DIP).
Infrastructure implements the interfaces (repositories, ephemeral store,
certificate cache, email sender).
"""

from app.application.interfaces import (
    IAttachmentRepository,
    ICertificateProvider,
    IEmailSender,
    IEmailTemplateRenderer,
    IEphemeralStore,
    ISignatureVerifier,
    IStoryRepository,
    ISubscriptionConfirmer,
)
from app.application.services import (
    InboundMessageGate,
    ReplicationMarkers,
    SnsSignatureVerifier,
)
from app.application.use_cases import (
    CompletionAggregator,
    MessageRouter,
    ReplicationTracker,
    StoryStoredNotifier,
)

__all__ = [
    "CompletionAggregator",
    "IAttachmentRepository",
    "ICertificateProvider",
    "IEmailSender",
    "IEmailTemplateRenderer",
    "IEphemeralStore",
    "ISignatureVerifier",
    "IStoryRepository",
    "ISubscriptionConfirmer",
    "InboundMessageGate",
    "MessageRouter",
    "ReplicationMarkers",
    "ReplicationTracker",
    "SnsSignatureVerifier",
    "StoryStoredNotifier",
]
