"""Application interfaces (ports): repository and service protocols."""

from app.application.interfaces.repositories import (
    IAttachmentRepository,
    IStoryRepository,
)
from app.application.interfaces.services import (
    ICertificateProvider,
    IEmailSender,
    IEmailTemplateRenderer,
    IEphemeralStore,
    ISignatureVerifier,
    ISubscriptionConfirmer,
)

__all__ = [
    "IAttachmentRepository",
    "ICertificateProvider",
    "IEmailSender",
    "IEmailTemplateRenderer",
    "IEphemeralStore",
    "ISignatureVerifier",
    "IStoryRepository",
    "ISubscriptionConfirmer",
]
