"""Presentation-layer dependency injection (composition root).

Provides FastAPI Depends() for DB sessions, the shared clients created in
the lifespan (app.state) and the application services built on them.
Routes depend only on these dependencies, not on infra directly; tests
swap any of them through app.dependency_overrides.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Annotated

import httpx
from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.sns import InboundMessage
from app.application.interfaces.repositories import IAttachmentRepository, IStoryRepository
from app.application.interfaces.services import (
    ICertificateProvider,
    IEmailSender,
    IEmailTemplateRenderer,
    IEphemeralStore,
    ISignatureVerifier,
    ISubscriptionConfirmer,
)
from app.application.services.message_gate import InboundMessageGate
from app.application.services.replication_markers import ReplicationMarkers
from app.application.services.signature_verifier import SnsSignatureVerifier
from app.application.use_cases.replication import (
    CompletionAggregator,
    ReplicationTracker,
    StoryStoredNotifier,
)
from app.application.use_cases.sns import MessageRouter
from app.core.config import get_settings
from app.infrastructure.external.email import EmailTemplateRenderer, create_email_sender
from app.infrastructure.external.sns import SnsSubscriptionClient
from app.infrastructure.persistence.database import get_db
from app.infrastructure.persistence.repositories import AttachmentRepository, StoryRepository

# ---- Shared clients (created in app lifespan) ----


def get_http_client(request: Request) -> httpx.AsyncClient:
    """Shared outbound HTTP client (app.state.http_client)."""
    return request.app.state.http_client


def get_ephemeral_store(request: Request) -> IEphemeralStore:
    """Redis-backed store for lookup entries and new-story markers (app.state.cache)."""
    return request.app.state.cache


def get_certificate_provider(request: Request) -> ICertificateProvider:
    """Process-wide signing-certificate cache (app.state.certificate_cache)."""
    return request.app.state.certificate_cache


# ---- Inbound gate ----


def get_signature_verifier(
    certificates: Annotated[ICertificateProvider, Depends(get_certificate_provider)],
) -> ISignatureVerifier:
    settings = get_settings()
    return SnsSignatureVerifier(
        certificates,
        settings.sns_cert_host_pattern,
        skip_verification=settings.skip_sns_signature_verification,
        is_production=settings.is_production,
    )


def get_message_gate(
    verifier: Annotated[ISignatureVerifier, Depends(get_signature_verifier)],
) -> InboundMessageGate:
    settings = get_settings()
    return InboundMessageGate(
        verifier,
        settings.allowed_topic_arns,
        skip_arn_validation=settings.skip_sns_arn_validation,
        is_production=settings.is_production,
    )


async def get_accepted_message(
    request: Request,
    gate: Annotated[InboundMessageGate, Depends(get_message_gate)],
) -> InboundMessage:
    """Authenticated delivery. Declared ahead of the router so rejections never open a session."""
    return await gate.accept(await request.body())


# ---- Repositories (one session per request; each write commits) ----


async def get_attachment_repo(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> IAttachmentRepository:
    return AttachmentRepository(db)


async def get_story_repo(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> IStoryRepository:
    return StoryRepository(db)


# ---- Email ----


def get_email_sender(
    http_client: Annotated[httpx.AsyncClient, Depends(get_http_client)],
) -> IEmailSender:
    """SendGrid sender when configured, otherwise log-only."""
    return create_email_sender(get_settings(), http_client)


@lru_cache
def get_email_renderer() -> IEmailTemplateRenderer:
    """Compiled email templates (built once per process)."""
    return EmailTemplateRenderer()


# ---- Replication use cases ----


def get_replication_markers(
    store: Annotated[IEphemeralStore, Depends(get_ephemeral_store)],
) -> ReplicationMarkers:
    settings = get_settings()
    return ReplicationMarkers(
        store,
        lookup_ttl_seconds=settings.replication_lookup_ttl_seconds,
        new_story_ttl_seconds=settings.new_story_marker_ttl_seconds,
    )


def get_story_stored_notifier(
    story_repo: Annotated[IStoryRepository, Depends(get_story_repo)],
    email_sender: Annotated[IEmailSender, Depends(get_email_sender)],
    renderer: Annotated[IEmailTemplateRenderer, Depends(get_email_renderer)],
) -> StoryStoredNotifier:
    return StoryStoredNotifier(
        story_repo,
        email_sender,
        renderer,
        site_domain=get_settings().site_domain,
    )


def get_completion_aggregator(
    attachment_repo: Annotated[IAttachmentRepository, Depends(get_attachment_repo)],
    story_repo: Annotated[IStoryRepository, Depends(get_story_repo)],
    markers: Annotated[ReplicationMarkers, Depends(get_replication_markers)],
    notifier: Annotated[StoryStoredNotifier, Depends(get_story_stored_notifier)],
) -> CompletionAggregator:
    return CompletionAggregator(attachment_repo, story_repo, markers, notifier)


def get_replication_tracker(
    attachment_repo: Annotated[IAttachmentRepository, Depends(get_attachment_repo)],
    markers: Annotated[ReplicationMarkers, Depends(get_replication_markers)],
    aggregator: Annotated[CompletionAggregator, Depends(get_completion_aggregator)],
) -> ReplicationTracker:
    return ReplicationTracker(attachment_repo, markers, aggregator)


# ---- Routing ----


def get_subscription_confirmer(
    http_client: Annotated[httpx.AsyncClient, Depends(get_http_client)],
) -> ISubscriptionConfirmer:
    return SnsSubscriptionClient(http_client)


def get_message_router(
    confirmer: Annotated[ISubscriptionConfirmer, Depends(get_subscription_confirmer)],
    tracker: Annotated[ReplicationTracker, Depends(get_replication_tracker)],
) -> MessageRouter:
    return MessageRouter(confirmer, tracker, get_settings().sns_cert_host_pattern)
