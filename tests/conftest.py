"""Pytest configuration and fixtures for the replication webhook.

Environment defaults are set before app.main is imported because the app
is built at import time. HTTP tests run against app.main:app through
ASGITransport (no lifespan), so every dependency that would reach
app.state, Redis or Postgres is overridden with an in-memory fake.
"""

import os

os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("TELEMETRY_ENABLED", "false")
os.environ.setdefault("REDIS_ENABLED", "false")
os.environ.setdefault("ALLOWED_SNS_TOPIC_ARNS", "arn:aws:sns:us-east-1:123456789012:replication")
os.environ.setdefault("SITE_DOMAIN", "sealed.love")

import pytest
from cryptography import x509
from cryptography.hazmat.primitives.asymmetric import rsa
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1 import dependencies
from app.infrastructure.persistence import database
from app.main import app
from tests.fakes import (
    FakeAttachmentRepository,
    FakeCertificateProvider,
    FakeStoryRepository,
    FakeSubscriptionConfirmer,
    InMemoryStore,
    RecordingEmailSender,
    make_certificate,
)


@pytest.fixture(scope="session")
def private_key() -> rsa.RSAPrivateKey:
    """RSA key standing in for the SNS signing key (generated once per run)."""
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def certificate(private_key: rsa.RSAPrivateKey) -> x509.Certificate:
    """Self-signed certificate for private_key."""
    return make_certificate(private_key)


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def attachment_repo() -> FakeAttachmentRepository:
    return FakeAttachmentRepository()


@pytest.fixture
def story_repo() -> FakeStoryRepository:
    return FakeStoryRepository()


@pytest.fixture
def email_sender() -> RecordingEmailSender:
    return RecordingEmailSender()


@pytest.fixture
def certificate_provider(certificate: x509.Certificate) -> FakeCertificateProvider:
    return FakeCertificateProvider(certificate)


@pytest.fixture
def confirmer() -> FakeSubscriptionConfirmer:
    return FakeSubscriptionConfirmer()


@pytest.fixture
async def client(
    store: InMemoryStore,
    attachment_repo: FakeAttachmentRepository,
    story_repo: FakeStoryRepository,
    email_sender: RecordingEmailSender,
    certificate_provider: FakeCertificateProvider,
    confirmer: FakeSubscriptionConfirmer,
) -> AsyncClient:
    """Async HTTP client against the FastAPI app (ASGI) with in-memory collaborators."""
    app.dependency_overrides.update(
        {
            dependencies.get_certificate_provider: lambda: certificate_provider,
            dependencies.get_ephemeral_store: lambda: store,
            dependencies.get_attachment_repo: lambda: attachment_repo,
            dependencies.get_story_repo: lambda: story_repo,
            dependencies.get_email_sender: lambda: email_sender,
            dependencies.get_subscription_confirmer: lambda: confirmer,
        }
    )
    transport = ASGITransport(app=app)
    try:
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            yield ac
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
async def db_session() -> AsyncSession:
    """Database session for repository integration tests.

    Requires DATABASE_URL pointing at a migrated Postgres database
    (alembic upgrade head). Skips when it is not configured. Use
    @pytest.mark.requires_db on tests that need it; run without DB via:
    pytest -m 'not requires_db'.
    """
    database._ensure_engine()
    if database.AsyncSessionLocal is None:
        pytest.skip("Postgres not configured: set DATABASE_URL, then run: alembic upgrade head")
    async with database.AsyncSessionLocal() as session:
        yield session
    await database.dispose_engine()
