"""Application lifespan: startup and shutdown.

Single place for all startup/shutdown logic (SRP). Used by main.py;
no business logic here, only wiring of infrastructure (shared HTTP
client, ephemeral store, certificate cache, telemetry, DB engine dispose).
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import httpx
from fastapi import FastAPI

from app.core.config import get_settings
from app.infrastructure.cache.redis_cache import CacheService
from app.infrastructure.persistence.database import dispose_engine
from app.infrastructure.security.certificate_cache import CertificateCache

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    Startup order: shared HTTP client, certificate cache, Redis store,
    telemetry (if enabled). Shutdown order: telemetry shutdown, store
    disconnect, HTTP client close, SQL engine dispose.
    """
    settings = get_settings()

    # ---- Startup ----
    # Shared HTTP client for certificate downloads, subscription confirmation and SendGrid.
    app.state.http_client = httpx.AsyncClient(timeout=settings.http_client_timeout_seconds)
    app.state.certificate_cache = CertificateCache(
        app.state.http_client, ttl_seconds=settings.sns_cert_cache_ttl_seconds
    )

    cache = CacheService(settings=settings)
    await cache.connect()
    app.state.cache = cache

    app.state.telemetry = None
    if settings.telemetry_enabled:
        from app.shared.telemetry.telemetry import TelemetryConfig

        telemetry = TelemetryConfig(
            service_name=settings.app_name,
            service_version=settings.app_version,
            environment=settings.environment,
        )
        telemetry.setup_telemetry(
            exporter_type=settings.telemetry_exporter,
            otlp_endpoint=settings.telemetry_otlp_endpoint,
            sample_rate=settings.telemetry_sample_rate,
        )
        telemetry.instrument_fastapi(app)
        app.state.telemetry = telemetry
        logger.info("Telemetry initialized")

    logger.info("%s %s started (%s)", settings.app_name, settings.app_version, settings.environment)

    yield

    # ---- Shutdown ----
    if app.state.telemetry is not None:
        app.state.telemetry.shutdown()
        app.state.telemetry = None
        logger.info("Telemetry shutdown complete")

    await app.state.cache.disconnect()

    await app.state.http_client.aclose()
    app.state.http_client = None
    app.state.certificate_cache.clear()
    logger.info("HTTP client closed")

    await dispose_engine()
