"""Email sender factory: SendGrid when configured, log-only otherwise."""

import httpx

from app.application.interfaces.services import IEmailSender
from app.core.config import Settings
from app.infrastructure.external.email.log_only_sender import LogOnlyEmailSender
from app.infrastructure.external.email.sendgrid_sender import SendGridEmailSender
from app.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


def create_email_sender(settings: Settings, http_client: httpx.AsyncClient) -> IEmailSender:
    """Return a SendGridEmailSender if SENDGRID_API_KEY and EMAIL_FROM are set, else LogOnlyEmailSender."""
    if settings.sendgrid_api_key is None or not settings.email_from:
        if settings.is_production:
            logger.warning("SENDGRID_API_KEY or EMAIL_FROM not set; emails will only be logged")
        return LogOnlyEmailSender()
    return SendGridEmailSender(
        http_client,
        api_key=settings.sendgrid_api_key.get_secret_value(),
        from_email=settings.email_from,
        from_name=settings.email_from_name,
        api_url=settings.sendgrid_api_url,
    )
