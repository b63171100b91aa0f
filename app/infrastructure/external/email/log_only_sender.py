"""Log-only email sender for environments without SendGrid credentials."""

from __future__ import annotations

import logging

from app.application.dtos.email import OutboundEmail
from app.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


class LogOnlyEmailSender:
    """IEmailSender implementation that logs instead of sending email."""

    async def send(self, email: OutboundEmail) -> None:
        """Log the email; nothing is delivered."""
        logger.info(
            "Email not sent (no provider configured): subject=%r attachments=%s",
            email.subject[:80],
            [a.filename for a in email.attachments],
        )
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Email text (first 500 chars): %s", email.text[:500])
