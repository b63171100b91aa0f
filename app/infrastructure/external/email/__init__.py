"""Email integration: SendGrid and log-only senders, factory, templates."""

from app.infrastructure.external.email.factory import create_email_sender
from app.infrastructure.external.email.log_only_sender import LogOnlyEmailSender
from app.infrastructure.external.email.sendgrid_sender import (
    SendGridEmailSender,
    build_sendgrid_payload,
)
from app.infrastructure.external.email.templates import EmailTemplateRenderer

__all__ = [
    "EmailTemplateRenderer",
    "LogOnlyEmailSender",
    "SendGridEmailSender",
    "build_sendgrid_payload",
    "create_email_sender",
]
