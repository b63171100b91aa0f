"""SendGrid email sender over the v3 mail/send HTTP API."""

from __future__ import annotations

import base64
from typing import Any

import httpx

from app.application.dtos.email import OutboundEmail
from app.infrastructure.exceptions import EmailDeliveryError
from app.shared.telemetry.logging import get_logger

logger = get_logger(__name__)

DEFAULT_SENDGRID_URL = "https://api.sendgrid.com/v3/mail/send"


def build_sendgrid_payload(email: OutboundEmail, from_email: str, from_name: str | None) -> dict[str, Any]:
    """Build the mail/send JSON body. Attachment content is base64-encoded."""
    sender: dict[str, str] = {"email": from_email}
    if from_name:
        sender["name"] = from_name
    payload: dict[str, Any] = {
        "personalizations": [{"to": [{"email": email.to}]}],
        "from": sender,
        "subject": email.subject,
        "content": [
            {"type": "text/plain", "value": email.text},
            {"type": "text/html", "value": email.html},
        ],
    }
    if email.attachments:
        payload["attachments"] = [
            {
                "content": base64.b64encode(a.content).decode("ascii"),
                "filename": a.filename,
                "type": a.mime_type,
                "disposition": "attachment",
            }
            for a in email.attachments
        ]
    return payload


class SendGridEmailSender:
    """IEmailSender implementation backed by SendGrid."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        api_key: str,
        from_email: str,
        from_name: str | None = None,
        api_url: str = DEFAULT_SENDGRID_URL,
    ) -> None:
        self._http = http_client
        self._api_key = api_key
        self.from_email = from_email
        self.from_name = from_name
        self.api_url = api_url

    async def send(self, email: OutboundEmail) -> None:
        """POST the email to SendGrid.

        Raises:
            EmailDeliveryError: Transport error or non-2xx response.
        """
        payload = build_sendgrid_payload(email, self.from_email, self.from_name)
        try:
            response = await self._http.post(
                self.api_url,
                json=payload,
                headers={"Authorization": f"Bearer {self._api_key}"},
            )
        except httpx.HTTPError as e:
            raise EmailDeliveryError(f"transport error: {e}") from e
        if not response.is_success:
            raise EmailDeliveryError(
                f"SendGrid error ({response.status_code}): {response.text[:500]}",
                status_code=response.status_code,
            )
        logger.info(
            "Email sent via SendGrid (subject=%r, attachments=%d)",
            email.subject[:80],
            len(email.attachments),
        )
