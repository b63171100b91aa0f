"""Subscription confirmation: visit the SubscribeURL SNS sent us."""

from __future__ import annotations

import httpx

from app.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


class SnsSubscriptionClient:
    """ISubscriptionConfirmer implementation using the shared httpx client."""

    def __init__(self, http_client: httpx.AsyncClient) -> None:
        self._http = http_client

    async def confirm(self, subscribe_url: str) -> bool:
        """GET subscribe_url. True on 2xx; transport errors and other statuses are logged."""
        try:
            response = await self._http.get(subscribe_url)
        except httpx.HTTPError as e:
            logger.warning("Subscription confirmation request failed: %s", e)
            return False
        if not response.is_success:
            logger.warning("Subscription confirmation returned HTTP %s", response.status_code)
            return False
        return True
