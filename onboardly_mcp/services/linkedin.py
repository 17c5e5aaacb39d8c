"""LinkedIn profile lookup through a Relevance AI webhook."""

import logging
from typing import Any

import httpx

from ..config import Settings, settings as default_settings

logger = logging.getLogger(__name__)


class LinkedinProfileService:
    """Resolves a LinkedIn profile URL into the webhook's JSON payload."""

    def __init__(
        self,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.settings = settings or default_settings
        self._transport = transport

    async def get_profile(self, profile_url: str) -> Any:
        """
        Fetch profile data for a LinkedIn URL.

        Raises:
            ValueError: No webhook URL is configured
            httpx.HTTPError: The webhook could not be reached or answered non-2xx
        """
        webhook_url = self.settings.relevance_webhook_url
        if not webhook_url:
            raise ValueError("Relevance webhook URL not configured")

        async with httpx.AsyncClient(
            timeout=self.settings.http_timeout_seconds, transport=self._transport
        ) as client:
            response = await client.post(webhook_url, json={"url": profile_url, "name": ""})

        if response.status_code >= 400:
            logger.warning(
                f"Profile webhook returned {response.status_code} for {profile_url}"
            )
        response.raise_for_status()
        return response.json()
