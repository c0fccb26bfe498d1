"""
User profile lookup over the Graph API.
"""

import logging
from typing import Optional

import httpx

from .base import ProfileLookup, ProfileResult
from .sender import DEFAULT_GRAPH_API_URL

logger = logging.getLogger(__name__)


class GraphProfileLookup(ProfileLookup):
    """Fetches a sender's first name. Bounded by timeout, never raises."""

    def __init__(
        self,
        page_access_token: str,
        graph_api_url: str = DEFAULT_GRAPH_API_URL,
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.page_access_token = page_access_token
        self.graph_api_url = graph_api_url.rstrip("/")
        self.timeout = timeout
        self._client = client

    async def _get(self, sender_id: str) -> httpx.Response:
        url = f"{self.graph_api_url}/{sender_id}"
        params = {"fields": "first_name,last_name", "access_token": self.page_access_token}
        if self._client is not None:
            return await self._client.get(url, params=params, timeout=self.timeout)
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await client.get(url, params=params)

    async def fetch(self, sender_id: str) -> ProfileResult:
        try:
            response = await self._get(sender_id)
        except httpx.TimeoutException:
            logger.warning(f"Profile lookup timed out for {sender_id}")
            return ProfileResult(status="error", error="timeout")
        except httpx.RequestError as e:
            logger.warning(f"Error fetching user profile for {sender_id}: {e}")
            return ProfileResult(status="error", error="transport")

        if response.status_code != 200:
            logger.warning(
                f"Profile lookup returned {response.status_code} for {sender_id}",
                extra={"status_code": response.status_code},
            )
            return ProfileResult(status="error", error=f"http_{response.status_code}")

        try:
            data = response.json()
        except ValueError:
            return ProfileResult(status="error", error="malformed_response")

        if not isinstance(data, dict):
            return ProfileResult(status="error", error="malformed_response")

        logger.info(f"User info received for {sender_id}")
        return ProfileResult(status="success", first_name=data.get("first_name") or None)
