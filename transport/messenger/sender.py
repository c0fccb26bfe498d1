"""
Messenger Send API client.

Delivers composed payloads to the platform.
No formatting intelligence. No retries. Bounded by timeout.
If the platform fails → log and return an error result.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from .base import MessageSender, SendResult
from .messages import recipient_of

logger = logging.getLogger(__name__)

DEFAULT_GRAPH_API_URL = "https://graph.facebook.com/v2.6"


class MessengerSenderError(Exception):
    """Sender is not usable (configuration problem)."""
    pass


class MessengerSender(MessageSender):
    """Send API over httpx."""

    def __init__(
        self,
        page_access_token: str,
        graph_api_url: str = DEFAULT_GRAPH_API_URL,
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        if not page_access_token:
            raise MessengerSenderError("MESSENGER_PAGE_ACCESS_TOKEN not configured")
        self.page_access_token = page_access_token
        self.endpoint = f"{graph_api_url.rstrip('/')}/me/messages"
        self.timeout = timeout
        self._client = client

    async def _post(self, payload: Dict[str, Any]) -> httpx.Response:
        params = {"access_token": self.page_access_token}
        if self._client is not None:
            return await self._client.post(
                self.endpoint, params=params, json=payload, timeout=self.timeout
            )
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await client.post(self.endpoint, params=params, json=payload)

    async def send(self, payload: Dict[str, Any]) -> SendResult:
        recipient_id = recipient_of(payload)

        try:
            response = await self._post(payload)
        except httpx.TimeoutException as e:
            logger.error(
                f"Send API timed out: {e}",
                extra={"recipient_id": recipient_id},
            )
            return SendResult(status="error", recipient_id=recipient_id, error="timeout")
        except httpx.RequestError as e:
            logger.error(
                f"HTTP request failed: {e}",
                exc_info=True,
                extra={"recipient_id": recipient_id, "error": str(e)},
            )
            return SendResult(status="error", recipient_id=recipient_id, error="transport")

        if response.status_code != 200:
            error_text = response.text
            logger.error(
                f"Failed calling Send API: {response.status_code} - {error_text}",
                extra={
                    "status_code": response.status_code,
                    "error_body": error_text,
                },
            )
            return SendResult(
                status="error",
                recipient_id=recipient_id,
                error=f"http_{response.status_code}",
            )

        try:
            body = response.json()
        except ValueError:
            logger.warning("Send API returned a non-JSON body")
            return SendResult(status="success", recipient_id=recipient_id)

        if not isinstance(body, dict):
            logger.warning("Send API returned an unexpected JSON body")
            return SendResult(status="success", recipient_id=recipient_id)

        message_id = body.get("message_id")
        recipient_id = str(body.get("recipient_id") or recipient_id)
        if message_id:
            logger.info(f"Successfully sent message with id {message_id} to recipient {recipient_id}")
        else:
            logger.info(f"Successfully called Send API for recipient {recipient_id}")

        return SendResult(status="success", recipient_id=recipient_id, message_id=message_id)
