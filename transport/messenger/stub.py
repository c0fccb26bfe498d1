"""
Stub outbound collaborators for testing and offline development.

Deterministic, in-process, nothing leaves the machine.
"""

import asyncio
import itertools
import logging
from typing import Any, Dict, List, Optional

from .base import MessageSender, ProfileLookup, ProfileResult, SendResult
from .messages import recipient_of

logger = logging.getLogger(__name__)


class RecordingSender(MessageSender):
    """
    Records every payload instead of sending it.

    `fail=True` makes every send return an error result.
    """

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.sent: List[Dict[str, Any]] = []
        self._ids = itertools.count(1)

    async def send(self, payload: Dict[str, Any]) -> SendResult:
        recipient_id = recipient_of(payload)
        self.sent.append(payload)
        if self.fail:
            return SendResult(status="error", recipient_id=recipient_id, error="stub_failure")
        message_id = f"mid.stub.{next(self._ids)}"
        logger.debug(f"[stub] sent {message_id} to {recipient_id}")
        return SendResult(status="success", recipient_id=recipient_id, message_id=message_id)

    def sent_to(self, recipient_id: str) -> List[Dict[str, Any]]:
        return [p for p in self.sent if recipient_of(p) == recipient_id]

    def texts(self, recipient_id: Optional[str] = None) -> List[str]:
        """Text of every sent message (quick replies included)."""
        payloads = self.sent if recipient_id is None else self.sent_to(recipient_id)
        return [p["message"]["text"] for p in payloads if "text" in p.get("message", {})]


class StubProfileLookup(ProfileLookup):
    """Profile lookup answering from a fixed table."""

    def __init__(
        self,
        names: Optional[Dict[str, str]] = None,
        default_name: Optional[str] = None,
        fail: bool = False,
        delay: float = 0.0,
    ):
        self.names = dict(names or {})
        self.default_name = default_name
        self.fail = fail
        self.delay = delay
        self.calls: List[str] = []

    async def fetch(self, sender_id: str) -> ProfileResult:
        self.calls.append(sender_id)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail:
            return ProfileResult(status="error", error="stub_failure")
        return ProfileResult(
            status="success",
            first_name=self.names.get(sender_id, self.default_name),
        )
