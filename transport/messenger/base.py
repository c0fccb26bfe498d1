"""
Outbound collaborator interfaces.

The conversation layer talks to the platform only through these:
- MessageSender: Send API
- ProfileLookup: user profile fetch

Failures come back as typed results. Callers fail open.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Literal, Optional

CallStatus = Literal["success", "error"]


@dataclass
class SendResult:
    """Outcome of one Send API call."""

    status: CallStatus
    recipient_id: Optional[str] = None
    message_id: Optional[str] = None
    error: Optional[str] = None   # timeout | http_<code> | transport | malformed_response

    @property
    def ok(self) -> bool:
        return self.status == "success"


@dataclass
class ProfileResult:
    """Outcome of one profile fetch."""

    status: CallStatus
    first_name: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == "success"


class MessageSender(ABC):
    """Abstract Send API boundary."""

    @abstractmethod
    async def send(self, payload: Dict[str, Any]) -> SendResult:
        """
        Deliver one composed payload.

        Args:
            payload: {"recipient": {"id": ...}, "message": {...}}
                     or {"recipient": {"id": ...}, "sender_action": ...}

        Returns:
            SendResult; never raises
        """
        raise NotImplementedError


class ProfileLookup(ABC):
    """Abstract profile boundary."""

    @abstractmethod
    async def fetch(self, sender_id: str) -> ProfileResult:
        """
        Fetch the sender's public profile.

        Returns:
            ProfileResult; never raises
        """
        raise NotImplementedError
