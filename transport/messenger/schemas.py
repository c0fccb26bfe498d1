"""
Messenger Transport Layer - Pydantic Schemas

PURE DATA MODELS - NO LOGIC
Defines the contract between the Messenger platform and the event router.
"""

from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ============================================================================
# EVENT KINDS
# ============================================================================

class EventKind(str, Enum):
    """Messaging event kinds, in classification priority order."""

    OPTIN = "optin"
    MESSAGE = "message"
    DELIVERY = "delivery"
    POSTBACK = "postback"
    READ = "read"
    ACCOUNT_LINKING = "account_linking"
    UNKNOWN = "unknown"


# ============================================================================
# MESSAGING EVENT PARTS (INPUT)
# ============================================================================

class Participant(BaseModel):
    """Sender or recipient of an event. Ids may arrive as numbers."""
    id: str

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> str:
        if value is None or value == "":
            raise ValueError("participant id is required")
        return str(value)


class QuickReply(BaseModel):
    """Quick reply selection carried by a message."""
    payload: str


class Message(BaseModel):
    """Message received (or echoed) on the page."""
    model_config = ConfigDict(extra="allow")

    mid: Optional[str] = None
    text: Optional[str] = None
    is_echo: bool = False
    app_id: Optional[Union[int, str]] = None
    metadata: Optional[str] = None
    quick_reply: Optional[QuickReply] = None
    attachments: Optional[list[dict[str, Any]]] = None


class Delivery(BaseModel):
    """Delivery confirmation."""
    mids: Optional[list[str]] = None
    watermark: Optional[int] = None
    seq: Optional[int] = None


class Postback(BaseModel):
    """Button tap carrying a developer-defined payload."""
    payload: Optional[str] = None
    title: Optional[str] = None


class Read(BaseModel):
    """Read receipt: everything before the watermark was seen."""
    watermark: Optional[int] = None
    seq: Optional[int] = None


class Optin(BaseModel):
    """Authentication ("Send to Messenger") event."""
    ref: Optional[str] = None


class AccountLinking(BaseModel):
    """Account link / unlink event."""
    status: Optional[str] = None
    authorization_code: Optional[str] = None


class MessagingEvent(BaseModel):
    """A single messaging event from a page entry."""
    model_config = ConfigDict(extra="allow")

    sender: Participant
    recipient: Participant
    timestamp: Optional[int] = None

    optin: Optional[Optin] = None
    message: Optional[Message] = None
    delivery: Optional[Delivery] = None
    postback: Optional[Postback] = None
    read: Optional[Read] = None
    account_linking: Optional[AccountLinking] = None

    @property
    def sender_id(self) -> str:
        return self.sender.id


# ============================================================================
# WEBHOOK PAYLOAD (INPUT)
# ============================================================================

class PageEntry(BaseModel):
    """One page entry. Events stay raw so a bad one can be skipped alone."""
    model_config = ConfigDict(extra="allow")

    id: Optional[Union[int, str]] = None
    time: Optional[int] = None
    messaging: list[Any] = Field(default_factory=list)


class MessengerWebhookPayload(BaseModel):
    """
    Full Messenger webhook payload.

    ref: https://developers.facebook.com/docs/messenger-platform/webhooks
    """
    model_config = ConfigDict(extra="allow")

    object: str = Field(..., description="Always 'page' for page subscriptions")
    entry: list[Any] = Field(default_factory=list, description="Webhook entries")
