"""Messenger Transport Layer - Module Exports

The FastAPI router lives in transport.messenger.webhook and is imported
from there, so conversation code can use these pieces without pulling in
the HTTP layer.
"""

from .base import MessageSender, ProfileLookup, ProfileResult, SendResult
from .normalize import (
    ClassifiedEvent,
    MalformedEventError,
    NormalizationError,
    classify_kind,
    iter_page_events,
    normalize_event,
    parse_payload,
)
from .profile import GraphProfileLookup
from .schemas import EventKind, MessagingEvent, MessengerWebhookPayload
from .security import (
    SIGNATURE_HEADER,
    SignatureVerificationError,
    compute_signature,
    verify_signature,
    verify_webhook_challenge,
)
from .sender import DEFAULT_GRAPH_API_URL, MessengerSender, MessengerSenderError
from .stub import RecordingSender, StubProfileLookup

__all__ = [
    # Collaborators
    "MessageSender",
    "ProfileLookup",
    "SendResult",
    "ProfileResult",
    "MessengerSender",
    "MessengerSenderError",
    "GraphProfileLookup",
    "RecordingSender",
    "StubProfileLookup",
    "DEFAULT_GRAPH_API_URL",
    # Schemas
    "EventKind",
    "MessagingEvent",
    "MessengerWebhookPayload",
    # Normalization
    "ClassifiedEvent",
    "MalformedEventError",
    "NormalizationError",
    "classify_kind",
    "iter_page_events",
    "normalize_event",
    "parse_payload",
    # Security
    "SIGNATURE_HEADER",
    "SignatureVerificationError",
    "compute_signature",
    "verify_signature",
    "verify_webhook_challenge",
]
