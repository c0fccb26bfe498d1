"""
Messenger Event Normalization

PURE CONVERSION - NO STATE, NO NETWORK

Turns a raw webhook body into classified, typed messaging events.
Classification tests fields in fixed priority:
optin → message → delivery → postback → read → account_linking.
"""

import logging
from dataclasses import dataclass
from typing import Any, Iterator

from pydantic import ValidationError

from .schemas import EventKind, MessagingEvent, MessengerWebhookPayload, PageEntry

logger = logging.getLogger(__name__)

PAGE_OBJECT = "page"

_PRIORITY = (
    EventKind.OPTIN,
    EventKind.MESSAGE,
    EventKind.DELIVERY,
    EventKind.POSTBACK,
    EventKind.READ,
    EventKind.ACCOUNT_LINKING,
)


class NormalizationError(Exception):
    """Webhook body could not be read as a webhook payload."""
    pass


class MalformedEventError(Exception):
    """A single messaging event is unusable. Skip it, keep the batch."""
    pass


@dataclass(frozen=True)
class ClassifiedEvent:
    """A messaging event together with the branch that handles it."""

    kind: EventKind
    event: MessagingEvent
    page_id: str = ""


def parse_payload(body: Any) -> MessengerWebhookPayload:
    """
    Validate the top-level webhook body.

    Raises:
        NormalizationError: body is not an object with an 'object' field
    """
    if not isinstance(body, dict):
        raise NormalizationError("Webhook body is not a JSON object")
    try:
        return MessengerWebhookPayload.model_validate(body)
    except ValidationError as e:
        raise NormalizationError(f"Invalid payload structure: {e}")


def classify_kind(raw: dict) -> EventKind:
    """First present field in priority order wins."""
    for kind in _PRIORITY:
        if raw.get(kind.value) is not None:
            return kind
    return EventKind.UNKNOWN


def normalize_event(raw: Any, page_id: str = "") -> ClassifiedEvent:
    """
    Classify and validate one raw messaging event.

    Raises:
        MalformedEventError: missing sender/recipient or bad field types
    """
    if not isinstance(raw, dict):
        raise MalformedEventError(f"Messaging event is not an object: {type(raw).__name__}")

    kind = classify_kind(raw)
    try:
        event = MessagingEvent.model_validate(raw)
    except ValidationError as e:
        raise MalformedEventError(f"Invalid {kind.value} event: {e}")

    return ClassifiedEvent(kind=kind, event=event, page_id=page_id)


def iter_page_events(payload: MessengerWebhookPayload) -> Iterator[ClassifiedEvent]:
    """
    Yield classified events of every entry, in order.

    Malformed entries and events are logged and skipped; the rest of the
    batch is still yielded.
    """
    for index, raw_entry in enumerate(payload.entry):
        try:
            entry = PageEntry.model_validate(raw_entry)
        except ValidationError as e:
            logger.warning(f"Skipping malformed page entry #{index}: {e}")
            continue

        page_id = "" if entry.id is None else str(entry.id)
        for raw_event in entry.messaging:
            try:
                yield normalize_event(raw_event, page_id)
            except MalformedEventError as e:
                logger.warning(
                    f"Skipping malformed messaging event: {e}",
                    extra={"page_id": page_id},
                )
