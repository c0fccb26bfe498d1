"""
Send API payload builders.

Pure functions returning the JSON bodies the Send API accepts.
"""

from typing import Any, Dict, Iterable, List, Sequence, Tuple

DEVELOPER_METADATA = "DEVELOPER_DEFINED_METADATA"

ATTACHMENT_TYPES = ("image", "audio", "video", "file")
SENDER_ACTIONS = ("mark_seen", "typing_on", "typing_off")


def _envelope(recipient_id: str, **body: Any) -> Dict[str, Any]:
    return {"recipient": {"id": recipient_id}, **body}


def text_message(recipient_id: str, text: str, metadata: str = DEVELOPER_METADATA) -> Dict[str, Any]:
    return _envelope(recipient_id, message={"text": text, "metadata": metadata})


def quick_reply(title: str, payload: str) -> Dict[str, str]:
    return {"content_type": "text", "title": title, "payload": payload}


def quick_reply_message(
    recipient_id: str,
    text: str,
    choices: Iterable[Tuple[str, str]],
) -> Dict[str, Any]:
    """Text with inline choices given as (title, payload) pairs."""
    return _envelope(
        recipient_id,
        message={
            "text": text,
            "quick_replies": [quick_reply(title, payload) for title, payload in choices],
        },
    )


def attachment_message(recipient_id: str, attachment_type: str, url: str) -> Dict[str, Any]:
    if attachment_type not in ATTACHMENT_TYPES:
        raise ValueError(f"Unsupported attachment type: {attachment_type}")
    return _envelope(
        recipient_id,
        message={"attachment": {"type": attachment_type, "payload": {"url": url}}},
    )


def template_message(recipient_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
    return _envelope(
        recipient_id,
        message={"attachment": {"type": "template", "payload": payload}},
    )


def generic_template(recipient_id: str, elements: Sequence[Dict[str, Any]]) -> Dict[str, Any]:
    return template_message(
        recipient_id,
        {"template_type": "generic", "elements": list(elements)},
    )


def button_template(recipient_id: str, text: str, buttons: Sequence[Dict[str, Any]]) -> Dict[str, Any]:
    return template_message(
        recipient_id,
        {"template_type": "button", "text": text, "buttons": list(buttons)},
    )


def postback_button(title: str, payload: str) -> Dict[str, str]:
    return {"type": "postback", "title": title, "payload": payload}


def web_url_button(url: str, title: str = "Open Web URL") -> Dict[str, str]:
    return {"type": "web_url", "url": url, "title": title}


def sender_action(recipient_id: str, action: str) -> Dict[str, Any]:
    if action not in SENDER_ACTIONS:
        raise ValueError(f"Unsupported sender action: {action}")
    return _envelope(recipient_id, sender_action=action)


def recipient_of(payload: Dict[str, Any]) -> str:
    return str(payload.get("recipient", {}).get("id", ""))


def quick_reply_payloads(payload: Dict[str, Any]) -> List[str]:
    """Payload strings of a quick-reply message (empty for other kinds)."""
    replies = payload.get("message", {}).get("quick_replies") or []
    return [reply.get("payload") for reply in replies]
