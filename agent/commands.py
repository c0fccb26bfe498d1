"""
Built-in keyword commands.

Static registry: exact message text → canned Send API payload.
Matching is case-sensitive. Text that matches nothing here is a weather query.
"""

import random
from typing import Any, Callable, Dict, Optional

from transport.messenger import messages

PayloadBuilder = Callable[[str, str], Dict[str, Any]]


def _image(recipient_id: str, server_url: str) -> Dict[str, Any]:
    return messages.attachment_message(recipient_id, "image", f"{server_url}/assets/rift.png")


def _gif(recipient_id: str, server_url: str) -> Dict[str, Any]:
    return messages.attachment_message(recipient_id, "image", f"{server_url}/assets/instagram_logo.gif")


def _audio(recipient_id: str, server_url: str) -> Dict[str, Any]:
    return messages.attachment_message(recipient_id, "audio", f"{server_url}/assets/sample.mp3")


def _video(recipient_id: str, server_url: str) -> Dict[str, Any]:
    return messages.attachment_message(recipient_id, "video", f"{server_url}/assets/allofus480.mov")


def _file(recipient_id: str, server_url: str) -> Dict[str, Any]:
    return messages.attachment_message(recipient_id, "file", f"{server_url}/assets/test.txt")


def _button(recipient_id: str, server_url: str) -> Dict[str, Any]:
    return messages.button_template(
        recipient_id,
        "This is test text",
        [
            messages.web_url_button("https://www.oculus.com/en-us/rift/"),
            messages.postback_button("Trigger Postback", "DEVELOPER_DEFINED_PAYLOAD"),
            {"type": "phone_number", "title": "Call Phone Number", "payload": "+16505551234"},
        ],
    )


def _generic(recipient_id: str, server_url: str) -> Dict[str, Any]:
    return messages.generic_template(
        recipient_id,
        [
            {
                "title": "rift",
                "subtitle": "Next-generation virtual reality",
                "item_url": "https://www.oculus.com/en-us/rift/",
                "image_url": f"{server_url}/assets/rift.png",
                "buttons": [
                    messages.web_url_button("https://www.oculus.com/en-us/rift/"),
                    messages.postback_button("Call Postback", "Payload for first bubble"),
                ],
            },
            {
                "title": "touch",
                "subtitle": "Your Hands, Now in VR",
                "item_url": "https://www.oculus.com/en-us/touch/",
                "image_url": f"{server_url}/assets/touch.png",
                "buttons": [
                    messages.web_url_button("https://www.oculus.com/en-us/touch/"),
                    messages.postback_button("Call Postback", "Payload for second bubble"),
                ],
            },
        ],
    )


def _receipt(recipient_id: str, server_url: str) -> Dict[str, Any]:
    # The Send API wants a unique order number per receipt
    order_number = f"order{random.randint(0, 999)}"
    return messages.template_message(
        recipient_id,
        {
            "template_type": "receipt",
            "recipient_name": "Peter Chang",
            "order_number": order_number,
            "currency": "USD",
            "payment_method": "Visa 1234",
            "timestamp": "1428444852",
            "elements": [
                {
                    "title": "Oculus Rift",
                    "subtitle": "Includes: headset, sensor, remote",
                    "quantity": 1,
                    "price": 599.00,
                    "currency": "USD",
                    "image_url": f"{server_url}/assets/riftsq.png",
                },
                {
                    "title": "Samsung Gear VR",
                    "subtitle": "Frost White",
                    "quantity": 1,
                    "price": 99.99,
                    "currency": "USD",
                    "image_url": f"{server_url}/assets/gearvrsq.png",
                },
            ],
            "address": {
                "street_1": "1 Hacker Way",
                "street_2": "",
                "city": "Menlo Park",
                "postal_code": "94025",
                "state": "CA",
                "country": "US",
            },
            "summary": {
                "subtotal": 698.99,
                "shipping_cost": 20.00,
                "total_tax": 57.67,
                "total_cost": 626.66,
            },
            "adjustments": [
                {"name": "New Customer Discount", "amount": -50},
                {"name": "$100 Off Coupon", "amount": -100},
            ],
        },
    )


def _quick_reply(recipient_id: str, server_url: str) -> Dict[str, Any]:
    return messages.quick_reply_message(
        recipient_id,
        "What's your favorite movie genre?",
        [
            ("Action", "DEVELOPER_DEFINED_PAYLOAD_FOR_PICKING_ACTION"),
            ("Comedy", "DEVELOPER_DEFINED_PAYLOAD_FOR_PICKING_COMEDY"),
            ("Drama", "DEVELOPER_DEFINED_PAYLOAD_FOR_PICKING_DRAMA"),
        ],
    )


def _read_receipt(recipient_id: str, server_url: str) -> Dict[str, Any]:
    return messages.sender_action(recipient_id, "mark_seen")


def _typing_on(recipient_id: str, server_url: str) -> Dict[str, Any]:
    return messages.sender_action(recipient_id, "typing_on")


def _typing_off(recipient_id: str, server_url: str) -> Dict[str, Any]:
    return messages.sender_action(recipient_id, "typing_off")


def _account_linking(recipient_id: str, server_url: str) -> Dict[str, Any]:
    return messages.button_template(
        recipient_id,
        "Welcome. Link your account.",
        [{"type": "account_link", "url": f"{server_url}/authorize"}],
    )


BUILTIN_COMMANDS: Dict[str, PayloadBuilder] = {
    "image": _image,
    "gif": _gif,
    "audio": _audio,
    "video": _video,
    "file": _file,
    "button": _button,
    "generic": _generic,
    "receipt": _receipt,
    "quick reply": _quick_reply,
    "read receipt": _read_receipt,
    "typing on": _typing_on,
    "typing off": _typing_off,
    "account linking": _account_linking,
}


def match_command(text: str) -> Optional[PayloadBuilder]:
    """Exact, case-sensitive lookup. None means "not a command"."""
    return BUILTIN_COMMANDS.get(text)
