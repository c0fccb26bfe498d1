"""Pytest configuration and fixtures."""

import hashlib
import hmac
import itertools
import sys
from pathlib import Path
from typing import Any, Dict, Optional

import pytest

# Add project root to sys.path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from agent.memory import (  # noqa: E402
    ConversationStateStore,
    InMemoryKeyedStore,
    LocationHistory,
    ProcessedEventCache,
)
from agent.router import EventRouter  # noqa: E402
from services.weather import StubWeatherClient, WeatherInfoCache  # noqa: E402
from transport.messenger import RecordingSender, StubProfileLookup  # noqa: E402


APP_SECRET = "test_app_secret"
VERIFY_TOKEN = "test_verify_token"
SERVER_URL = "https://bot.example.com"
PAGE_ID = "PAGE_1"


def sign(body: bytes, secret: str = APP_SECRET) -> str:
    """X-Hub-Signature header value for body."""
    digest = hmac.new(secret.encode("utf-8"), body, hashlib.sha1).hexdigest()
    return f"sha1={digest}"


class EventFactory:
    """Builds raw messaging events and page payloads the way the platform sends them."""

    def __init__(self):
        self._mids = itertools.count(1)
        self._clock = itertools.count(1458692752478)

    def _base(self, sender_id: str, **fields: Any) -> Dict[str, Any]:
        return {
            "sender": {"id": sender_id},
            "recipient": {"id": PAGE_ID},
            "timestamp": next(self._clock),
            **fields,
        }

    def text(self, sender_id: str, text: str, mid: Optional[str] = None) -> Dict[str, Any]:
        mid = mid or f"mid.{next(self._mids)}"
        return self._base(sender_id, message={"mid": mid, "text": text})

    def quick_reply(self, sender_id: str, payload: str, text: str = "") -> Dict[str, Any]:
        return self._base(
            sender_id,
            message={
                "mid": f"mid.{next(self._mids)}",
                "text": text or payload,
                "quick_reply": {"payload": payload},
            },
        )

    def attachment(self, sender_id: str) -> Dict[str, Any]:
        return self._base(
            sender_id,
            message={
                "mid": f"mid.{next(self._mids)}",
                "attachments": [{"type": "image", "payload": {"url": "https://example.com/a.png"}}],
            },
        )

    def echo(self, sender_id: str, text: str = "echo") -> Dict[str, Any]:
        return self._base(
            sender_id,
            message={"mid": f"mid.{next(self._mids)}", "text": text, "is_echo": True, "app_id": 1517776481860111},
        )

    def delivery(self, sender_id: str) -> Dict[str, Any]:
        return self._base(
            sender_id,
            delivery={"mids": [f"mid.{next(self._mids)}"], "watermark": 1458668856253, "seq": 37},
        )

    def postback(self, sender_id: str, payload: str = "GET_STARTED") -> Dict[str, Any]:
        return self._base(sender_id, postback={"payload": payload, "title": "Get Started"})

    def optin(self, sender_id: str, ref: str = "PASS_THROUGH_PARAM") -> Dict[str, Any]:
        return self._base(sender_id, optin={"ref": ref})

    def read(self, sender_id: str) -> Dict[str, Any]:
        return self._base(sender_id, read={"watermark": 1458668856253, "seq": 38})

    def account_linking(self, sender_id: str, status: str = "linked") -> Dict[str, Any]:
        return self._base(
            sender_id,
            account_linking={"status": status, "authorization_code": "abc123"},
        )

    def page(self, *events: Dict[str, Any], object_type: str = "page") -> Dict[str, Any]:
        return {
            "object": object_type,
            "entry": [{"id": PAGE_ID, "time": 1458692752478, "messaging": list(events)}],
        }


@pytest.fixture
def events() -> EventFactory:
    return EventFactory()


@pytest.fixture
def sender() -> RecordingSender:
    return RecordingSender()


@pytest.fixture
def profiles() -> StubProfileLookup:
    return StubProfileLookup(names={"USER_1": "Alice", "USER_2": "Bob"})


@pytest.fixture
def weather_client() -> StubWeatherClient:
    return StubWeatherClient()


@pytest.fixture
def conversation() -> ConversationStateStore:
    return ConversationStateStore(
        profiles=InMemoryKeyedStore(name="profiles"),
        pending=InMemoryKeyedStore(name="pending_follow_up"),
        states=InMemoryKeyedStore(name="conversation_state"),
    )


@pytest.fixture
def history() -> LocationHistory:
    return LocationHistory(InMemoryKeyedStore(name="location_history"))


@pytest.fixture
def weather(weather_client) -> WeatherInfoCache:
    return WeatherInfoCache(weather_client, InMemoryKeyedStore(ttl_seconds=86400, name="weather_info"))


@pytest.fixture
def router(sender, profiles, conversation, history, weather) -> EventRouter:
    return EventRouter(
        sender=sender,
        profile_lookup=profiles,
        conversation=conversation,
        history=history,
        weather=weather,
        processed=ProcessedEventCache(max_size=100),
        server_url=SERVER_URL,
    )

