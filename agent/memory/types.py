"""
Conversation state types.

Defines the records held in the per-sender keyed stores.
Stores hold JSON-compatible values; these types convert at the boundary.
"""

from dataclasses import dataclass, asdict
from enum import Enum
from typing import Any, Dict, Optional


class ConversationState(str, Enum):
    """Explicit per-sender conversation state tag."""

    NEW = "new"
    GREETED = "greeted"
    AWAITING_LOCATION = "awaiting_location"
    WEATHER_SENT = "weather_sent"
    CHOOSING_NEXT = "choosing_next"
    CHATTING = "chatting"
    ENDED = "ended"


@dataclass(frozen=True)
class WeatherRecord:
    """Resolved forecast for one location."""

    city: str            # Resolved city name from the weather provider
    country: str         # Country as typed by the sender
    low: str
    high: str
    description: str

    @property
    def location(self) -> str:
        """Unnormalized "city, country" label used by location history."""
        return f"{self.city}, {self.country}"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WeatherRecord":
        return cls(
            city=str(data["city"]),
            country=str(data["country"]),
            low=str(data["low"]),
            high=str(data["high"]),
            description=str(data["description"]),
        )


@dataclass(frozen=True)
class CachedProfile:
    """Display name cached for a sender."""

    sender_id: str
    display_name: str


def location_key(city: str, country: str) -> str:
    """Normalized weather cache key: lowercase "city, country"."""
    return f"{city}, {country}".lower()


def parse_state(value: Optional[str]) -> ConversationState:
    """Read a stored state tag, defaulting to NEW for unknown values."""
    if value is None:
        return ConversationState.NEW
    try:
        return ConversationState(value)
    except ValueError:
        return ConversationState.NEW
