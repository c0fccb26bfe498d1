"""
Weather lookup abstract interface.

Role: "city, country" → forecast record.

Rules:
- No caching here (WeatherInfoCache sits in front)
- Failure → typed result, never an exception
- Every call is bounded by a timeout
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Literal, Optional

from agent.memory.types import WeatherRecord


WeatherStatus = Literal["success", "not_found", "error"]


@dataclass
class WeatherLookupResult:
    """Weather lookup result."""

    status: WeatherStatus
    record: Optional[WeatherRecord] = None
    error: Optional[str] = None   # timeout | http_<code> | malformed_response | transport
    raw: Optional[Dict[str, Any]] = None

    @property
    def ok(self) -> bool:
        return self.status == "success" and self.record is not None


class WeatherClient(ABC):
    """
    Abstract weather boundary.
    Conversation code must depend ONLY on this interface.
    """

    @abstractmethod
    async def fetch(self, city: str, country: str) -> WeatherLookupResult:
        """
        Resolve a location to today's forecast.

        Args:
            city: City as typed by the sender
            country: Country (code) as typed by the sender

        Returns:
            WeatherLookupResult with a record or an explicit error status
        """
        raise NotImplementedError


def parse_forecast(data: Any, country: str) -> Optional[WeatherRecord]:
    """
    Extract today's forecast from a weather.forecast response.

    Expected shape:
        {"query": {"results": {"channel": {
            "location": {"city": ...},
            "item": {"forecast": [{"low": ..., "high": ..., "text": ...}, ...]}}}}}

    Returns:
        WeatherRecord, or None when any part is missing or malformed
    """
    try:
        channel = data["query"]["results"]["channel"]
        forecast = channel["item"]["forecast"]
        city = channel["location"]["city"]
    except (KeyError, TypeError):
        return None

    if not isinstance(forecast, list) or not forecast:
        return None

    today = forecast[0]
    if not isinstance(today, dict):
        return None
    if any(today.get(field) is None for field in ("low", "high", "text")) or not city:
        return None

    return WeatherRecord(
        city=str(city),
        country=country,
        low=str(today["low"]),
        high=str(today["high"]),
        description=str(today["text"]),
    )
