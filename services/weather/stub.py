"""
Stub weather backend for testing and offline development.

Deterministic, fast, and never fails silently.
"""

import asyncio
from typing import Dict, List, Optional, Tuple

from agent.memory.types import WeatherRecord

from .base import WeatherClient, WeatherLookupResult


class StubWeatherClient(WeatherClient):
    """
    Deterministic fake weather for testing and CI.

    Known locations come from `forecasts` (keyed by lowercase
    "city, country"). With `default_forecast=True` any other location gets
    a generated record whose city is the title-cased input.
    """

    def __init__(
        self,
        forecasts: Optional[Dict[str, WeatherRecord]] = None,
        default_forecast: bool = True,
        delay: float = 0.0,
    ):
        self.forecasts = dict(forecasts or {})
        self.default_forecast = default_forecast
        self.delay = delay
        self.calls: List[Tuple[str, str]] = []

    async def fetch(self, city: str, country: str) -> WeatherLookupResult:
        self.calls.append((city, country))
        if self.delay:
            await asyncio.sleep(self.delay)

        record = self.forecasts.get(f"{city}, {country}".lower())
        if record is None and self.default_forecast:
            record = WeatherRecord(
                city=city.title(),
                country=country,
                low="50",
                high="68",
                description="Partly Cloudy",
            )

        if record is None:
            return WeatherLookupResult(status="not_found", error="malformed_response")
        return WeatherLookupResult(status="success", record=record)


class FailingWeatherClient(WeatherClient):
    """Weather backend that always fails (upstream down)."""

    def __init__(self, error: str = "transport"):
        self.error = error
        self.calls: List[Tuple[str, str]] = []

    async def fetch(self, city: str, country: str) -> WeatherLookupResult:
        self.calls.append((city, country))
        return WeatherLookupResult(status="error", error=self.error)
