"""
Weather service exports.

Clean interface for conversation code to import weather components.
"""

from .base import WeatherClient, WeatherLookupResult, WeatherStatus, parse_forecast
from .cache import (
    DEFAULT_WEATHER_CACHE_TTL_SECONDS,
    WeatherInfoCache,
    parse_location,
)
from .http_client import DEFAULT_WEATHER_API_URL, HttpWeatherClient
from .stub import FailingWeatherClient, StubWeatherClient

__all__ = [
    "WeatherClient",
    "WeatherLookupResult",
    "WeatherStatus",
    "parse_forecast",
    "WeatherInfoCache",
    "parse_location",
    "DEFAULT_WEATHER_CACHE_TTL_SECONDS",
    "HttpWeatherClient",
    "DEFAULT_WEATHER_API_URL",
    "StubWeatherClient",
    "FailingWeatherClient",
]
