"""
HTTP weather client.

Queries a YQL-style weather.forecast endpoint for "city, country".
No retries. Bounded by timeout. Never raises.
"""

import logging
from typing import Optional

import httpx

from .base import WeatherClient, WeatherLookupResult, parse_forecast

logger = logging.getLogger(__name__)

DEFAULT_WEATHER_API_URL = "https://query.yahooapis.com/v1/public/yql"

_FORECAST_QUERY = (
    'select * from weather.forecast where woeid in '
    '(select woeid from geo.places(1) where text="{location}")'
)


class HttpWeatherClient(WeatherClient):
    """
    Weather backend over HTTP.

    The location text goes into the query string; httpx handles encoding.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_WEATHER_API_URL,
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.base_url = base_url
        self.timeout = timeout
        self._client = client

    def build_params(self, city: str, country: str) -> dict:
        return {
            "q": _FORECAST_QUERY.format(location=f"{city}, {country}"),
            "format": "json",
            "env": "store://datatables.org/alltableswithkeys",
        }

    async def _get(self, params: dict) -> httpx.Response:
        if self._client is not None:
            return await self._client.get(self.base_url, params=params, timeout=self.timeout)
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await client.get(self.base_url, params=params)

    async def fetch(self, city: str, country: str) -> WeatherLookupResult:
        params = self.build_params(city, country)
        logger.info(f"Fetching weather for '{city}, {country}'")

        try:
            response = await self._get(params)
        except httpx.TimeoutException as e:
            logger.warning(f"Weather request timed out: {e}")
            return WeatherLookupResult(status="error", error="timeout")
        except httpx.RequestError as e:
            logger.error(f"Weather request failed: {e}", exc_info=True)
            return WeatherLookupResult(status="error", error="transport")

        if response.status_code != 200:
            logger.warning(
                f"Non-success status code while fetching weather: {response.status_code}",
                extra={"status_code": response.status_code},
            )
            return WeatherLookupResult(status="error", error=f"http_{response.status_code}")

        try:
            data = response.json()
        except ValueError:
            logger.warning("Weather response is not JSON")
            return WeatherLookupResult(status="error", error="malformed_response")

        record = parse_forecast(data, country)
        if record is None:
            logger.info(f"No forecast data for '{city}, {country}'")
            return WeatherLookupResult(status="not_found", error="malformed_response", raw=data)

        logger.info(
            f"Extracted low of {record.low}, high of {record.high}, "
            f"text of {record.description} for {record.city}"
        )
        return WeatherLookupResult(status="success", record=record, raw=data)
