"""
Weather info cache.

Cache-aside layer in front of a WeatherClient. Entries are keyed by
lowercase "city, country" and expire after the store's TTL.
"""

import logging
import re
from typing import Optional, Tuple

from agent.memory.base import KeyedStore
from agent.memory.types import WeatherRecord, location_key

from .base import WeatherClient

logger = logging.getLogger(__name__)

# One capture group: a split yields city, separator, country
_LOCATION_SPLIT_RE = re.compile(r",( )*")
_EXPECTED_COMPONENTS = 3

DEFAULT_WEATHER_CACHE_TTL_SECONDS = 24 * 60 * 60


def parse_location(text: str) -> Optional[Tuple[str, str]]:
    """
    Split free text of the form "city, country".

    Returns:
        (city, country), or None when the text is not exactly one
        comma-separated pair
    """
    components = _LOCATION_SPLIT_RE.split(text)
    if len(components) != _EXPECTED_COMPONENTS:
        logger.info(f"Badly formatted location input: {text!r}")
        return None

    city, _, country = components
    if not city or not country:
        logger.info(f"Empty city or country in location input: {text!r}")
        return None
    return city, country


class WeatherInfoCache:
    """
    Cache-aside weather lookups.

    - Hit: stored record returned, no network call
    - Miss: WeatherClient called; success is upserted, failure returns None
    - Failures are never cached
    """

    def __init__(self, client: WeatherClient, store: KeyedStore):
        self.client = client
        self.store = store

    async def get_cached(self, city: str, country: str) -> Optional[WeatherRecord]:
        data = await self.store.get(location_key(city, country))
        if data is None:
            return None
        try:
            return WeatherRecord.from_dict(data)
        except (KeyError, TypeError) as e:
            logger.error(f"Corrupted weather cache entry for '{city}, {country}': {e}")
            return None

    async def put(self, key: str, record: WeatherRecord) -> None:
        await self.store.set(key, record.to_dict())
        logger.info(f"Added {key} to cache with info of {record.to_dict()}")

    async def lookup(self, city: str, country: str) -> Optional[WeatherRecord]:
        """
        Resolve a location through the cache.

        Returns:
            WeatherRecord, or None when the upstream lookup failed
        """
        key = location_key(city, country)

        cached = await self.get_cached(city, country)
        if cached is not None:
            logger.info(f"Cache hit on {key}")
            return cached

        logger.info(f"Cache miss on {key}")
        result = await self.client.fetch(city, country)
        if not result.ok:
            logger.info(f"Weather lookup failed for {key}: {result.status} ({result.error})")
            return None

        await self.put(key, result.record)
        return result.record

    async def lookup_text(self, text: str) -> Optional[WeatherRecord]:
        """Parse "city, country" free text and look it up. None if malformed."""
        parsed = parse_location(text)
        if parsed is None:
            return None
        city, country = parsed
        return await self.lookup(city, country)
